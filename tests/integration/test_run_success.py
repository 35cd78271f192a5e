from __future__ import annotations

import json
import zipfile
from datetime import date
from pathlib import Path

from openpyxl import Workbook

from producer_export.cli import main as cli_main
from producer_export.config.loader import load_config
from producer_export.models.entity import EntityType
from producer_export.services.orchestrator import convert_file

"""End-to-end run: roster workbook -> per-entity archives in a run directory."""

TODAY = date(2026, 10, 19)


def _read_zip(path: Path) -> dict[str, dict]:
    with zipfile.ZipFile(path) as zf:
        return {name: json.loads(zf.read(name).decode("utf-8")) for name in zf.namelist()}


def test_individual_and_firm_passes(write_config: Path, roster_workbook: Path):
    result = convert_file(roster_workbook, load_config(write_config), today=TODAY)

    agents = _read_zip(result.stat_for(EntityType.INDIVIDUAL).archive_path)
    assert list(agents) == ["Jane Doe_1.json"]
    jane = agents["Jane Doe_1.json"]
    assert jane["PartitionKey"] == "CFP_L1"
    assert jane["NPN"] == "123"
    assert jane["ExternalEntityIdentifier"] == {"code": "ENTITY ID", "value": "Individual"}
    assert jane["LicenseDetails"]["ExpirationDate"] == "2099-01-01"

    firms = _read_zip(result.stat_for(EntityType.FIRM).archive_path)
    assert list(firms) == ["Acme Agency_1.json"]
    assert firms["Acme Agency_1.json"]["PartitionKey"] == "CFP_L9"


def test_expired_firm_yields_empty_archive(temp_workdir: Path, write_config: Path):
    wb = Workbook()
    ws = wb.active
    ws.title = "Sheet1"
    ws.append(["ENTITYTYPE", "PRODUCERNAME", "LICENSENUMBER", "EXPIRATIONDATE"])
    ws.append(["Individual", "Jane Doe", "L1", "2099-01-01"])
    ws.append(["Firm", "Gone Agency", "L2", "2000-01-01"])
    path = temp_workdir / "data" / "roster.xlsx"
    wb.save(path)

    result = convert_file(path, load_config(write_config), today=TODAY)

    firm = result.stat_for(EntityType.FIRM)
    assert firm.records == 0
    assert firm.skipped_expired == 1
    assert _read_zip(firm.archive_path) == {}
    assert firm.combined_path.name == "AgencyTransformed_0.json"
    assert json.loads(firm.combined_path.read_text(encoding="utf-8")) == []
    assert result.stat_for(EntityType.INDIVIDUAL).records == 1


def test_runs_are_deterministic(write_config: Path, roster_workbook: Path):
    cfg = load_config(write_config)
    first = convert_file(roster_workbook, cfg, today=TODAY)
    second = convert_file(roster_workbook, cfg, today=TODAY)
    for a, b in zip(first.archive_paths, second.archive_paths, strict=True):
        assert _read_zip(a) == _read_zip(b)


def test_cli_layout_on_disk(write_config: Path, roster_workbook: Path, temp_workdir: Path):
    assert cli_main([str(roster_workbook)]) == 0
    runs = list((temp_workdir / "output").iterdir())
    assert len(runs) == 1
    names = sorted(p.name for p in runs[0].iterdir())
    assert len(names) == 4
    assert names[:2] == ["AgencyTransformed_1.json", "AgentTransformed_1.json"]
    assert names[2].startswith("outputAgencies_") and names[3].startswith("outputAgents_")
    # 失敗が無ければエラーログは作られない
    assert not (temp_workdir / "logs").exists()

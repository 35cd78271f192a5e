# Shared pytest fixtures
from __future__ import annotations

import tempfile
from pathlib import Path

import pandas as pd
import pytest

from producer_export.logging.init import reset_logging

ROSTER_HEADER = [
    "ENTITYTYPE",
    "PRODUCERNAME",
    "NPN",
    "LICENSETYPE",
    "LICENSENUMBER",
    "EFFECTIVEDATE",
    "EXPIRATIONDATE",
    "MAILINGPHONE",
    "BUSINESSPHONE",
    "MAILINGEMAILADDRESS",
    "PREFERREDPOSTALADDRESS",
]


@pytest.fixture(autouse=True)
def _fresh_logging():
    # StreamHandler は生成時の sys.stdout を保持するため毎テスト作り直す
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("PRODUCER_EXPORT_OUTPUT_DIR", raising=False)
        monkeypatch.delenv("PRODUCER_EXPORT_TIMEZONE", raising=False)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """output_directory: ./output
sheet_name: Sheet1
naming_key: Name
timezone: UTC
logs_directory: ./logs
record:
  client: CFP
  partition_prefix: CFP_
  products: [CFCFDP1CO]
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "export.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def roster_rows() -> list[list[object]]:
    """Header + rows: 2 live agents (one repeated license), 1 expired agent, 1 live firm."""
    return [
        ROSTER_HEADER,
        ["Individual", "Jane Doe", "123", "Resident", "L1", "2020-01-01", "2099-01-01",
         "555-0001", "555-1001", "jane@example.com", "1 Main St"],
        ["Individual", "Jane Doe Again", "124", "Resident", "L1", "2020-01-01", "2099-06-01",
         "555-0002", "555-1002", "jane2@example.com", "2 Main St"],
        ["Individual", "Old Agent", "125", "Resident", "L3", "2010-01-01", "2000-01-01",
         "555-0003", "555-1003", "old@example.com", "3 Main St"],
        ["Firm", "Acme Agency", "900", "Resident", "L9", "2020-01-01", "2099-01-01",
         "555-0009", "555-1009", "acme@example.com", "9 Main St"],
    ]


def make_excel_file(path: Path, sheets: dict[str, list[list[object]]]) -> Path:
    """Write a real workbook; every row (header included) is written as data."""
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        for sheet_name, rows in sheets.items():
            pd.DataFrame(rows).to_excel(writer, sheet_name=sheet_name, header=False, index=False)
    return path


@pytest.fixture()
def roster_workbook(temp_workdir: Path, roster_rows: list[list[object]]) -> Path:
    return make_excel_file(temp_workdir / "data" / "roster.xlsx", {"Sheet1": roster_rows})

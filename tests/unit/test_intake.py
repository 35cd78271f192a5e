from __future__ import annotations

from pathlib import Path

import pytest

from producer_export.errors import UploadRejectedError
from producer_export.services.intake import validate_upload


@pytest.mark.parametrize("name", ["roster.xlsx", "roster.XLSX", "legacy.xls", "roster.csv"])
def test_accepts_spreadsheet_types(tmp_path: Path, name: str):
    p = tmp_path / name
    p.write_bytes(b"1234")
    assert validate_upload(p) == 4


def test_rejects_other_types(tmp_path: Path):
    p = tmp_path / "roster.pdf"
    p.write_bytes(b"%PDF")
    with pytest.raises(UploadRejectedError, match="invalid file type"):
        validate_upload(p)


def test_rejects_large_files(tmp_path: Path):
    p = tmp_path / "roster.csv"
    p.write_bytes(b"x" * 11)
    with pytest.raises(UploadRejectedError, match="too large"):
        validate_upload(p, max_bytes=10)


def test_rejects_missing_file(tmp_path: Path):
    with pytest.raises(UploadRejectedError, match="not found"):
        validate_upload(tmp_path / "missing.xlsx")

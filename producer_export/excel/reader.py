from __future__ import annotations

import numbers
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, time
from io import BytesIO
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

from producer_export.errors import SheetNotFoundError, WorkbookReadError
from producer_export.models.row_data import RowData

"""Worksheet reader.

Opens an uploaded spreadsheet (bytes), picks a worksheet by exact name and
turns it into RowData values: header line -> keys, every cell rendered as
text, dates as ``yyyy-mm-dd``. CSV uploads are a single sheet named
``Sheet1``.
"""

__all__ = [
    "CSV_SHEET_NAME",
    "SheetData",
    "list_sheet_names",
    "read_sheet_frames",
    "normalize_sheet",
    "read_worksheet",
    "render_cell",
]

CSV_SHEET_NAME = "Sheet1"
DATE_FMT = "%Y-%m-%d"
EMPTY_HEADER = "__EMPTY"
# .xls (BIFF) は xlrd, .xlsx は openpyxl
EXCEL_ENGINES = {".xlsx": "openpyxl", ".xls": "xlrd"}


@dataclass
class SheetData:
    sheet_name: str
    columns: list[str]
    rows: list[RowData]


def _is_csv(file_name: str | None) -> bool:
    return file_name is not None and Path(file_name).suffix.lower() == ".csv"


def _na_options(keep_na_strings: Iterable[str] | None) -> tuple[bool, list[str] | None]:
    """Return (keep_default_na, na_values) excluding ``keep_na_strings`` from pandas' NA set."""
    # pandas._libs.parsers.STR_NA_VALUES には既定のNA文字列集合が格納されている
    import pandas._libs.parsers as parsers

    if keep_na_strings:
        custom_na = parsers.STR_NA_VALUES.copy() - set(keep_na_strings)
        return False, list(custom_na)
    return True, None


def _excel_engine(file_name: str | None) -> str | None:
    """Engine for the upload suffix; None lets pandas sniff the bytes."""
    if file_name is None:
        return None
    return EXCEL_ENGINES.get(Path(file_name).suffix.lower())


def _open_excel(data: bytes, file_name: str | None = None) -> pd.ExcelFile:
    try:
        return pd.ExcelFile(BytesIO(data), engine=_excel_engine(file_name))
    except Exception as e:
        raise WorkbookReadError(f"unreadable workbook: {e}") from e


def list_sheet_names(data: bytes, *, file_name: str | None = None) -> list[str]:
    """List worksheet names in workbook order."""
    if _is_csv(file_name):
        return [CSV_SHEET_NAME]
    return [str(n) for n in _open_excel(data, file_name).sheet_names]


def read_sheet_frames(
    data: bytes,
    *,
    file_name: str | None = None,
    target_sheets: Iterable[str] | None = None,
    keep_na_strings: Iterable[str] | None = None,
) -> dict[str, pd.DataFrame]:
    """Read raw (header-less) DataFrames keyed by sheet name.

    Parameters
    ----------
    data: spreadsheet bytes
    file_name: original upload name; a ``.csv`` suffix selects the CSV parser
    target_sheets: restrict to these sheet names (None = all sheets)
    keep_na_strings: strings that must stay text instead of becoming NaN
    """
    keep_default_na, na_values = _na_options(keep_na_strings)
    targets = set(target_sheets) if target_sheets is not None else None

    if _is_csv(file_name):
        if targets is not None and CSV_SHEET_NAME not in targets:
            return {}
        try:
            df = pd.read_csv(
                BytesIO(data),
                header=None,
                dtype=str,
                encoding="utf-8-sig",
                keep_default_na=keep_default_na,
                na_values=na_values,
                skip_blank_lines=True,
            )
        except pd.errors.EmptyDataError:
            df = pd.DataFrame()
        except Exception as e:
            raise WorkbookReadError(f"unreadable csv: {e}") from e
        return {CSV_SHEET_NAME: df}

    xls = _open_excel(data, file_name)
    dfs: dict[str, pd.DataFrame] = {}
    for name in xls.sheet_names:
        if targets is not None and str(name) not in targets:
            continue
        try:
            # ヘッダなしで生読み (後で header_row を適用)
            df = xls.parse(name, header=None, keep_default_na=keep_default_na, na_values=na_values)
        except Exception as e:
            raise WorkbookReadError(f"unreadable worksheet '{name}': {e}") from e
        dfs[str(name)] = df
    return dfs


def render_cell(val: Any) -> str | None:
    """Render a cell value as text (None for empty cells)."""
    if val is None or val is pd.NA or val is pd.NaT:
        return None
    if isinstance(val, (datetime, date, pd.Timestamp)):
        return val.strftime(DATE_FMT)
    if isinstance(val, time):
        return val.isoformat()
    if isinstance(val, (bool, np.bool_)):
        return "TRUE" if val else "FALSE"
    if isinstance(val, numbers.Integral):
        return str(int(val))
    if isinstance(val, numbers.Real):
        f = float(val)
        if np.isnan(f):
            return None
        return str(int(f)) if f.is_integer() else repr(f)
    return str(val)


def _header_names(values: list[Any]) -> list[str]:
    """Header texts; blank headers become ``__EMPTY``, repeats get ``_1``, ``_2``..."""
    columns: list[str] = []
    seen: dict[str, int] = {}
    for raw in values:
        text = render_cell(raw)
        name = text.strip() if text is not None and text.strip() else EMPTY_HEADER
        if name in seen:
            seen[name] += 1
            name = f"{name}_{seen[name]}"
        else:
            seen[name] = 0
        columns.append(name)
    return columns


def normalize_sheet(df: pd.DataFrame, sheet_name: str, header_row: int = 1) -> SheetData:
    """Normalize a raw DataFrame using ``header_row`` (1-based) as header.

    Steps:
    1. A sheet shorter than the header line yields no columns and no rows
    2. Header line values become the column names
    3. Remaining lines become rows; lines with every cell empty are skipped
    """
    if header_row < 1:
        raise ValueError(f"header_row must be >= 1, got {header_row}")
    if df.shape[0] < header_row:
        return SheetData(sheet_name=sheet_name, columns=[], rows=[])

    columns = _header_names(df.iloc[header_row - 1].tolist())
    rows: list[RowData] = []
    for offset, (_, raw) in enumerate(df.iloc[header_row:].iterrows()):
        if raw.isna().all():
            continue
        values = {col: render_cell(val) for col, val in zip(columns, raw.tolist(), strict=False)}
        rows.append(RowData(row_number=header_row + offset + 1, values=values))
    return SheetData(sheet_name=sheet_name, columns=columns, rows=rows)


def read_worksheet(
    data: bytes,
    sheet_name: str,
    *,
    file_name: str | None = None,
    header_row: int = 1,
    keep_na_strings: Iterable[str] | None = None,
) -> SheetData:
    """Read one worksheet by exact name.

    Raises:
        SheetNotFoundError: no worksheet called ``sheet_name``
        WorkbookReadError: the bytes are not a readable workbook/CSV
    """
    frames = read_sheet_frames(
        data,
        file_name=file_name,
        target_sheets=[sheet_name],
        keep_na_strings=keep_na_strings,
    )
    if sheet_name not in frames:
        raise SheetNotFoundError(sheet_name, list_sheet_names(data, file_name=file_name))
    return normalize_sheet(frames[sheet_name], sheet_name, header_row=header_row)

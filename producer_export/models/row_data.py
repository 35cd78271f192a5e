from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

"""RowData model.

RowData represents a single worksheet line after header processing. Every
header column is present in ``values``; empty cells map to ``None``.
"""

__all__ = [
    "RowData",
]


@dataclass(frozen=True)
class RowData:
    """Logical representation of a single worksheet row.

    ``row_number`` is the 1-based line number in the sheet (the first data
    row under a header on line 1 is row 2).
    """
    row_number: int
    values: Mapping[str, str | None]

    def get(self, column: str) -> str | None:
        return self.values.get(column)

    def has_column(self, column: str) -> bool:
        return column in self.values

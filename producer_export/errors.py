from __future__ import annotations

"""Exception hierarchy for a conversion run.

Read/classify/package failures abort the run. ``RecordWriteError`` is the
only one that is recovered from (inside the emitter).
"""

__all__ = [
    "ConversionError",
    "UploadRejectedError",
    "WorkbookReadError",
    "SheetNotFoundError",
    "MalformedRowError",
    "RecordWriteError",
    "PackagingError",
]


class ConversionError(Exception):
    """Base exception for conversion run errors."""


class UploadRejectedError(ConversionError):
    """Raised when an input file fails the intake checks (type, size, existence)."""


class WorkbookReadError(ConversionError):
    """Raised when the uploaded bytes cannot be parsed as a workbook or CSV."""


class SheetNotFoundError(ConversionError):
    """Raised when the requested worksheet is not present in the workbook."""

    def __init__(self, sheet_name: str, available: list[str] | None = None) -> None:
        self.sheet_name = sheet_name
        self.available = list(available or [])
        msg = f"worksheet not found: '{sheet_name}'"
        if self.available:
            msg += f" (available: {', '.join(self.available)})"
        super().__init__(msg)


class MalformedRowError(ConversionError):
    """Raised when a row has no discriminator column at all."""

    def __init__(self, row_number: int, column: str) -> None:
        self.row_number = row_number
        self.column = column
        super().__init__(f"row {row_number} has no '{column}' column")


class RecordWriteError(ConversionError):
    """Raised for a single record file that could not be written."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"failed to write {path}: {reason}")


class PackagingError(ConversionError):
    """Raised when an archive cannot be created."""

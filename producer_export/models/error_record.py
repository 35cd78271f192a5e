from __future__ import annotations

import json
import re
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""One line of the JSON Lines error log.

Written for every failure the run recovers from, in practice a record file
that could not be written. ``row`` is the record's 1-based position inside its
entity pass, or -1 when no position applies. Keys are fixed by
``producer_export/logging/error_log_schema.json``.
"""

__all__ = [
    "ErrorRecord",
    "error_type_for",
]

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def error_type_for(error: BaseException) -> str:
    """``RecordWriteError`` -> ``RECORD_WRITE_ERROR``."""
    return _CAMEL_BOUNDARY.sub("_", type(error).__name__).upper()


def _utc_stamp() -> str:
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


@dataclass(frozen=True)
class ErrorRecord:
    """Error log entry.

    Attributes:
        timestamp: UTC, ISO8601 with a ``Z`` suffix
        file: uploaded spreadsheet name
        sheet: worksheet name
        row: record position within the entity pass (-1 if unknown)
        error_type: UPPER_SNAKE classification
        message: human readable reason
    """
    timestamp: str
    file: str
    sheet: str
    row: int
    error_type: str
    message: str

    @classmethod
    def create(cls, file: str, sheet: str, row: int, error_type: str, message: str) -> ErrorRecord:
        return cls(_utc_stamp(), file, sheet, row, error_type, message)

    @classmethod
    def from_error(cls, error: BaseException, *, file: str, sheet: str, row: int = -1) -> ErrorRecord:
        """Build an entry whose type and message come from ``error``."""
        return cls.create(file, sheet, row, error_type_for(error), str(error))

    def to_json_line(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)

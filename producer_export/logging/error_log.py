from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime
from pathlib import Path

from producer_export.models.error_record import ErrorRecord

"""JSON Lines error log for one conversion run.

Entries are kept in memory while the run writes record files and are appended
to ``<logs_dir>/errors-YYYYMMDD-HHMMSS.log`` (UTC) on flush(). A run without
failures leaves no log file behind.
"""

__all__ = [
    "ErrorRecord",
    "ErrorLogBuffer",
    "SCHEMA_PATH",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"
SCHEMA_PATH = Path(__file__).with_name("error_log_schema.json")


class ErrorLogBuffer:
    """Pending error log entries of a single run (not thread safe)."""

    def __init__(self, logs_dir: Path | None = None) -> None:
        self.logs_dir = logs_dir if logs_dir is not None else LOGS_DIR
        self._pending: list[ErrorRecord] = []
        self._path: Path | None = None

    @property
    def file_path(self) -> Path:
        """Log file of this run; the name is fixed on first use."""
        if self._path is None:
            self.logs_dir.mkdir(parents=True, exist_ok=True)
            self._path = self.logs_dir / f"errors-{datetime.now(UTC).strftime(TIMESTAMP_FMT)}.log"
        return self._path

    @property
    def records(self) -> list[ErrorRecord]:
        return list(self._pending)

    def append(self, record: ErrorRecord) -> None:
        self._pending.append(record)

    def extend(self, records: Iterable[ErrorRecord]) -> None:
        self._pending.extend(records)

    def __len__(self) -> int:
        return len(self._pending)

    def flush(self) -> Path | None:
        """Append pending entries to the log file.

        Returns the file path, or None when there was nothing to write (no file
        is created in that case).
        """
        if not self._pending:
            return None
        path = self.file_path
        lines = "".join(r.to_json_line() + "\n" for r in self._pending)
        with path.open("a", encoding="utf-8") as f:
            f.write(lines)
        self._pending.clear()
        return path

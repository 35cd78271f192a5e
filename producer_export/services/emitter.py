from __future__ import annotations

import json
import logging
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..errors import RecordWriteError
from ..logging.error_log import ErrorLogBuffer, ErrorRecord
from ..models.output_record import OutputRecord
from .progress import ProgressTracker

logger = logging.getLogger(__name__)

"""Per-record file emitter.

Writes each record as ``<dest>/<stem>.json``. The stem is the naming-key
value plus the 1-based position (``Jane Doe_3``), or ``object_<i>`` when the
value is missing. Positions are unique, so file count == record count even
when naming-key values collide.

Write failures are best effort: logged, buffered in the error log, counted,
and the batch continues.
"""

__all__ = [
    "ILLEGAL_FILENAME_CHARS",
    "EmitResult",
    "safe_file_stem",
    "emit_records",
]

ILLEGAL_FILENAME_CHARS = re.compile(r'[/\\?%*:|"<>]')
MAX_STEM_BASE = 200
# 多くのファイルシステムの上限 (文字数ではなくバイト数)
MAX_FILENAME_BYTES = 255
FILE_SUFFIX = ".json"


@dataclass
class EmitResult:
    directory: Path
    written: list[Path] = field(default_factory=list)
    failures: list[RecordWriteError] = field(default_factory=list)

    @property
    def skipped(self) -> int:
        return len(self.failures)


def _fit_bytes(text: str, limit: int) -> str:
    """Cut ``text`` to at most ``limit`` UTF-8 bytes without splitting a character."""
    return text.encode("utf-8")[:max(limit, 0)].decode("utf-8", errors="ignore")


def safe_file_stem(value: Any, index: int) -> str:
    """Derive the sanitized file stem for the record at 1-based ``index``.

    The name part is capped at MAX_STEM_BASE characters and further cut so
    that ``<stem>.json`` fits in MAX_FILENAME_BYTES bytes.
    """
    if value is None or value == "":
        base = "object"
    else:
        suffix_bytes = len(f"_{index}{FILE_SUFFIX}".encode("utf-8"))
        base = _fit_bytes(str(value)[:MAX_STEM_BASE], MAX_FILENAME_BYTES - suffix_bytes)
    return ILLEGAL_FILENAME_CHARS.sub("_", f"{base}_{index}")


def _as_mapping(record: OutputRecord | Mapping[str, Any]) -> Mapping[str, Any]:
    if isinstance(record, OutputRecord):
        return record.to_dict()
    return record


def _write_one(path: Path, payload: Mapping[str, Any]) -> None:
    try:
        path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    except (OSError, TypeError, ValueError) as e:
        raise RecordWriteError(str(path), str(e)) from e


def emit_records(
    records: Sequence[OutputRecord | Mapping[str, Any]],
    naming_key: str,
    dest_dir: Path,
    *,
    error_log: ErrorLogBuffer | None = None,
    source_name: str = "",
    sheet_name: str = "",
) -> EmitResult:
    """Write one JSON file per record into ``dest_dir`` (created if missing).

    Args:
        records: OutputRecord values (or already serialized mappings)
        naming_key: top-level field used for the file name (e.g. ``Name``)
        dest_dir: destination directory
        error_log: buffer receiving one ErrorRecord per failed write
        source_name / sheet_name: context stamped into error records

    Returns:
        EmitResult listing written paths and the failures that were skipped
    """
    dest_dir.mkdir(parents=True, exist_ok=True)
    result = EmitResult(directory=dest_dir)

    with ProgressTracker(len(records), description=f"Writing {dest_dir.name}") as progress:
        for index, record in enumerate(records, start=1):
            payload = _as_mapping(record)
            stem = safe_file_stem(payload.get(naming_key), index)
            path = dest_dir / f"{stem}{FILE_SUFFIX}"
            try:
                _write_one(path, payload)
            except RecordWriteError as e:
                logger.warning(f"record {index} skipped: {e}")
                result.failures.append(e)
                if error_log is not None:
                    error_log.append(ErrorRecord.from_error(e, file=source_name, sheet=sheet_name, row=index))
                progress.advance(success=False)
                continue
            logger.debug(f"Saved: {path}")
            result.written.append(path)
            progress.advance()

    return result

from __future__ import annotations

from pathlib import Path

from ..errors import UploadRejectedError
from ..models.config_models import DEFAULT_MAX_UPLOAD_BYTES

ALLOWED_SUFFIXES = frozenset({".xlsx", ".xls", ".csv"})


def validate_upload(path: Path, *, max_bytes: int = DEFAULT_MAX_UPLOAD_BYTES) -> int:
    """Check an input file before reading it. Returns its size in bytes.

    Raises:
        UploadRejectedError: missing file, unsupported type or too large
    """
    if not path.is_file():
        raise UploadRejectedError(f"file not found: {path}")
    if path.suffix.lower() not in ALLOWED_SUFFIXES:
        raise UploadRejectedError(
            f"invalid file type '{path.suffix}': upload an Excel file (.xlsx, .xls) or CSV file"
        )
    size = path.stat().st_size
    if size > max_bytes:
        raise UploadRejectedError(f"file too large: {size} bytes (max {max_bytes})")
    return size

from __future__ import annotations

import logging
import zipfile
from pathlib import Path

from ..errors import PackagingError

logger = logging.getLogger(__name__)


def package_directory(source_dir: Path, archive_path: Path) -> Path:
    """Zip the regular files of ``source_dir`` (non-recursive) into ``archive_path``.

    Members are stored flat, by file name, in sorted order. Any failure is
    fatal for the run and raised as PackagingError.
    """
    if not source_dir.is_dir():
        raise PackagingError(f"not a directory: {source_dir}")
    try:
        archive_path.parent.mkdir(parents=True, exist_ok=True)
        files = sorted(p for p in source_dir.iterdir() if p.is_file())
        with zipfile.ZipFile(archive_path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for f in files:
                zf.write(f, arcname=f.name)
    except (OSError, zipfile.BadZipFile) as e:
        raise PackagingError(f"failed to create {archive_path}: {e}") from e
    logger.info(f"Packaged {len(files)} files into {archive_path.name}")
    return archive_path

from __future__ import annotations

import logging
import shutil
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

logger = logging.getLogger(__name__)

"""Per-run workspace.

Each conversion run owns a fresh directory (``tempfile.mkdtemp``), so two
runs never share intermediate files. The directory is removed when the run
ends unless ``keep`` is set.
"""

WORKSPACE_PREFIX = "producer-export-"


@contextmanager
def acquire_workspace(root: Path | str | None = None, *, keep: bool = False) -> Iterator[Path]:
    """Yield an exclusively owned directory for one conversion run."""
    if root is not None:
        Path(root).mkdir(parents=True, exist_ok=True)
    path = Path(tempfile.mkdtemp(prefix=WORKSPACE_PREFIX, dir=root))
    logger.debug(f"workspace acquired: {path}")
    try:
        yield path
    finally:
        if keep:
            logger.info(f"workspace kept: {path}")
        else:
            shutil.rmtree(path, ignore_errors=True)
            logger.debug(f"workspace released: {path}")

from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Record-level progress bar.

The emitter advances one step per record file. A bar is only drawn when
stdout is a terminal; piped or CI output gets the labeled log lines alone.
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
]

BAR_OPTIONS: dict[str, Any] = {
    "unit": "record",
    "disable": False,
    "leave": True,
    "position": 0,
    "ncols": 80,
    "ascii": True,
}


def is_tty_enabled() -> bool:
    return sys.stdout.isatty()


class ProgressTracker:
    """Counts written/failed records and mirrors them on a tqdm bar (TTY only)."""

    def __init__(self, total: int, *, description: str = "Writing records") -> None:
        self.total = total
        self.description = description
        self.current = 0
        self.failed = 0
        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None = (
            tqdm(total=total, desc=description, **BAR_OPTIONS) if self.enabled else None
        )

    def advance(self, success: bool = True) -> None:
        self.current += 1
        if not success:
            self.failed += 1
        if self.pbar is None:
            return
        self.pbar.update(1)
        if self.failed:
            self.pbar.set_postfix(failed=self.failed)

    def close(self) -> None:
        if self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

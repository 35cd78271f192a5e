from __future__ import annotations

from dataclasses import dataclass, field

"""Config dataclasses for producer-export.

Loaded from YAML by ``producer_export.config.loader``. Defaults here are the
values used when no config file is present.
"""

DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024  # 10MB


@dataclass(frozen=True)
class RecordSettings:
    """Constants stamped into every OutputRecord."""
    client: str = "CFP"
    partition_prefix: str = "CFP_"
    products: tuple[str, ...] = ("CFCFDP1CO",)


@dataclass(frozen=True)
class ExportConfig:
    """Root configuration object for a conversion run."""
    output_directory: str = "./output"  # run-* ディレクトリの親
    sheet_name: str = "Sheet1"  # --sheet 省略時
    header_row: int = 1  # 1-based
    naming_key: str = "Name"
    keep_na_strings: tuple[str, ...] = ("NA", "N/A")
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    timezone: str = "UTC"
    workspace_root: str | None = None  # None -> system temp dir
    keep_workspace: bool = False
    write_combined: bool = True
    logs_directory: str = "./logs"
    record: RecordSettings = field(default_factory=RecordSettings)

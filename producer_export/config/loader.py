from __future__ import annotations

import json
import os
from dataclasses import replace
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from producer_export.models.config_models import ExportConfig, RecordSettings

"""Config loader.

Responsibilities:
- Load YAML config (default ``config/export.yml``)
- Validate against the bundled ``config_schema.json``
- Apply defaults and environment overrides
"""

__all__ = [
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "load_config",
    "apply_env_overrides",
]

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/export.yml")

ENV_OUTPUT_DIR = "PRODUCER_EXPORT_OUTPUT_DIR"
ENV_TIMEZONE = "PRODUCER_EXPORT_TIMEZONE"


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: If the schema file is unreadable or the data violates it
            (unknown keys, wrong types, out-of-range values).
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _check_timezone(name: str) -> None:
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigError(f"unknown timezone: {name}") from e


def _build_config(data: dict[str, Any]) -> ExportConfig:
    defaults = ExportConfig()
    rec_raw = data.get("record", {})
    rec_defaults = RecordSettings()
    record = RecordSettings(
        client=rec_raw.get("client", rec_defaults.client),
        partition_prefix=rec_raw.get("partition_prefix", rec_defaults.partition_prefix),
        products=tuple(rec_raw.get("products", rec_defaults.products)),
    )
    return ExportConfig(
        output_directory=data.get("output_directory", defaults.output_directory),
        sheet_name=data.get("sheet_name", defaults.sheet_name),
        header_row=data.get("header_row", defaults.header_row),
        naming_key=data.get("naming_key", defaults.naming_key),
        keep_na_strings=tuple(data.get("keep_na_strings", defaults.keep_na_strings)),
        max_upload_bytes=data.get("max_upload_bytes", defaults.max_upload_bytes),
        timezone=data.get("timezone", defaults.timezone),
        workspace_root=data.get("workspace_root", defaults.workspace_root),
        keep_workspace=data.get("keep_workspace", defaults.keep_workspace),
        write_combined=data.get("write_combined", defaults.write_combined),
        logs_directory=data.get("logs_directory", defaults.logs_directory),
        record=record,
    )


def apply_env_overrides(cfg: ExportConfig) -> ExportConfig:
    """Return ``cfg`` with PRODUCER_EXPORT_* environment variables applied."""
    changes: dict[str, Any] = {}
    out_dir = os.getenv(ENV_OUTPUT_DIR)
    if out_dir:
        changes["output_directory"] = out_dir
    tz = os.getenv(ENV_TIMEZONE)
    if tz:
        _check_timezone(tz)
        changes["timezone"] = tz
    if not changes:
        return cfg
    return replace(cfg, **changes)


def load_config(path: Path | None = None) -> ExportConfig:
    """Load and validate the export config.

    ``path=None`` reads ``DEFAULT_CONFIG_PATH`` when it exists and falls back
    to built-in defaults otherwise. An explicit path that does not exist is
    an error.
    """
    if path is None:
        if not DEFAULT_CONFIG_PATH.exists():
            return apply_env_overrides(ExportConfig())
        path = DEFAULT_CONFIG_PATH
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping: {path}")

    _validate_config_schema(data)
    cfg = _build_config(data)
    _check_timezone(cfg.timezone)
    return apply_env_overrides(cfg)

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path

from dotenv import load_dotenv

from producer_export.config.loader import ConfigError, load_config
from producer_export.errors import ConversionError
from producer_export.logging.init import log_summary, set_debug, setup_logging
from producer_export.services.orchestrator import convert_file
from producer_export.services.summary import render_summary_line

"""CLI entrypoint.

Flow:
- Load .env, then the YAML config
- Convert one spreadsheet (read -> transform -> emit -> package)
- Print archive paths and a SUMMARY line
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv.

    override=True により .env の値で既存環境変数を上書きする。
    """
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="producer-export",
        description="Producer roster spreadsheet -> per-record JSON archives",
    )
    p.add_argument("input", type=Path, help="Spreadsheet to convert (.xlsx, .xls or .csv)")
    p.add_argument("--sheet", help="Worksheet name (default: sheet_name from config)")
    p.add_argument("--config", type=Path, help="Config file (default: config/export.yml if present)")
    p.add_argument("--output-dir", type=Path, help="Override output_directory from config")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print sheet names, headers & first rows then exit")
    return p.parse_args(argv)


def _inspect_data(path: Path, sheet: str | None, cfg) -> int:
    from producer_export.excel.reader import list_sheet_names, read_worksheet

    try:
        data = path.read_bytes()
        names = list_sheet_names(data, file_name=path.name)
        print(f"FILE: {path.name} sheets={names}")
        target = sheet or cfg.sheet_name
        sd = read_worksheet(
            data,
            target,
            file_name=path.name,
            header_row=cfg.header_row,
            keep_na_strings=cfg.keep_na_strings,
        )
    except (OSError, ConversionError) as e:
        print(f"inspect: {e}")
        return EXIT_FATAL
    print(f"  SHEET: {sd.sheet_name} rows={len(sd.rows)} cols={sd.columns}")
    for r in sd.rows[:3]:
        print(f"    row {r.row_number}: {dict(r.values)}")
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None のときのみシステム引数を読む (テストから main([...]) で呼ぶため)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"), override=True)

    if args.debug:
        set_debug(True)
        logger.debug("debug mode enabled")

    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL
    if args.output_dir is not None:
        cfg = replace(cfg, output_directory=str(args.output_dir))

    if args.inspect_data:
        return _inspect_data(args.input, args.sheet, cfg)

    logger.info(f"Converting: {args.input}")
    try:
        result = convert_file(args.input, cfg, sheet_name=args.sheet)
    except ConversionError as e:
        logger.error(f"conversion: {e}")
        return EXIT_FATAL

    for archive in result.archive_paths:
        logger.info(f"archive: {archive}")

    summary_line = render_summary_line(result)
    # log_summary が "SUMMARY " を付与するため除去
    log_summary(summary_line[len("SUMMARY "):])

    if result.skipped_writes > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

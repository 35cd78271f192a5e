from __future__ import annotations

import json
import logging
import shutil
import uuid
from datetime import UTC, date, datetime
from pathlib import Path
from zoneinfo import ZoneInfo

from ..errors import ConversionError, PackagingError, UploadRejectedError
from ..excel.reader import read_worksheet
from ..logging.error_log import ErrorLogBuffer
from ..models.config_models import ExportConfig
from ..models.entity import EntityType
from ..models.processing_result import ConversionResult, EntityStat
from .emitter import emit_records
from .intake import validate_upload
from .packager import package_directory
from .transform import TransformResult, transform_rows
from .workspace import acquire_workspace

logger = logging.getLogger(__name__)

"""Conversion orchestration.

Coordinates one run: read the worksheet once, transform it for every entity
type (all-or-nothing), then for each entity emit the per-record files into
an isolated workspace, zip them and move the archive into a fresh run
directory under ``output_directory``.
"""

__all__ = [
    "ENTITY_ORDER",
    "ARCHIVE_DATE_FMT",
    "today_in",
    "convert_workbook",
    "convert_file",
]

ENTITY_ORDER: tuple[EntityType, ...] = (EntityType.INDIVIDUAL, EntityType.FIRM)
ARCHIVE_DATE_FMT = "%m-%d-%Y"
RUN_DIR_FMT = "%Y%m%d-%H%M%S"


def today_in(timezone: str) -> date:
    """Current calendar date in ``timezone``."""
    return datetime.now(ZoneInfo(timezone)).date()


def _new_run_directory(output_dir: Path, started: datetime) -> Path:
    run_dir = output_dir / f"run-{started.strftime(RUN_DIR_FMT)}-{uuid.uuid4().hex[:8]}"
    try:
        run_dir.mkdir(parents=True, exist_ok=False)
    except OSError as e:
        raise PackagingError(f"cannot create run directory {run_dir}: {e}") from e
    return run_dir


def _write_combined(result: TransformResult, run_dir: Path) -> Path:
    """Publish the whole transformed array as ``<Label>Transformed_<count>.json``."""
    path = run_dir / f"{result.entity.profile.combined_name}_{result.count}.json"
    payload = [r.to_dict() for r in result.records]
    try:
        path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    except OSError as e:
        raise PackagingError(f"failed to write {path}: {e}") from e
    return path


def _publish(archive: Path, run_dir: Path) -> Path:
    try:
        return Path(shutil.move(str(archive), str(run_dir / archive.name)))
    except OSError as e:
        raise PackagingError(f"failed to move {archive.name} into {run_dir}: {e}") from e


def convert_workbook(
    data: bytes,
    sheet_name: str,
    config: ExportConfig,
    *,
    file_name: str = "upload.xlsx",
    today: date | None = None,
) -> ConversionResult:
    """Run the whole pipeline for one uploaded spreadsheet.

    Args:
        data: spreadsheet bytes
        sheet_name: worksheet to convert (exact name)
        config: export configuration
        file_name: original upload name (``.csv`` selects the CSV reader)
        today: reference date for expiration and archive names
            (default: today in ``config.timezone``)

    Returns:
        ConversionResult with one EntityStat per entity type

    Raises:
        ConversionError: SheetNotFoundError / WorkbookReadError /
            MalformedRowError / PackagingError abort the run
    """
    start_time = datetime.now(UTC)
    if today is None:
        today = today_in(config.timezone)

    logger.info(f"Reading worksheet '{sheet_name}' from {file_name}")
    sheet = read_worksheet(
        data,
        sheet_name,
        file_name=file_name,
        header_row=config.header_row,
        keep_na_strings=config.keep_na_strings,
    )
    logger.info(f"rows={len(sheet.rows)} columns={len(sheet.columns)}")

    # 変換は全エンティティ分を先に実施 (失敗時は何も書き出さない)
    transformed = [
        transform_rows(sheet.rows, entity, today=today, settings=config.record)
        for entity in ENTITY_ORDER
    ]
    for tr in transformed:
        logger.info(
            f"{tr.entity.value}: records={tr.count} expired={tr.skipped_expired} "
            f"duplicates={tr.skipped_duplicate} undated={tr.undated}"
        )

    error_log = ErrorLogBuffer(Path(config.logs_directory))
    run_dir = _new_run_directory(Path(config.output_directory), start_time)
    date_label = today.strftime(ARCHIVE_DATE_FMT)
    stats: list[EntityStat] = []

    try:
        with acquire_workspace(config.workspace_root, keep=config.keep_workspace) as workspace:
            for tr in transformed:
                profile = tr.entity.profile
                folder = workspace / f"{profile.archive_prefix}_{date_label}"
                emitted = emit_records(
                    tr.records,
                    config.naming_key,
                    folder,
                    error_log=error_log,
                    source_name=file_name,
                    sheet_name=sheet_name,
                )
                archive = package_directory(folder, workspace / f"{folder.name}.zip")
                archive = _publish(archive, run_dir)
                combined = _write_combined(tr, run_dir) if config.write_combined else None
                stats.append(
                    EntityStat(
                        entity=tr.entity,
                        records=tr.count,
                        written=len(emitted.written),
                        skipped_writes=emitted.skipped,
                        skipped_expired=tr.skipped_expired,
                        skipped_duplicate=tr.skipped_duplicate,
                        skipped_other_type=tr.skipped_other_type,
                        undated=tr.undated,
                        archive_path=archive,
                        combined_path=combined,
                    )
                )
                if emitted.skipped:
                    logger.warning(f"{profile.label}: {emitted.skipped} record file(s) skipped")
    except ConversionError:
        shutil.rmtree(run_dir, ignore_errors=True)
        raise
    except OSError as e:
        # ワークスペース作成などの I/O 失敗も致命扱い
        shutil.rmtree(run_dir, ignore_errors=True)
        raise PackagingError(f"workspace I/O failed: {e}") from e
    finally:
        error_log_path = error_log.flush()
        if error_log_path is not None:
            logger.info(f"error log written: {error_log_path}")

    end_time = datetime.now(UTC)
    return ConversionResult(
        source_name=file_name,
        sheet_name=sheet_name,
        total_rows=len(sheet.rows),
        entity_stats=stats,
        run_directory=run_dir,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        error_log_path=error_log_path,
    )


def convert_file(
    path: Path,
    config: ExportConfig,
    *,
    sheet_name: str | None = None,
    today: date | None = None,
) -> ConversionResult:
    """Validate and convert a spreadsheet on disk (``sheet_name`` defaults to the configured one)."""
    validate_upload(path, max_bytes=config.max_upload_bytes)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise UploadRejectedError(f"cannot read {path}: {e}") from e
    return convert_workbook(
        data,
        sheet_name or config.sheet_name,
        config,
        file_name=path.name,
        today=today,
    )

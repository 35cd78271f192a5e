from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from .entity import EntityType

"""Result models for a conversion run.

EntityStat carries the outcome of one entity pass (transform, emit,
package); ConversionResult aggregates both passes for the SUMMARY line.
"""


@dataclass(frozen=True)
class EntityStat:
    """Per-entity pass statistics."""
    entity: EntityType
    records: int  # 変換後レコード数
    written: int  # 書き込み成功ファイル数
    skipped_writes: int
    skipped_expired: int
    skipped_duplicate: int
    skipped_other_type: int
    undated: int  # 有効期限なし/解析不能 (保持扱い)
    archive_path: Path
    combined_path: Path | None = None


@dataclass(frozen=True)
class ConversionResult:
    """Aggregated result of a conversion run."""
    source_name: str
    sheet_name: str
    total_rows: int
    entity_stats: list[EntityStat]
    run_directory: Path
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    error_log_path: Path | None = None

    @property
    def archive_paths(self) -> list[Path]:
        return [s.archive_path for s in self.entity_stats]

    @property
    def total_records(self) -> int:
        return sum(s.records for s in self.entity_stats)

    @property
    def total_written(self) -> int:
        return sum(s.written for s in self.entity_stats)

    @property
    def skipped_writes(self) -> int:
        return sum(s.skipped_writes for s in self.entity_stats)

    @property
    def skipped_expired(self) -> int:
        return sum(s.skipped_expired for s in self.entity_stats)

    @property
    def skipped_duplicate(self) -> int:
        return sum(s.skipped_duplicate for s in self.entity_stats)

    def stat_for(self, entity: EntityType) -> EntityStat | None:
        for s in self.entity_stats:
            if s.entity is entity:
                return s
        return None

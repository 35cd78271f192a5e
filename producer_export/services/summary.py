from __future__ import annotations

from ..models.entity import EntityType
from ..models.processing_result import ConversionResult

"""SUMMARY line rendering.

Format:
SUMMARY sheet={sheet} rows={rows} individual={n} firm={n} written={n}
skipped_writes={n} expired={n} duplicates={n} elapsed_sec={elapsed}
"""


def _format_seconds(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # Format very small numbers to avoid scientific notation
        return f"{value:.6f}".rstrip('0').rstrip('.')
    return f"{value:.3f}".rstrip('0').rstrip('.')


def render_summary_line(result: ConversionResult) -> str:
    """Render the SUMMARY line for a finished run.

    Examples:
        >>> from datetime import datetime, timezone
        >>> from pathlib import Path
        >>> t = datetime(2024, 1, 1, tzinfo=timezone.utc)
        >>> result = ConversionResult(
        ...     source_name="roster.xlsx", sheet_name="Sheet1", total_rows=0,
        ...     entity_stats=[], run_directory=Path("out"), start_time=t,
        ...     end_time=t, elapsed_seconds=2.0,
        ... )
        >>> render_summary_line(result)
        'SUMMARY sheet=Sheet1 rows=0 individual=0 firm=0 written=0 skipped_writes=0 expired=0 duplicates=0 elapsed_sec=2'
    """
    individual = result.stat_for(EntityType.INDIVIDUAL)
    firm = result.stat_for(EntityType.FIRM)
    return (
        f"SUMMARY sheet={result.sheet_name} "
        f"rows={result.total_rows} "
        f"individual={individual.records if individual else 0} "
        f"firm={firm.records if firm else 0} "
        f"written={result.total_written} "
        f"skipped_writes={result.skipped_writes} "
        f"expired={result.skipped_expired} "
        f"duplicates={result.skipped_duplicate} "
        f"elapsed_sec={_format_seconds(result.elapsed_seconds)}"
    )

"""Domain models for the producer roster export.

Rows read from the worksheet, the entity tag/profile, the OutputRecord
schema, configuration and run results.
"""

from .config_models import ExportConfig, RecordSettings
from .entity import EntityProfile, EntityType
from .output_record import OutputRecord
from .processing_result import ConversionResult, EntityStat
from .row_data import RowData

__all__ = [
    # Configuration models
    "ExportConfig",
    "RecordSettings",
    # Processing models
    "EntityType",
    "EntityProfile",
    "RowData",
    "OutputRecord",
    "EntityStat",
    "ConversionResult",
]

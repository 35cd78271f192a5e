from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, datetime

import pandas as pd

from ..errors import MalformedRowError
from ..models.config_models import RecordSettings
from ..models.entity import EntityType
from ..models.output_record import (
    Address,
    Communication,
    ContactDetails,
    ExternalEntityIdentifier,
    LicenseDetails,
    OutputRecord,
)
from ..models.row_data import RowData

"""Row classification and transformation.

Single pass over the worksheet rows for one entity type:

1. keep rows whose ENTITYTYPE equals the tag
2. drop rows whose partition key was already accepted (first row wins)
3. drop rows whose EXPIRATIONDATE is strictly before ``today``
4. map the survivors into OutputRecord

Rows without a readable expiration date are kept and counted as undated.
The function is pure: ``today`` is injected and nothing is logged or written.
"""

__all__ = [
    "DISCRIMINATOR_COLUMN",
    "TransformResult",
    "parse_calendar_date",
    "is_expired",
    "partition_key",
    "build_record",
    "transform_rows",
]

DISCRIMINATOR_COLUMN = "ENTITYTYPE"
LICENSE_NUMBER_COLUMN = "LICENSENUMBER"
EXPIRATION_COLUMN = "EXPIRATIONDATE"
EMAIL_COLUMN = "MAILINGEMAILADDRESS"
ADDRESS_COLUMN = "PREFERREDPOSTALADDRESS"


@dataclass(frozen=True)
class TransformResult:
    entity: EntityType
    records: list[OutputRecord] = field(default_factory=list)
    skipped_other_type: int = 0
    skipped_expired: int = 0
    skipped_duplicate: int = 0
    undated: int = 0

    @property
    def count(self) -> int:
        return len(self.records)


def parse_calendar_date(value: str | None) -> date | None:
    """Parse a cell text into a calendar date (None when missing or unparseable)."""
    if value is None or not str(value).strip():
        return None
    try:
        ts = pd.to_datetime(str(value).strip(), errors="coerce")
    except (ValueError, OverflowError):
        return None
    if ts is None or pd.isna(ts):
        return None
    return ts.date()


def is_expired(value: str | None, today: date) -> bool:
    """True only for a readable date strictly before ``today``."""
    parsed = parse_calendar_date(value)
    return parsed is not None and parsed < today


def partition_key(row: RowData, prefix: str) -> str:
    # LICENSENUMBER 欠落時は prefix のみ (欠落行同士は重複扱い)
    return f"{prefix}{row.get(LICENSE_NUMBER_COLUMN) or ''}"


def build_record(row: RowData, settings: RecordSettings) -> OutputRecord:
    """Map one accepted row into the fixed OutputRecord shape.

    Cells are copied as read: the same layout for every entity type, one
    email (MAILINGEMAILADDRESS) for all email slots and the raw
    PREFERREDPOSTALADDRESS for both address fields.
    """
    email = row.get(EMAIL_COLUMN)
    address = row.get(ADDRESS_COLUMN)
    return OutputRecord(
        partition_key=partition_key(row, settings.partition_prefix),
        client=settings.client,
        name=row.get("PRODUCERNAME"),
        products=tuple(settings.products),
        external_id=ExternalEntityIdentifier(value=row.get(DISCRIMINATOR_COLUMN)),
        npn=row.get("NPN"),
        license=LicenseDetails(
            license_type=row.get("LICENSETYPE"),
            license_number=row.get(LICENSE_NUMBER_COLUMN),
            effective_date=row.get("EFFECTIVEDATE"),
            expiration_date=row.get(EXPIRATION_COLUMN),
            qualification=row.get("QUALIFICATION"),
            qualification_effective_date=row.get("QUALIFICATIONEFFECTIVEDATE"),
        ),
        contact=ContactDetails(
            home_phone=row.get("MAILINGPHONE"),
            business_phone=row.get("BUSINESSPHONE"),
            mobile_phone=row.get("MAILINGPHONE"),
            email=email,
        ),
        address=Address(street_name=address, unformatted_address=address),
        communications=(
            Communication(type="PhNo", value=row.get("BUSINESSPHONE")),
            Communication(type="Email", value=email or ""),
        ),
    )


def transform_rows(
    rows: Iterable[RowData],
    entity_type: EntityType,
    *,
    today: date | datetime,
    settings: RecordSettings | None = None,
) -> TransformResult:
    """Classify, filter, dedupe and map ``rows`` for ``entity_type``.

    Args:
        rows: worksheet rows in sheet order
        entity_type: which ENTITYTYPE value to accept
        today: reference date for the expiration filter
        settings: record constants (client, partition prefix, products)

    Returns:
        TransformResult with the records in source order and skip counters

    Raises:
        MalformedRowError: a row has no ENTITYTYPE column at all
    """
    if isinstance(today, datetime):
        today = today.date()
    settings = settings or RecordSettings()

    records: list[OutputRecord] = []
    accepted: set[str] = set()
    other = expired = duplicate = undated = 0

    for row in rows:
        if not row.has_column(DISCRIMINATOR_COLUMN):
            raise MalformedRowError(row.row_number, DISCRIMINATOR_COLUMN)
        if row.get(DISCRIMINATOR_COLUMN) != entity_type.value:
            other += 1
            continue
        key = partition_key(row, settings.partition_prefix)
        if key in accepted:
            duplicate += 1
            continue
        expiration = parse_calendar_date(row.get(EXPIRATION_COLUMN))
        if expiration is not None and expiration < today:
            expired += 1
            continue
        if expiration is None:
            undated += 1
        accepted.add(key)
        records.append(build_record(row, settings))

    return TransformResult(
        entity=entity_type,
        records=records,
        skipped_other_type=other,
        skipped_expired=expired,
        skipped_duplicate=duplicate,
        undated=undated,
    )

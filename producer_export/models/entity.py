from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

"""Entity type tag and the per-entity column profile."""

__all__ = [
    "EntityType",
    "EntityProfile",
    "PROFILES",
]


class EntityType(Enum):
    """Value of the ENTITYTYPE discriminator column.

    - INDIVIDUAL: agents, exported as ``outputAgents_*``
    - FIRM: agencies, exported as ``outputAgencies_*``
    """
    INDIVIDUAL = "Individual"
    FIRM = "Firm"

    @property
    def profile(self) -> EntityProfile:
        return PROFILES[self]


@dataclass(frozen=True)
class EntityProfile:
    """How an entity's artifacts are named."""
    label: str  # Agent / Agency
    archive_prefix: str
    combined_name: str


PROFILES: dict[EntityType, EntityProfile] = {
    EntityType.INDIVIDUAL: EntityProfile(
        label="Agent",
        archive_prefix="outputAgents",
        combined_name="AgentTransformed",
    ),
    EntityType.FIRM: EntityProfile(
        label="Agency",
        archive_prefix="outputAgencies",
        combined_name="AgencyTransformed",
    ),
}

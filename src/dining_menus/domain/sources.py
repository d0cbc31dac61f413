"""Domain models for nutrition information sources."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class InformationSource:
    """Where a food's nutrient values came from."""

    id: UUID
    name: str
    description: str | None
    error_confidence_description: str | None

"""Domain models for batch ingestion outcomes."""

from dataclasses import dataclass, field
from uuid import UUID


@dataclass(frozen=True)
class BatchFailure:
    """A record that could not be ingested."""

    index: int
    label: str
    error: Exception


@dataclass(frozen=True)
class BatchSkip:
    """A record skipped because an overlapping menu already exists."""

    index: int
    label: str
    existing_menu_ids: list[UUID]


@dataclass
class BatchResult:
    """Per-record outcome of a batch run, in input order."""

    succeeded: list[UUID] = field(default_factory=list)
    failed: list[BatchFailure] = field(default_factory=list)
    skipped: list[BatchSkip] = field(default_factory=list)

"""Nutrition information source registry."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from dining_menus.domain.errors import ConflictError
from dining_menus.domain.sources import InformationSource

DEFAULT_ERROR_CONFIDENCE = "No specific confidence information provided"

_logger = logging.getLogger(__name__)


def default_description(name: str) -> str:
    """Description stored for sources first seen on a scraped food."""
    return f"Macro information source: {name}"


class SourceWriter(Protocol):
    """Minimal persistence interface needed to get or create a source."""

    def get_source_by_name(self, name: str) -> InformationSource | None:
        """Return a source by its unique name, if present."""

    def insert_source(
        self,
        name: str,
        description: str | None,
        error_confidence_description: str | None,
    ) -> UUID:
        """Insert a source and return its id."""


class InformationSourceRepository(SourceWriter, Protocol):
    """Persistence interface for information sources."""

    def list_sources(self) -> list[InformationSource]:
        """Return all sources."""


@dataclass
class InformationSourceService:
    """Creates information sources lazily; the first writer wins."""

    repository: InformationSourceRepository

    def get_or_create(
        self,
        name: str,
        description: str | None = None,
        error_confidence_description: str | None = None,
        repository: SourceWriter | None = None,
    ) -> UUID:
        """Return the id for a source name, creating the row when unseen.

        An existing row is returned untouched even if the description differs.
        """
        target = repository or self.repository
        existing = target.get_source_by_name(name)
        if existing is not None:
            return existing.id
        try:
            source_id = target.insert_source(
                name,
                description or default_description(name),
                error_confidence_description or DEFAULT_ERROR_CONFIDENCE,
            )
        except ConflictError:
            if repository is not None:
                raise
            winner = self.repository.get_source_by_name(name)
            if winner is None:
                raise
            _logger.warning(
                "Source insert conflicted, using existing: name=%s id=%s",
                name,
                winner.id,
            )
            return winner.id
        _logger.info("Created information source: name=%s", name)
        return source_id

    def get_by_name(self, name: str) -> InformationSource | None:
        """Return a source by name."""
        return self.repository.get_source_by_name(name)

    def list_sources(self) -> list[InformationSource]:
        """Return all sources."""
        return self.repository.list_sources()

"""Supabase repository for nutrition information sources."""

from dataclasses import dataclass
from uuid import UUID, uuid4

from postgrest.exceptions import APIError
from supabase import Client

from dining_menus.adapters.supabase_rows import (
    SOURCE_COLUMNS,
    parse_source,
    source_row,
    translate_api_error,
)
from dining_menus.domain.errors import StorageError
from dining_menus.domain.sources import InformationSource
from dining_menus.services.sources import InformationSourceRepository


@dataclass
class SupabaseSourceRepository(InformationSourceRepository):
    """Supabase implementation for information sources."""

    client: Client

    def get_source_by_name(self, name: str) -> InformationSource | None:
        """Return a source by its unique name."""
        response = (
            self.client.table("information_sources")
            .select(SOURCE_COLUMNS)
            .eq("name", name)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return parse_source(response.data[0])

    def insert_source(
        self,
        name: str,
        description: str | None,
        error_confidence_description: str | None,
    ) -> UUID:
        """Insert a source row; a taken name raises ``ConflictError``."""
        try:
            response = (
                self.client.table("information_sources")
                .insert(
                    source_row(uuid4(), name, description, error_confidence_description)
                )
                .execute()
            )
        except APIError as exc:
            raise translate_api_error(
                exc, entity="information source", key=name, action="create source"
            ) from exc
        if not response.data:
            raise StorageError("Failed to create information source")
        return UUID(str(response.data[0]["id"]))

    def list_sources(self) -> list[InformationSource]:
        """Return all sources ordered by name."""
        response = (
            self.client.table("information_sources")
            .select(SOURCE_COLUMNS)
            .order("name", desc=False)
            .execute()
        )
        return [parse_source(row) for row in response.data or []]

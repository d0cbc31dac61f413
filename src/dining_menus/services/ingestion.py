"""Atomic ingestion of a single scraped menu."""

import logging
from collections.abc import Mapping
from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from dining_menus.domain.errors import (
    ConflictError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from dining_menus.domain.menus import NewFood, NewMenu, ServingUnit
from dining_menus.domain.records import FoodRecord, MenuRecord, parse_menu_record
from dining_menus.services.locations import LocationService, LocationWriter
from dining_menus.services.nutrients import complete_profile, encode_nutrients
from dining_menus.services.sources import InformationSourceService, SourceWriter

_logger = logging.getLogger(__name__)


class IngestionTransaction(LocationWriter, SourceWriter, Protocol):
    """Write handle scoped to one menu ingestion."""

    def insert_nutrient_profile(self, nutrients: Mapping[str, float]) -> UUID:
        """Insert a nutrient profile row and return its id."""

    def insert_food(self, food: NewFood) -> UUID:
        """Insert a food row and return its id."""

    def insert_menu(self, menu: NewMenu) -> UUID:
        """Insert a menu row and return its id."""

    def link_food(self, menu_id: UUID, food_id: UUID) -> None:
        """Link a food to a menu; a repeated pair is rejected."""


class MenuStore(Protocol):
    """Factory for ingestion transactions."""

    def transaction(self) -> AbstractContextManager[IngestionTransaction]:
        """Open a transaction that commits on exit and rolls back on error."""


@dataclass
class _Progress:
    step: str = "begin"
    food_name: str | None = None


@dataclass
class MenuIngestionService:
    """Writes a menu with its foods, nutrients and links all or nothing."""

    store: MenuStore
    location_service: LocationService
    source_service: InformationSourceService
    conflict_retry_attempts: int = 3

    def ingest_menu(self, record: Mapping[str, object] | MenuRecord) -> UUID:
        """Validate and persist one menu record, returning the new menu id.

        A conflict raised by a concurrent writer creating the same location
        or information source restarts the ingestion, which then resolves to
        the winning rows.
        """
        menu = parse_menu_record(record)
        attempt = 0
        while True:
            try:
                return self._ingest_once(menu)
            except ConflictError as exc:
                attempt += 1
                if attempt > self.conflict_retry_attempts:
                    raise StorageError(
                        f"conflict persisted after {attempt} attempts: {exc}",
                        step="commit",
                    ) from exc
                _logger.warning(
                    "Ingestion conflicted (attempt %s/%s): menu=%s error=%s",
                    attempt,
                    self.conflict_retry_attempts + 1,
                    menu.label,
                    exc,
                )

    def _ingest_once(self, menu: MenuRecord) -> UUID:
        progress = _Progress()
        try:
            with self.store.transaction() as transaction:
                progress.step = "resolve_location"
                location_id = self._resolve_location(transaction, menu)
                food_ids = [
                    self._insert_food(transaction, food, progress)
                    for food in menu.foods
                ]
                progress.step = "insert_menu"
                progress.food_name = None
                menu_id = transaction.insert_menu(
                    NewMenu(
                        name=menu.name,
                        location_id=location_id,
                        start_time=menu.start_time,
                        end_time=menu.end_time,
                    )
                )
                progress.step = "link_food"
                for food, food_id in zip(menu.foods, food_ids, strict=True):
                    progress.food_name = food.name
                    transaction.link_food(menu_id, food_id)
                progress.step = "commit"
                progress.food_name = None
        except (ValidationError, NotFoundError, ConflictError):
            raise
        except StorageError as exc:
            raise exc.with_context(progress.step, progress.food_name) from exc
        except Exception as exc:
            raise StorageError(
                str(exc) or type(exc).__name__,
                step=progress.step,
                food_name=progress.food_name,
            ) from exc
        _logger.info(
            "Ingested menu: id=%s menu=%s foods=%s", menu_id, menu.label, len(food_ids)
        )
        return menu_id

    def _resolve_location(
        self, transaction: IngestionTransaction, menu: MenuRecord
    ) -> UUID:
        if menu.location is not None:
            return self.location_service.resolve_location(
                menu.location.name,
                menu.location.latitude,
                menu.location.longitude,
                repository=transaction,
            )
        locations = transaction.list_locations_by_name(menu.canonical_location_name)
        if not locations:
            raise NotFoundError("location", menu.canonical_location_name)
        return locations[0].id

    def _insert_food(
        self,
        transaction: IngestionTransaction,
        food: FoodRecord,
        progress: _Progress,
    ) -> UUID:
        progress.food_name = food.name
        progress.step = "resolve_information_source"
        source_id = self.source_service.get_or_create(
            food.macro_information_source, repository=transaction
        )
        progress.step = "insert_nutrient_profile"
        profile_id = transaction.insert_nutrient_profile(complete_profile(food.macros))
        progress.step = "insert_food"
        return transaction.insert_food(
            NewFood(
                name=food.name,
                brand=food.brand,
                serving_size=food.serving_size,
                serving_units=[
                    ServingUnit(name=unit.name, grams=unit.grams)
                    for unit in food.serving_units
                ],
                macro_percentage_error_estimate=food.macro_percentage_error_estimate,
                information_source_id=source_id,
                nutrient_profile_id=profile_id,
                embedding=encode_nutrients(food.macros),
            )
        )

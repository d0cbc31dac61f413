"""Batch ingestion of scraped menus."""

import logging
from collections.abc import Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from uuid import UUID

from dining_menus.domain.ingestion import BatchFailure, BatchResult, BatchSkip
from dining_menus.domain.records import MenuRecord, parse_menu_record
from dining_menus.services.ingestion import MenuIngestionService
from dining_menus.services.locations import LocationService
from dining_menus.services.menus import MenuQueryService

_logger = logging.getLogger(__name__)

_Outcome = UUID | BatchSkip | BatchFailure


@dataclass
class BatchIngestionService:
    """Ingests many menus, collecting per-record outcomes instead of raising."""

    ingestion_service: MenuIngestionService
    query_service: MenuQueryService
    location_service: LocationService
    max_workers: int = 1

    def ingest_batch(
        self,
        records: Sequence[Mapping[str, object] | MenuRecord],
        skip_existing: bool = False,
    ) -> BatchResult:
        """Ingest records in input order.

        With ``skip_existing`` a record whose canonical location already has a
        menu overlapping its time window is reported as skipped. Each record
        is ingested atomically; one failure never stops the batch.
        """
        if self.max_workers > 1 and len(records) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                outcomes = list(
                    executor.map(
                        lambda item: self._process(item[0], item[1], skip_existing),
                        enumerate(records),
                    )
                )
        else:
            outcomes = [
                self._process(index, record, skip_existing)
                for index, record in enumerate(records)
            ]

        result = BatchResult()
        for outcome in outcomes:
            if isinstance(outcome, BatchFailure):
                result.failed.append(outcome)
            elif isinstance(outcome, BatchSkip):
                result.skipped.append(outcome)
            else:
                result.succeeded.append(outcome)
        _logger.info(
            "Batch ingestion finished: total=%s succeeded=%s skipped=%s failed=%s",
            len(records),
            len(result.succeeded),
            len(result.skipped),
            len(result.failed),
        )
        return result

    def _process(
        self,
        index: int,
        record: Mapping[str, object] | MenuRecord,
        skip_existing: bool,
    ) -> _Outcome:
        label = describe_record(record)
        try:
            menu = parse_menu_record(record)
            label = menu.label
            if skip_existing:
                existing = self._existing_menu_ids(menu)
                if existing:
                    _logger.info("Skipping existing menu: %s", label)
                    return BatchSkip(
                        index=index, label=label, existing_menu_ids=existing
                    )
            return self.ingestion_service.ingest_menu(menu)
        except Exception as exc:  # noqa: BLE001
            _logger.warning("Failed to ingest record %s (%s): %s", index, label, exc)
            return BatchFailure(index=index, label=label, error=exc)

    def _existing_menu_ids(self, menu: MenuRecord) -> list[UUID]:
        # Same location the coordinator would write to.
        if menu.location is None:
            location = self.location_service.get_location_by_name(
                menu.canonical_location_name
            )
        else:
            location = self.location_service.match_location(
                menu.location.name, menu.location.latitude, menu.location.longitude
            )
        if location is None:
            return []
        summaries = self.query_service.menus_at_location(
            location.id, menu.start_time, menu.end_time
        )
        return [summary.id for summary in summaries]


def describe_record(record: object) -> str:
    """Best-effort label for a record that may not have passed validation."""
    if isinstance(record, MenuRecord):
        return record.label
    if not isinstance(record, Mapping):
        return repr(record)
    location = record.get("location")
    if isinstance(location, Mapping):
        location = location.get("name")
    return (
        f"{record.get('name')} @ {location} "
        f"[{record.get('start_time')} - {record.get('end_time')}]"
    )

from __future__ import annotations

import asyncio
import bisect
from collections.abc import Iterable

from consumers.base import IncidentConsumer
from timeline.config import DEFAULT_CONFIG, TimelineConfig
from timeline.parsed import ParsedIncident
from timeline.services import GLOBAL_REGION


class IncidentArchive:
    """Parsed incidents keyed by ``service::region``, each key's records
    kept in posting-date order. Re-adding a record with the same key and
    date replaces it.
    """

    def __init__(self, config: TimelineConfig = DEFAULT_CONFIG) -> None:
        self._config = config
        self._records: dict[str, list[ParsedIncident]] = {}

    def add(self, incident: ParsedIncident) -> None:
        records = self._records.setdefault(incident.id, [])
        dates = [r.date for r in records]
        i = bisect.bisect_left(dates, incident.date)
        if i < len(records) and records[i].date == incident.date:
            records[i] = incident
        else:
            records.insert(i, incident)

    def __len__(self) -> int:
        return sum(len(r) for r in self._records.values())

    def get(self, key: str) -> list[ParsedIncident]:
        return list(self._records.get(key, []))

    def query(
        self,
        services: Iterable[str] | None = None,
        regions: Iterable[str] | None = None,
        start: int = 0,
        end: int = 0,
    ) -> list[ParsedIncident]:
        """Filter stored incidents.

        ``services`` match the short service name; ``regions`` match the
        region, and global services always pass the region filter.
        ``start``/``end`` (epoch seconds, 0 = unbounded) compare against
        the posting date, not the impact window.

        Raises:
            ValueError: ``end`` is set and earlier than ``start``.
        """
        if end > 0 and end < start:
            raise ValueError("The end date must be greater than or equal to the start.")

        wanted_services = {s.strip().lower() for s in services or [] if s.strip()}
        wanted_regions = {r.strip().lower() for r in regions or [] if r.strip()}

        results: list[ParsedIncident] = []
        for records in self._records.values():
            for incident in records:
                if wanted_services and incident.service.lower() not in wanted_services:
                    continue
                if wanted_regions and not self._region_matches(incident, wanted_regions):
                    continue
                if start > 0 and incident.date < start:
                    continue
                if end > 0 and incident.date > end:
                    continue
                results.append(incident)

        return sorted(results, key=lambda p: (p.date, p.id))

    def _region_matches(self, incident: ParsedIncident, regions: set[str]) -> bool:
        if incident.service in self._config.global_services or incident.region == GLOBAL_REGION:
            return True
        return incident.region.lower() in regions


class ArchiveConsumer(IncidentConsumer):
    """Reactive consumer that stores every incident in an ``IncidentArchive``."""

    def __init__(self, queue: asyncio.Queue[ParsedIncident], archive: IncidentArchive) -> None:
        super().__init__(queue)
        self.archive = archive

    async def process(self, incident: ParsedIncident) -> None:
        self.archive.add(incident)

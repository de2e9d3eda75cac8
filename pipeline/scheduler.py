from __future__ import annotations

import asyncio
import logging

from pipeline.dedup import DeduplicationStore
from pipeline.event_bus import EventBus
from pipeline.parse import parse_batch
from pipeline.registry import SourceRegistry
from providers.base import IncidentSource
from timeline.config import DEFAULT_CONFIG, TimelineConfig

log = logging.getLogger(__name__)

DEFAULT_CONCURRENCY_LIMIT = 20


class Scheduler:
    """Producer coordinator that spawns one independent worker task per
    registered source.

    Each worker runs on its own schedule (``source.poll_interval_seconds``)
    and acquires a shared ``asyncio.Semaphore`` before performing a network
    fetch, bounding the maximum number of concurrent outbound requests.

    Fetched incidents are parsed one by one; failures are counted and
    logged, and never stop the rest of the batch. The scheduler is strictly
    a *producer*: it pushes new parsed incidents onto the ``EventBus`` and
    has no knowledge of consumers.
    """

    def __init__(
        self,
        registry: SourceRegistry,
        dedup: DeduplicationStore,
        bus: EventBus,
        config: TimelineConfig = DEFAULT_CONFIG,
        concurrency_limit: int = DEFAULT_CONCURRENCY_LIMIT,
    ) -> None:
        self._registry = registry
        self._dedup = dedup
        self._bus = bus
        self._config = config
        self._semaphore = asyncio.Semaphore(concurrency_limit)
        self._concurrency_limit = concurrency_limit
        self.failure_count = 0

    async def poll_once(self, source: IncidentSource) -> int:
        """Fetch, parse and publish one batch; returns the number of new
        incidents published."""
        async with self._semaphore:
            try:
                raw = await source.fetch_incidents()
            except Exception:
                log.exception("Worker %s fetch failed", source.name)
                raw = []

        result = parse_batch(raw, self._config)
        self.failure_count += len(result.failures)
        if result.failures:
            log.warning(
                "Worker %s: %d of %d incident(s) could not be parsed",
                source.name,
                len(result.failures),
                len(raw),
            )

        new_count = 0
        for incident in result.parsed:
            if self._dedup.is_new(incident):
                await self._bus.put(incident)
                new_count += 1

        if new_count:
            log.info(
                "Worker %s: %d new incident(s), %d total tracked, %d without stated window",
                source.name,
                new_count,
                self._dedup.size,
                result.missed,
            )
        return new_count

    async def _source_worker(self, source: IncidentSource) -> None:
        """Long-lived worker loop for a single source."""
        log.info(
            "Worker started for %s (interval=%ds)",
            source.name,
            source.poll_interval_seconds,
        )

        while True:
            await self.poll_once(source)
            await asyncio.sleep(source.poll_interval_seconds)

    async def run(self) -> None:
        """Spawn one worker task per source and await them all.

        If no sources are registered the method returns immediately.
        """
        sources = self._registry.sources
        if not sources:
            log.warning("No sources registered")
            return

        log.info(
            "Scheduler starting %d source worker(s), concurrency limit=%d",
            len(sources),
            self._concurrency_limit,
        )

        tasks = [
            asyncio.create_task(
                self._source_worker(s),
                name=f"worker-{s.name}",
            )
            for s in sources
        ]

        await asyncio.gather(*tasks)

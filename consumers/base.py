from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod

from timeline.parsed import ParsedIncident

log = logging.getLogger(__name__)


class IncidentConsumer(ABC):
    """Reactive incident consumer that runs as an independent asyncio task.

    Each consumer subscribes to an ``asyncio.Queue`` and blocks on
    ``queue.get()``, processing incidents as they arrive. This decouples
    consumption from ingestion; the scheduler never calls consumers
    directly.
    """

    def __init__(self, queue: asyncio.Queue[ParsedIncident]) -> None:
        self._queue = queue

    @abstractmethod
    async def process(self, incident: ParsedIncident) -> None:
        """Handle a single incident. Subclasses implement this."""

    async def run(self) -> None:
        """Main consumer loop: awaits incidents from the queue and
        dispatches them to ``process()``.

        Runs indefinitely; designed to be launched via
        ``asyncio.create_task(consumer.run())``.
        """
        log.info("%s started, awaiting incidents", type(self).__name__)
        while True:
            incident = await self._queue.get()
            try:
                await self.process(incident)
            except Exception:
                log.exception(
                    "%s failed processing incident %s at %d",
                    type(self).__name__,
                    incident.id,
                    incident.date,
                )
            finally:
                self._queue.task_done()

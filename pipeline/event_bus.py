from __future__ import annotations

import asyncio

from timeline.parsed import ParsedIncident


class EventBus:
    """Async incident channel backed by ``asyncio.Queue``.

    Producers call ``put()`` to publish deduplicated incidents.
    Each consumer receives its own independent queue so that a slow
    consumer never blocks others or the ingestion pipeline.
    """

    def __init__(self, maxsize: int = 0) -> None:
        self._subscribers: list[asyncio.Queue[ParsedIncident]] = []
        self._maxsize = maxsize

    def subscribe(self) -> asyncio.Queue[ParsedIncident]:
        """Create and return a new subscriber queue."""
        q: asyncio.Queue[ParsedIncident] = asyncio.Queue(maxsize=self._maxsize)
        self._subscribers.append(q)
        return q

    async def put(self, incident: ParsedIncident) -> None:
        """Publish an incident to every subscriber queue."""
        for q in self._subscribers:
            await q.put(incident)

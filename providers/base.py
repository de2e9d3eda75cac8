from __future__ import annotations

from abc import ABC, abstractmethod

import httpx

from models.incident import RawIncident

DEFAULT_POLL_INTERVAL = 300


class IncidentSource(ABC):
    """Abstract base for all sources of raw dashboard incidents.

    Each concrete source is responsible for fetching its own data (JSON
    feed, archived export, etc.) and normalizing entries into RawIncident
    objects. Parsing the incidents is left to the pipeline.

    A shared ``httpx.AsyncClient`` is injected at construction time so
    that all sources reuse one connection pool.
    """

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable source name (e.g. 'AWS Service Health Dashboard')."""

    @property
    def poll_interval_seconds(self) -> int:
        """Seconds between fetch cycles for this source.

        Override in subclasses to customise per-source cadence.
        """
        return DEFAULT_POLL_INTERVAL

    @abstractmethod
    async def fetch_incidents(self) -> list[RawIncident]:
        """Fetch the published incidents.

        Implementations should handle HTTP errors gracefully and return an
        empty list when no data is available or when the feed has not changed
        since the last poll.
        """

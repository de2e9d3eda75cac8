from __future__ import annotations

import logging
from typing import Any

import httpx

from models.incident import RawIncident
from providers.base import IncidentSource
from timeline.config import DEFAULT_CONFIG, TimelineConfig

log = logging.getLogger(__name__)

# Example entry from the feed:
#
# {
#     "service_name": "AWS Identity and Access Management (N. Virginia)",
#     "summary": "[RESOLVED] Delays for User and Policy Updates",
#     "date": "1481033166",
#     "status": "0",
#     "details": "",
#     "description": "<div><span class=\"yellowfg\"> 6:06 AM PST</span>&nbsp;Between 4:25 AM to 5:25 AM PST we ...</div>",
#     "service": "iam-us-east-1"
# }


def incidents_from_payload(payload: Any) -> list[RawIncident]:
    """Read the ``archive`` and ``current`` lists of a dashboard payload."""
    if not isinstance(payload, dict):
        raise ValueError(f"Expected a JSON object, got {type(payload).__name__}")

    incidents: list[RawIncident] = []
    for section in ("archive", "current"):
        for entry in payload.get(section) or []:
            if isinstance(entry, dict):
                incidents.append(RawIncident.from_json(entry))
            else:
                log.warning("Skipping malformed %s entry: %r", section, entry)
    return incidents


class DashboardSource(IncidentSource):
    """Source adapter for the status dashboard's JSON data file.

    Uses HTTP conditional requests (ETag / If-None-Match) to skip
    re-parsing when the file has not changed.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        config: TimelineConfig = DEFAULT_CONFIG,
        url: str | None = None,
    ) -> None:
        super().__init__(client)
        self._url = url or config.url
        self._etag: str | None = None

    @property
    def name(self) -> str:
        return "AWS Service Health Dashboard"

    @property
    def poll_interval_seconds(self) -> int:
        return 600

    async def fetch_incidents(self) -> list[RawIncident]:
        headers: dict[str, str] = {}
        if self._etag:
            headers["If-None-Match"] = self._etag

        try:
            resp = await self._client.get(self._url, headers=headers)
        except httpx.HTTPError as exc:
            log.error("[%s] HTTP error retrieving %s: %s", self.name, self._url, exc)
            return []

        if resp.status_code == 304:
            return []

        if resp.status_code != 200:
            log.warning("[%s] Unexpected status %d", self.name, resp.status_code)
            return []

        try:
            incidents = incidents_from_payload(resp.json())
        except ValueError as exc:
            log.error("[%s] Failed to decode dashboard data: %s", self.name, exc)
            return []

        self._etag = resp.headers.get("etag")
        log.info("[%s] Retrieved %d incident(s)", self.name, len(incidents))
        return incidents

from __future__ import annotations

from datetime import datetime, timezone

from consumers.base import IncidentConsumer
from timeline.parsed import ParsedIncident


def _fmt(epoch: int) -> str:
    return datetime.fromtimestamp(epoch, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S")


class ConsoleConsumer(IncidentConsumer):
    """Reactive consumer that prints parsed incidents to stdout."""

    async def process(self, incident: ParsedIncident) -> None:
        stated = "stated" if incident.timeline.start_time_was_found_in_description else "inferred"
        print(
            f"[{_fmt(incident.date)}] {incident.id} ({incident.status.name})\n"
            f"  Summary: {incident.summary}\n"
            f"  Impact: {_fmt(incident.start)} -> {_fmt(incident.end)} UTC"
            f" ({stated}, {incident.event_duration}s)\n",
            flush=True,
        )

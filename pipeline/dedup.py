from __future__ import annotations

from timeline.parsed import ParsedIncident


class DeduplicationStore:
    """In-memory store that tracks which (service::region, posted date)
    pairs have already been processed, preventing duplicate consumer
    dispatches when the feed keeps returning its archive.
    """

    def __init__(self) -> None:
        self._seen: set[tuple[str, int]] = set()

    def is_new(self, incident: ParsedIncident) -> bool:
        """Return True the first time a given incident is seen, False after."""
        key = (incident.id, incident.date)
        if key in self._seen:
            return False
        self._seen.add(key)
        return True

    @property
    def size(self) -> int:
        return len(self._seen)

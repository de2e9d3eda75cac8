from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime

from timeline.errors import InvalidIntervalError


@dataclass(frozen=True)
class DatedUpdate:
    """One update fragment of an incident, resolved to a UTC instant.

    Fields:
        timestamp:     When the update was posted (UTC).
        text:          Update body with markup removed.
        original_zone: Zone abbreviation seen on the update's label, or ''.
    """

    timestamp: datetime
    text: str
    original_zone: str = ""


@dataclass(frozen=True, order=True)
class TimeInterval:
    """A concrete period of impact. Construction fails if ``end < start``."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise InvalidIntervalError(
                f"The end time, {self.end.isoformat()}, was before the start time, "
                f"{self.start.isoformat()}."
            )

    @property
    def seconds(self) -> int:
        return math.floor((self.end - self.start).total_seconds())


@dataclass(frozen=True)
class EventTimeline:
    """Timeline extracted from an incident description.

    ``updates`` and ``intervals`` are keyed by UTC instant and iterate in
    ascending order. ``start``/``end`` bound the whole event; the two
    ``*_found_in_description`` flags are true only when at least one
    explicit outage window was read from the text, otherwise the bounds
    come from the first and last update (or the posting date).
    """

    start: datetime
    end: datetime
    updates: dict[datetime, DatedUpdate] = field(default_factory=dict)
    intervals: dict[datetime, TimeInterval] = field(default_factory=dict)
    start_time_was_found_in_description: bool = False
    end_time_was_found_in_description: bool = False

    def duration_seconds(self) -> int:
        """Total seconds of impact: the sum of the interval lengths, not
        necessarily the whole span between ``start`` and ``end``."""
        return sum(interval.seconds for interval in self.intervals.values())

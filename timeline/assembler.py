from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime, timezone

from models.incident import RawIncident
from models.timeline import DatedUpdate, EventTimeline, TimeInterval
from timeline.config import DEFAULT_CONFIG, TimelineConfig
from timeline.dates import get_base_date, get_dated_updates
from timeline.errors import DescriptionFormatError, IncidentParseError, TimestampParseError
from timeline.extractors import DEFAULT_EXTRACTORS, ExtractionContext, OutageWindowExtractor

log = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def extract_intervals(
    updates: dict[datetime, DatedUpdate],
    base_date: datetime,
    config: TimelineConfig = DEFAULT_CONFIG,
    extractors: Sequence[OutageWindowExtractor] = DEFAULT_EXTRACTORS,
) -> dict[datetime, TimeInterval]:
    """Run every extractor over every update, oldest update first.

    Intervals are keyed by start instant. When two intervals share a
    start, repeated announcements are assumed and the one ending later is
    kept, unless the extractor only fills empty slots.
    """
    if not updates:
        return {}

    context = ExtractionContext(
        base_date=base_date,
        last_update=next(reversed(updates)),
        config=config,
    )
    found: dict[datetime, TimeInterval] = {}

    for update in updates.values():
        for extractor in extractors:
            for interval in extractor.extract(update, context):
                existing = found.get(interval.start)
                if existing is None:
                    found[interval.start] = interval
                elif extractor.replaces_shorter_duplicate and interval.end > existing.end:
                    found[interval.start] = interval
                else:
                    continue
                log.debug(
                    "[%s] Interval %s -> %s",
                    extractor.name,
                    interval.start.isoformat(),
                    interval.end.isoformat(),
                )

    return dict(sorted(found.items()))


def get_event_timeline(
    incident: RawIncident,
    base_date: datetime | None = None,
    config: TimelineConfig = DEFAULT_CONFIG,
    extractors: Sequence[OutageWindowExtractor] = DEFAULT_EXTRACTORS,
) -> EventTimeline:
    """Build the timeline of one incident.

    Start and end come, in decreasing order of confidence, from:

    1. the outage windows stated in the updates (flags set to True),
    2. the first and last update, as a single interval,
    3. the base date alone, as a zero-length interval.

    Raises:
        IncidentParseError: the description is malformed or holds a
            timestamp that cannot be resolved. The raw incident is
            attached and the underlying error chained.
    """
    try:
        if base_date is None:
            base_date = get_base_date(incident, config)
        base_date = _as_utc(base_date)
        updates = get_dated_updates(incident, base_date, config)
        intervals = extract_intervals(updates, base_date, config, extractors)
    except (DescriptionFormatError, TimestampParseError) as exc:
        raise IncidentParseError(
            f"Could not parse event {incident.service} posted at {incident.posted_at}: {exc}",
            incident,
        ) from exc

    if intervals:
        return EventTimeline(
            start=next(iter(intervals.values())).start,
            end=max(interval.end for interval in intervals.values()),
            updates=updates,
            intervals=intervals,
            start_time_was_found_in_description=True,
            end_time_was_found_in_description=True,
        )

    if updates:
        start, end = next(iter(updates)), next(reversed(updates))
        log.debug(
            "No outage window stated for %s, using update span %s -> %s",
            incident.service,
            start.isoformat(),
            end.isoformat(),
        )
    else:
        start = end = base_date
        log.debug("No updates for %s, using base date %s", incident.service, base_date.date())

    return EventTimeline(
        start=start,
        end=end,
        updates=updates,
        intervals={start: TimeInterval(start, end)},
    )

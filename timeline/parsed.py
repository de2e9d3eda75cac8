from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from models.incident import IncidentStatus, RawIncident
from models.timeline import EventTimeline
from timeline.assembler import get_event_timeline
from timeline.config import DEFAULT_CONFIG, TimelineConfig
from timeline.errors import IncidentParseError
from timeline.services import get_service_name, resolve_region


def to_epoch(value: datetime) -> int:
    return int(value.astimezone(timezone.utc).timestamp())


def monthly_outage_durations(start: datetime, end: datetime) -> dict[str, int]:
    """Seconds between ``start`` and ``end`` falling in each calendar month,
    keyed ``YYYY-MM``."""
    durations: dict[str, int] = {}
    remaining = (end - start).total_seconds()
    current = start

    while remaining > 0:
        if current.month == 12:
            next_month = current.replace(year=current.year + 1, month=1, day=1,
                                         hour=0, minute=0, second=0, microsecond=0)
        else:
            next_month = current.replace(month=current.month + 1, day=1,
                                         hour=0, minute=0, second=0, microsecond=0)
        in_month = (next_month - current).total_seconds()
        durations[f"{current.year}-{current.month:02d}"] = round(min(remaining, in_month))
        remaining -= in_month
        current = next_month

    return durations


@dataclass(frozen=True)
class ParsedIncident:
    """An incident reduced to the fields used for availability reporting.

    Stored under ``id`` (``service::region``) with ``date``, the posting
    time in epoch seconds, as the sort key. ``start``/``end`` are epoch
    seconds taken from the timeline; ``event_duration`` is the summed
    length of its intervals.
    """

    service: str
    region: str
    date: int
    start: int
    end: int
    summary: str
    status: IncidentStatus
    description: str
    timeline: EventTimeline = field(compare=False, repr=False)

    @property
    def id(self) -> str:
        return f"{self.service}::{self.region}"

    @property
    def event_duration(self) -> int:
        return self.timeline.duration_seconds()

    @property
    def monthly_outage_durations(self) -> dict[str, int]:
        return monthly_outage_durations(
            datetime.fromtimestamp(self.start, tz=timezone.utc),
            datetime.fromtimestamp(self.end, tz=timezone.utc),
        )

    @classmethod
    def from_raw(cls, raw: RawIncident, config: TimelineConfig = DEFAULT_CONFIG) -> ParsedIncident:
        """Parse a raw dashboard entry.

        Raises:
            IncidentParseError: for any failure, with ``raw`` attached.
        """
        try:
            timeline = get_event_timeline(raw, config=config)
            return cls(
                service=get_service_name(raw.service),
                region=resolve_region(raw.service, raw.description, config),
                date=int(raw.posted_at),
                start=to_epoch(timeline.start),
                end=to_epoch(timeline.end),
                summary=raw.summary,
                status=IncidentStatus.parse(raw.status),
                description=describe_updates(timeline),
                timeline=timeline,
            )
        except IncidentParseError:
            raise
        except Exception as exc:
            raise IncidentParseError(f"Could not parse event: {raw.to_json()}", raw) from exc

    def to_json(self) -> dict[str, object]:
        return {
            "id": self.id,
            "service": self.service,
            "region": self.region,
            "date": self.date,
            "start": self.start,
            "end": self.end,
            "event_duration": self.event_duration,
            "summary": self.summary,
            "status": self.status.name,
            "description": self.description,
            "monthly_outage_durations": self.monthly_outage_durations,
            "start_time_was_found_in_description": self.timeline.start_time_was_found_in_description,
        }


def describe_updates(timeline: EventTimeline) -> str:
    """One line per update: ``<UTC timestamp> : <text>``."""
    return "\r\n".join(
        f"{ts.isoformat()} : {update.text}" for ts, update in timeline.updates.items()
    )

"""Resolution of labels and phrases into absolute UTC instants.

Every absolute instant is produced the same way: a calendar date is
combined with a clock reading whose zone abbreviation has already been
replaced by a numeric offset, and the result is parsed and converted to
UTC. Times that end up without any offset are read as UTC.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, timezone

from models.incident import RawIncident
from models.timeline import DatedUpdate
from timeline.config import DEFAULT_CONFIG, TimelineConfig
from timeline.errors import TimestampParseError
from timeline.patterns import FIRST_LABEL_RE, ORDINAL_RE, SLASH_DATE
from timeline.splitter import split_updates
from timeline.zones import find_zone, replace_zone_with_offset

log = logging.getLogger(__name__)

_MONTH_NUMBERS = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
}

_CLOCK_FORMATS = (
    "%I:%M %p %z",
    "%I:%M:%S %p %z",
    "%H:%M %z",
    "%H:%M:%S %z",
    "%I:%M %p",
    "%I:%M:%S %p",
    "%H:%M",
    "%H:%M:%S",
)

_MERIDIEM_NORMALISE_RE = re.compile(r"(\d)\s*([AaPp])\.?[Mm]\b\.?")
# 00:31 PM reads as 12:31 PM
_ZERO_HOUR_RE = re.compile(r"^0{1,2}(?=:\d{2}(?::\d{2})? [AP]M\b)")
_SLASH_DATE_RE = re.compile(rf"^({SLASH_DATE})$")
_MONTH_DAY_RE = re.compile(
    r"^(?P<month>[A-Za-z]+)\.?\s+(?P<day>\d{1,2})(?:st|nd|rd|th)?"
    r"(?:,?\s*(?P<year>\d{4}))?,?$"
)


@dataclass(frozen=True)
class CalendarDay:
    """A calendar date named in the text, with an optional explicit year."""

    month: int
    day: int
    year: int | None = None

    def on_year(self, default_year: int) -> date:
        year = self.year if self.year is not None else default_year
        try:
            return date(year, self.month, self.day)
        except ValueError as exc:
            raise TimestampParseError(
                "Not a valid calendar date", f"{year}-{self.month}-{self.day}"
            ) from exc


def month_number(name: str) -> int:
    """Map 'May', 'Sept', 'December' or 'Dec.' to a month number."""
    number = _MONTH_NUMBERS.get(name.strip().rstrip(".")[:3].lower())
    if number is None:
        raise TimestampParseError("Unknown month name", name)
    return number


def parse_calendar_day(text: str) -> CalendarDay:
    """Read a date clause: 'August 8th', 'November 10, 2020' or '7/31'."""
    text = ORDINAL_RE.sub(r"\1", text.strip()).strip()
    m = _SLASH_DATE_RE.match(text)
    if m:
        month, _, day = re.split(r"([/.])", m.group(1))
        return CalendarDay(int(month), int(day))

    m = _MONTH_DAY_RE.match(text)
    if not m:
        raise TimestampParseError("Could not read calendar date", text)
    year = m.group("year")
    return CalendarDay(
        month=month_number(m.group("month")),
        day=int(m.group("day")),
        year=int(year) if year else None,
    )


def normalise_clock(text: str) -> str:
    """Tidy a clock reading: '5:10pm  PDT' -> '5:10 PM PDT'."""
    text = _MERIDIEM_NORMALISE_RE.sub(lambda m: f"{m.group(1)} {m.group(2).upper()}M", text)
    text = " ".join(text.split())
    return _ZERO_HOUR_RE.sub("12", text)


def resolve_instant(
    day: date,
    clock: str,
    config: TimelineConfig = DEFAULT_CONFIG,
) -> datetime:
    """Combine a calendar day with a clock reading such as '5:10 PM PDT'.

    The reading is interpreted in its own zone (or UTC when it has none)
    and the result is returned in UTC.
    """
    clock = replace_zone_with_offset(normalise_clock(clock), config)
    text = f"{day.isoformat()} {clock}"
    for fmt in _CLOCK_FORMATS:
        try:
            parsed = datetime.strptime(text, f"%Y-%m-%d {fmt}")
        except ValueError:
            continue
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)
    raise TimestampParseError("Could not parse timestamp", text)


def posted_date(incident: RawIncident) -> datetime:
    """The incident's posting time (UTC) truncated to midnight."""
    try:
        posted = incident.posted_datetime
    except (TypeError, ValueError, OverflowError) as exc:
        raise TimestampParseError("Could not read posting time", incident.posted_at) from exc
    return posted.replace(hour=0, minute=0, second=0, microsecond=0)


def get_base_date(incident: RawIncident, config: TimelineConfig = DEFAULT_CONFIG) -> datetime:
    """Date that anchors updates and phrases carrying only a time of day.

    Normally the posting date. When the first update label names its own
    month and day (``May 10, 11:21 AM PDT``) that month and day win, since
    the posting date can lag the start of a multi-day incident; the year
    always comes from the posting date.
    """
    base = posted_date(incident)
    if not incident.description:
        return base

    m = FIRST_LABEL_RE.match(incident.description)
    if not m:
        return base
    label = m.group(1).strip()
    if config.patterns.label_time.match(label):
        return base
    fields = config.patterns.label_month.match(label)
    if not fields:
        return base

    first = _resolve_month_label(fields, base.year, config)
    return base.replace(month=first.month, day=first.day)


def _resolve_month_label(fields: re.Match[str], default_year: int, config: TimelineConfig) -> datetime:
    year = fields.group("year")
    day = CalendarDay(
        month=month_number(fields.group("month")),
        day=int(ORDINAL_RE.sub(r"\1", fields.group("day"))),
        year=int(year) if year else None,
    )
    return resolve_instant(day.on_year(default_year), fields.group("time"), config)


def get_dated_updates(
    incident: RawIncident,
    base_date: datetime | None = None,
    config: TimelineConfig = DEFAULT_CONFIG,
) -> dict[datetime, DatedUpdate]:
    """Resolve every update of the description to a UTC timestamp.

    Labels holding only a time are placed on ``base_date``; labels led by
    a month keep their month and day and take the base date's year. The
    result is ordered by timestamp, which may differ from the order the
    updates appear in the description. Updates resolving to the same
    instant keep the last one seen.

    Raises:
        DescriptionFormatError: the description has no update structure.
        TimestampParseError: a label matches neither shape or is invalid.
    """
    if base_date is None:
        base_date = get_base_date(incident, config)

    patterns = config.patterns
    dated: dict[datetime, DatedUpdate] = {}

    for label, text in split_updates(incident.description):
        zone = find_zone(label, config) or ""
        m = patterns.label_time.match(label)
        if m:
            timestamp = resolve_instant(base_date.date(), m.group(1), config)
        else:
            fields = patterns.label_month.match(label)
            if not fields:
                raise TimestampParseError("Update label is neither a time nor a dated time", label)
            timestamp = _resolve_month_label(fields, base_date.year, config)

        if timestamp in dated:
            log.debug("Update at %s repeated, keeping the later text", timestamp.isoformat())
        dated[timestamp] = DatedUpdate(timestamp=timestamp, text=text, original_zone=zone)

    return dict(sorted(dated.items()))

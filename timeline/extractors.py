"""Outage-window extractors.

Each extractor reads one update's text and returns the impact intervals
it can find there. They run in a fixed order over every update and all
of their results are kept; a single update may describe several windows.
"""
from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from models.timeline import DatedUpdate, TimeInterval
from timeline.config import TimelineConfig
from timeline.dates import parse_calendar_day, resolve_instant
from timeline.errors import InvalidIntervalError, TimestampParseError
from timeline.patterns import MERIDIEM_RE, ORDINAL_RE
from timeline.zones import ensure_zone, find_zone

log = logging.getLogger(__name__)

_DATED_TIME_RE = re.compile(
    r"^(?P<date>[A-Za-z]+\.?\s+\d{1,2}(?:\s+\d{4})?)\s+(?P<clock>\d{1,2}:.*)$"
)


@dataclass(frozen=True)
class ExtractionContext:
    """What an extractor needs to know besides the update itself.

    Fields:
        base_date:   Anchor date (UTC midnight) for phrases with no date.
        last_update: Timestamp of the incident's most recent update.
        config:      Zone table and default zone.
    """

    base_date: datetime
    last_update: datetime
    config: TimelineConfig

    @property
    def base_day(self) -> date:
        return self.base_date.date()


def _meridiem(clock: str) -> str | None:
    m = MERIDIEM_RE.match(clock)
    if not m or not m.group(1):
        return None
    return m.group(1)[0].upper()


def _build_interval(start: datetime, end: datetime, extractor: str, phrase: str) -> TimeInterval | None:
    try:
        return TimeInterval(start, end)
    except InvalidIntervalError as exc:
        log.warning("[%s] Dropping interval read from %r: %s", extractor, phrase, exc)
        return None


class OutageWindowExtractor(ABC):
    """Reads impact intervals out of a single update's text."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Short identifier used in log lines."""

    @property
    def replaces_shorter_duplicate(self) -> bool:
        """Whether an interval starting at an instant already recorded
        replaces the recorded one when it ends later.

        When False the interval is only added if no interval starts at
        the same instant.
        """
        return True

    @abstractmethod
    def extract(self, update: DatedUpdate, context: ExtractionContext) -> list[TimeInterval]:
        """Return every interval described in ``update.text``.

        Intervals whose end precedes their start are logged and left
        out. Phrases that match but cannot be read as instants raise
        ``TimestampParseError``.
        """


class BetweenTimesExtractor(OutageWindowExtractor):
    """``Between 5:10 PM and 7:04 PM PDT`` with optional ``on <date>`` clauses.

    Missing zones are borrowed from the other side of the phrase or fall
    back to the default zone. Without an explicit end date, an end that
    lands before the start is moved forward a day when the phrase reads
    PM -> AM, and by twelve hours when AM/PM was left out.
    """

    @property
    def name(self) -> str:
        return "between-times"

    def extract(self, update: DatedUpdate, context: ExtractionContext) -> list[TimeInterval]:
        config = context.config
        base_day = context.base_day
        intervals: list[TimeInterval] = []

        for m in config.patterns.between_times.finditer(update.text):
            start_zone = find_zone(m.group("start"), config)
            end_zone = find_zone(m.group("end"), config)
            start = ensure_zone(m.group("start"), end_zone, config)
            end = ensure_zone(m.group("end"), start_zone, config)

            end_day: date | None = None
            if m.group("end_date"):
                end_day = parse_calendar_day(m.group("end_date")).on_year(base_day.year)
                end_dt = resolve_instant(end_day, end, config)
            else:
                end_dt = resolve_instant(base_day, end, config)
                if end_dt < resolve_instant(base_day, start, config):
                    if _meridiem(start) == "P" and _meridiem(end) == "A":
                        end_dt += timedelta(days=1)
                    else:
                        end_dt += timedelta(hours=12)

            if m.group("start_date"):
                start_day = parse_calendar_day(m.group("start_date")).on_year(base_day.year)
            else:
                start_day = end_day or base_day
            start_dt = resolve_instant(start_day, start, config)

            interval = _build_interval(start_dt, end_dt, self.name, m.group(0))
            if interval:
                intervals.append(interval)

        return intervals


class BetweenDatesExtractor(OutageWindowExtractor):
    """``Between June 11 9:56 PM PDT and June 12 6:40 AM PDT``.

    Both sides name their own month and day; the year is optional and
    defaults to the base date's year. A side without a zone borrows the
    other side's, or the zone the update itself was posted in.
    """

    @property
    def name(self) -> str:
        return "between-dates"

    def extract(self, update: DatedUpdate, context: ExtractionContext) -> list[TimeInterval]:
        config = context.config
        intervals: list[TimeInterval] = []

        for m in config.patterns.between_dates.finditer(update.text):
            start = self._tidy(m.group("start"))
            end = self._tidy(m.group("end"))
            start_zone = find_zone(start, config)
            end_zone = find_zone(end, config)
            start = ensure_zone(start, end_zone or update.original_zone, config)
            end = ensure_zone(end, start_zone or update.original_zone, config)

            start_dt = self._resolve(start, context)
            end_dt = self._resolve(end, context)

            interval = _build_interval(start_dt, end_dt, self.name, m.group(0))
            if interval:
                intervals.append(interval)

        return intervals

    @staticmethod
    def _tidy(text: str) -> str:
        """'December 6, 2020 at 11:10 PM' -> 'December 6 2020 11:10 PM'"""
        text = ORDINAL_RE.sub(r"\1", text.replace(",", " "))
        text = re.sub(r"\s+at\s+", " ", text)
        return " ".join(text.split())

    @staticmethod
    def _resolve(text: str, context: ExtractionContext) -> datetime:
        m = _DATED_TIME_RE.match(text)
        if not m:
            raise TimestampParseError("Could not split date and time", text)
        day = parse_calendar_day(m.group("date")).on_year(context.base_day.year)
        return resolve_instant(day, m.group("clock"), context.config)


class StartingAtExtractor(OutageWindowExtractor):
    """``Starting at 5:03 PM PDT`` (or ``Beginning at ...``), optionally
    followed by ``on <date>``.

    The phrase names no end, so the interval runs to the incident's last
    update.
    """

    @property
    def name(self) -> str:
        return "starting-at"

    @property
    def replaces_shorter_duplicate(self) -> bool:
        return False

    def extract(self, update: DatedUpdate, context: ExtractionContext) -> list[TimeInterval]:
        config = context.config
        intervals: list[TimeInterval] = []

        for m in config.patterns.starting_at.finditer(update.text):
            start = ensure_zone(m.group("start"), None, config)
            if m.group("start_date"):
                day = parse_calendar_day(m.group("start_date")).on_year(context.base_day.year)
            else:
                day = context.base_day
            start_dt = resolve_instant(day, start, config)

            interval = _build_interval(start_dt, context.last_update, self.name, m.group(0))
            if interval:
                intervals.append(interval)

        return intervals


DEFAULT_EXTRACTORS: tuple[OutageWindowExtractor, ...] = (
    BetweenTimesExtractor(),
    BetweenDatesExtractor(),
    StartingAtExtractor(),
)

"""Regular expressions used to read incident descriptions.

Fragments are plain strings so they can be combined; ``TimelinePatterns``
compiles the full set for one zone table. Examples of the phrasing each
pattern is meant to catch are kept next to it.
"""
from __future__ import annotations

import re

MONTHS = (
    r"(?:Jan(?:uary)?|Feb(?:ruary)?|Mar(?:ch)?|Apr(?:il)?|May|June?|July?"
    r"|Aug(?:ust)?|Sep(?:t(?:ember)?)?|Oct(?:ober)?|Nov(?:ember)?|Dec(?:ember)?)"
    r"(?![a-z])\.?"
)

# 7, 07, 23rd, 31st
DAY = r"(?:3[01]|[12][0-9]|0?[1-9])(?!\d)(?:st|nd|rd|th)?"

# 7/30 or 8.27
SLASH_DATE = r"(?:1[0-2]|0?[1-9])[/.](?:3[01]|[12][0-9]|0?[1-9])(?!\d)"

# A year only when it closes the clause: "May 5, 2020," but not "May 5, 2500 instances"
YEAR = r"(?:19|20)\d{2}(?=[,.]|$)"

# August 8th, November 10, 2020, 7/31
DATE_CLAUSE = rf"(?:{MONTHS}\s+{DAY}(?:,?\s+{YEAR})?|{SLASH_DATE})"

_MERIDIEM = r"(?:[AaPp]\.?[Mm]\b\.?)"

# Zone token accepted at the end of an update label; unknown ones are
# resolved through the default zone.
_ANY_ZONE = r"[A-Z]{3,5}"

ORDINAL_RE = re.compile(r"\b(\d+)(?:st|nd|rd|th)\b")

# Captures the AM/PM of a clock reading like 12:10 AM or 3:53 pm PDT
MERIDIEM_RE = re.compile(rf"^\s*(?:[01]?[0-9]|2[0-3]):[0-5][0-9](?::[0-5][0-9])?\s?({_MERIDIEM})?")

# Split a description into <div><span>label</span>body</div> blocks; body
# text may span lines.
BLOCK_RE = re.compile(
    r"<div[^>]*>\s*<span[^>]*>\s?(.*?)\s?</span>(.*?)</div>",
    re.DOTALL,
)

# A description holding a single update without the surrounding <div>.
SINGLE_BLOCK_RE = re.compile(r"<span[^>]*>\s?(.*?)\s?</span>(.*?)$", re.DOTALL)

TAG_RE = re.compile(r"<[^>]+>")

# First label of a description when it starts with a month, e.g.
# <div><span class="yellowfg">May 10, 11:21 AM PDT</span>
FIRST_LABEL_RE = re.compile(r"^\s*(?:<div[^>]*>\s*)?<span[^>]*>\s?(.*?)\s?</span>", re.DOTALL)


def time_pattern(zones: str) -> str:
    """Non-capturing clock reading with optional seconds, AM/PM and zone.

    Matches 5:00, 13:00, 05:15, 6:20 PM, 12:10 AM EST, 00:31:29 PM GMT.
    """
    return (
        r"(?:[01]?[0-9]|2[0-3]):[0-5][0-9](?::[0-5][0-9])?(?![0-9])"
        rf"(?:\s?{_MERIDIEM})?"
        rf"(?:\s?(?:{zones})\b)?"
    )


class TimelinePatterns:
    """Compiled pattern set for one table of zone abbreviations."""

    def __init__(self, zone_names: tuple[str, ...]) -> None:
        names = sorted(zone_names, key=len, reverse=True)
        zones = "|".join(re.escape(n) for n in names) or r"(?!x)x"
        self.zone_names = tuple(names)

        time = time_pattern(zones)
        label_time = time_pattern(_ANY_ZONE)

        # Trailing zone abbreviation, e.g. the PST in "May 5, 5:45 AM PST".
        self.zone_at_end = re.compile(rf"\b({_ANY_ZONE})$")

        # Labels made of a bare time: "3:13 PM PDT"
        self.label_time = re.compile(rf"^\s?({label_time})")

        # Labels led by a month: "May 10, 11:21 AM PDT", "Oct 7th 7:00 PM PDT"
        self.label_month = re.compile(
            rf"^\s?(?P<month>{MONTHS})\s+(?P<day>{DAY}),?"
            rf"(?:\s+(?P<year>\d{{4}}),?)?\s+(?P<time>{label_time})\s*$"
        )

        # Between 5:10 PM on August 7th, and 3:50 AM PDT on August 8th,
        # Between 5:39 PM and 5:49 PM PDT
        # Between 7:26 AM and 7:34 AM PDT, and between 7:57 AM to 8:05 AM PDT
        # Between 09:00 and 9:18 AM PST
        # Between 11:59 AM and 6:25 PM PST on November 10, 2020,
        # Between 10:11 PM on 7/30 and 12:14 AM PDT on 7/31
        # From 5:10 PM PDT to 9:45 PM PDT
        self.between_times = re.compile(
            rf"\b(?:[Bb]etween|[Ff]rom)\s+(?P<start>{time})"
            rf"(?:\s+on\s+(?P<start_date>{DATE_CLAUSE}),?)?"
            rf"\s+(?:and|to|on)\s+(?P<end>{time})"
            rf"(?:\s+on\s+(?P<end_date>{DATE_CLAUSE}),?)?"
        )

        # Between January 29 9:12 PM and January 30 12:48 AM PST
        # Between June 11 9:56 PM PDT and June 12 6:40 AM PDT
        # Between December 6, 2020 at 11:10 PM PST and December 7, 2020 at 5:45 AM PST
        # Between June 4th at 10:25 PM PDT and June 5th at 12:45 AM PDT
        month_time = (
            rf"{MONTHS}\s+{DAY},?(?:\s*(?:19|20)\d{{2}})?,?(?:\s+at)?\s+{time}"
        )
        self.between_dates = re.compile(
            rf"\b(?:[Bb]etween|[Ff]rom)\s+(?P<start>{month_time})"
            rf"\s+(?:and|to)\s+(?P<end>{month_time})"
        )

        # Starting at 5:03 PM PDT, we
        # Starting at 9:37 PM PDT on October 8th,
        # Beginning at 2:52 PM PDT a small percentage
        self.starting_at = re.compile(
            rf"\b(?:[Ss]tarting|[Bb]eginning)\s+at\s+(?P<start>{time})"
            rf"(?:\s+on\s+(?P<start_date>{DATE_CLAUSE}))?"
        )

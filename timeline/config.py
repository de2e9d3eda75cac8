from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from functools import cached_property
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from timeline.patterns import TimelinePatterns

log = logging.getLogger(__name__)

CONFIG_ENV_VAR = "SERVICE_AVAILABILITY_CONFIG"

DEFAULT_URL = "https://status.aws.amazon.com/data.json"
DEFAULT_TIME_ZONE = "PDT"

DEFAULT_TIME_ZONES: Mapping[str, float] = MappingProxyType({
    "HAST": -10,
    "HADT": -9,
    "AKST": -9,
    "AKDT": -8,
    "PST": -8,
    "PDT": -7,
    "MST": -7,
    "MDT": -6,
    "CST": -6,
    "CDT": -5,
    "EST": -5,
    "EDT": -4,
    "GMT": 0,
    "UTC": 0,
})

DEFAULT_GLOBAL_SERVICES: tuple[str, ...] = (
    "awswaf", "billingconsole", "chatbot", "chime", "cloudfront", "fps",
    "globalaccelerator", "health", "iam", "import-export",
    "interregionvpcpeering", "management-console", "marketplace",
    "organizations", "route53", "route53domainregistration", "spencer",
    "supportcenter", "trustedadvisor",
)


def _parse_offset(value: float | int | str) -> float:
    """Accept ``-7``, ``-7.0`` or ``"-07:00"`` and return signed hours."""
    if isinstance(value, (int, float)):
        return float(value)
    text = value.strip()
    sign = -1.0 if text.startswith("-") else 1.0
    hours, _, minutes = text.lstrip("+-").partition(":")
    return sign * (int(hours) + int(minutes or 0) / 60)


def format_offset(hours: float) -> str:
    """Render signed hours as an ISO offset, e.g. ``-7`` -> ``-07:00``."""
    sign = "-" if hours < 0 else "+"
    total_minutes = round(abs(hours) * 60)
    return f"{sign}{total_minutes // 60:02d}:{total_minutes % 60:02d}"


@dataclass(frozen=True)
class TimelineConfig:
    """Process-wide, read-only settings consumed by the timeline engine.

    Fields:
        time_zones:        Zone abbreviation -> UTC offset in hours.
        default_time_zone: Zone assumed when a time carries none and no
                           sibling time supplies one.
        global_services:   Services published without a region.
        url:               Location of the dashboard data feed.

    Instances are never mutated; the compiled patterns derived from the
    zone table are built on first use and cached on the instance.
    """

    time_zones: Mapping[str, float] = field(default_factory=lambda: DEFAULT_TIME_ZONES)
    default_time_zone: str = DEFAULT_TIME_ZONE
    global_services: tuple[str, ...] = DEFAULT_GLOBAL_SERVICES
    url: str = DEFAULT_URL

    def __post_init__(self) -> None:
        zones = {name.upper(): _parse_offset(v) for name, v in self.time_zones.items()}
        object.__setattr__(self, "time_zones", MappingProxyType(zones))
        object.__setattr__(self, "default_time_zone", self.default_time_zone.upper())
        object.__setattr__(self, "global_services", tuple(self.global_services))

    @cached_property
    def patterns(self) -> TimelinePatterns:
        return TimelinePatterns(tuple(self.time_zones))

    def offset_for(self, abbreviation: str) -> str | None:
        """Offset string for a zone abbreviation.

        Unknown abbreviations fall back to the default zone; if that is
        unknown as well, ``None`` is returned and the caller treats the
        time as UTC.
        """
        hours = self.time_zones.get(abbreviation.upper())
        if hours is None:
            hours = self.time_zones.get(self.default_time_zone)
            if hours is None:
                log.warning(
                    "Unrecognised zone %s and default zone %s is not mapped, assuming UTC",
                    abbreviation,
                    self.default_time_zone,
                )
                return None
            log.warning(
                "Unrecognised zone %s, using default zone %s",
                abbreviation,
                self.default_time_zone,
            )
        return format_offset(hours)


_KNOWN_KEYS = {
    "time_zones": "time_zones",
    "timezonemap": "time_zones",
    "default_time_zone": "default_time_zone",
    "defaulttimezone": "default_time_zone",
    "global_services": "global_services",
    "globalservices": "global_services",
    "url": "url",
}


def config_from_dict(data: Mapping[str, Any]) -> TimelineConfig:
    """Build a config from a mapping; absent or empty keys keep defaults."""
    kwargs: dict[str, Any] = {}
    for key, value in data.items():
        name = _KNOWN_KEYS.get(key.lower())
        if name is None:
            log.warning("Ignoring unknown config key %r", key)
            continue
        if value in (None, "", [], {}):
            continue
        kwargs[name] = value
    return TimelineConfig(**kwargs)


def load_config(path: str | os.PathLike[str] | None = None) -> TimelineConfig:
    """Load configuration once at start-up.

    Reads ``path`` or, when not given, the file named by the
    ``SERVICE_AVAILABILITY_CONFIG`` environment variable. With neither,
    the built-in defaults are returned.
    """
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR) or None
    if path is None:
        return DEFAULT_CONFIG

    raw = Path(path).read_text(encoding="utf-8")
    config = config_from_dict(json.loads(raw))
    log.info(
        "Loaded config from %s (%d zones, default zone %s)",
        path,
        len(config.time_zones),
        config.default_time_zone,
    )
    return config


DEFAULT_CONFIG = TimelineConfig()

from __future__ import annotations

import re

from timeline.config import DEFAULT_CONFIG, TimelineConfig

GLOBAL_REGION = "global"

_REGION_RE = re.compile(
    r"((?:us|eu|cn|ap|ca|me|sa|af)(?:-gov|-isob?)?-"
    r"(?:(?:(?:central|(?:north|south)?(?:east|west)?)-\d)|standard))"
)

# "... in the us-east-1 Region ..." as written for pseudo-global services.
_REGION_IN_DESCRIPTION_RE = re.compile(
    r"in\s+the\s+([a-zA-Z]{2}-[a-zA-Z]+-[0-9]+)\s+Region", re.IGNORECASE
)


def get_region(service: str) -> str:
    """'ec2-us-east-1' -> 'us-east-1'; tokens without a region are global."""
    m = _REGION_RE.search(service)
    return m.group(1) if m else GLOBAL_REGION


def get_service_name(service: str) -> str:
    """'management-console-us-gov-west-1' -> 'management-console'"""
    m = _REGION_RE.search(service)
    if not m:
        return service
    return service[: m.start(1)].rstrip("-")


def resolve_region(service: str, description: str = "", config: TimelineConfig = DEFAULT_CONFIG) -> str:
    """Region an incident belongs to.

    Regional tokens carry their region. A region-less token of a known
    global service stays global unless the description names a region;
    any other region-less service is its own region.
    """
    region = get_region(service)
    if region != GLOBAL_REGION:
        return region

    name = get_service_name(service)
    if name not in config.global_services:
        return name

    m = _REGION_IN_DESCRIPTION_RE.search(description or "")
    return m.group(1).lower() if m else GLOBAL_REGION

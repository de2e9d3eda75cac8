from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from models.incident import RawIncident
from timeline.config import DEFAULT_CONFIG, TimelineConfig
from timeline.errors import IncidentParseError
from timeline.parsed import ParsedIncident

log = logging.getLogger(__name__)


@dataclass
class BatchResult:
    """Outcome of parsing one fetched batch.

    ``failures`` holds one ``IncidentParseError`` per incident that could
    not be parsed; each carries the raw incident for reporting.
    """

    parsed: list[ParsedIncident] = field(default_factory=list)
    failures: list[IncidentParseError] = field(default_factory=list)

    @property
    def missed(self) -> int:
        """Parsed incidents whose bounds were not stated in the text."""
        return sum(
            1 for p in self.parsed if not p.timeline.end_time_was_found_in_description
        )


def parse_batch(
    incidents: Iterable[RawIncident],
    config: TimelineConfig = DEFAULT_CONFIG,
) -> BatchResult:
    """Parse each incident independently; one bad incident never aborts
    the rest of the batch."""
    result = BatchResult()
    for raw in incidents:
        try:
            result.parsed.append(ParsedIncident.from_raw(raw, config))
        except IncidentParseError as exc:
            log.warning("Could not parse incident %s posted at %s: %s", raw.service, raw.posted_at, exc.__cause__ or exc)
            result.failures.append(exc)
    return result

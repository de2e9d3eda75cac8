from __future__ import annotations

from typing import Any


class TimelineError(Exception):
    """Base class for failures raised while building an incident timeline."""


class DescriptionFormatError(TimelineError):
    """The description has no recognisable label/body structure."""


class TimestampParseError(TimelineError):
    """A label or matched phrase could not be resolved to an instant."""

    def __init__(self, message: str, text: str) -> None:
        super().__init__(f"{message}: {text!r}")
        self.text = text


class InvalidIntervalError(TimelineError, ValueError):
    """An interval whose end precedes its start."""


class IncidentParseError(TimelineError):
    """Fatal failure for a single incident.

    Carries the raw incident so the caller can report or skip it; the
    underlying reason is chained as ``__cause__``.
    """

    def __init__(self, message: str, incident: Any) -> None:
        super().__init__(message)
        self.incident = incident

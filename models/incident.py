from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from enum import IntEnum
from typing import Any, Mapping


class IncidentStatus(IntEnum):
    """Severity code published with each dashboard entry."""

    GREEN = 0
    BLUE = 1
    YELLOW = 2
    RED = 3

    @classmethod
    def parse(cls, raw: str | int | None) -> IncidentStatus:
        """Read a status code; anything unrecognised counts as GREEN."""
        try:
            return cls(int(raw))  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return cls.GREEN


@dataclass(frozen=True)
class RawIncident:
    """One entry of the status dashboard feed, exactly as published.

    Fields:
        service:      Composite service+region token (e.g. ``ec2-us-east-1``).
        posted_at:    Posting time, seconds since the epoch as a decimal string.
        status:       Status code as published (see ``IncidentStatus``).
        summary:      Headline, e.g. ``[RESOLVED] Increased API Error Rates``.
        description:  Marked-up body holding the timestamped updates.
        service_name: Human-readable service name.
        details:      Free-form extra text, usually empty.
    """

    service: str
    posted_at: str
    status: str = "0"
    summary: str = ""
    description: str = ""
    service_name: str = ""
    details: str = ""

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> RawIncident:
        """Build from a feed object (keys ``service``, ``date``, ...)."""
        return cls(
            service=str(data.get("service") or ""),
            posted_at=str(data.get("date") or "0"),
            status=str(data.get("status") if data.get("status") is not None else "0"),
            summary=data.get("summary") or "",
            description=data.get("description") or "",
            service_name=data.get("service_name") or "",
            details=data.get("details") or "",
        )

    def to_json(self) -> dict[str, str]:
        """Inverse of ``from_json``, used when reporting a failed incident."""
        data = asdict(self)
        data["date"] = data.pop("posted_at")
        return data

    @property
    def posted_datetime(self) -> datetime:
        """Posting time as an aware UTC datetime."""
        return datetime.fromtimestamp(int(self.posted_at), tz=timezone.utc)

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from models.incident import RawIncident

FIXTURES = Path(__file__).parent / "fixtures"


def utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def epoch(*args: int) -> str:
    return str(int(utc(*args).timestamp()))


def blocks(*updates: tuple[str, str]) -> str:
    """Build a dashboard description out of (label, text) pairs."""
    return "".join(
        f'<div><span class="yellowfg"> {label}</span>&nbsp;{text}</div>'
        for label, text in updates
    )


def make_incident(posted: datetime, *updates: tuple[str, str], service: str = "ec2-us-east-1") -> RawIncident:
    return RawIncident(
        service=service,
        posted_at=str(int(posted.timestamp())),
        summary="[RESOLVED] Test incident",
        description=blocks(*updates),
    )


@pytest.fixture
def load_incident():
    def _load(name: str) -> RawIncident:
        data = json.loads((FIXTURES / f"{name}.json").read_text(encoding="utf-8"))
        return RawIncident.from_json(data)

    return _load


@pytest.fixture
def dashboard_payload() -> dict:
    return json.loads((FIXTURES / "dashboard.json").read_text(encoding="utf-8"))

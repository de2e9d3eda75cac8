from __future__ import annotations

import json

import main
from providers.dashboard import DashboardSource, incidents_from_payload
from timeline.config import DEFAULT_CONFIG


def test_parse_args_defaults():
    args = main.parse_args([])

    assert args.once is False
    assert args.output == "json"
    assert (args.start, args.end) == (0, 0)


async def test_export_once_filters(monkeypatch, dashboard_payload):
    async def fetch(self):
        return incidents_from_payload(dashboard_payload)

    monkeypatch.setattr(DashboardSource, "fetch_incidents", fetch)
    args = main.parse_args(["--once", "--services", "ec2,route53"])

    data = json.loads(await main.export_once(DEFAULT_CONFIG, args))

    assert [d["id"] for d in data] == ["ec2::us-east-1"]


async def test_export_once_csv(monkeypatch, dashboard_payload):
    async def fetch(self):
        return incidents_from_payload(dashboard_payload)

    monkeypatch.setattr(DashboardSource, "fetch_incidents", fetch)
    args = main.parse_args(["--once", "--output", "csv", "--regions", "us-standard"])

    text = await main.export_once(DEFAULT_CONFIG, args)

    assert text.splitlines()[0].startswith('"id"')
    assert len(text.split("\r\n")) == 2

from __future__ import annotations

import json

import httpx
import pytest

from providers.dashboard import DashboardSource, incidents_from_payload

URL = "https://status.example.com/data.json"


def make_source(handler):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return client, DashboardSource(client=client, url=URL)


def test_incidents_from_payload(dashboard_payload):
    incidents = incidents_from_payload(dashboard_payload)

    assert [i.service for i in incidents] == ["ec2-us-east-1", "route53", "s3-us-standard"]
    assert incidents[0].posted_at == "1526397141"


def test_incidents_from_payload_skips_malformed_entries():
    incidents = incidents_from_payload({"archive": ["oops", {"service": "ec2-us-east-1", "date": "1"}]})

    assert [i.service for i in incidents] == ["ec2-us-east-1"]


def test_incidents_from_payload_rejects_non_object():
    with pytest.raises(ValueError):
        incidents_from_payload([])


async def test_fetch_and_conditional_refetch(dashboard_payload):
    seen_headers = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen_headers.append(request.headers.get("If-None-Match"))
        if request.headers.get("If-None-Match") == '"v1"':
            return httpx.Response(304)
        return httpx.Response(200, json=dashboard_payload, headers={"ETag": '"v1"'})

    client, source = make_source(handler)
    async with client:
        first = await source.fetch_incidents()
        second = await source.fetch_incidents()

    assert len(first) == 3
    assert second == []
    assert seen_headers == [None, '"v1"']


async def test_server_error_returns_nothing(caplog):
    client, source = make_source(lambda request: httpx.Response(500))
    async with client:
        assert await source.fetch_incidents() == []

    assert "Unexpected status 500" in caplog.text


async def test_undecodable_body_returns_nothing():
    client, source = make_source(lambda request: httpx.Response(200, content=b"<html>"))
    async with client:
        assert await source.fetch_incidents() == []


async def test_failed_fetch_keeps_previous_etag(dashboard_payload):
    responses = iter([
        httpx.Response(200, json=dashboard_payload, headers={"ETag": '"v1"'}),
        httpx.Response(200, content=json.dumps([]).encode(), headers={"ETag": '"v2"'}),
    ])
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.headers.get("If-None-Match"))
        return next(responses)

    client, source = make_source(handler)
    async with client:
        await source.fetch_incidents()
        await source.fetch_incidents()

    assert seen == [None, '"v1"']
    assert source._etag == '"v1"'


async def test_connection_error_returns_nothing():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    client, source = make_source(handler)
    async with client:
        assert await source.fetch_incidents() == []


def test_default_url_comes_from_config():
    source = DashboardSource(client=httpx.AsyncClient())

    assert source._url == "https://status.aws.amazon.com/data.json"
    assert source.poll_interval_seconds == 600

from __future__ import annotations

import pytest

from models.incident import IncidentStatus, RawIncident
from tests.conftest import make_incident, utc
from timeline.errors import IncidentParseError, TimestampParseError
from timeline.parsed import ParsedIncident, describe_updates, monthly_outage_durations, to_epoch
from timeline.services import get_region, get_service_name, resolve_region


@pytest.mark.parametrize(
    "token, service, region",
    [
        ("ec2-us-east-1", "ec2", "us-east-1"),
        ("management-console-us-gov-west-1", "management-console", "us-gov-west-1"),
        ("aws-glue-us-east-1", "aws-glue", "us-east-1"),
        ("ec2-ca-central-1", "ec2", "ca-central-1"),
        ("s3-us-standard", "s3", "us-standard"),
        ("route53", "route53", "global"),
    ],
)
def test_service_and_region(token, service, region):
    assert get_service_name(token) == service
    assert get_region(token) == region


class TestResolveRegion:
    def test_regional_token(self):
        assert resolve_region("ec2-us-east-1") == "us-east-1"

    def test_global_service(self):
        assert resolve_region("route53", "We are investigating DNS delays.") == "global"

    def test_global_service_pinned_by_description(self):
        text = "We are investigating errors in the US-EAST-1 Region."
        assert resolve_region("cloudfront", text) == "us-east-1"

    def test_unknown_regionless_service_is_its_own_region(self):
        assert resolve_region("resourcegroups") == "resourcegroups"


def test_monthly_durations_split_at_month_boundary():
    assert monthly_outage_durations(utc(2019, 1, 31, 23, 0), utc(2019, 2, 1, 1, 30)) == {
        "2019-01": 3600,
        "2019-02": 5400,
    }


def test_monthly_durations_across_year_end():
    assert monthly_outage_durations(utc(2018, 12, 31, 23, 0), utc(2019, 1, 1, 0, 30)) == {
        "2018-12": 3600,
        "2019-01": 1800,
    }


def test_monthly_durations_zero_length():
    assert monthly_outage_durations(utc(2019, 1, 1), utc(2019, 1, 1)) == {}


def test_to_epoch():
    assert to_epoch(utc(2018, 5, 15, 12, 27)) == 1526387220


class TestParsedIncident:
    def test_from_fixture(self, load_incident):
        parsed = ParsedIncident.from_raw(load_incident("ec2-us-east-1"))

        assert parsed.id == "ec2::us-east-1"
        assert parsed.service == "ec2"
        assert parsed.region == "us-east-1"
        assert parsed.date == 1526397141
        assert parsed.start == 1526387220
        assert parsed.end == 1526397420
        assert parsed.event_duration == 10200
        assert parsed.status is IncidentStatus.BLUE
        assert parsed.summary == "[RESOLVED] Increased API Error Rates"
        assert parsed.monthly_outage_durations == {"2018-05": 10200}

    def test_description_lists_updates(self, load_incident):
        parsed = ParsedIncident.from_raw(load_incident("ec2-us-east-1"))

        lines = parsed.description.split("\r\n")
        assert len(lines) == 2
        assert lines[0].startswith("2018-05-15T13:25:00+00:00 : We are investigating")
        assert lines[1].startswith("2018-05-15T15:31:00+00:00 : Between 5:27 AM and 8:17 AM PDT")

    def test_global_service_pinned_by_description(self, load_incident):
        parsed = ParsedIncident.from_raw(load_incident("iam"))

        assert parsed.id == "iam::us-east-1"

    def test_to_json(self, load_incident):
        data = ParsedIncident.from_raw(load_incident("ec2-us-east-1")).to_json()

        assert data["id"] == "ec2::us-east-1"
        assert data["status"] == "BLUE"
        assert data["event_duration"] == 10200
        assert data["start_time_was_found_in_description"] is True

    def test_inferred_window(self):
        parsed = ParsedIncident.from_raw(
            make_incident(
                utc(2019, 5, 10, 23, 0),
                ("11:21 AM PDT", "We are investigating increased error rates."),
                ("3:15 PM PDT", "The issue has been resolved."),
            )
        )

        assert parsed.start == to_epoch(utc(2019, 5, 10, 18, 21))
        assert parsed.end == to_epoch(utc(2019, 5, 10, 22, 15))
        assert parsed.event_duration == 14040
        assert parsed.to_json()["start_time_was_found_in_description"] is False

    def test_failure_carries_raw_incident(self):
        raw = make_incident(utc(2018, 8, 31, 23, 50), ("Yesterday", "Unreadable."), service="route53")

        with pytest.raises(IncidentParseError) as info:
            ParsedIncident.from_raw(raw)

        assert info.value.incident is raw
        assert isinstance(info.value.__cause__, TimestampParseError)

    def test_bad_posting_time(self):
        raw = RawIncident(service="ec2-us-east-1", posted_at="soon")

        with pytest.raises(IncidentParseError):
            ParsedIncident.from_raw(raw)


def test_describe_updates_empty():
    timeline = ParsedIncident.from_raw(RawIncident(service="s3-us-standard", posted_at="1535759400")).timeline

    assert describe_updates(timeline) == ""


def test_status_parse():
    assert IncidentStatus.parse("3") is IncidentStatus.RED
    assert IncidentStatus.parse(None) is IncidentStatus.GREEN
    assert IncidentStatus.parse("unknown") is IncidentStatus.GREEN


def test_raw_incident_round_trip_keys(load_incident):
    data = load_incident("iam").to_json()

    assert data["date"] == "1607351400"
    assert "posted_at" not in data

from __future__ import annotations

import csv
import io
import json

import pytest

from export import CSV_COLUMNS, render, to_csv, to_json
from timeline.parsed import ParsedIncident


@pytest.fixture
def parsed(load_incident):
    return [
        ParsedIncident.from_raw(load_incident("ec2-us-east-1")),
        ParsedIncident.from_raw(load_incident("iam")),
    ]


def test_json_export(parsed):
    data = json.loads(to_json(parsed))

    assert [d["id"] for d in data] == ["ec2::us-east-1", "iam::us-east-1"]
    assert data[0]["monthly_outage_durations"] == {"2018-05": 10200}


def test_csv_export(parsed):
    text = to_csv(parsed)

    assert text.startswith('"id","service","region"')
    assert not text.endswith("\n")

    rows = list(csv.reader(io.StringIO(text)))
    assert rows[0] == list(CSV_COLUMNS)
    assert len(rows) == 3
    first = dict(zip(rows[0], rows[1]))
    assert first["id"] == "ec2::us-east-1"
    assert first["event_duration"] == "10200"
    assert first["status"] == "BLUE"
    assert json.loads(first["monthly_outage_durations"]) == {"2018-05": 10200}
    assert first["description"].count("\r\n") == 1


def test_csv_export_empty():
    assert to_csv([]) == ",".join(f'"{c}"' for c in CSV_COLUMNS)


def test_render(parsed):
    assert render(parsed, "CSV") == to_csv(parsed)
    assert render(parsed) == to_json(parsed)


def test_render_unknown_format(parsed):
    with pytest.raises(ValueError):
        render(parsed, "xml")

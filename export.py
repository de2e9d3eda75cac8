"""Rendering of parsed incidents for download (JSON or CSV)."""
from __future__ import annotations

import csv
import io
import json
from collections.abc import Iterable

from timeline.parsed import ParsedIncident

OUTPUT_FORMATS = ("json", "csv")

CSV_COLUMNS = (
    "id",
    "service",
    "region",
    "date",
    "start",
    "end",
    "event_duration",
    "summary",
    "status",
    "description",
    "monthly_outage_durations",
    "start_time_was_found_in_description",
)


def to_json(incidents: Iterable[ParsedIncident]) -> str:
    return json.dumps([i.to_json() for i in incidents])


def to_csv(incidents: Iterable[ParsedIncident]) -> str:
    """Quoted header row, then one quoted row per incident. The monthly
    durations map is JSON-encoded inside its cell."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\r\n")
    writer.writerow(CSV_COLUMNS)
    for incident in incidents:
        data = incident.to_json()
        data["monthly_outage_durations"] = json.dumps(data["monthly_outage_durations"])
        writer.writerow([data[c] for c in CSV_COLUMNS])
    return buffer.getvalue().rstrip("\r\n")


def render(incidents: Iterable[ParsedIncident], output: str = "json") -> str:
    output = (output or "json").lower()
    if output == "json":
        return to_json(incidents)
    if output == "csv":
        return to_csv(incidents)
    raise ValueError(f"Unsupported output format {output!r}, expected one of {OUTPUT_FORMATS}")

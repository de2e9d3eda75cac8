"""Extraction of outage timelines from status dashboard incident notices.

Entry points live in the submodules so the data models can import the
shared error types without a cycle:

    timeline.assembler.get_event_timeline
    timeline.dates.get_base_date / get_dated_updates
    timeline.splitter.split_updates
    timeline.zones.replace_zone_with_offset
    timeline.parsed.ParsedIncident
"""

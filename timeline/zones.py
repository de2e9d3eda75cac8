from __future__ import annotations

from timeline.config import DEFAULT_CONFIG, TimelineConfig


def find_zone(text: str, config: TimelineConfig = DEFAULT_CONFIG) -> str | None:
    """Return the zone abbreviation ending ``text`` (e.g. 'PDT'), if any."""
    m = config.patterns.zone_at_end.search(text.strip())
    return m.group(1) if m else None


def ensure_zone(text: str, fallback: str | None, config: TimelineConfig = DEFAULT_CONFIG) -> str:
    """Append ``fallback`` (or the default zone) when ``text`` carries no zone."""
    if find_zone(text, config):
        return text
    return f"{text.strip()} {fallback or config.default_time_zone}"


def replace_zone_with_offset(text: str, config: TimelineConfig = DEFAULT_CONFIG) -> str:
    """Swap a trailing zone abbreviation for its UTC offset.

    ``"May 5, 5:45 AM PST"`` becomes ``"May 5, 5:45 AM -08:00"``. Text
    without a trailing abbreviation is returned trimmed but otherwise
    unchanged. An abbreviation that cannot be resolved at all is dropped,
    leaving the time to be read as UTC.
    """
    text = text.strip()
    m = config.patterns.zone_at_end.search(text)
    if not m:
        return text

    offset = config.offset_for(m.group(1))
    head = text[: m.start(1)].rstrip()
    if offset is None:
        return head
    return f"{head} {offset}"

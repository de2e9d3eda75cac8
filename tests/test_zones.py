from __future__ import annotations

import logging

import pytest

from timeline.config import (
    CONFIG_ENV_VAR,
    DEFAULT_CONFIG,
    TimelineConfig,
    config_from_dict,
    format_offset,
    load_config,
)
from timeline.zones import ensure_zone, find_zone, replace_zone_with_offset


def test_replace_time_zone_with_offset():
    assert replace_zone_with_offset("May 5, 5:45 AM PST") == "May 5, 5:45 AM -08:00"


@pytest.mark.parametrize(
    "zone, offset",
    [("HAST", "-10:00"), ("AKDT", "-08:00"), ("PDT", "-07:00"), ("EDT", "-04:00"), ("GMT", "+00:00"), ("UTC", "+00:00")],
)
def test_default_table(zone, offset):
    assert replace_zone_with_offset(f"3:53 PM {zone}") == f"3:53 PM {offset}"


def test_text_without_zone_is_only_trimmed():
    assert replace_zone_with_offset("  11:21 AM ") == "11:21 AM"


def test_zone_must_end_the_text():
    assert replace_zone_with_offset("PDT outage at 5:45 AM") == "PDT outage at 5:45 AM"


def test_unknown_zone_uses_default(caplog):
    with caplog.at_level(logging.WARNING):
        assert replace_zone_with_offset("5:45 AM IST") == "5:45 AM -07:00"
    assert "IST" in caplog.text


def test_unknown_zone_and_unknown_default_is_dropped():
    config = TimelineConfig(default_time_zone="XYZ")
    assert replace_zone_with_offset("5:45 AM IST", config) == "5:45 AM"


def test_find_and_ensure_zone():
    assert find_zone("7:04 PM PDT") == "PDT"
    assert find_zone("5:10 PM") is None
    assert ensure_zone("5:10 PM", "PST") == "5:10 PM PST"
    assert ensure_zone("5:10 PM", None) == "5:10 PM PDT"
    assert ensure_zone("5:10 PM EST", "PST") == "5:10 PM EST"


def test_format_offset():
    assert format_offset(-7) == "-07:00"
    assert format_offset(0) == "+00:00"
    assert format_offset(5.5) == "+05:30"
    assert format_offset(-9.5) == "-09:30"


def test_config_from_dict_accepts_original_key_names():
    config = config_from_dict({
        "TimeZoneMap": {"IST": "+05:30", "pdt": -7},
        "DefaultTimeZone": "ist",
        "Url": "https://example.com/data.json",
    })

    assert dict(config.time_zones) == {"IST": 5.5, "PDT": -7.0}
    assert config.default_time_zone == "IST"
    assert config.url == "https://example.com/data.json"
    assert replace_zone_with_offset("1:00 PM IST", config) == "1:00 PM +05:30"


def test_config_from_dict_keeps_defaults_for_empty_values(caplog):
    with caplog.at_level(logging.WARNING):
        config = config_from_dict({"GlobalServices": [], "SNSTopic": "arn:aws:sns:x"})

    assert config.global_services == DEFAULT_CONFIG.global_services
    assert "SNSTopic" in caplog.text


def test_config_is_read_only():
    with pytest.raises(TypeError):
        DEFAULT_CONFIG.time_zones["XST"] = 1  # type: ignore[index]


def test_load_config_from_env(tmp_path, monkeypatch):
    path = tmp_path / "config.json"
    path.write_text('{"default_time_zone": "EST"}', encoding="utf-8")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(path))

    config = load_config()

    assert config.default_time_zone == "EST"
    assert len(config.time_zones) == 14


def test_load_config_without_file_returns_defaults(monkeypatch):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    assert load_config() is DEFAULT_CONFIG

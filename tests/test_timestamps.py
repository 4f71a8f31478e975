from datetime import datetime

import pytest
from babel import Locale

from debuginfolib.config import ConfigError, TimestampFormatError
from debuginfolib.timestamps import (
    format_instant,
    now,
    parse_locale,
    validate_pattern,
)

INSTANT = datetime(2024, 1, 2, 3, 4, 5)


@pytest.mark.parametrize("pattern, expected", [
    ("yyyy-MM-dd HH:mm:ss", "2024-01-02 03:04:05"),
    ("yyyy/MM/dd-HH:mm:ss", "2024/01/02-03:04:05"),
    ("yyyy-MM-dd'T'HH:mm:ss", "2024-01-02T03:04:05"),
    ("HH 'o''clock'", "03 o'clock"),
    ("dd.MM.yyyy", "02.01.2024"),
])
def test_format_instant(pattern, expected):
    assert format_instant(INSTANT, pattern) == expected


@pytest.mark.parametrize("culture, expected", [
    (None, "January"),
    ("en-US", "January"),
    ("de-DE", "Januar"),
    ("fr_FR", "janvier"),
])
def test_month_names_follow_culture(culture, expected):
    assert format_instant(INSTANT, "MMMM", culture) == expected


@pytest.mark.parametrize("pattern", [
    "yyyy-MM-dd HH:mm:ss",
    "HH:mm",
    "yyyy-MM-dd'T'HH:mm:ss.SSS",
    "EEEE, d MMMM yyyy",
])
def test_valid_patterns(pattern):
    assert validate_pattern(pattern, "en-US", INSTANT) == pattern


@pytest.mark.parametrize("pattern, reason", [
    ("!", "no date or time field"),
    ("", "empty"),
    ("yyyy-MM-dd J", "illegal pattern character"),
    ("yyyy 'unterminated", "unterminated"),
    ("literal only", "illegal pattern character"),
    (None, "expected str"),
    (42, "expected str"),
])
def test_invalid_patterns(pattern, reason):
    with pytest.raises(TimestampFormatError, match=reason) as exc_info:
        validate_pattern(pattern, None, INSTANT)
    assert exc_info.value.pattern == pattern


def test_timestamp_format_error_is_value_error():
    with pytest.raises(ValueError):
        validate_pattern("!")


def test_parse_locale():
    assert parse_locale(None) == Locale("en", "US")
    assert parse_locale("de-DE") == Locale("de", "DE")
    assert parse_locale("de_DE") == Locale("de", "DE")
    loc = Locale("ja", "JP")
    assert parse_locale(loc) is loc


@pytest.mark.parametrize("value", ["zz-QQ", "", "   ", 12])
def test_parse_locale_rejects(value):
    with pytest.raises(ConfigError):
        parse_locale(value)


def test_now_is_timezone_aware():
    assert now().tzinfo is not None

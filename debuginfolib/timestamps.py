"""Locale-aware timestamp rendering.

Patterns use LDML syntax (the syntax of CLDR and ICU), e.g.
``yyyy-MM-dd HH:mm:ss``.  Rendering is delegated to Babel; this module
only adds the stricter validation applied when a pattern is configured.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from babel import Locale, UnknownLocaleError
from babel.dates import PATTERN_CHARS, format_datetime, tokenize_pattern

from .config import DEFAULT_LOCALE, ConfigError, TimestampFormatError

DATE_FORMAT = "yyyy-MM-dd"
TIME_FORMAT = "HH:mm:ss"
DATE_TIME_FORMAT = "yyyy-MM-dd HH:mm:ss"


def now() -> datetime:
    """Current local time, timezone-aware."""
    return datetime.now().astimezone()


def parse_locale(value: Any) -> Locale:
    """Resolve *value* to a :class:`babel.Locale`.

    ``None`` selects :data:`DEFAULT_LOCALE`.  Both ``de-DE`` and ``de_DE``
    are accepted.  Raises :class:`ConfigError` for unknown identifiers.
    """
    if value is None:
        value = DEFAULT_LOCALE
    if isinstance(value, Locale):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"Invalid culture: {value!r}")
    try:
        return Locale.parse(value.strip().replace("-", "_"))
    except (UnknownLocaleError, ValueError) as e:
        raise ConfigError(f"Unknown culture {value!r}: {e}")


def format_instant(instant: datetime, pattern: str, locale: Locale | str | None = None) -> str:
    """Render *instant* with an LDML *pattern* under *locale*."""
    return format_datetime(instant, pattern, locale=parse_locale(locale))


def validate_pattern(
    pattern: Any,
    locale: Locale | str | None = None,
    instant: datetime | None = None,
) -> str:
    """Check that *pattern* is a usable timestamp pattern and return it.

    Rejected: non-strings, empty patterns, unterminated quotes, unquoted
    ASCII letters that are not pattern fields, patterns without a single
    date/time field, and anything the formatter refuses during a trial
    rendering of *instant* (default: now) under *locale*.

    Raises :class:`TimestampFormatError`.
    """
    if not isinstance(pattern, str):
        raise TimestampFormatError(pattern, f"expected str, got {type(pattern).__name__}")
    if not pattern:
        raise TimestampFormatError(pattern, "pattern is empty")

    _check_literals(pattern)

    if not any(kind == "field" for kind, _ in tokenize_pattern(pattern)):
        raise TimestampFormatError(pattern, "pattern contains no date or time field")

    try:
        format_instant(instant or now(), pattern, locale)
    except (ValueError, KeyError) as e:
        raise TimestampFormatError(pattern, str(e))
    return pattern


def _check_literals(pattern: str) -> None:
    """Reject unterminated quotes and unquoted letters outside the field set."""
    quoted = False
    i = 0
    while i < len(pattern):
        char = pattern[i]
        if char == "'":
            # '' is an escaped quote, in or out of a quoted run
            if pattern[i + 1:i + 2] == "'":
                i += 2
                continue
            quoted = not quoted
        elif not quoted and char.isascii() and char.isalpha() and char not in PATTERN_CHARS:
            raise TimestampFormatError(pattern, f"illegal pattern character {char!r}")
        i += 1
    if quoted:
        raise TimestampFormatError(pattern, "unterminated quoted literal")

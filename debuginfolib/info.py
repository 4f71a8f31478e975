from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Mapping

from babel import Locale

from .caller import CALLER_OF_WRAPPER, resolve_caller_name
from .config import (
    DEBUGINFO_PARAMS,
    DEFAULT_CALLER_NAME_FORMAT,
    DEFAULT_DELIMITER,
    DEFAULT_TIMESTAMP_FORMAT,
    ConfigError,
    validate_param_values,
)
from .models import CallerNameFormat
from .timestamps import (
    DATE_FORMAT,
    DATE_TIME_FORMAT,
    TIME_FORMAT,
    format_instant,
    now,
    parse_locale,
    validate_pattern,
)

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Settings:
    caller_name_format: CallerNameFormat
    timestamp_format: str
    culture: Locale
    delimiter: str


class DebugInfo:
    """Debug strings for embedding in log output.

    One instance owns one configuration; construct it once and hand it to
    whatever needs it::

        info = DebugInfo(CallerNameFormat.SHORT_NAME)
        log.debug("%s entering", info.render())  # "2024-01-02 03:04:05, Bar.foo entering"
        log.debug(f"{info} entering")            # same

    The caller accessors identify the code that touches them, so they must
    be read directly at the call site, not through a helper.  Passing the
    instance itself as a lazy ``%s`` argument reports the logging module
    as the caller, because the message is formatted later.  All
    configuration access is serialised by an internal lock; queries work
    on a consistent snapshot.
    """

    def __init__(
        self,
        caller_name_format: CallerNameFormat | str = DEFAULT_CALLER_NAME_FORMAT,
        timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT,
        culture: Locale | str | None = None,
        delimiter: str = DEFAULT_DELIMITER,
        *,
        clock: Callable[[], datetime] = now,
    ) -> None:
        self._lock = threading.RLock()
        self._clock = clock
        self.init(caller_name_format, timestamp_format, culture, delimiter)

    # -- configuration ---------------------------------------------------

    def init(
        self,
        caller_name_format: CallerNameFormat | str = DEFAULT_CALLER_NAME_FORMAT,
        timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT,
        culture: Locale | str | None = None,
        delimiter: str = DEFAULT_DELIMITER,
    ) -> None:
        """Reset every setting. ``culture=None`` selects the default locale.

        Nothing is changed if any argument is rejected.
        """
        fmt = CallerNameFormat.coerce(caller_name_format)
        locale = parse_locale(culture)
        validate_pattern(timestamp_format, locale, self._clock())
        if not isinstance(delimiter, str):
            raise ConfigError(f"Delimiter must be str, got {type(delimiter).__name__}")
        with self._lock:
            self._settings = _Settings(fmt, timestamp_format, locale, delimiter)
        log.debug("DebugInfo initialised: %s", self.to_config())

    def configure(self, config: Mapping[str, Any]) -> None:
        """Apply a (partial) config dict, e.g. from a preset or the environment.

        Keys not present keep their current value.  Raises
        :class:`ConfigError` listing every invalid field; nothing is
        applied in that case.
        """
        errors = validate_param_values(DEBUGINFO_PARAMS, config)
        if errors:
            raise ConfigError(
                "Configuration has invalid values:\n  • "
                + "\n  • ".join(e.message for e in errors)
            )
        with self._lock:
            current = self._settings
            self.init(
                config.get("caller_name_format", current.caller_name_format),
                config.get("timestamp_format", current.timestamp_format),
                config.get("culture", current.culture),
                config.get("delimiter", current.delimiter),
            )

    def to_config(self) -> dict[str, Any]:
        with self._lock:
            s = self._settings
        return {
            "caller_name_format": s.caller_name_format.value,
            "timestamp_format": s.timestamp_format,
            "culture": str(s.culture),
            "delimiter": s.delimiter,
        }

    @property
    def caller_name_format(self) -> CallerNameFormat:
        return self._snapshot().caller_name_format

    @caller_name_format.setter
    def caller_name_format(self, value: CallerNameFormat | str) -> None:
        fmt = CallerNameFormat.coerce(value)
        self._replace(caller_name_format=fmt)

    @property
    def timestamp_format(self) -> str:
        return self._snapshot().timestamp_format

    @timestamp_format.setter
    def timestamp_format(self, value: str) -> None:
        # validate before storing; a rejected pattern leaves the old one
        with self._lock:
            validate_pattern(value, self._settings.culture, self._clock())
            self._replace(timestamp_format=value)

    @property
    def culture(self) -> Locale:
        return self._snapshot().culture

    @culture.setter
    def culture(self, value: Locale | str | None) -> None:
        self._replace(culture=parse_locale(value))

    @property
    def delimiter(self) -> str:
        return self._snapshot().delimiter

    @delimiter.setter
    def delimiter(self, value: str) -> None:
        if not isinstance(value, str):
            raise ConfigError(f"Delimiter must be str, got {type(value).__name__}")
        self._replace(delimiter=value)

    # -- caller names ----------------------------------------------------

    @property
    def name(self) -> str:
        """Method name of the caller."""
        return resolve_caller_name(CallerNameFormat.NAME, CALLER_OF_WRAPPER)

    @property
    def short_name(self) -> str:
        """``Class.method`` of the caller."""
        return resolve_caller_name(CallerNameFormat.SHORT_NAME, CALLER_OF_WRAPPER)

    @property
    def full_name(self) -> str:
        """``module.Class.method`` of the caller."""
        return resolve_caller_name(CallerNameFormat.FULL_NAME, CALLER_OF_WRAPPER)

    @property
    def class_name(self) -> str:
        """Class name of the caller."""
        return resolve_caller_name(CallerNameFormat.CLASS_NAME, CALLER_OF_WRAPPER)

    @property
    def full_class_name(self) -> str:
        """``module.Class`` of the caller."""
        return resolve_caller_name(CallerNameFormat.FULL_CLASS_NAME, CALLER_OF_WRAPPER)

    def caller_name(self) -> str:
        """Caller name in the configured :attr:`caller_name_format`."""
        fmt = self._snapshot().caller_name_format
        return resolve_caller_name(fmt, CALLER_OF_WRAPPER)

    # -- timestamps ------------------------------------------------------

    @property
    def date(self) -> str:
        """Current date as ``yyyy-MM-dd`` in the default locale."""
        return format_instant(self._clock(), DATE_FORMAT)

    @property
    def time(self) -> str:
        """Current time as ``HH:mm:ss`` in the default locale."""
        return format_instant(self._clock(), TIME_FORMAT)

    @property
    def date_time(self) -> str:
        """Current date and time as ``yyyy-MM-dd HH:mm:ss`` in the default locale."""
        return format_instant(self._clock(), DATE_TIME_FORMAT)

    def timestamp(self) -> str:
        """Current time in the configured pattern and culture."""
        s = self._snapshot()
        return format_instant(self._clock(), s.timestamp_format, s.culture)

    # -- combined --------------------------------------------------------

    @property
    def time_stamp(self) -> str:
        """Timestamp, delimiter and caller name of whoever reads this."""
        s = self._snapshot()
        caller = resolve_caller_name(s.caller_name_format, CALLER_OF_WRAPPER)
        return self._combine(s, caller)

    def render(self) -> str:
        """Same as :attr:`time_stamp`, as a call."""
        s = self._snapshot()
        caller = resolve_caller_name(s.caller_name_format, CALLER_OF_WRAPPER)
        return self._combine(s, caller)

    def __str__(self) -> str:
        s = self._snapshot()
        caller = resolve_caller_name(s.caller_name_format, CALLER_OF_WRAPPER)
        return self._combine(s, caller)

    def __repr__(self) -> str:
        return f"DebugInfo({self.to_config()!r})"

    # -- internals -------------------------------------------------------

    def _combine(self, s: _Settings, caller: str) -> str:
        stamp = format_instant(self._clock(), s.timestamp_format, s.culture)
        return f"{stamp}{s.delimiter}{caller}"

    def _snapshot(self) -> _Settings:
        with self._lock:
            return self._settings

    def _replace(self, **changes: Any) -> None:
        with self._lock:
            s = self._settings
            self._settings = _Settings(
                changes.get("caller_name_format", s.caller_name_format),
                changes.get("timestamp_format", s.timestamp_format),
                changes.get("culture", s.culture),
                changes.get("delimiter", s.delimiter),
            )

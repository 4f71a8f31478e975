from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Mapping

from babel import Locale

from .models import CallerNameFormat

log = logging.getLogger(__name__)

PRESET_SCHEMA_VERSION = "1.0"

DEFAULT_CALLER_NAME_FORMAT = CallerNameFormat.FULL_NAME
DEFAULT_TIMESTAMP_FORMAT = "yyyy-MM-dd HH:mm:ss"
DEFAULT_LOCALE = "en_US"
DEFAULT_DELIMITER = ", "

# Environment variable -> config key
ENV_VARS = {
    "DEBUGINFO_CALLER_NAME_FORMAT": "caller_name_format",
    "DEBUGINFO_TIMESTAMP_FORMAT": "timestamp_format",
    "DEBUGINFO_CULTURE": "culture",
    "DEBUGINFO_DELIMITER": "delimiter",
}


class ConfigError(Exception):
    """Raised when configuration validation fails."""
    pass


class TimestampFormatError(ConfigError, ValueError):
    """Raised when a timestamp pattern is rejected by the formatter."""

    def __init__(self, pattern: Any, reason: str):
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid timestamp format {pattern!r}: {reason}")


@dataclass
class ConfigFieldError:
    """A single validation error for one configuration field.

    Attributes:
        key:     The config key that failed validation.
        value:   The offending value.
        message: Human-readable explanation of what is wrong.
    """
    key: str
    value: Any
    message: str


@dataclass(frozen=True)
class ParamSpec:
    """Declarative specification for a single configuration parameter."""
    key: str
    type: type | tuple              # expected Python type(s)
    default: Any
    label: str                       # short label for messages and the CLI
    description: str = ""
    choices: list | None = None      # allowed string values
    nullable: bool = False           # True if None is valid


DEBUGINFO_PARAMS: list[ParamSpec] = [
    ParamSpec(
        key="caller_name_format", type=str,
        default=DEFAULT_CALLER_NAME_FORMAT.value,
        choices=[f.value for f in CallerNameFormat],
        label="Caller name format",
        description=(
            "Which parts of the caller identity are rendered: the method "
            "name, class and method, module-qualified class and method, the "
            "class alone, or the module-qualified class."
        ),
    ),
    ParamSpec(
        key="timestamp_format", type=str, default=DEFAULT_TIMESTAMP_FORMAT,
        label="Timestamp format",
        description=(
            "LDML date/time pattern, e.g. 'yyyy-MM-dd HH:mm:ss'. Literal "
            "letters must be quoted, as in yyyy-MM-dd'T'HH:mm."
        ),
    ),
    ParamSpec(
        key="culture", type=(str, Locale), default=None, nullable=True,
        label="Culture",
        description=(
            "Locale used to render the timestamp (e.g. 'de-DE'). Empty means "
            f"the fixed default locale '{DEFAULT_LOCALE}', not the host's."
        ),
    ),
    ParamSpec(
        key="delimiter", type=str, default=DEFAULT_DELIMITER,
        label="Delimiter",
        description="Separator between the timestamp and the caller name.",
    ),
]


def default_config() -> dict[str, Any]:
    """Returns the built-in default configuration."""
    return {p.key: p.default for p in DEBUGINFO_PARAMS}


def merge_configs(*configs: Mapping[str, Any]) -> dict[str, Any]:
    """Merge config dicts left-to-right. Later values override earlier ones."""
    result: dict[str, Any] = {}
    for cfg in configs:
        result.update(cfg)
    return result


def config_from_env(environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    """Collect config overrides from ``DEBUGINFO_*`` environment variables.

    Unset variables are omitted. An empty ``DEBUGINFO_CULTURE`` selects the
    default locale.
    """
    env = os.environ if environ is None else environ
    overrides: dict[str, Any] = {}
    for var, key in ENV_VARS.items():
        if var not in env:
            continue
        value: Any = env[var]
        if key == "culture" and not value.strip():
            value = None
        overrides[key] = value
    if overrides:
        log.debug("Config overrides from environment: %s", sorted(overrides))
    return overrides


def load_preset(path: str) -> dict[str, Any]:
    """
    Load a JSON preset file. Returns a partial config dict.
    Raises ConfigError if the file cannot be read or parsed.
    """
    if not os.path.isfile(path):
        raise ConfigError(f"Preset file not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in preset file {path}: {e}")
    except OSError as e:
        raise ConfigError(f"Cannot read preset file {path}: {e}")

    if not isinstance(data, dict):
        raise ConfigError(f"Preset file must contain a JSON object, got {type(data).__name__}")

    # Strip metadata keys, they are informational, not config
    preset = {k: v for k, v in data.items() if k not in ("schema_version", "_description")}
    log.debug("Loaded preset %s (%d keys)", path, len(preset))
    return preset


def save_preset(config: Mapping[str, Any], path: str, *, description: str | None = None) -> None:
    """
    Save a config dict as a JSON preset file.
    Only values that differ from the defaults are written.  Cultures are
    compared as locales, so ``"en-US"`` matches the default ``None``.
    """
    from .timestamps import parse_locale

    preset: dict[str, Any] = {"schema_version": PRESET_SCHEMA_VERSION}
    if description:
        preset["_description"] = description

    defaults = default_config()
    for k, v in config.items():
        if k.startswith("_"):
            continue
        if isinstance(v, CallerNameFormat):
            v = v.value
        if k == "culture":
            locale = parse_locale(v)
            if locale == parse_locale(defaults[k]):
                continue
            v = str(locale)
        if k in defaults and defaults[k] == v:
            continue
        preset[k] = v

    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(preset, f, indent=4, ensure_ascii=False)
    log.debug("Saved preset %s", path)


# ---------------------------------------------------------------------------
# Validation  (ParamSpec-driven)
# ---------------------------------------------------------------------------

def validate_param_values(
    params: list[ParamSpec],
    values: Mapping[str, Any],
) -> list[ConfigFieldError]:
    """Validate *values* against a list of :class:`ParamSpec` definitions.

    Returns a (possibly empty) list of :class:`ConfigFieldError` objects.
    Only keys present in *values* are checked; missing keys are not errors
    (they will receive their default). Unknown keys are reported.
    """
    errors: list[ConfigFieldError] = []
    known = {spec.key for spec in params}

    for key in values:
        if key not in known:
            errors.append(ConfigFieldError(
                key, values[key], f"Unknown configuration key '{key}'.",
            ))

    for spec in params:
        if spec.key not in values:
            continue

        value = values[spec.key]

        # -- nullable --
        if value is None:
            if spec.nullable:
                continue
            errors.append(ConfigFieldError(
                spec.key, value,
                f"{spec.label} must not be empty.",
            ))
            continue

        # -- enum members are accepted for their value --
        if isinstance(value, CallerNameFormat):
            value = value.value

        if not isinstance(value, spec.type):
            errors.append(ConfigFieldError(
                spec.key, value,
                f"{spec.label} must be {_type_label(spec.type)}, "
                f"got {type(value).__name__}.",
            ))
            continue

        # -- choices (case-insensitive for strings) --
        if spec.choices is not None:
            normalized = value.strip().lower() if isinstance(value, str) else value
            if normalized not in spec.choices:
                opts = ", ".join(repr(c) for c in spec.choices)
                errors.append(ConfigFieldError(
                    spec.key, value,
                    f"{spec.label} must be one of {opts}.",
                ))

    return errors


def validate_config_fields(config: Mapping[str, Any]) -> list[ConfigFieldError]:
    """Validate a config dict, including the timestamp pattern and locale.

    Returns structured errors.  Never raises.
    """
    from .timestamps import parse_locale, validate_pattern

    errors = validate_param_values(DEBUGINFO_PARAMS, config)
    bad = {e.key for e in errors}

    locale = None
    if "culture" in config and "culture" not in bad:
        try:
            locale = parse_locale(config["culture"])
        except ConfigError as e:
            errors.append(ConfigFieldError("culture", config["culture"], str(e)))

    if "timestamp_format" in config and "timestamp_format" not in bad:
        try:
            validate_pattern(config["timestamp_format"], locale)
        except TimestampFormatError as e:
            errors.append(ConfigFieldError(
                "timestamp_format", config["timestamp_format"], str(e),
            ))

    return errors


def validate_config(config: Mapping[str, Any]) -> None:
    """Validate a config dict.

    Raises :class:`ConfigError` listing every invalid field.
    """
    errors = validate_config_fields(config)
    if errors:
        lines = [e.message for e in errors]
        raise ConfigError(
            "Configuration has invalid values:\n  • " + "\n  • ".join(lines)
        )


def _type_label(t) -> str:
    """Human-readable label for an expected type or tuple of types."""
    if isinstance(t, tuple):
        return " or ".join(x.__name__ for x in t)
    return t.__name__

from ._version import __version__
from .models import CallerNameFormat, CallerIdentity
from .caller import resolve_caller, resolve_caller_name
from .config import (
    default_config,
    merge_configs,
    config_from_env,
    validate_config,
    validate_config_fields,
    validate_param_values,
    load_preset,
    save_preset,
    ConfigError,
    ConfigFieldError,
    ParamSpec,
    TimestampFormatError,
    DEBUGINFO_PARAMS,
    DEFAULT_CALLER_NAME_FORMAT,
    DEFAULT_DELIMITER,
    DEFAULT_LOCALE,
    DEFAULT_TIMESTAMP_FORMAT,
)
from .timestamps import (
    DATE_FORMAT,
    DATE_TIME_FORMAT,
    TIME_FORMAT,
    format_instant,
    parse_locale,
    validate_pattern,
)
from .info import DebugInfo

__all__ = [
    "__version__",
    "CallerNameFormat",
    "CallerIdentity",
    "resolve_caller",
    "resolve_caller_name",
    "default_config",
    "merge_configs",
    "config_from_env",
    "validate_config",
    "validate_config_fields",
    "validate_param_values",
    "load_preset",
    "save_preset",
    "ConfigError",
    "ConfigFieldError",
    "ParamSpec",
    "TimestampFormatError",
    "DEBUGINFO_PARAMS",
    "DEFAULT_CALLER_NAME_FORMAT",
    "DEFAULT_DELIMITER",
    "DEFAULT_LOCALE",
    "DEFAULT_TIMESTAMP_FORMAT",
    "DATE_FORMAT",
    "DATE_TIME_FORMAT",
    "TIME_FORMAT",
    "format_instant",
    "parse_locale",
    "validate_pattern",
    "DebugInfo",
]

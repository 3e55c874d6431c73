"""Essentials Core -- cross-cutting primitives shared by every component.

Module Map
----------
    errors.py      Structured error hierarchy (EssentialsError, ConfigError)
    result.py      Result envelope (Ok / Err / try_result)
    logging.py     Structured logging (structlog)
    settings.py    EssentialsSettings (pydantic-settings, ESSENTIALS_* env)
    maps.py        Mapping rename / compaction helpers
"""

from essentials.core.errors import (
    ConfigError,
    ErrorCategory,
    ErrorContext,
    EssentialsError,
    InvalidConfigError,
    OrchestrationError,
)
from essentials.core.logging import LogContext, configure_logging, get_logger
from essentials.core.maps import compact, compact_blank, compact_nil, renake
from essentials.core.result import Err, Ok, Result, try_result
from essentials.core.settings import EssentialsSettings, get_settings

__all__ = [
    # errors
    "ConfigError",
    "ErrorCategory",
    "ErrorContext",
    "EssentialsError",
    "InvalidConfigError",
    "OrchestrationError",
    # logging
    "LogContext",
    "configure_logging",
    "get_logger",
    # maps
    "compact",
    "compact_blank",
    "compact_nil",
    "renake",
    # result
    "Err",
    "Ok",
    "Result",
    "try_result",
    # settings
    "EssentialsSettings",
    "get_settings",
]

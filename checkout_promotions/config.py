"""Runtime settings and logging configuration.

Settings come from the environment:

    PROMOTIONS_LOG_LEVEL        debug, info (default), warning, error, critical
    PROMOTIONS_LOG_FORMAT       json (default) or console
    PROMOTIONS_MOBILE_PLATFORM  ``_platform`` property value of mobile app carts (default: ios)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

import structlog

from .errors import ConfigurationError, errmsg

LOG_LEVELS = {
    "debug": 10,
    "info": 20,
    "warning": 30,
    "error": 40,
    "critical": 50,
}
LOG_FORMATS = ("json", "console")


@dataclass(frozen=True)
class Settings:
    log_level: str = "info"
    log_format: str = "json"
    mobile_platform: str = "ios"

    def __post_init__(self) -> None:
        if self.log_level not in LOG_LEVELS:
            raise ConfigurationError(f"{errmsg.INVALID_LOG_LEVEL}: {self.log_level!r}")
        if self.log_format not in LOG_FORMATS:
            raise ConfigurationError(f"{errmsg.INVALID_LOG_FORMAT}: {self.log_format!r}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> Settings:
        """Read settings from ``environ`` (defaults to ``os.environ``)."""
        env = os.environ if environ is None else environ
        return cls(
            log_level=env.get("PROMOTIONS_LOG_LEVEL", "info").lower(),
            log_format=env.get("PROMOTIONS_LOG_FORMAT", "json").lower(),
            mobile_platform=env.get("PROMOTIONS_MOBILE_PLATFORM", "ios"),
        )


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Configure structlog with ISO timestamps and JSON (or console) rendering."""
    settings = settings or Settings.from_env()
    if settings.log_format == "console":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(LOG_LEVELS[settings.log_level]),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
    )

# -*- coding: utf-8 -*-
"""Logging configuration for structlog + Logfire.

The CLI prints its results as JSON on stdout, so every log line goes to a
single stream handler (stderr unless told otherwise). Logfire, when enabled,
only exports; its own console output is turned off.
"""

from __future__ import annotations

import logging
import sys
from typing import IO, Any, Optional

import logfire
import structlog
from structlog.types import EventDict, Processor

from wallet_inspector.config import AppSettings, Settings, get_settings

# Map standard logging levels to Logfire levels
LOG_LEVEL_TO_LOGFIRE: dict[str, str] = {
    "DEBUG": "debug",
    "INFO": "info",
    "WARNING": "warn",
    "ERROR": "error",
    "CRITICAL": "fatal",
}


def service_context(app: AppSettings) -> Processor:
    """Processor stamping logger name, app and service identity onto each event."""
    static: dict[str, Any] = {"app_name": app.app_name, "environment": app.environment}
    if app.service_name:
        static["service_name"] = app.service_name
    if app.service_version:
        static["service_version"] = app.service_version

    def _add(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
        stdlib_logger = getattr(logger, "_logger", None)
        event_dict["logger"] = getattr(stdlib_logger, "name", None) or getattr(logger, "name", "") or ""
        for key, value in static.items():
            event_dict.setdefault(key, value)
        return event_dict

    return _add


def configure_logging(
    settings: Optional[Settings] = None,
    *,
    level: Optional[str] = None,
    json_format: Optional[bool] = None,
    stream: Optional[IO[str]] = None,
) -> None:
    """Configure structlog (and Logfire when enabled).

    Args:
        settings: Defaults to get_settings().
        level: Overrides logging.console_level (e.g. from --log-level).
        json_format: Overrides logging.json_format (e.g. from --log-json).
        stream: Log destination; defaults to sys.stderr.
    """
    settings = settings or get_settings()
    app_settings = settings.app
    logging_settings = settings.logging
    use_json = logging_settings.json_format if json_format is None else json_format

    level_name = (level or logging_settings.console_level).upper()
    handler: logging.Handler
    if logging_settings.log_to_console:
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(logging.Formatter("%(message)s"))
    else:
        # Events still reach Logfire through the processor chain.
        handler = logging.NullHandler()
    logging.basicConfig(level=getattr(logging, level_name, logging.INFO), handlers=[handler], force=True)

    if logging_settings.logfire_enabled:
        logfire.configure(
            token=logging_settings.logfire_token,
            service_name=app_settings.service_name or app_settings.app_name,
            service_version=app_settings.service_version,
            environment=app_settings.environment,
            min_level=LOG_LEVEL_TO_LOGFIRE.get(logging_settings.logfire_level, "info"),  # type: ignore[arg-type]
            console=False,
            send_to_logfire="if-token-present",
        )

    processors: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        service_context(app_settings),
    ]
    if logging_settings.logfire_enabled:
        processors.append(logfire.StructlogProcessor())  # type: ignore[arg-type]
    processors.append(
        structlog.processors.JSONRenderer()
        if use_json
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

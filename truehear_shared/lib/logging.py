"""
Structured logging configuration for the truehear-shared SDK.

Configures structlog to work alongside stdlib logging so that both
`logging.getLogger()` and `structlog.get_logger()` produce consistent,
structured output: JSON lines for log aggregators (ELK, Loki, Datadog)
and human-readable colored output in development.

Environment (via Settings):
- LOG_LEVEL: minimum level (default INFO)
- SERVICE_NAME: tagged on every event as `service`
- LOG_REDACT_KEYS: comma-separated keys to censor, dotted paths allowed
- LOG_FILE_PATH: optional file receiving JSON lines in addition to stdout
- ENVIRONMENT=test: all output suppressed

Usage:
    from truehear_shared.lib.logging import create_logger, setup_logging

    setup_logging()  # Call once at application startup

    db_logger = create_logger(module="database", connection="primary")
    db_logger.debug("connected")
"""

import logging
import os
import socket
import sys
import traceback
from pathlib import Path
from typing import Any

import structlog

from truehear_shared.config.settings import Settings, get_settings

REDACTED = "[Redacted]"

# Above CRITICAL: nothing passes the root logger
SILENT = logging.CRITICAL + 10

# Event keys whose exception values are expanded by flatten_errors
ERROR_KEYS = ("err", "error")


class RedactProcessor:
    """Replace the values of configured keys with a censor string."""

    def __init__(self, paths: list[str], censor: str = REDACTED) -> None:
        self._paths = [path.split(".") for path in paths if path]
        self._censor = censor

    def __call__(
        self, logger: Any, method_name: str, event_dict: structlog.types.EventDict
    ) -> structlog.types.EventDict:
        for parts in self._paths:
            self._redact(event_dict, parts)
        return event_dict

    def _redact(self, container: Any, parts: list[str]) -> None:
        head, rest = parts[0], parts[1:]
        if not isinstance(container, dict) or head not in container:
            return
        if not rest:
            container[head] = self._censor
            return
        # Copy so the caller's own dict is never mutated
        nested = container[head]
        if isinstance(nested, dict):
            nested = dict(nested)
            container[head] = nested
        self._redact(nested, rest)


def flatten_errors(
    logger: Any, method_name: str, event_dict: structlog.types.EventDict
) -> structlog.types.EventDict:
    """Expand exceptions passed as `err=` or `error=` into errorMessage/errorStack/errorType."""
    for key in ERROR_KEYS:
        value = event_dict.get(key)
        if isinstance(value, BaseException):
            del event_dict[key]
            event_dict["errorMessage"] = str(value)
            event_dict["errorStack"] = "".join(traceback.format_exception(value))
            event_dict["errorType"] = type(value).__name__
    return event_dict


def _add_service_context(service_name: str) -> structlog.types.Processor:
    host = socket.gethostname()
    pid = os.getpid()

    def processor(
        logger: Any, method_name: str, event_dict: structlog.types.EventDict
    ) -> structlog.types.EventDict:
        event_dict.setdefault("service", service_name)
        event_dict.setdefault("host", host)
        event_dict.setdefault("pid", pid)
        return event_dict

    return processor


def _json_formatter(
    foreign_pre_chain: list[structlog.types.Processor],
) -> structlog.stdlib.ProcessorFormatter:
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=foreign_pre_chain,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
    )


def setup_logging(settings: Settings | None = None) -> None:
    """
    Configure structlog and stdlib logging for the application.

    In development: human-readable colored console output.
    Elsewhere: JSON-formatted structured logs on stdout.
    In test: silent.
    """
    if settings is None:
        settings = get_settings()

    # Shared processors for both structlog and stdlib
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        _add_service_context(settings.service_name),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        flatten_errors,
        RedactProcessor(settings.log_redact_keys),
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        # capture_logs() only sees uncached loggers
        cache_logger_on_first_use=not settings.is_test,
    )

    if settings.is_development:
        console_formatter = structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.dev.ConsoleRenderer(),
            ],
        )
    else:
        console_formatter = _json_formatter(shared_processors)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(console_formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(console)

    # File handler (optional), always JSON
    if settings.log_file_path:
        log_file = Path(settings.log_file_path).resolve()
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(_json_formatter(shared_processors))
        root_logger.addHandler(file_handler)

    if settings.is_test:
        root_logger.setLevel(SILENT)
    else:
        root_logger.setLevel(getattr(logging, settings.log_level, logging.INFO))


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger, optionally named."""
    if name:
        return structlog.get_logger(name)
    return structlog.get_logger()


def create_logger(**context: Any) -> structlog.stdlib.BoundLogger:
    """
    Create a contextual logger with static metadata.

    Every event emitted through the returned logger carries `context`.

    Example:
        >>> auth_logger = create_logger(service="auth-api")
        >>> auth_logger.warning("user_token_expired", user_id="u42")
    """
    return structlog.get_logger().bind(**context)

"""
Logging configuration module for structured logging.

This module configures structlog for the library. It provides JSON output
for production and human-readable console output for development.

The logging configuration includes:
- ISO timestamp formatting
- Log level inclusion and filtering
- Redaction of credential fields that must never reach a log sink
- JSON/Console output based on settings
"""

import logging

import structlog

from credentia.core.config.settings import settings

# Event keys whose values are dropped before rendering.
REDACTED_KEYS = frozenset({"secret", "password", "credential_hash", "hashed_password", "token"})


def redact_sensitive_fields(logger, method_name, event_dict):
    """Replace values of credential-bearing keys with a fixed marker."""
    for key in REDACTED_KEYS.intersection(event_dict):
        event_dict[key] = "[redacted]"
    return event_dict


def configure_logging(log_level: str | None = None, json_logs: bool | None = None) -> None:
    """
    Configures structlog for credentia.

    Sets up:
    1. ISO format timestamps
    2. Log level inclusion and level filtering
    3. Redaction of secrets, hashes and raw tokens
    4. JSON rendering when ``json_logs`` (or ``settings.LOG_JSON``) is set,
       console rendering otherwise

    Args:
        log_level: Minimum level name; defaults to ``settings.LOG_LEVEL``.
        json_logs: Render JSON; defaults to ``settings.LOG_JSON``.
    """
    level_name = (log_level or settings.LOG_LEVEL).upper()
    use_json = settings.LOG_JSON if json_logs is None else json_logs

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        redact_sensitive_fields,
        structlog.processors.JSONRenderer() if use_json else structlog.dev.ConsoleRenderer(),
    ]

    structlog.configure(
        processors=processors,
        context_class=dict,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level_name)
        ),
        cache_logger_on_first_use=True,
    )


logger = structlog.get_logger("credentia")

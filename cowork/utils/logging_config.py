"""
Structured JSON logging for the cowork CLI.

Store and manager modules log key names, scopes and providers only. As a
backstop, any event field named like a credential is masked before rendering.
"""

import sys
from collections.abc import MutableMapping
from typing import Any

import structlog

SECRET_FIELDS = frozenset({"token", "password", "ssh_key", "secret", "value"})
REDACTED = "***"


def redact_secrets(_logger: Any, _method_name: str, event_dict: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
    """Mask event fields that would carry credential material."""
    for field in SECRET_FIELDS.intersection(event_dict):
        if event_dict[field] is not None:
            event_dict[field] = REDACTED
    return event_dict


def configure_logging(log_level: str = "INFO") -> None:
    """Send JSON log lines to stderr so command output on stdout stays clean.

    Args:
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            redact_secrets,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

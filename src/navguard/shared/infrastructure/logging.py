"""
Structured logging configuration using structlog.

Provides consistent, structured logging across all modules. Submitted
JavaScript is untrusted input and is never written to logs verbatim.
"""

import logging
import re
import sys
from typing import Any

import structlog

from navguard.shared.infrastructure.config import settings

# Keys whose values carry submitted source code
CODE_KEYS = frozenset({"code", "source", "source_code", "body"})

MAX_LOGGED_STRING = 2000

_SECRET_PATTERNS = {
    r"(api[_-]?key|token|password|secret)['\"]?\s*[:=]\s*['\"]?([^'\"\s]+)": r"\1=[REDACTED]",
    r"Bearer\s+\S+": "Bearer [TOKEN_REDACTED]",
    r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b": "[EMAIL_REDACTED]",
}


def _redact_string(text: str) -> str:
    for pattern, replacement in _SECRET_PATTERNS.items():
        text = re.sub(pattern, replacement, text, flags=re.IGNORECASE)
    if len(text) > MAX_LOGGED_STRING:
        text = text[:MAX_LOGGED_STRING] + "... [TRUNCATED]"
    return text


def _redact_value(key: str, value: Any) -> Any:
    if key in CODE_KEYS and isinstance(value, (str, bytes)):
        return f"[CODE REDACTED len={len(value)}]"
    if isinstance(value, str):
        return _redact_string(value)
    if isinstance(value, dict):
        return {k: _redact_value(k, v) for k, v in value.items()}
    if isinstance(value, list):
        return [_redact_value(key, item) for item in value]
    return value


def privacy_redactor(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Redact submitted code and credentials from log events.

    Redacts:
    - Values of code-bearing keys (code, source, source_code, body)
    - API keys, tokens, passwords, bearer credentials
    - Email addresses
    - Overlong strings (truncated)

    Args:
        logger: Logger instance
        method_name: Logging method name
        event_dict: Event dictionary to process

    Returns:
        Redacted event dictionary
    """
    if not settings.log_redaction_enabled:
        return event_dict

    return {key: _redact_value(key, value) for key, value in event_dict.items()}


def configure_logging(stream: Any = None) -> None:
    """
    Configure structlog for the application.

    Sets up:
    - Pretty console output for development
    - JSON output otherwise
    - Log level from settings
    - Privacy redaction of submitted code
    """
    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        privacy_redactor,
    ]

    if settings.is_development:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(colors=False),
        ]
    else:
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=stream or sys.stderr,
        level=getattr(logging, settings.log_level.upper()),
        force=True,
    )


def get_logger(name: str) -> Any:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Structured logger instance

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("sanitize_completed", outcome="sanitized", removed_count=1)
    """
    return structlog.get_logger(name)

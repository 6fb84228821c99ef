"""
Starboards logging utilities.

Provides configurable logging for REST requests/responses and for the raw
packet pipeline. Bot tokens never reach the log output.
"""

import logging
import re
from typing import Any

_sdk_logger = logging.getLogger("starboards")
_http_logger = logging.getLogger("starboards.http")
_events_logger = logging.getLogger("starboards.events")

# Patterns for sensitive data that should be masked
_SENSITIVE_PATTERNS = [
    # Authorization header values ("Bot <token>" / "Bearer <token>")
    (re.compile(r"\b(Bot|Bearer)\s+[A-Za-z0-9._\-]{20,}"), r"\1 [TOKEN_REDACTED]"),
    # Discord bot tokens: base64 user id, timestamp, HMAC
    (re.compile(r"[A-Za-z0-9_\-]{23,28}\.[A-Za-z0-9_\-]{6,7}\.[A-Za-z0-9_\-]{27,}"), "[TOKEN_REDACTED]"),
    # Secret/token patterns
    (re.compile(r"(secret|token|password|api_key)['\"]?\s*[:=]\s*['\"][^'\"]+['\"]", re.IGNORECASE), r"\1: [REDACTED]"),
]

_DEFAULT_SENSITIVE_KEYS = frozenset({"authorization", "token", "secret", "password", "api_key"})


def configure_logging(
    level: int = logging.INFO,
    http_level: int | None = None,
    events_level: int | None = None,
    handler: logging.Handler | None = None,
    format_string: str | None = None,
) -> None:
    """
    Configure starboards logging.

    Args:
        level: Default log level for all starboards loggers (default: INFO)
        http_level: Log level for REST request/response logging (default: same as level)
        events_level: Log level for raw packet processing (default: same as level)
        handler: Custom handler to use (default: StreamHandler to stderr)
        format_string: Custom format string (default: includes timestamp, level, logger name)

    Example:
        ```python
        import logging
        from starboards.logging import configure_logging

        # See why packets are discarded
        configure_logging(level=logging.INFO, events_level=logging.DEBUG)
        ```
    """
    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    formatter = logging.Formatter(format_string)

    if handler is None:
        handler = logging.StreamHandler()

    handler.setFormatter(formatter)

    _sdk_logger.setLevel(level)
    _sdk_logger.addHandler(handler)

    _http_logger.setLevel(http_level if http_level is not None else level)
    _events_logger.setLevel(events_level if events_level is not None else level)


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Get a starboards logger.

    Args:
        name: Logger name suffix (e.g., "http", "events"). If None, returns main logger.

    Returns:
        Logger instance
    """
    if name is None:
        return _sdk_logger
    return logging.getLogger(f"starboards.{name}")


def mask_sensitive_data(text: str) -> str:
    """
    Mask sensitive data in a string.

    Replaces bot tokens and authorization header values with redacted
    placeholders.
    """
    result = text
    for pattern, replacement in _SENSITIVE_PATTERNS:
        result = pattern.sub(replacement, result)
    return result


def safe_log_dict(data: dict[str, Any], sensitive_keys: set[str] | None = None) -> dict[str, Any]:
    """
    Create a copy of a dictionary with sensitive values masked.

    Args:
        data: Dictionary that may contain sensitive values
        sensitive_keys: Set of keys to mask (default: authorization, token, secret, password, api_key)

    Returns:
        Dictionary with sensitive values replaced with "[REDACTED]"
    """
    if sensitive_keys is None:
        sensitive_keys = set(_DEFAULT_SENSITIVE_KEYS)

    result: dict[str, Any] = {}
    for key, value in data.items():
        key_lower = key.lower()
        if key_lower in sensitive_keys or any(sk in key_lower for sk in sensitive_keys):
            result[key] = "[REDACTED]"
        elif isinstance(value, dict):
            result[key] = safe_log_dict(value, sensitive_keys)
        elif isinstance(value, list):
            result[key] = [
                safe_log_dict(item, sensitive_keys) if isinstance(item, dict) else item
                for item in value
            ]
        else:
            result[key] = value

    return result


def log_http_request(
    method: str,
    url: str,
    headers: dict[str, str] | None = None,
    params: dict[str, Any] | None = None,
) -> None:
    """Log a REST request at DEBUG level with sensitive data masked."""
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"{method} {url}"]

    if headers:
        log_parts.append(f"headers={safe_log_dict(headers)}")

    if params:
        log_parts.append(f"params={params}")

    _http_logger.debug(" | ".join(log_parts))


def log_http_response(
    status_code: int,
    url: str,
    elapsed_ms: float | None = None,
) -> None:
    """Log a REST response at DEBUG level."""
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"Response {status_code} from {url}"]

    if elapsed_ms is not None:
        log_parts.append(f"elapsed={elapsed_ms:.2f}ms")

    _http_logger.debug(" | ".join(log_parts))


def log_packet_discarded(
    packet_type: str | None,
    reason: str,
    channel_id: str | None = None,
    message_id: str | None = None,
) -> None:
    """
    Log a discarded raw packet at DEBUG level.

    Discards are the normal outcome for most packets (unconfigured channels,
    other emoji, deleted messages), so they never log above DEBUG.
    """
    if not _events_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"discarded {packet_type}: {reason}"]

    if channel_id:
        log_parts.append(f"channel_id={channel_id}")

    if message_id:
        log_parts.append(f"message_id={message_id}")

    _events_logger.debug(" | ".join(log_parts))


__all__ = [
    "configure_logging",
    "get_logger",
    "mask_sensitive_data",
    "safe_log_dict",
    "log_http_request",
    "log_http_response",
    "log_packet_discarded",
]

"""
Structured logging configuration for jarfetch.

Log records go to stderr so stdout stays reserved for command output (the
resolved id in silent mode, progress narration otherwise). Two formats:

- JsonFormatter: one JSON object per line, for scripts and log collectors.
- SimpleFormatter: human-readable "LEVEL logger: msg | k=v" lines.

Both run the record's `extra` fields through the same filter: credential-like
keys are dropped, URLs lose their query strings, raw bodies are redacted.

Usage:
    from jarfetch.logging_config import setup_logging

    setup_logging(level=logging.DEBUG, json_format=False)
    logger = logging.getLogger(__name__)
    logger.info("Fetched version catalog", extra={"count": 700})
"""

from __future__ import annotations

import logging
import re
import sys
from datetime import UTC, datetime
from typing import Any
from urllib.parse import urlsplit

import orjson

# URLs embedded in free text; query strings may carry signed tokens
_URL_PATTERN = re.compile(r"(https?://[^\s\"'<>]+)")
_SENSITIVE_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"\b(api[_-]?key|apikey)[=:]\s*['\"]?[\w\-]+['\"]?", re.I), "[API_KEY]"),
    (re.compile(r"\b(bearer|token)[=:\s]+['\"]?[\w\-\.]+['\"]?", re.I), "[TOKEN]"),
    (re.compile(r"(authorization|auth)[=:\s]+['\"]?[\w\-\.\s]+['\"]?", re.I), "[AUTH]"),
]

# Keys never emitted, matched case-insensitively as substrings
BLOCKED_FIELDS: frozenset[str] = frozenset(
    {
        "api_key",
        "secret",
        "token",
        "password",
        "authorization",
        "cookie",
        "credential",
    }
)

# Keys whose values are replaced or reduced before emitting
REDACTED_FIELDS: dict[str, str] = {
    "url": "endpoint",
    "body": "[BODY]",
    "headers": "[HEADERS]",
}

MAX_LIST_ITEMS = 10
MAX_DEPTH = 3

# LogRecord attributes that are not user-supplied extras
_RESERVED_ATTRS: frozenset[str] = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "exc_info",
        "exc_text",
        "thread",
        "threadName",
        "message",
        "taskName",
    }
)


def _normalize_url(url: str) -> str:
    """Reduce a URL to host and path, dropping credentials and query string."""
    parts = urlsplit(url)
    host = parts.hostname or ""
    path = parts.path or "/"
    return f"{host}{path}" if host else path


def _sanitize_url_in_text(match: re.Match[str]) -> str:
    return _normalize_url(match.group(1))


def _sanitize_text(text: str) -> str:
    """Strip query strings from URLs and mask credential-looking fragments."""
    if not text:
        return text

    result = _URL_PATTERN.sub(_sanitize_url_in_text, text)
    for pattern, replacement in _SENSITIVE_PATTERNS:
        result = pattern.sub(replacement, result)
    return result


def _filter_log_record(record: dict[str, Any], *, _depth: int = 0) -> dict[str, Any]:
    """Filter blocked and redacted fields from a record's extras.

    Nested dicts are filtered recursively up to MAX_DEPTH.
    """
    if _depth > MAX_DEPTH:
        return {"_truncated": "max depth exceeded"}

    filtered: dict[str, Any] = {}

    for key, value in record.items():
        key_lower = key.lower()

        if any(blocked in key_lower for blocked in BLOCKED_FIELDS):
            continue

        if key_lower in REDACTED_FIELDS:
            if key_lower == "url" and isinstance(value, str):
                filtered["endpoint"] = _normalize_url(value)
            else:
                filtered[key] = REDACTED_FIELDS[key_lower]
            continue

        if isinstance(value, (int, float, bool, type(None))):
            filtered[key] = value
        elif isinstance(value, str):
            filtered[key] = _sanitize_text(value)
        elif isinstance(value, (list, tuple)):
            if len(value) <= MAX_LIST_ITEMS:
                filtered[key] = list(value)
            else:
                filtered[key] = f"[list:{len(value)} items]"
        elif isinstance(value, dict):
            filtered[key] = _filter_log_record(value, _depth=_depth + 1)
        else:
            filtered[key] = _sanitize_text(str(value))

    return filtered


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {k: v for k, v in record.__dict__.items() if k not in _RESERVED_ATTRS}


class JsonFormatter(logging.Formatter):
    """One JSON object per line.

    {"ts":"2026-01-01T00:00:00.000+00:00","level":"INFO","logger":"jarfetch.pipeline","msg":"..."}
    """

    def format(self, record: logging.LogRecord) -> str:
        log_dict: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "msg": _sanitize_text(record.getMessage()),
        }

        if record.levelno >= logging.WARNING:
            log_dict["file"] = record.filename
            log_dict["line"] = record.lineno

        if record.exc_info:
            log_dict["exc"] = _sanitize_text(self.formatException(record.exc_info))

        extra = _extra_fields(record)
        if extra:
            log_dict.update(_filter_log_record(extra))

        return orjson.dumps(log_dict, default=str).decode()


class SimpleFormatter(logging.Formatter):
    """Human-readable formatter with filtered extras."""

    def format(self, record: logging.LogRecord) -> str:
        base = f"{record.levelname:8s} {record.name}: {_sanitize_text(record.getMessage())}"

        extra = _extra_fields(record)
        if extra:
            filtered = _filter_log_record(extra)
            if filtered:
                extra_str = " ".join(f"{k}={v}" for k, v in filtered.items())
                base = f"{base} | {extra_str}"

        if record.exc_info:
            base = f"{base}\n{_sanitize_text(self.formatException(record.exc_info))}"

        return base


def setup_logging(
    *,
    level: int | str = logging.WARNING,
    json_format: bool = False,
    stream: Any = None,
) -> None:
    """Configure logging for the CLI.

    Call once at startup. Replaces any handlers already on the root logger.

    Args:
        level: Log level (default WARNING; the CLI narrates on stdout).
        json_format: Use JsonFormatter instead of SimpleFormatter.
        stream: Output stream (default stderr).
    """
    if stream is None:
        stream = sys.stderr

    handler = logging.StreamHandler(stream)
    handler.setFormatter(JsonFormatter() if json_format else SimpleFormatter())

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)

    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)

"""Tests for logging configuration module.

Verifies that log output:
1. Drops credential-like fields
2. Reduces URLs to host and path
3. Produces one valid JSON object per line in JSON mode
"""

from __future__ import annotations

import io
import json
import logging
from typing import TYPE_CHECKING

import pytest

from jarfetch.logging_config import (
    BLOCKED_FIELDS,
    JsonFormatter,
    SimpleFormatter,
    _filter_log_record,
    _normalize_url,
    _sanitize_text,
    setup_logging,
)

if TYPE_CHECKING:
    from collections.abc import Iterator


def _record(msg: str = "test", level: int = logging.INFO, **extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="jarfetch.test",
        level=level,
        pathname="test.py",
        lineno=10,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture
def restore_root_logger() -> Iterator[None]:
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class TestBlockedFields:
    """Sensitive fields are dropped."""

    def test_blocked_fields_not_empty(self) -> None:
        assert "token" in BLOCKED_FIELDS
        assert "password" in BLOCKED_FIELDS

    def test_filter_removes_partial_matches(self) -> None:
        """Fields containing blocked words are removed, case-insensitively."""
        record = {"X_Auth_Token": "v", "proxy_password": "v", "API_KEY": "v", "version": "1.20.4"}
        filtered = _filter_log_record(record)
        assert filtered == {"version": "1.20.4"}


class TestSanitizeText:
    """Tests for _sanitize_text function."""

    def test_url_query_string_removed(self) -> None:
        result = _sanitize_text("GET https://data.test/v1/objects/abc/server.jar?sig=secret")
        assert "sig=secret" not in result
        assert "data.test/v1/objects/abc/server.jar" in result

    def test_bearer_token_redacted(self) -> None:
        result = _sanitize_text("Auth: bearer abc123xyz")
        assert "abc123xyz" not in result

    def test_safe_text_unchanged(self) -> None:
        text = "Checksum verified for 1.20.4"
        assert _sanitize_text(text) == text

    def test_empty_string_unchanged(self) -> None:
        assert _sanitize_text("") == ""


class TestUrlFields:
    """URL extras are reduced to host and path."""

    def test_url_normalized_to_endpoint(self) -> None:
        filtered = _filter_log_record({"url": "https://user:pw@meta.test/m.json?x=1"})
        assert "url" not in filtered
        assert filtered["endpoint"] == "meta.test/m.json"

    def test_normalize_url_without_host(self) -> None:
        assert _normalize_url("/relative/path?q=1") == "/relative/path"

    def test_body_redacted(self) -> None:
        assert _filter_log_record({"body": "<html>"})["body"] == "[BODY]"


class TestFilterLogRecord:
    """Structural filtering."""

    def test_scalars_preserved(self) -> None:
        record = {"version": "1.20.4", "bytes_written": 42, "ok": True, "status": None}
        assert _filter_log_record(record) == record

    def test_list_capped(self) -> None:
        assert _filter_log_record({"ids": list(range(15))})["ids"] == "[list:15 items]"

    def test_nested_dict_filtered(self) -> None:
        filtered = _filter_log_record({"request": {"timeout": 30, "secret": "x"}})
        assert filtered["request"] == {"timeout": 30}


class TestFormatters:
    """JsonFormatter and SimpleFormatter output."""

    def test_json_contains_required_fields(self) -> None:
        parsed = json.loads(JsonFormatter().format(_record("hello")))
        assert parsed["level"] == "INFO"
        assert parsed["logger"] == "jarfetch.test"
        assert parsed["msg"] == "hello"
        assert "ts" in parsed

    def test_json_warning_includes_location(self) -> None:
        parsed = json.loads(JsonFormatter().format(_record(level=logging.WARNING)))
        assert parsed["file"] == "test.py"
        assert parsed["line"] == 10

    def test_json_extra_fields_filtered(self) -> None:
        output = JsonFormatter().format(_record(version="1.20.4", user_token="t"))
        parsed = json.loads(output)
        assert parsed["version"] == "1.20.4"
        assert "user_token" not in parsed

    def test_simple_appends_extras(self) -> None:
        output = SimpleFormatter().format(_record("Located artifact", version="1.20.4"))
        assert output.startswith("INFO")
        assert "Located artifact | version=1.20.4" in output


class TestSetupLogging:
    """setup_logging wiring."""

    @pytest.mark.usefixtures("restore_root_logger")
    def test_json_mode(self) -> None:
        stream = io.StringIO()
        setup_logging(level=logging.INFO, json_format=True, stream=stream)

        logging.getLogger("jarfetch.test").info("fetched", extra={"count": 3})

        parsed = json.loads(stream.getvalue().strip())
        assert parsed["msg"] == "fetched"
        assert parsed["count"] == 3

    @pytest.mark.usefixtures("restore_root_logger")
    def test_default_level_hides_info(self) -> None:
        stream = io.StringIO()
        setup_logging(stream=stream)

        logger = logging.getLogger("jarfetch.test")
        logger.info("info message")
        logger.warning("warning message")

        output = stream.getvalue()
        assert "info message" not in output
        assert "warning message" in output

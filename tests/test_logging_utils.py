"""Tests for logging utilities and sensitive data redaction."""

from __future__ import annotations

import json
import logging

import pytest

from toolshed.logging_utils import configure_logging


@pytest.mark.parametrize("fmt", ["plain", "json"])
def test_sensitive_data_filter_redacts_tokens(fmt):
    secret = "top-secret-token"
    configure_logging("INFO", fmt, [secret])

    handler = logging.getLogger().handlers[0]
    record = logging.LogRecord(
        name="toolshed.test.redaction",
        level=logging.INFO,
        pathname=__file__,
        lineno=0,
        msg="Authorization header Bearer %s",
        args=(secret,),
        exc_info=None,
    )

    for filter_ in handler.filters:
        filter_.filter(record)

    formatted = handler.format(record)
    assert secret not in formatted
    assert "[redacted]" in formatted


def test_gemini_key_query_parameter_is_masked():
    configure_logging("INFO", "plain", [])

    handler = logging.getLogger().handlers[0]
    record = logging.LogRecord(
        name="toolshed.llm.client",
        level=logging.WARNING,
        pathname=__file__,
        lineno=0,
        msg="POST %s failed",
        args=("https://generativelanguage.googleapis.com/v1beta/models/x:generateContent?key=AIzaSecret",),
        exc_info=None,
    )

    for filter_ in handler.filters:
        filter_.filter(record)

    formatted = handler.format(record)
    assert "AIzaSecret" not in formatted
    assert "key=[redacted]" in formatted


def test_json_format_includes_request_id():
    configure_logging("DEBUG", "json", [])

    handler = logging.getLogger().handlers[0]
    record = logging.LogRecord(
        name="toolshed.access",
        level=logging.INFO,
        pathname=__file__,
        lineno=0,
        msg="HTTP GET /items status=200",
        args=(),
        exc_info=None,
    )
    record.request_id = "abc123"

    payload = json.loads(handler.format(record))
    assert payload["message"] == "HTTP GET /items status=200"
    assert payload["request_id"] == "abc123"
    assert payload["logger"] == "toolshed.access"

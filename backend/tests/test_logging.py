"""Tests for log formatting."""

from __future__ import annotations

import logging

import orjson

from character_table.core.logging import JsonFormatter, TextFormatter


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("character_table.catalog", logging.INFO, __file__, 1, "Fetched page", None, None)
    record.__dict__.update(extra)
    return record


def test_json_groups_context_without_prefix() -> None:
    line = JsonFormatter().format(_record(ctx_url="https://example.test/api/character?page=2", ctx_page=2))

    payload = orjson.loads(line)
    assert payload["message"] == "Fetched page"
    assert payload["logger"] == "character_table.catalog"
    assert payload["context"] == {"url": "https://example.test/api/character?page=2", "page": 2}


def test_json_omits_empty_context() -> None:
    payload = orjson.loads(JsonFormatter().format(_record()))

    assert "context" not in payload


def test_text_appends_context_pairs() -> None:
    line = TextFormatter().format(_record(ctx_records=826))

    assert line.endswith("character_table.catalog: Fetched page [records=826]")

"""Tests for squad.utils.parsing: strip_fences, response_text, parse_json_object."""

import json
from unittest.mock import MagicMock

import pytest

from squad.utils.parsing import parse_json_object, response_text, strip_fences


def _response(content):
    response = MagicMock()
    response.content = content
    return response


# --- strip_fences ---

class TestStripFences:
    def test_strip_json_fences(self):
        text = '```json\n{"key": "value"}\n```'
        assert strip_fences(text) == '{"key": "value"}'

    def test_strip_plain_fences(self):
        text = '```\n{"key": "value"}\n```'
        assert strip_fences(text) == '{"key": "value"}'

    def test_no_fences_returns_stripped(self):
        text = '  {"key": "value"}  '
        assert strip_fences(text) == '{"key": "value"}'

    def test_fences_with_surrounding_prose(self):
        text = 'Here you go:\n```json\n{"approved": true}\n```\nThanks.'
        assert strip_fences(text) == '{"approved": true}'


# --- response_text ---

class TestResponseText:
    def test_plain_string_content(self):
        assert response_text(_response("hello")) == "hello"

    def test_content_blocks_joined(self):
        blocks = [
            {"type": "thinking", "thinking": "hmm"},
            {"type": "text", "text": "part one, "},
            "part two",
        ]
        assert response_text(_response(blocks)) == "part one, part two"

    def test_empty_content(self):
        assert response_text(_response([])) == ""


# --- parse_json_object ---

class TestParseJsonObject:
    def test_parses_fenced_object(self):
        assert parse_json_object('```json\n{"a": 1}\n```') == {"a": 1}

    def test_rejects_array(self):
        with pytest.raises(ValueError):
            parse_json_object("[1, 2]")

    def test_invalid_json_raises_decode_error(self):
        with pytest.raises(json.JSONDecodeError):
            parse_json_object("not json")

"""Tests for the frontmatter format strategies."""

from __future__ import annotations

import pytest

from hugobros.content.formats import (
    HEADERLESS_YAML,
    JSON_OBJECT,
    STRATEGIES,
    TOML_BLOCK,
    YAML_BLOCK,
    decode_json_mapping,
    decode_toml_mapping,
    decode_yaml_mapping,
    find_object_end,
)
from hugobros.core.errors import DecodeError


class TestDecoders:
    def test_yaml_keeps_dates_as_text(self):
        data = decode_yaml_mapping("date: 2024-01-01\nupdated: 2024-01-02 10:00:00\n")
        assert data == {"date": "2024-01-01", "updated": "2024-01-02 10:00:00"}

    def test_yaml_empty_block_is_empty_mapping(self):
        assert decode_yaml_mapping("") == {}

    def test_yaml_scalar_rejected(self):
        with pytest.raises(DecodeError, match="not a mapping"):
            decode_yaml_mapping("just a string")

    def test_yaml_syntax_error(self):
        with pytest.raises(DecodeError, match="Invalid YAML"):
            decode_yaml_mapping("title: [unclosed")

    def test_yaml_preserves_key_order(self):
        data = decode_yaml_mapping("zeta: 1\nalpha: 2\nmid: 3\n")
        assert list(data) == ["zeta", "alpha", "mid"]

    def test_toml_dates_bridged_to_iso_text(self):
        data = decode_toml_mapping(
            'title = "T"\ndate = 2024-01-01T10:00:00\n[extra]\nwhen = 2024-02-03\n'
        )
        assert data["date"] == "2024-01-01T10:00:00"
        assert data["extra"] == {"when": "2024-02-03"}

    def test_toml_syntax_error(self):
        with pytest.raises(DecodeError, match="Invalid TOML"):
            decode_toml_mapping("title = = nope")

    def test_json_array_rejected(self):
        with pytest.raises(DecodeError):
            decode_json_mapping("[1, 2]")


class TestFindObjectEnd:
    def test_simple(self):
        assert find_object_end('{"a": 1} tail') == 7

    def test_nested(self):
        text = '{"a": {"b": {}}} rest'
        assert text[: find_object_end(text) + 1] == '{"a": {"b": {}}}'

    def test_braces_inside_strings_ignored(self):
        text = '{"a": "}{", "b": "\\"}"} after {x}'
        end = find_object_end(text)
        assert text[end + 1 :] == " after {x}"

    def test_unbalanced(self):
        assert find_object_end('{"a": {"b": 1}') is None


class TestStrategies:
    def test_order(self):
        assert [s.name for s in STRATEGIES] == ["yaml", "toml", "json", "headerless"]

    def test_yaml_precondition(self):
        assert YAML_BLOCK.matches("---\ntitle: x\n---\n")
        assert not YAML_BLOCK.matches("title: x\n---\n")

    def test_yaml_unterminated_block_fails(self):
        attempt = YAML_BLOCK.attempt("---\ntitle: x\n")
        assert not attempt.ok
        assert "Unterminated" in attempt.error

    def test_toml_block(self):
        attempt = TOML_BLOCK.attempt('+++\ntitle = "T"\n+++\n\nBody\n')
        assert attempt.ok
        assert attempt.mapping == {"title": "T"}
        assert attempt.body == "Body"

    def test_json_object_body_after_brace(self):
        attempt = JSON_OBJECT.attempt('  {"title": "J"}\n\nBody {with} braces\n')
        assert attempt.ok
        assert attempt.mapping == {"title": "J"}
        assert attempt.body == "Body {with} braces"

    def test_headerless_gate_rejects_prose(self):
        raw = "Some prose here.\n---\nMore text"
        assert HEADERLESS_YAML.matches(raw)
        assert not HEADERLESS_YAML.attempt(raw).ok

    def test_headerless_not_for_marked_input(self):
        assert not HEADERLESS_YAML.matches("---\ntitle: x\n---\n")
        assert not HEADERLESS_YAML.matches("+++\ntitle = 'x'\n+++\n")

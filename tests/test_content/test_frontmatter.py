"""Tests for frontmatter parse/serialize and backfill."""

from __future__ import annotations

from datetime import datetime

import pytest

from hugobros.content.frontmatter import (
    backfill,
    bind_frontmatter,
    extract_title_from_markdown,
    format_timestamp,
    parse,
    serialize,
    with_field,
)
from hugobros.content.model import UNTITLED, Document, Frontmatter
from hugobros.core.errors import DecodeError, ValidationError


# ---------------------------------------------------------------------------
# parse
# ---------------------------------------------------------------------------


class TestParse:
    def test_plain_text_gets_default_document(self):
        document, used_default = parse("Just text")
        assert used_default is True
        assert document.used_default_frontmatter is True
        assert document.frontmatter.title == UNTITLED
        assert document.frontmatter.date == ""
        assert document.frontmatter.tags == []
        assert document.frontmatter.categories == []
        assert document.frontmatter.custom_fields == {}
        assert document.body == "Just text"

    def test_yaml_block(self):
        document, used_default = parse(
            '---\ntitle: "Hello"\ndate: "2024-01-01 10:00:00"\n---\nBody'
        )
        assert used_default is False
        assert document.frontmatter.title == "Hello"
        assert document.frontmatter.date == "2024-01-01 10:00:00"
        assert document.body == "Body"

    def test_headerless_block(self):
        document, used_default = parse('title: "Alt"\ndate: "2024-01-02"\n---\nAlt body')
        assert used_default is False
        assert document.frontmatter.title == "Alt"
        assert document.frontmatter.date == "2024-01-02"
        assert document.body == "Alt body"

    def test_toml_block(self):
        document, _ = parse(
            '+++\ntitle = "Toml"\ndate = 2024-03-04T05:06:07\ntags = ["a", "b"]\n+++\n\nText\n'
        )
        assert document.frontmatter.title == "Toml"
        assert document.frontmatter.date == "2024-03-04T05:06:07"
        assert document.frontmatter.tags == ["a", "b"]
        assert document.body == "Text"

    def test_json_object_with_braces_in_body(self):
        raw = '{"title": "Json", "extra": {"nested": true}}\n\nfunc() { return {}; }\n'
        document, used_default = parse(raw)
        assert used_default is False
        assert document.frontmatter.title == "Json"
        assert document.frontmatter.custom_fields == {"extra": {"nested": True}}
        assert document.body == "func() { return {}; }"

    def test_yaml_block_wins_over_json_in_body(self):
        document, _ = parse('---\ntitle: A\n---\n{"title": "B"}')
        assert document.frontmatter.title == "A"
        assert document.body == '{"title": "B"}'

    def test_unbound_title_keeps_sentinel(self):
        document, used_default = parse("---\ndate: 2024-01-01\n---\nBody")
        assert used_default is False
        assert document.frontmatter.title == UNTITLED

    def test_type_mismatch_falls_through_to_default(self):
        raw = "---\ntitle: [a, b]\n---\nBody"
        document, used_default = parse(raw)
        assert used_default is True
        assert document.body == raw

    def test_type_mismatch_in_flag(self):
        _, used_default = parse('---\ntitle: T\ndraft: "sometimes"\n---\n')
        assert used_default is True

    def test_invalid_yaml_falls_through(self):
        raw = "---\ntitle: [unclosed\n---\nBody"
        document, used_default = parse(raw)
        assert used_default is True
        assert document.frontmatter.title == UNTITLED

    def test_null_lists_become_empty(self):
        document, _ = parse("---\ntitle: T\ntags:\ncategories: null\n---\n")
        assert document.frontmatter.tags == []
        assert document.frontmatter.categories == []

    def test_known_and_custom_fields_kept_apart(self):
        document, _ = parse(
            "---\ntitle: T\nzeta: 1\ndraft: true\nseries: [x]\nalpha: {k: v}\n---\n"
        )
        fm = document.frontmatter
        assert fm.draft is True
        assert "draft" not in fm.custom_fields
        assert "title" not in fm.custom_fields
        assert list(fm.custom_fields) == ["zeta", "series", "alpha"]
        assert fm.custom_fields["alpha"] == {"k": "v"}

    def test_optional_fields(self):
        document, _ = parse(
            "---\ntitle: T\ncomments: false\nlayout: wide\nlist_image: /images/a.png\n---\n"
        )
        fm = document.frontmatter
        assert fm.comments is False
        assert fm.layout == "wide"
        assert fm.list_image == "/images/a.png"
        assert fm.description is None


# ---------------------------------------------------------------------------
# serialize
# ---------------------------------------------------------------------------


class TestSerialize:
    def test_layout(self):
        fm = Frontmatter(title="Hello", date="2024-01-01 10:00:00", tags=["x"])
        text = serialize(Document(frontmatter=fm, body="Body"))
        assert text.startswith("---\ntitle: Hello\n")
        assert text.endswith("---\n\nBody")

    def test_declared_order_then_custom_fields(self):
        fm = Frontmatter(title="T", date="d", draft=True, description="desc")
        fm.custom_fields["zzz"] = 1
        fm.custom_fields["aaa"] = 2
        text = serialize(Document(frontmatter=fm))
        keys = [line.split(":")[0] for line in text.splitlines() if ":" in line]
        assert keys == ["title", "date", "tags", "categories", "description", "draft", "zzz", "aaa"]

    def test_absent_optionals_omitted(self):
        text = serialize(Document(frontmatter=Frontmatter(title="T")))
        assert "layout" not in text
        assert "draft" not in text

    def test_unicode_kept(self):
        text = serialize(Document(frontmatter=Frontmatter(title="Привет")))
        assert "Привет" in text

    def test_dash_runs_escaped_in_values(self):
        fm = Frontmatter(title="a ----- b", custom_fields={"note": "x---y"})
        text = serialize(Document(frontmatter=fm, body="text"))
        block = text.split("\n---\n", 1)[0]
        assert "---" not in block[3:]
        assert parse(text).document.frontmatter == fm


@pytest.mark.parametrize(
    "raw",
    [
        '---\ntitle: "Hello"\ndate: "2024-01-01 10:00:00"\n---\nBody',
        "---\ntitle: T\ntags: [a, b]\ncomments: true\nseries: {name: s, part: 2}\n---\n\n# Head\n\ntext\n",
        '+++\ntitle = "Toml"\ndate = 2024-01-01T10:00:00\nweight = 1.5\n+++\nBody',
        '{"title": "Json", "draft": false, "list": [1, 2]}\nBody',
        'title: "Alt"\ndate: "2024-01-02"\n---\nAlt body',
        '+++\ntitle = "Before --- after"\n+++\nBody',
        '{"title": "T", "note": "a---b"}\nBody',
        'title: "x---y"\n---\nBody',
    ],
)
def test_round_trip_is_stable(raw):
    document, used_default = parse(raw)
    assert used_default is False

    once = serialize(document)
    reparsed, _ = parse(once)
    assert reparsed == document
    assert serialize(reparsed) == once


# ---------------------------------------------------------------------------
# binding helpers
# ---------------------------------------------------------------------------


class TestBinding:
    def test_bind_rejects_non_text_title(self):
        with pytest.raises(DecodeError, match="title"):
            bind_frontmatter({"title": 5})

    def test_bind_rejects_mixed_tags(self):
        with pytest.raises(DecodeError, match="tags"):
            bind_frontmatter({"tags": ["a", 1]})

    def test_with_field_custom(self):
        fm = with_field(Frontmatter(title="T"), "rating", 5)
        assert fm.custom_fields == {"rating": 5}
        assert fm.title == "T"

    def test_with_field_known(self):
        fm = with_field(Frontmatter(title="T"), "draft", True)
        assert fm.draft is True

    def test_with_field_wrong_type(self):
        with pytest.raises(ValidationError, match="draft"):
            with_field(Frontmatter(), "draft", "maybe")


# ---------------------------------------------------------------------------
# backfill
# ---------------------------------------------------------------------------


class TestBackfill:
    def test_extract_title_from_markdown(self):
        assert extract_title_from_markdown("intro\n# First\n# Second") == "First"
        assert extract_title_from_markdown("## Sub only") is None
        assert extract_title_from_markdown("") is None

    def test_title_from_heading(self):
        document, _ = parse("---\ndate: d\n---\n# Real Title\n\ntext")
        backfill(document, "file-stem", 0)
        assert document.frontmatter.title == "Real Title"

    def test_title_from_stem(self):
        document, _ = parse("no heading at all")
        backfill(document, "file-stem", 0)
        assert document.frontmatter.title == "file-stem"

    def test_existing_title_kept(self):
        document, _ = parse("---\ntitle: Set\ndate: d\n---\n# Heading")
        backfill(document, "stem", 0)
        assert document.frontmatter.title == "Set"

    def test_date_from_mtime_when_default(self):
        mtime = datetime(2023, 5, 6, 7, 8, 9).timestamp()
        document, _ = parse("plain")
        backfill(document, "stem", mtime)
        assert document.frontmatter.date == "2023-05-06 07:08:09"

    def test_date_from_mtime_when_empty(self):
        mtime = datetime(2023, 5, 6, 7, 8, 9).timestamp()
        document, _ = parse('---\ntitle: T\ndate: ""\n---\n')
        backfill(document, "stem", mtime)
        assert document.frontmatter.date == format_timestamp(mtime)

    def test_existing_date_kept(self):
        document, _ = parse("---\ntitle: T\ndate: 2020-01-01\n---\n")
        backfill(document, "stem", 0)
        assert document.frontmatter.date == "2020-01-01"

"""Tests for the frontmatter field configuration."""

from __future__ import annotations

import json

import pytest

from hugobros.content.schema import (
    FieldConfig,
    FrontmatterConfig,
    format_label,
    generate_frontmatter_config,
    infer_value_type,
    load_frontmatter_config,
    save_frontmatter_config,
)
from hugobros.core.errors import ValidationError


@pytest.mark.parametrize(
    "value,expected",
    [
        (None, None),
        ("", None),
        (True, "boolean"),
        (3, "number"),
        (2.5, "number"),
        (["a"], "array"),
        ({"k": "v"}, "object"),
        ("/images/cover.jpg", "image"),
        ("thumb.webp", "image"),
        ("2024-01-01 10:00:00", "datetime"),
        ("2024-01-01T10:00:00Z", "datetime"),
        ("2024-01-01", "date"),
        ("line one\nline two", "text"),
        ("plain words", "string"),
    ],
)
def test_infer_value_type(value, expected):
    assert infer_value_type(value) == expected


@pytest.mark.parametrize(
    "name,label",
    [
        ("list_image", "List Image"),
        ("hero-banner", "Hero Banner"),
        ("coverImage", "Cover Image"),
        ("series", "Series"),
    ],
)
def test_format_label(name, label):
    assert format_label(name) == label


class TestLoadSave:
    def test_default_when_missing(self, site_root):
        config = load_frontmatter_config(site_root)
        assert config.is_default
        assert config.custom_fields == []
        assert config.to_dict()["version"] == "1.0"

    def test_save_then_load(self, site_root):
        config = FrontmatterConfig(
            preview_image_field="cover",
            custom_fields=[FieldConfig(name="cover", type="image", label="Cover")],
        )
        path = save_frontmatter_config(site_root, config)
        assert path == site_root / ".hugobros" / "frontmatter-config.json"

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["previewImageField"] == "cover"
        assert data["customFields"][0] == {"name": "cover", "label": "Cover", "type": "image"}

        loaded = load_frontmatter_config(site_root)
        assert not loaded.is_default
        assert loaded.preview_image_field == "cover"
        assert loaded.custom_fields[0].type == "image"

    def test_invalid_json(self, site_root, write_file):
        write_file(site_root / ".hugobros" / "frontmatter-config.json", "{nope")
        with pytest.raises(ValidationError, match="Failed to parse"):
            load_frontmatter_config(site_root)

    def test_missing_keys(self, site_root, write_file):
        write_file(
            site_root / ".hugobros" / "frontmatter-config.json",
            json.dumps({"customFields": [{"name": "x"}]}),
        )
        with pytest.raises(ValidationError, match="Invalid frontmatter config"):
            load_frontmatter_config(site_root)


class TestGenerate:
    def test_no_posts(self, site_root):
        config = generate_frontmatter_config(site_root)
        assert config.custom_fields == []
        assert config.field_groups == []
        assert config.preview_image_field is None

    def test_infers_fields_from_posts(self, site_root, create_content_file):
        create_content_file(
            "content/posts/a.md",
            extra_fm={
                "cover": "/images/a.png",
                "cover_alt": "An image",
                "rating": 4,
                "series": "intro",
            },
        )
        create_content_file(
            "content/posts/b.md",
            extra_fm={"cover": "/images/b.png", "rating": 5, "featured": True},
        )
        # drafts are not inspected
        create_content_file("content/drafts/c.md", extra_fm={"secret": "x"})

        config = generate_frontmatter_config(site_root)
        by_name = {f.name: f for f in config.custom_fields}

        assert [f.name for f in config.custom_fields] == sorted(by_name)
        assert "secret" not in by_name
        assert "title" not in by_name
        assert by_name["cover"].type == "image"
        assert by_name["cover"].label == "Cover"
        assert by_name["rating"].type == "number"
        assert by_name["featured"].type == "boolean"
        assert by_name["series"].type == "string"

        assert config.preview_image_field == "cover"
        assert len(config.field_groups) == 1
        assert config.field_groups[0].fields == ["cover", "cover_alt"]

    def test_prefers_known_preview_field(self, site_root, create_content_file):
        create_content_file(
            "content/posts/a.md",
            extra_fm={"banner": "/images/x.png", "thumbnail": "/images/y.png"},
        )
        assert generate_frontmatter_config(site_root).preview_image_field == "thumbnail"

    def test_non_text_keys(self, site_root, write_file):
        write_file(
            site_root / "content" / "posts" / "a.md",
            "---\ntitle: A\n2024: yes\ntrue: x\nfoo: bar\n---\n\nBody\n",
        )
        config = generate_frontmatter_config(site_root)
        by_name = {f.name: f for f in config.custom_fields}

        assert sorted(by_name) == ["2024", "True", "foo"]
        assert by_name["2024"].label == "2024"
        assert by_name["2024"].type == "boolean"

    def test_fixed_image_fields_not_preview_candidates(self, site_root, create_content_file):
        create_content_file(
            "content/posts/a.md",
            extra_fm={"main_image": "/images/m.png", "hero": "/images/h.png"},
        )
        config = generate_frontmatter_config(site_root)
        assert "main_image" not in {f.name for f in config.custom_fields}
        assert config.preview_image_field == "hero"

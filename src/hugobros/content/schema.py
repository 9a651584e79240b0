"""
Frontmatter field configuration.

Describes the custom (non-schema) frontmatter fields a site uses so editors
can render inputs for them. The config lives in
``.hugobros/frontmatter-config.json`` and can be generated by inspecting the
open field bags of existing posts.
"""

from __future__ import annotations

import json
import logging
import re
from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any

from hugobros.content.scanner import ContentScanner
from hugobros.core.config import SiteLayout
from hugobros.core.errors import ContentIOError, ValidationError

logger = logging.getLogger(__name__)

SCHEMA_VERSION = "1.0"

PREFERRED_PREVIEW_FIELDS = ("cover", "thumbnail", "banner", "image")
IMAGE_SUFFIXES = (".png", ".jpg", ".jpeg", ".gif", ".webp", ".svg")


@dataclass
class FieldUi:
    placeholder: str | None = None
    rows: int | None = None


@dataclass
class FieldConfig:
    name: str
    type: str = "string"
    label: str | None = None
    description: str | None = None
    ui: FieldUi | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name, "label": self.label, "type": self.type}
        if self.description is not None:
            data["description"] = self.description
        if self.ui is not None:
            data["ui"] = {"placeholder": self.ui.placeholder, "rows": self.ui.rows}
        return data


@dataclass
class FieldGroup:
    name: str
    fields: list[str] = field(default_factory=list)
    label: str | None = None
    collapsed: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "label": self.label,
            "fields": list(self.fields),
            "collapsed": self.collapsed,
        }


@dataclass
class FrontmatterConfig:
    version: str = SCHEMA_VERSION
    preview_image_field: str | None = None
    custom_fields: list[FieldConfig] = field(default_factory=list)
    field_groups: list[FieldGroup] = field(default_factory=list)
    is_default: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "previewImageField": self.preview_image_field,
            "customFields": [f.to_dict() for f in self.custom_fields],
            "fieldGroups": [g.to_dict() for g in self.field_groups],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FrontmatterConfig:
        """Build a config from its JSON form.

        Raises:
            ValidationError: If required keys are missing or mistyped
        """
        try:
            custom_fields = []
            for raw in data.get("customFields", []):
                ui = raw.get("ui")
                custom_fields.append(
                    FieldConfig(
                        name=raw["name"],
                        type=raw["type"],
                        label=raw.get("label"),
                        description=raw.get("description"),
                        ui=FieldUi(ui.get("placeholder"), ui.get("rows")) if ui else None,
                    )
                )
            field_groups = [
                FieldGroup(
                    name=raw["name"],
                    fields=list(raw["fields"]),
                    label=raw.get("label"),
                    collapsed=raw.get("collapsed"),
                )
                for raw in data.get("fieldGroups", [])
            ]
            return cls(
                version=str(data["version"]),
                preview_image_field=data.get("previewImageField"),
                custom_fields=custom_fields,
                field_groups=field_groups,
                is_default=False,
            )
        except (KeyError, TypeError, AttributeError) as e:
            raise ValidationError(f"Invalid frontmatter config: {e}") from e


# ---------------------------------------------------------------------------
# Load / save
# ---------------------------------------------------------------------------


def load_frontmatter_config(site_root: Path) -> FrontmatterConfig:
    """Load the site's field config, or the default if none is saved.

    Raises:
        ContentIOError: If the file exists but can't be read
        ValidationError: If the file isn't a valid config
    """
    path = SiteLayout(site_root).schema_file
    if not path.exists():
        return FrontmatterConfig()
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ContentIOError(f"Failed to read frontmatter config: {e}", path=path) from e
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Failed to parse frontmatter config: {e}", path=path) from e
    if not isinstance(data, dict):
        raise ValidationError("Frontmatter config must be a JSON object", path=path)
    return FrontmatterConfig.from_dict(data)


def save_frontmatter_config(site_root: Path, config: FrontmatterConfig) -> Path:
    """Write the field config as pretty JSON and return its path."""
    path = SiteLayout(site_root).schema_file
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(config.to_dict(), indent=2) + "\n", encoding="utf-8")
    except OSError as e:
        raise ContentIOError(f"Failed to write frontmatter config: {e}", path=path) from e
    return path


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------


def _looks_like_image(value: str) -> bool:
    lower = value.lower()
    return "/images/" in lower or lower.endswith(IMAGE_SUFFIXES)


def _looks_like_datetime(value: str) -> bool:
    for fmt in ("%Y-%m-%d %H:%M:%S", "%Y-%m-%d %H:%M"):
        try:
            datetime.strptime(value, fmt)
            return True
        except ValueError:
            pass
    if "T" not in value:
        return False
    try:
        datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return False
    return True


def _looks_like_date(value: str) -> bool:
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return len(value) == 10


def infer_value_type(value: Any) -> str | None:
    """Guess an editor field type for a frontmatter value.

    Returns:
        Type name, or None when the value carries no type information
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    if isinstance(value, (datetime, date)):
        return "datetime" if isinstance(value, datetime) else "date"
    text = str(value)
    if not text.strip():
        return None
    if _looks_like_image(text):
        return "image"
    if _looks_like_datetime(text):
        return "datetime"
    if _looks_like_date(text):
        return "date"
    if "\n" in text:
        return "text"
    return "string"


def format_label(name: str) -> str:
    """``list_image`` / ``list-image`` / ``listImage`` -> ``List Image``."""
    spaced = re.sub(r"[_-]+", " ", name)
    spaced = re.sub(r"(?<=[a-z])(?=[A-Z])", " ", spaced)
    return " ".join(word[:1].upper() + word[1:] for word in spaced.split())


def _pick_preview_field(image_fields: list[str], totals: Counter) -> str | None:
    if not image_fields:
        return None
    for candidate in PREFERRED_PREVIEW_FIELDS:
        if candidate in image_fields:
            return candidate
    best = image_fields[0]
    for name in image_fields[1:]:
        if totals[name] > totals[best]:
            best = name
    return best


def generate_frontmatter_config(site_root: Path) -> FrontmatterConfig:
    """Infer a field config from the custom fields used across posts."""
    scanner = ContentScanner(site_root)
    totals: Counter = Counter()
    type_votes: dict[str, Counter] = {}

    for item in scanner.list_posts():
        for key, value in item.frontmatter.custom_fields.items():
            # YAML allows non-text keys such as 2024 or true
            name = str(key)
            totals[name] += 1
            votes = type_votes.setdefault(name, Counter())
            field_type = infer_value_type(value)
            if field_type is not None:
                votes[field_type] += 1

    custom_fields = sorted(
        (
            FieldConfig(
                name=name,
                label=format_label(name),
                # most_common keeps first-seen order on ties
                type=type_votes[name].most_common(1)[0][0] if type_votes[name] else "string",
            )
            for name in totals
        ),
        key=lambda f: f.name,
    )

    image_fields = [f.name for f in custom_fields if f.type == "image"]
    field_groups: list[FieldGroup] = []
    if image_fields:
        grouped: list[str] = []
        for name in image_fields:
            grouped.append(name)
            for alt in (f"{name}_alt", f"{name}Alt"):
                if alt in totals:
                    grouped.append(alt)
                    break
        field_groups.append(FieldGroup(name="images", label="Images", fields=grouped, collapsed=False))

    logger.debug("Inferred %d custom fields from posts", len(custom_fields))
    return FrontmatterConfig(
        preview_image_field=_pick_preview_field(image_fields, totals),
        custom_fields=custom_fields,
        field_groups=field_groups,
        is_default=False,
    )

"""
Data model for frontmatter documents and classified content.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

UNTITLED = "Untitled Post"

# Fixed-schema keys in serialization order
LIST_FIELDS = ("tags", "categories")
BOOL_FIELDS = ("comments", "draft")
OPTIONAL_TEXT_FIELDS = (
    "updated",
    "layout",
    "permalink",
    "description",
    "list_image",
    "list_image_alt",
    "main_image",
    "main_image_alt",
)
FIELD_ORDER = (
    "title",
    "date",
    "updated",
    "tags",
    "categories",
    "comments",
    "layout",
    "permalink",
    "description",
    "draft",
    "list_image",
    "list_image_alt",
    "main_image",
    "main_image_alt",
)
KNOWN_FIELDS = frozenset(FIELD_ORDER)

_MISSING = object()


@dataclass
class Frontmatter:
    """Known frontmatter fields plus an open bag for everything else.

    A key in KNOWN_FIELDS never appears in custom_fields.
    """

    title: str = UNTITLED
    date: str = ""
    tags: list[str] = field(default_factory=list)
    categories: list[str] = field(default_factory=list)
    updated: str | None = None
    comments: bool | None = None
    layout: str | None = None
    permalink: str | None = None
    description: str | None = None
    draft: bool | None = None
    list_image: str | None = None
    list_image_alt: str | None = None
    main_image: str | None = None
    main_image_alt: str | None = None
    custom_fields: dict[str, Any] = field(default_factory=dict)

    @property
    def is_draft(self) -> bool:
        return bool(self.draft)

    def unset(self, key: str) -> bool:
        """Clear a field. Returns False if it wasn't set."""
        if key in KNOWN_FIELDS:
            if key == "title":
                self.title = UNTITLED
            elif key == "date":
                if not self.date:
                    return False
                self.date = ""
            elif key in LIST_FIELDS:
                if not getattr(self, key):
                    return False
                setattr(self, key, [])
            else:
                if getattr(self, key) is None:
                    return False
                setattr(self, key, None)
            return True
        return self.custom_fields.pop(key, _MISSING) is not _MISSING

    def to_mapping(self) -> dict[str, Any]:
        """Ordered mapping of the fields that should be written out."""
        data: dict[str, Any] = {}
        for key in FIELD_ORDER:
            value = getattr(self, key)
            if key in LIST_FIELDS:
                data[key] = list(value)
            elif key in ("title", "date"):
                data[key] = value
            elif value is not None:
                data[key] = value
        for key, value in self.custom_fields.items():
            data[key] = value
        return data


@dataclass
class Document:
    """Frontmatter plus the body text that follows it."""

    frontmatter: Frontmatter = field(default_factory=Frontmatter)
    body: str = ""
    used_default_frontmatter: bool = False


class ContentKind(str, Enum):
    """Logical content categories."""

    POST = "post"
    PAGE = "page"
    DRAFT = "draft"


@dataclass
class ContentItem:
    """A classified document with identity and filesystem location."""

    id: str
    kind: ContentKind
    frontmatter: Frontmatter
    body: str
    file_path: Path
    created_at: int
    modified_at: int
    used_default_frontmatter: bool = False

    @property
    def title(self) -> str:
        return self.frontmatter.title

    @property
    def date(self) -> str:
        return self.frontmatter.date

    @property
    def tags(self) -> list[str]:
        return list(self.frontmatter.tags)

    @property
    def categories(self) -> list[str]:
        return list(self.frontmatter.categories)

    @property
    def is_draft(self) -> bool:
        return self.frontmatter.is_draft

    @property
    def document(self) -> Document:
        return Document(
            frontmatter=self.frontmatter,
            body=self.body,
            used_default_frontmatter=self.used_default_frontmatter,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "kind": self.kind.value,
            "title": self.title,
            "date": self.date,
            "frontmatter": self.frontmatter.to_mapping(),
            "content": self.body,
            "file_path": str(self.file_path),
            "created_at": self.created_at,
            "modified_at": self.modified_at,
        }


@dataclass
class ImageInfo:
    """A static image asset."""

    filename: str
    path: str
    full_path: Path
    url: str
    size: int
    created_at: int
    width: int | None = None
    height: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "filename": self.filename,
            "path": self.path,
            "full_path": str(self.full_path),
            "url": self.url,
            "size": self.size,
            "width": self.width,
            "height": self.height,
            "created_at": self.created_at,
        }

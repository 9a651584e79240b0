"""
Frontmatter parsing and serialization.

``parse`` never fails: it walks the format strategies in order and falls
back to a default document when none of them applies. ``serialize`` always
writes the ``---`` YAML form, so a parse/serialize cycle normalizes any
supported input to that form.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any, NamedTuple

import yaml

from hugobros.content.formats import STRATEGIES, YAML_MARKER, FormatStrategy
from hugobros.content.model import (
    BOOL_FIELDS,
    KNOWN_FIELDS,
    LIST_FIELDS,
    OPTIONAL_TEXT_FIELDS,
    UNTITLED,
    Document,
    Frontmatter,
)
from hugobros.core.config import DATE_FORMAT
from hugobros.core.errors import DecodeError, ValidationError

logger = logging.getLogger(__name__)


class ParseResult(NamedTuple):
    document: Document
    used_default_frontmatter: bool


def _text(key: str, value: Any) -> str:
    if not isinstance(value, str):
        raise DecodeError(f"'{key}' must be text, got {type(value).__name__}")
    return value


def _text_list(key: str, value: Any) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise DecodeError(f"'{key}' must be a list of text values")
    return list(value)


def _flag(key: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise DecodeError(f"'{key}' must be true or false, got {value!r}")
    return value


def bind_frontmatter(mapping: Mapping[str, Any]) -> Frontmatter:
    """Bind a decoded mapping to the Frontmatter schema.

    Known keys populate the typed fields; everything else goes into
    custom_fields untouched, in source order.

    Raises:
        DecodeError: If a known key holds a value of the wrong type
    """
    frontmatter = Frontmatter()
    for key, value in mapping.items():
        if key not in KNOWN_FIELDS:
            frontmatter.custom_fields[key] = value
            continue
        if key in LIST_FIELDS:
            setattr(frontmatter, key, _text_list(key, value))
        elif value is None:
            # null reads the same as absent
            continue
        elif key in BOOL_FIELDS:
            setattr(frontmatter, key, _flag(key, value))
        elif key in OPTIONAL_TEXT_FIELDS or key in ("title", "date"):
            setattr(frontmatter, key, _text(key, value))
    return frontmatter


def with_field(frontmatter: Frontmatter, key: str, value: Any) -> Frontmatter:
    """Return a copy of frontmatter with one field replaced.

    The result goes through the same binding as parsed input, so a value of
    the wrong type for a known field is rejected.

    Raises:
        ValidationError: If the value doesn't fit the field
    """
    mapping = frontmatter.to_mapping()
    mapping[key] = value
    try:
        return bind_frontmatter(mapping)
    except DecodeError as e:
        raise ValidationError(e.message) from e


def default_document(raw: str) -> Document:
    """The document used when no frontmatter block is recognized."""
    return Document(frontmatter=Frontmatter(), body=raw, used_default_frontmatter=True)


def parse(raw: str, strategies: Iterable[FormatStrategy] = STRATEGIES) -> ParseResult:
    """Split raw text into frontmatter and body.

    The first strategy whose precondition matches and whose block decodes
    and binds cleanly wins, even if a later one would also match.

    Args:
        raw: Full file contents
        strategies: Ordered strategies to try

    Returns:
        ParseResult of (document, used_default_frontmatter)
    """
    for strategy in strategies:
        if not strategy.matches(raw):
            continue
        attempt = strategy.attempt(raw)
        if not attempt.ok:
            continue
        try:
            frontmatter = bind_frontmatter(attempt.mapping or {})
        except DecodeError as e:
            logger.debug("%s frontmatter rejected: %s", strategy.name, e.message)
            continue
        document = Document(frontmatter=frontmatter, body=attempt.body)
        return ParseResult(document, False)

    return ParseResult(default_document(raw), True)


class FrontmatterDumper(yaml.SafeDumper):
    """SafeDumper that double-quotes any string holding a block marker."""


def _represent_str(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    style = '"' if YAML_MARKER in data else None
    return dumper.represent_scalar("tag:yaml.org,2002:str", data, style=style)


FrontmatterDumper.add_representer(str, _represent_str)

# Dash runs only survive dumping inside double-quoted scalars
_DASH_RUN = re.compile(r"-{3,}")


def dump_frontmatter(frontmatter: Frontmatter) -> str:
    """Render frontmatter fields as a YAML mapping (no delimiters).

    Runs of three or more dashes inside values are written as ``\\x2D``
    escapes so a re-parse splits on the real marker lines only.
    """
    text = yaml.dump(
        frontmatter.to_mapping(),
        Dumper=FrontmatterDumper,
        default_flow_style=False,
        allow_unicode=True,
        sort_keys=False,
        width=120,
    )
    return _DASH_RUN.sub(lambda m: "\\x2D" * len(m.group()), text)


def serialize(document: Document) -> str:
    """Render a document in the canonical ``---`` YAML form."""
    return f"---\n{dump_frontmatter(document.frontmatter)}---\n\n{document.body}"


# ---------------------------------------------------------------------------
# Backfill used when building content items from files
# ---------------------------------------------------------------------------


def extract_title_from_markdown(body: str) -> str | None:
    """Return the text of the first ``# `` heading in the body, if any."""
    for line in body.splitlines():
        stripped = line.strip()
        if stripped.startswith("# "):
            title = stripped.lstrip("#").strip()
            if title:
                return title
    return None


def format_timestamp(timestamp: float) -> str:
    """Render a Unix timestamp in the site's canonical local date format."""
    return datetime.fromtimestamp(timestamp).strftime(DATE_FORMAT)


def backfill(document: Document, stem: str, modified_at: float) -> Document:
    """Fill in a missing title and date from the body and file metadata.

    Args:
        document: Parsed document (mutated in place)
        stem: File name without extension, the last-resort title
        modified_at: File modification time

    Returns:
        The same document, for chaining
    """
    frontmatter = document.frontmatter
    if frontmatter.title == UNTITLED:
        frontmatter.title = extract_title_from_markdown(document.body) or stem
    if document.used_default_frontmatter or not frontmatter.date:
        frontmatter.date = format_timestamp(modified_at)
    return document

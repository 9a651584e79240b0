"""
Frontmatter format detection.

Each supported convention is a FormatStrategy: a cheap structural check on
the raw text plus an extract step that splits off the frontmatter block and
decodes it into a plain mapping. Strategies report failure through an
Attempt instead of raising, so the caller can walk them in order and take the
first one that works.

Supported conventions, in detection order:
- ``---`` YAML block
- ``+++`` TOML block
- ``{ ... }`` JSON object followed by the body
- headerless YAML ending at a ``---`` line
"""

from __future__ import annotations

import datetime as dt
import json
import logging
import tomllib
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import yaml

from hugobros.core.errors import DecodeError

logger = logging.getLogger(__name__)

YAML_MARKER = "---"
TOML_MARKER = "+++"
HEADERLESS_MARKER = "\n---"

# Tokens a headerless block must contain to be taken for frontmatter
HEADERLESS_GATE = ("title:", "date:")

_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"


class FrontmatterLoader(yaml.SafeLoader):
    """SafeLoader that keeps timestamps as the text they were written as."""


FrontmatterLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _TIMESTAMP_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


@dataclass(frozen=True)
class Attempt:
    """Outcome of running one strategy against raw text."""

    strategy: str
    mapping: dict[str, Any] | None = None
    body: str = ""
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.mapping is not None


@dataclass(frozen=True)
class FormatStrategy:
    """A named (precondition, extract) pair."""

    name: str
    matches: Callable[[str], bool]
    extract: Callable[[str], tuple[dict[str, Any], str]]

    def attempt(self, raw: str) -> Attempt:
        """Run the extract step, folding DecodeError into a failed Attempt."""
        try:
            mapping, body = self.extract(raw)
        except DecodeError as e:
            logger.debug("%s frontmatter rejected: %s", self.name, e.message)
            return Attempt(strategy=self.name, error=e.message)
        return Attempt(strategy=self.name, mapping=mapping, body=body)


# ---------------------------------------------------------------------------
# Mapping decoders
# ---------------------------------------------------------------------------


def _require_mapping(data: Any, syntax: str) -> dict[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise DecodeError(f"{syntax} frontmatter is a {type(data).__name__}, not a mapping")
    return data


def decode_yaml_mapping(text: str) -> dict[str, Any]:
    """Decode YAML text into a mapping.

    Raises:
        DecodeError: If the text is not valid YAML or not a mapping
    """
    try:
        data = yaml.load(text, Loader=FrontmatterLoader)  # noqa: S506 - SafeLoader subclass
    except yaml.YAMLError as e:
        raise DecodeError(f"Invalid YAML: {e}") from e
    return _require_mapping(data, "YAML")


def _bridge_toml_value(value: Any) -> Any:
    """Convert TOML-only value types into the YAML-equivalent shapes."""
    if isinstance(value, (dt.datetime, dt.date, dt.time)):
        return value.isoformat()
    if isinstance(value, dict):
        return {key: _bridge_toml_value(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_bridge_toml_value(item) for item in value]
    return value


def decode_toml_mapping(text: str) -> dict[str, Any]:
    """Decode TOML text into a mapping with dates rendered as ISO text.

    Raises:
        DecodeError: If the text is not valid TOML
    """
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise DecodeError(f"Invalid TOML: {e}") from e
    return _bridge_toml_value(data)


def decode_json_mapping(text: str) -> dict[str, Any]:
    """Decode a JSON object literal into a mapping.

    Raises:
        DecodeError: If the text is not valid JSON or not an object
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise DecodeError(f"Invalid JSON: {e}") from e
    return _require_mapping(data, "JSON")


def find_object_end(text: str, start: int = 0) -> int | None:
    """Index of the brace closing the object that opens at ``start``.

    Braces inside JSON string literals are ignored.

    Returns:
        Index of the matching ``}``, or None if the object never closes
    """
    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return index
    return None


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------


def _split_delimited(raw: str, marker: str) -> tuple[str, str]:
    parts = raw.split(marker, 2)
    if len(parts) < 3:
        raise DecodeError(f"Unterminated {marker} block")
    return parts[1].strip(), parts[2].strip()


def _extract_yaml_block(raw: str) -> tuple[dict[str, Any], str]:
    block, body = _split_delimited(raw, YAML_MARKER)
    return decode_yaml_mapping(block), body


def _extract_toml_block(raw: str) -> tuple[dict[str, Any], str]:
    block, body = _split_delimited(raw, TOML_MARKER)
    return decode_toml_mapping(block), body


def _extract_json_object(raw: str) -> tuple[dict[str, Any], str]:
    text = raw.lstrip()
    end = find_object_end(text)
    if end is None:
        raise DecodeError("Unbalanced braces in JSON frontmatter")
    return decode_json_mapping(text[: end + 1]), text[end + 1 :].strip()


def _has_headerless_block(raw: str) -> bool:
    return (
        not raw.startswith(YAML_MARKER)
        and not raw.startswith(TOML_MARKER)
        and HEADERLESS_MARKER in raw
    )


def _extract_headerless(raw: str) -> tuple[dict[str, Any], str]:
    index = raw.find(HEADERLESS_MARKER)
    candidate = raw[:index]
    if not any(token in candidate for token in HEADERLESS_GATE):
        raise DecodeError("Text before --- does not look like frontmatter")
    body = raw[index + len(HEADERLESS_MARKER) :].strip()
    return decode_yaml_mapping(candidate), body


YAML_BLOCK = FormatStrategy(
    name="yaml",
    matches=lambda raw: raw.startswith(YAML_MARKER),
    extract=_extract_yaml_block,
)

TOML_BLOCK = FormatStrategy(
    name="toml",
    matches=lambda raw: raw.startswith(TOML_MARKER),
    extract=_extract_toml_block,
)

JSON_OBJECT = FormatStrategy(
    name="json",
    matches=lambda raw: raw.lstrip().startswith("{"),
    extract=_extract_json_object,
)

HEADERLESS_YAML = FormatStrategy(
    name="headerless",
    matches=_has_headerless_block,
    extract=_extract_headerless,
)

STRATEGIES: tuple[FormatStrategy, ...] = (
    YAML_BLOCK,
    TOML_BLOCK,
    JSON_OBJECT,
    HEADERLESS_YAML,
)

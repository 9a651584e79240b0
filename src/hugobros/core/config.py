"""
Configuration and path management.

Provides site root detection, the Hugo project layout, and site config loading.

Resolution order for site root:
  1. HUGOBROS_SITE_ROOT environment variable (highest priority)
  2. Walk up from cwd looking for a Hugo config file
  3. Global config file (~/.config/hugobros/config.yaml) site_root key
"""

from __future__ import annotations

import json
import os
import tomllib
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from hugobros.core.errors import ContentIOError, ValidationError

CONFIG_CANDIDATES = (
    "hugo.toml",
    "hugo.yaml",
    "hugo.yml",
    "hugo.json",
    "config.toml",
    "config.yaml",
    "config.yml",
    "config.json",
)

# Nested location used by Hugo's configuration directory layout
DEFAULT_CONFIG_DIR = Path("config") / "_default"

CONTENT_DIR = "content"
POSTS_DIR_NAMES = ("posts", "post")
DRAFTS_DIR = "drafts"
STATIC_DIR = "static"

INDEX_FILENAMES = ("index.md", "_index.md")
MARKDOWN_SUFFIX = ".md"

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class SiteLayout:
    """Maps a Hugo project root to its concrete directories.

    Directory lookups hit the filesystem on every call, so the layout always
    reflects the current state of the tree.
    """

    def __init__(self, root: Path):
        self.root = Path(root)

    def find_config_path(self) -> Path | None:
        """Return the first existing config file, or None.

        Candidates are tried at the root first, then under config/_default/.
        """
        for base in (self.root, self.root / DEFAULT_CONFIG_DIR):
            for candidate in CONFIG_CANDIDATES:
                path = base / candidate
                if path.is_file():
                    return path
        return None

    @property
    def content_dir(self) -> Path:
        return self.root / CONTENT_DIR

    @property
    def posts_dir(self) -> Path:
        """Prefer content/posts, then content/post, then the content root."""
        for name in POSTS_DIR_NAMES:
            candidate = self.content_dir / name
            if candidate.is_dir():
                return candidate
        return self.content_dir

    @property
    def pages_dir(self) -> Path:
        # Pages are told apart by filename, not by a dedicated directory
        return self.content_dir

    @property
    def drafts_dir(self) -> Path:
        return self.content_dir / DRAFTS_DIR

    @property
    def static_dir(self) -> Path:
        return self.root / STATIC_DIR

    @property
    def schema_file(self) -> Path:
        return self.root / ".hugobros" / "frontmatter-config.json"

    def validate(self) -> None:
        """Check that the root looks like a Hugo site.

        Raises:
            ValidationError: If no config file exists or content/ is missing
        """
        if self.find_config_path() is None:
            raise ValidationError(
                f"Hugo config not found in {self.root} (hugo.* or config.*)",
                path=self.root,
            )
        if not self.content_dir.is_dir():
            raise ValidationError(
                f"content/ directory not found in {self.root}",
                path=self.content_dir,
            )

    def is_valid(self) -> bool:
        try:
            self.validate()
        except ValidationError:
            return False
        return True


@dataclass
class SiteConfig:
    """The handful of site settings hugobros cares about."""

    title: str = ""
    base_url: str = ""
    language_code: str = ""
    params: dict[str, Any] = field(default_factory=dict)
    raw: dict[str, Any] = field(default_factory=dict)
    path: Path | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "base_url": self.base_url,
            "language_code": self.language_code,
            "params": self.params,
            "path": str(self.path) if self.path else None,
        }


def _read_config_mapping(path: Path) -> dict[str, Any]:
    """Decode a config file into a plain dict, dispatching on suffix."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ContentIOError(f"Failed to read config {path}: {e}", path=path) from e

    suffix = path.suffix.lower()
    try:
        if suffix == ".toml":
            data = tomllib.loads(text)
        elif suffix in (".yaml", ".yml"):
            data = yaml.safe_load(text) if text.strip() else {}
        elif suffix == ".json":
            data = json.loads(text) if text.strip() else {}
        else:
            raise ValidationError(f"Unsupported config format: {path.name}", path=path)
    except (tomllib.TOMLDecodeError, yaml.YAMLError, json.JSONDecodeError) as e:
        raise ValidationError(f"Failed to parse config {path}: {e}", path=path) from e

    if not isinstance(data, dict):
        raise ValidationError(f"Config {path} is not a mapping", path=path)
    return data


def _first_key(data: dict[str, Any], *keys: str) -> str:
    for key in keys:
        value = data.get(key)
        if value is not None:
            return str(value)
    return ""


def load_site_config(path: Path) -> SiteConfig:
    """Load a Hugo config file into a SiteConfig.

    Args:
        path: Path to hugo.toml / config.yaml / ... file

    Returns:
        SiteConfig with the common fields extracted

    Raises:
        ContentIOError: If the file can't be read
        ValidationError: If the file can't be decoded as a mapping
    """
    path = Path(path)
    data = _read_config_mapping(path)
    params = data.get("params")
    return SiteConfig(
        title=_first_key(data, "title"),
        base_url=_first_key(data, "baseURL", "baseurl", "baseUrl"),
        language_code=_first_key(data, "languageCode", "languagecode"),
        params=params if isinstance(params, dict) else {},
        raw=data,
        path=path,
    )


def get_global_config_path() -> Path:
    """Return the path to the global hugobros config file.

    Respects XDG_CONFIG_HOME if set, otherwise defaults to
    ~/.config/hugobros/config.yaml.

    Returns:
        Path to global config file (may not exist).
    """
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config_home:
        base = Path(xdg_config_home)
    else:
        base = Path.home() / ".config"
    return base / "hugobros" / "config.yaml"


def load_global_config() -> dict:
    """Load the global hugobros configuration.

    Returns:
        Configuration dict, or empty dict if file is missing or invalid.
    """
    config_path = get_global_config_path()
    if not config_path.is_file():
        return {}
    try:
        text = config_path.read_text(encoding="utf-8")
        data = yaml.safe_load(text)
        if isinstance(data, dict):
            return data
        return {}
    except (OSError, yaml.YAMLError):
        return {}


def _walk_up_for_site(start_path: Path) -> Path | None:
    """Walk up directory tree looking for a Hugo config file.

    Args:
        start_path: Starting path for search.

    Returns:
        Path to the first directory holding a config, or None if not found.
    """
    current = start_path.resolve()
    while True:
        if SiteLayout(current).find_config_path() is not None:
            return current
        if current == current.parent:
            return None
        current = current.parent


def find_site_root(start_path: Path | None = None) -> Path:
    """Find the Hugo site root using 3-tier resolution.

    Resolution order:
      1. HUGOBROS_SITE_ROOT environment variable (highest priority)
      2. Walk up from start_path (or cwd) looking for a Hugo config
      3. Global config file site_root key

    Args:
        start_path: Starting path for the walk (defaults to cwd)

    Returns:
        Path to project root

    Raises:
        ValidationError: If no Hugo site is found by any method
    """
    # Tier 1: HUGOBROS_SITE_ROOT environment variable
    env_root = os.environ.get("HUGOBROS_SITE_ROOT")
    if env_root:
        env_path = Path(env_root).expanduser().resolve()
        SiteLayout(env_path).validate()
        return env_path

    # Tier 2: Walk up from start_path looking for a config file
    if start_path is None:
        start_path = Path.cwd()
    result = _walk_up_for_site(Path(start_path))
    if result is not None:
        return result

    # Tier 3: Global config file
    global_config = load_global_config()
    site_root_str = global_config.get("site_root")
    if site_root_str:
        global_path = Path(site_root_str).expanduser().resolve()
        SiteLayout(global_path).validate()
        return global_path

    raise ValidationError(
        f"Could not find a Hugo site starting from {start_path}. "
        f"Set HUGOBROS_SITE_ROOT, pass --root, or configure "
        f"site_root in {get_global_config_path()}."
    )


@lru_cache(maxsize=1)
def get_site_root() -> Path:
    """Get the cached site root path."""
    return find_site_root()


def get_layout(site_root: Path | None = None) -> SiteLayout:
    """Get the layout for a site (uses the cached root if not provided)."""
    if site_root is None:
        site_root = get_site_root()
    return SiteLayout(Path(site_root))

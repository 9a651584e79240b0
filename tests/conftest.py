"""Shared test fixtures for hugobros package."""

import os
from pathlib import Path

import pytest
import yaml
from click.testing import CliRunner


def _write_file(path: Path, text: str, mtime: float | None = None) -> Path:
    """Write text to path, creating parents, optionally pinning the mtime."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    if mtime is not None:
        os.utime(path, (mtime, mtime))
    return path


@pytest.fixture
def write_file():
    """Helper for writing files with an optional pinned mtime."""
    return _write_file


@pytest.fixture
def make_site(tmp_path):
    """Factory fixture for building a minimal Hugo project on disk."""

    def _make(
        name: str = "site",
        config_name: str = "hugo.toml",
        config_text: str = 'title = "Test Site"\nbaseURL = "https://example.org/"\n',
        posts_dir: str | None = "posts",
    ) -> Path:
        root = tmp_path / name
        _write_file(root / config_name, config_text)
        (root / "content").mkdir(parents=True, exist_ok=True)
        if posts_dir:
            (root / "content" / posts_dir).mkdir(parents=True, exist_ok=True)
        return root

    return _make


@pytest.fixture
def site_root(make_site, monkeypatch):
    """A Hugo site that auto-detection resolves to."""
    root = make_site()

    from hugobros.core import config

    # Clear the lru_cache first
    config.get_site_root.cache_clear()
    monkeypatch.setattr(config, "get_site_root", lambda: root)
    monkeypatch.delenv("HUGOBROS_SITE_ROOT", raising=False)

    return root


@pytest.fixture
def create_content_file(site_root):
    """Factory fixture for creating markdown files with YAML frontmatter."""

    def _create(
        rel_path: str = "content/posts/test-post.md",
        title: str | None = "Test Post",
        body: str = "Test content.",
        extra_fm: dict | None = None,
        draft: bool | None = None,
        mtime: float | None = None,
    ) -> Path:
        fm: dict = {}
        if title is not None:
            fm["title"] = title
        fm["date"] = "2024-01-01 10:00:00"
        if draft is not None:
            fm["draft"] = draft
        if extra_fm:
            fm.update(extra_fm)

        fm_str = yaml.safe_dump(fm, default_flow_style=False, sort_keys=False)
        return _write_file(site_root / rel_path, f"---\n{fm_str}---\n\n{body}\n", mtime=mtime)

    return _create


@pytest.fixture
def runner():
    return CliRunner()

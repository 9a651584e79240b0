"""
Hugo content scanner.

Walks the content tree, parses each markdown file and sorts it into posts,
pages, or drafts. Nothing is cached: every call reads from disk.

Classification rules:
- Anything under content/drafts/ is a draft, whatever its draft flag says.
- A post or page whose frontmatter says ``draft: true`` is a draft.
- Posts are non-index files directly inside the posts directory.
- Pages are index files (index.md, _index.md) up to two levels deep, plus
  standalone files directly in the content root.
"""

from __future__ import annotations

import contextlib
import logging
import os
import tempfile
from collections.abc import Iterable, Iterator
from datetime import datetime
from pathlib import Path

from hugobros.content.frontmatter import backfill, parse, serialize
from hugobros.content.model import ContentItem, ContentKind, Document, Frontmatter
from hugobros.content.naming import sanitize_filename
from hugobros.core.config import (
    DATE_FORMAT,
    DRAFTS_DIR,
    INDEX_FILENAMES,
    MARKDOWN_SUFFIX,
    POSTS_DIR_NAMES,
    SiteLayout,
    get_layout,
)
from hugobros.core.errors import (
    ConflictError,
    ContentIOError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def walk_files(directory: Path, max_depth: int) -> Iterator[Path]:
    """Yield regular files at most ``max_depth`` levels below ``directory``.

    Depth 1 means direct children only. Hidden entries and symlinks are
    skipped; entries are visited in name order.
    """
    if max_depth < 1 or not directory.is_dir():
        return
    try:
        entries = sorted(directory.iterdir())
    except OSError as e:
        logger.warning("Cannot read directory %s: %s", directory, e)
        return
    for entry in entries:
        if entry.name.startswith(".") or entry.is_symlink():
            continue
        if entry.is_dir():
            yield from walk_files(entry, max_depth - 1)
        elif entry.is_file():
            yield entry


def is_markdown(path: Path) -> bool:
    return path.suffix.lower() == MARKDOWN_SUFFIX


def is_index(path: Path) -> bool:
    return path.name in INDEX_FILENAMES


def write_atomic(path: Path, text: str) -> None:
    """Write text to path via a temp file in the same directory.

    Raises:
        ContentIOError: If the file can't be written
    """
    try:
        fd, tmp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp", prefix=".hugobros_")
        try:
            os.write(fd, text.encode("utf-8"))
            os.close(fd)
            fd = -1  # mark closed
            os.replace(tmp_path, path)
        except Exception:
            if fd >= 0:
                os.close(fd)
            with contextlib.suppress(OSError):
                os.unlink(tmp_path)
            raise
    except OSError as e:
        raise ContentIOError(f"Failed to write {path}: {e}", path=path) from e


class ContentScanner:
    """Lists, loads and writes content for one Hugo site."""

    # Walk depth per kind, counted from the directory being walked
    POST_DEPTH = 1
    PAGE_DEPTH = 2
    DRAFT_DEPTH = 1

    def __init__(self, site_root: Path | None = None):
        """Initialize scanner.

        Args:
            site_root: Hugo site root directory (auto-detected if not provided)
        """
        if site_root is None:
            site_root = get_layout().root
        self.site_root = Path(site_root)
        self.layout = SiteLayout(self.site_root)

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    def make_id(self, path: Path) -> str:
        """Project-relative path with forward slashes."""
        return Path(path).relative_to(self.site_root).as_posix()

    def resolve_id(self, item_id: str) -> Path:
        """Map an id back to a path inside the site.

        Raises:
            ConflictError: If the id points outside the site root
        """
        path = self.site_root / item_id
        root = self.site_root.resolve()
        if not path.resolve().is_relative_to(root):
            raise ConflictError(f"Refusing to touch path outside the site: {item_id}", path=path)
        return path

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def _in_drafts_dir(self, path: Path) -> bool:
        return path.is_relative_to(self.layout.drafts_dir)

    def _is_post_location(self, path: Path) -> bool:
        return path.parent == self.layout.posts_dir and not is_index(path)

    def _is_page_location(self, path: Path) -> bool:
        content_dir = self.layout.content_dir
        if not path.is_relative_to(content_dir):
            return False
        if is_index(path):
            return len(path.relative_to(content_dir).parts) <= self.PAGE_DEPTH
        # Root-level files are posts when the posts dir falls back to the content root
        return path.parent == content_dir and self.layout.posts_dir != content_dir

    def location_kind(self, path: Path) -> ContentKind | None:
        """Kind a markdown file gets from where it sits, ignoring its draft flag."""
        path = Path(path)
        if not is_markdown(path):
            return None
        if self._in_drafts_dir(path):
            return ContentKind.DRAFT
        if self._is_post_location(path):
            return ContentKind.POST
        if self._is_page_location(path):
            return ContentKind.PAGE
        return None

    def classify(self, path: Path, frontmatter: Frontmatter) -> ContentKind | None:
        """Final kind of a file: location first, then the draft flag."""
        kind = self.location_kind(path)
        if kind in (ContentKind.POST, ContentKind.PAGE) and frontmatter.is_draft:
            return ContentKind.DRAFT
        return kind

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def _candidate_paths(self, kind: ContentKind) -> Iterator[Path]:
        layout = self.layout
        walks: list[Iterable[Path]]
        if kind is ContentKind.POST:
            walks = [walk_files(layout.posts_dir, self.POST_DEPTH)]
        elif kind is ContentKind.PAGE:
            walks = [walk_files(layout.pages_dir, self.PAGE_DEPTH)]
        else:
            walks = [
                walk_files(layout.drafts_dir, self.DRAFT_DEPTH),
                walk_files(layout.posts_dir, self.POST_DEPTH),
                walk_files(layout.pages_dir, self.PAGE_DEPTH),
            ]

        seen: set[Path] = set()
        for walk in walks:
            for path in walk:
                if path in seen:
                    continue
                seen.add(path)
                if not is_markdown(path):
                    logger.debug("Skipping non-markdown file %s", path)
                    continue
                yield path

    def load(self, path: Path, kind: ContentKind) -> ContentItem:
        """Read and parse a single file into a ContentItem.

        Raises:
            ContentIOError: If the file or its metadata can't be read
        """
        path = Path(path)
        try:
            raw = path.read_text(encoding="utf-8")
            stat = path.stat()
        except (OSError, UnicodeDecodeError) as e:
            raise ContentIOError(f"Failed to read {path}: {e}", path=path) from e

        document, used_default = parse(raw)
        backfill(document, path.stem, stat.st_mtime)

        modified_at = int(stat.st_mtime)
        created_at = int(getattr(stat, "st_birthtime", 0) or stat.st_mtime)

        return ContentItem(
            id=self.make_id(path),
            kind=kind,
            frontmatter=document.frontmatter,
            body=document.body,
            file_path=path,
            created_at=created_at,
            modified_at=modified_at,
            used_default_frontmatter=used_default,
        )

    def list(self, kind: ContentKind | str) -> list[ContentItem]:
        """List every item of one kind, newest modification first.

        Files that can't be read are logged and skipped. Ties on
        modification time are broken by id.
        """
        kind = ContentKind(kind)
        items: list[ContentItem] = []
        for path in self._candidate_paths(kind):
            if self.location_kind(path) is None:
                continue
            try:
                item = self.load(path, kind)
            except ContentIOError as e:
                logger.warning("Skipping %s: %s", path, e.message)
                continue
            if self.classify(path, item.frontmatter) is kind:
                items.append(item)

        items.sort(key=lambda it: (-it.modified_at, it.id))
        return items

    def list_posts(self) -> list[ContentItem]:
        return self.list(ContentKind.POST)

    def list_pages(self) -> list[ContentItem]:
        return self.list(ContentKind.PAGE)

    def list_drafts(self) -> list[ContentItem]:
        return self.list(ContentKind.DRAFT)

    def get(self, kind: ContentKind | str, item_id: str) -> ContentItem:
        """Load one item by id.

        Raises:
            NotFoundError: If the id doesn't name an existing file
            ConflictError: If the id points outside the site
            ContentIOError: If the file can't be read
        """
        kind = ContentKind(kind)
        path = self.resolve_id(item_id)
        if not path.is_file():
            raise NotFoundError(f"{kind.value.capitalize()} not found: {item_id}", path=path)
        return self.load(path, kind)

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------

    def save(self, item: ContentItem) -> None:
        """Serialize an item and overwrite its file.

        Raises:
            ContentIOError: If the file can't be written
        """
        write_atomic(Path(item.file_path), serialize(item.document))

    def _new_path(self, kind: ContentKind, slug: str) -> Path:
        layout = self.layout
        if kind is ContentKind.POST:
            return layout.posts_dir / f"{slug}{MARKDOWN_SUFFIX}"
        if kind is ContentKind.DRAFT:
            return layout.drafts_dir / f"{slug}{MARKDOWN_SUFFIX}"
        if slug in POSTS_DIR_NAMES or slug == DRAFTS_DIR:
            raise ConflictError(f"'{slug}' is a reserved directory name", path=layout.content_dir / slug)
        return layout.content_dir / slug / "index.md"

    def create(self, kind: ContentKind | str, title: str) -> ContentItem:
        """Create a new content file with minimal frontmatter.

        Raises:
            ValidationError: If the title is blank
            ConflictError: If the target file already exists
            ContentIOError: If the file can't be written
        """
        kind = ContentKind(kind)
        if not title.strip():
            raise ValidationError("Title must not be empty")

        path = self._new_path(kind, sanitize_filename(title))
        if path.exists():
            raise ConflictError(f"File already exists: {self.make_id(path)}", path=path)

        frontmatter = Frontmatter(title=title, date=datetime.now().strftime(DATE_FORMAT))
        if kind is ContentKind.DRAFT:
            frontmatter.draft = True

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ContentIOError(f"Failed to create {path.parent}: {e}", path=path.parent) from e
        write_atomic(path, serialize(Document(frontmatter=frontmatter)))
        logger.info("Created %s", path)

        return self.load(path, kind)

    def _protected_paths(self) -> set[Path]:
        protected = {self.site_root.resolve(), self.layout.content_dir.resolve()}
        config_path = self.layout.find_config_path()
        if config_path is not None:
            protected.add(config_path.resolve())
        return protected

    def delete(self, item_id: str) -> None:
        """Delete a content file.

        Raises:
            NotFoundError: If the id doesn't name an existing path
            ConflictError: If the path is a directory, the site config, or
                outside the site
            ContentIOError: If the file can't be removed
        """
        path = self.resolve_id(item_id)
        if not path.exists():
            raise NotFoundError(f"Not found: {item_id}", path=path)
        if path.resolve() in self._protected_paths() or path.is_dir():
            raise ConflictError(f"Refusing to delete protected path: {item_id}", path=path)
        try:
            path.unlink()
        except OSError as e:
            raise ContentIOError(f"Failed to delete {item_id}: {e}", path=path) from e
        logger.info("Deleted %s", path)

    def publish(self, item_id: str) -> ContentItem:
        """Turn a draft into published content.

        Clears the draft flag; a file in the drafts directory is also moved
        into the posts directory.

        Raises:
            NotFoundError: If the id doesn't name an existing file
            ConflictError: If the item isn't a draft or the target exists
            ContentIOError: If the file can't be written or moved
        """
        item = self.get(ContentKind.DRAFT, item_id)
        path = Path(item.file_path)
        if self.classify(path, item.frontmatter) is not ContentKind.DRAFT:
            raise ConflictError(f"Not a draft: {item_id}", path=path)

        item.frontmatter.draft = None
        target = path
        if self._in_drafts_dir(path):
            target = self.layout.posts_dir / path.name
            if target.exists():
                raise ConflictError(f"File already exists: {self.make_id(target)}", path=target)
            target.parent.mkdir(parents=True, exist_ok=True)

        write_atomic(target, serialize(item.document))
        if target != path:
            try:
                path.unlink()
            except OSError as e:
                raise ContentIOError(f"Failed to remove {item_id}: {e}", path=path) from e

        kind = self.location_kind(target) or ContentKind.POST
        return self.load(target, kind)


def list_content(kind: ContentKind | str, site_root: Path) -> list[ContentItem]:
    """List content of one kind for the site at ``site_root``."""
    return ContentScanner(site_root).list(kind)


def get_content(kind: ContentKind | str, site_root: Path, item_id: str) -> ContentItem:
    """Fetch one content item by id for the site at ``site_root``."""
    return ContentScanner(site_root).get(kind, item_id)

"""
Static image assets.

Lists and deletes images under the site's static/ directory. Copying and
resizing images is left to other tools.
"""

from __future__ import annotations

import logging
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from hugobros.content.model import ImageInfo
from hugobros.content.scanner import walk_files
from hugobros.core.config import SiteLayout
from hugobros.core.errors import ConflictError, ContentIOError, NotFoundError

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = frozenset({".png", ".jpg", ".jpeg", ".gif", ".webp", ".svg", ".ico"})

# Static trees nest deeper than content; keep a bound against runaway walks
ASSET_DEPTH = 10


def is_image(path: Path) -> bool:
    return path.suffix.lower() in IMAGE_EXTENSIONS


def image_dimensions(path: Path) -> tuple[int | None, int | None]:
    """Read pixel dimensions, or (None, None) for formats Pillow can't open."""
    if path.suffix.lower() == ".svg":
        return None, None
    try:
        with Image.open(path) as img:
            return img.width, img.height
    except (UnidentifiedImageError, OSError) as e:
        logger.debug("No dimensions for %s: %s", path, e)
        return None, None


def image_info(path: Path, static_dir: Path) -> ImageInfo:
    """Describe one image file.

    Raises:
        ContentIOError: If the file metadata can't be read
    """
    try:
        stat = path.stat()
    except OSError as e:
        raise ContentIOError(f"Failed to read metadata for {path}: {e}", path=path) from e

    rel = path.relative_to(static_dir).as_posix()
    width, height = image_dimensions(path)
    return ImageInfo(
        filename=path.name,
        path=rel,
        full_path=path,
        url=f"/{rel}",
        size=stat.st_size,
        created_at=int(getattr(stat, "st_birthtime", 0) or stat.st_mtime),
        width=width,
        height=height,
    )


def list_images(site_root: Path) -> list[ImageInfo]:
    """List images under static/, newest first.

    Unreadable files are logged and skipped.
    """
    static_dir = SiteLayout(site_root).static_dir
    images: list[ImageInfo] = []
    for path in walk_files(static_dir, ASSET_DEPTH):
        if not is_image(path):
            continue
        try:
            images.append(image_info(path, static_dir))
        except ContentIOError as e:
            logger.warning("Skipping %s: %s", path, e.message)

    images.sort(key=lambda img: (-img.created_at, img.path))
    return images


def delete_image(site_root: Path, image_path: str) -> None:
    """Delete an image given its path relative to static/.

    Raises:
        NotFoundError: If the image doesn't exist
        ConflictError: If the path is a directory or escapes static/
        ContentIOError: If the file can't be removed
    """
    static_dir = SiteLayout(site_root).static_dir
    path = static_dir / image_path.lstrip("/")
    if not path.resolve().is_relative_to(static_dir.resolve()):
        raise ConflictError(f"Refusing to touch path outside static/: {image_path}", path=path)
    if not path.exists():
        raise NotFoundError(f"Image not found: {image_path}", path=path)
    if path.is_dir():
        raise ConflictError(f"Refusing to delete directory: {image_path}", path=path)
    try:
        path.unlink()
    except OSError as e:
        raise ContentIOError(f"Failed to delete {image_path}: {e}", path=path) from e
    logger.info("Deleted %s", path)

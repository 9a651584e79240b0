"""Core utilities for hugobros."""

from hugobros.core.config import SiteConfig, SiteLayout, get_layout, get_site_root, load_site_config
from hugobros.core.errors import (
    ConflictError,
    ContentIOError,
    DecodeError,
    HugoBrosError,
    NotFoundError,
    ValidationError,
)

__all__ = [
    # Config
    "SiteConfig",
    "SiteLayout",
    "get_layout",
    "get_site_root",
    "load_site_config",
    # Errors
    "HugoBrosError",
    "ContentIOError",
    "DecodeError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
]

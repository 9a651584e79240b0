"""
Error types shared across hugobros.

Single-item operations raise these to the caller; listing operations log and
skip per-file failures instead.
"""

from __future__ import annotations


class HugoBrosError(Exception):
    """Base exception for hugobros errors."""

    def __init__(self, message: str, path: object | None = None):
        self.message = message
        self.path = path
        super().__init__(message)


class ContentIOError(HugoBrosError):
    """A file or directory is missing, unreadable, or unwritable."""


class DecodeError(HugoBrosError):
    """A frontmatter block failed to decode under one format."""


class ValidationError(HugoBrosError):
    """The project root is not a usable Hugo site."""


class NotFoundError(HugoBrosError):
    """The requested id does not resolve to an existing file."""


class ConflictError(HugoBrosError):
    """The operation would clobber or remove something it must not."""

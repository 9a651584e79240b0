"""
Content management module for Hugo sites.

Provides tools for:
- Parsing and writing frontmatter in YAML, TOML, and JSON forms
- Classifying content files into posts, pages, and drafts
- Listing static image assets
- Describing custom frontmatter fields
"""

from hugobros.content.frontmatter import ParseResult, parse, serialize
from hugobros.content.model import ContentItem, ContentKind, Document, Frontmatter, ImageInfo
from hugobros.content.scanner import ContentScanner, get_content, list_content

__all__ = [
    "ContentItem",
    "ContentKind",
    "ContentScanner",
    "Document",
    "Frontmatter",
    "ImageInfo",
    "ParseResult",
    "get_content",
    "list_content",
    "parse",
    "serialize",
]

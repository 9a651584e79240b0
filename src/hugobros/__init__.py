"""hugobros - frontmatter and content tools for Hugo sites."""

__version__ = "0.1.0"

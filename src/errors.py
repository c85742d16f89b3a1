"""Exception types raised inside the content stores.

These never escape a ``CollectionStore``: the store boundary converts
them into an excluded item and a logged warning.
"""

from __future__ import annotations

from pathlib import Path


class SiteContentError(Exception):
    """Base class for sitecontent errors."""


class ContentParseError(SiteContentError):
    """A content file exists but could not be turned into a record."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")


class FrontmatterError(ContentParseError):
    """The front matter block of a markdown file is malformed."""

"""File-backed collection stores for articles and guides.

A store knows how to list the items of one content type in its
directory and read each of them into a record. Storage and parse
failures stop at this boundary: a broken item is logged and left out,
a missing or unreadable directory reads as an empty collection.
"""

from __future__ import annotations

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Generic, TypeVar

from pydantic import BaseModel, ValidationError

from sitecontent.content.models import Article, Guide, GuidePart
from sitecontent.errors import ContentParseError
from sitecontent.shared.frontmatter import parse_frontmatter

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

MARKDOWN_SUFFIX = ".md"
GUIDE_INDEX_FILENAME = "index.md"

# Failures that exclude a single item instead of aborting the collection.
ITEM_READ_ERRORS = (
    OSError,
    UnicodeDecodeError,
    json.JSONDecodeError,
    ContentParseError,
    ValidationError,
)


def is_safe_slug(slug: str) -> bool:
    """Whether *slug* names a single entry inside the collection directory."""
    return bool(slug) and not slug.startswith(".") and "/" not in slug and "\\" not in slug


class CollectionStore(ABC, Generic[T]):
    """Base class for one on-disk content collection.

    Subclasses implement the synchronous ``_list_slugs`` and ``_read``;
    the async public methods run them in a worker thread and apply the
    failure policy.
    """

    def __init__(self, directory: Path) -> None:
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    # ── Subclass hooks ───────────────────────────────────────────

    @abstractmethod
    def _list_slugs(self) -> list[str]:
        """Return item slugs in listing order. May raise ``OSError``."""

    @abstractmethod
    def _read(self, slug: str) -> T:
        """Read one item. May raise any of ``ITEM_READ_ERRORS``."""

    def _include(self, item: T) -> bool:
        """Whether a successfully read item belongs in ``read_all``."""
        return True

    # ── Public API ───────────────────────────────────────────────

    async def list_slugs(self) -> list[str]:
        """List item slugs; an absent or unreadable directory yields ``[]``."""
        try:
            return await asyncio.to_thread(self._list_slugs)
        except FileNotFoundError:
            logger.debug("Content directory %s does not exist", self._directory)
            return []
        except OSError as exc:
            logger.warning("Could not list content directory %s: %s", self._directory, exc)
            return []

    async def read_item(self, slug: str) -> T | None:
        """Read a single item by slug, or ``None`` if it is missing or broken."""
        if not is_safe_slug(slug):
            logger.debug("Rejected unsafe slug %r in %s", slug, self._directory)
            return None
        try:
            return await asyncio.to_thread(self._read, slug)
        except FileNotFoundError:
            logger.debug("No content item %r in %s", slug, self._directory)
            return None
        except ITEM_READ_ERRORS as exc:
            logger.warning("Skipping content item %r in %s: %s", slug, self._directory, exc)
            return None

    async def read_all(self) -> list[T]:
        """Read every listed item concurrently, preserving listing order."""
        slugs = await self.list_slugs()
        results = await asyncio.gather(*(self.read_item(slug) for slug in slugs))
        items = [item for item in results if item is not None and self._include(item)]
        logger.info(
            "Loaded %d of %d items from %s", len(items), len(slugs), self._directory
        )
        return items


class ArticleStore(CollectionStore[Article]):
    """Articles stored as ``<slug>.md`` files with YAML front matter."""

    def _list_slugs(self) -> list[str]:
        return [
            path.stem
            for path in sorted(self._directory.iterdir())
            if path.is_file() and path.suffix == MARKDOWN_SUFFIX
        ]

    def _read(self, slug: str) -> Article:
        path = self._directory / f"{slug}{MARKDOWN_SUFFIX}"
        fm = parse_frontmatter(path.read_text(encoding="utf-8"), path=path)
        return Article.model_validate({**fm.data, "slug": slug, "content": fm.body})


class GuideStore(CollectionStore[Guide]):
    """Guides stored as one directory each.

    ``index.md`` carries the guide header and intro; every other
    markdown file in the directory is a part. Guides without a
    publication date are drafts: readable by slug, left out of
    ``read_all``.
    """

    def _list_slugs(self) -> list[str]:
        return [path.name for path in sorted(self._directory.iterdir()) if path.is_dir()]

    def _read(self, slug: str) -> Guide:
        guide_dir = self._directory / slug
        index_path = guide_dir / GUIDE_INDEX_FILENAME
        fm = parse_frontmatter(index_path.read_text(encoding="utf-8"), path=index_path)

        parts = [
            self._read_part_file(path)
            for path in sorted(guide_dir.iterdir())
            if path.is_file()
            and path.suffix == MARKDOWN_SUFFIX
            and path.name != GUIDE_INDEX_FILENAME
        ]
        return Guide.model_validate(
            {**fm.data, "slug": slug, "content": fm.body, "parts": parts}
        )

    def _include(self, item: Guide) -> bool:
        return item.published_at is not None

    @staticmethod
    def _read_part_file(path: Path) -> GuidePart:
        fm = parse_frontmatter(path.read_text(encoding="utf-8"), path=path)
        return GuidePart.model_validate({**fm.data, "slug": path.stem, "content": fm.body})

    async def read_part(self, guide_slug: str, part_slug: str) -> str | None:
        """Return the body of one guide part, or ``None`` if unavailable."""
        if not (is_safe_slug(guide_slug) and is_safe_slug(part_slug)):
            return None
        path = self._directory / guide_slug / f"{part_slug}{MARKDOWN_SUFFIX}"
        try:
            text = await asyncio.to_thread(path.read_text, encoding="utf-8")
            return parse_frontmatter(text, path=path).body
        except FileNotFoundError:
            return None
        except ITEM_READ_ERRORS as exc:
            logger.warning("Could not read guide part %s: %s", path, exc)
            return None

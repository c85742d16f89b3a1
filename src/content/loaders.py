"""Loaders: the API page code calls for articles and guides.

A loader is a thin facade over a ``ContentCache`` and a
``RelatednessScorer``. Every query goes through the cache, so it sees
the current snapshot (reloaded when stale).
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Generic, TypeVar

from sitecontent.content.cache import ContentCache
from sitecontent.content.models import Article, Guide
from sitecontent.content.related import DEFAULT_RELATED_LIMIT, Relatable, RelatednessScorer
from sitecontent.content.store import GuideStore
from sitecontent.shared.dates import ensure_utc

T = TypeVar("T", bound=Relatable)

_EPOCH = datetime.min.replace(tzinfo=UTC)


def newest_first(items: list[T]) -> list[T]:
    """Sort by publication time, newest first; undated items go last."""
    return sorted(
        items,
        key=lambda item: ensure_utc(item.published) if item.published else _EPOCH,
        reverse=True,
    )


class ContentLoader(Generic[T]):
    """Query one cached collection.

    Args:
        cache: The collection's cache. Owned by the caller, so tests and
            the content library decide its clock and staleness.
        scorer: Relatedness scorer; a default 30-day scorer if omitted.
        related_limit: Default ``limit`` for ``get_related``.
    """

    default_latest_limit = 6

    def __init__(
        self,
        cache: ContentCache[T],
        *,
        scorer: RelatednessScorer | None = None,
        related_limit: int = DEFAULT_RELATED_LIMIT,
    ) -> None:
        self._cache = cache
        self._scorer = scorer or RelatednessScorer()
        self._related_limit = related_limit

    @property
    def cache(self) -> ContentCache[T]:
        return self._cache

    @property
    def scorer(self) -> RelatednessScorer:
        return self._scorer

    async def get_all(self) -> list[T]:
        """Return the whole collection in snapshot order."""
        return list(await self._cache.get_all())

    async def get_by_slug(self, slug: str) -> T | None:
        return await self._cache.get_by_slug(slug)

    async def get_related(
        self,
        current_slug: str,
        category_slug: str | None = None,
        limit: int | None = None,
        *,
        now: datetime | None = None,
    ) -> list[T]:
        """Rank the siblings of *current_slug* and return the best *limit*."""
        items = await self._cache.get_all()
        return self._scorer.rank(
            items,
            current_slug,
            category_slug,
            limit=self._related_limit if limit is None else limit,
            now=now,
        )

    async def get_by_category(self, category_slug: str) -> list[T]:
        return [
            item for item in await self._cache.get_all()
            if item.category_slug == category_slug
        ]

    async def get_by_tag(self, tag: str) -> list[T]:
        return [item for item in await self._cache.get_all() if tag in item.tags]

    async def get_latest(self, limit: int | None = None) -> list[T]:
        """Return the newest items; the snapshot itself is never re-sorted."""
        limit = self.default_latest_limit if limit is None else limit
        return newest_first(list(await self._cache.get_all()))[:limit]


class ArticleLoader(ContentLoader[Article]):
    """Articles from ``content/posts``."""

    async def get_featured(self, limit: int = 3) -> list[Article]:
        featured = [article for article in await self._cache.get_all() if article.featured]
        return newest_first(featured)[:limit]


class GuideLoader(ContentLoader[Guide]):
    """Multi-part guides from ``content/guides``."""

    default_latest_limit = 4

    async def get_part(self, guide_slug: str, part_slug: str) -> str | None:
        """Return the markdown body of one guide part, read from disk."""
        store = self._cache.store
        if not isinstance(store, GuideStore):
            raise TypeError("GuideLoader requires a cache backed by a GuideStore")
        return await store.read_part(guide_slug, part_slug)

"""Related-content ranking.

Each sibling of the current item gets a small hand-tuned weighted sum::

    10 * shared_tags + 5 * same_category + 2 * recent

Candidates are sorted by score, highest first. Python's sort is stable,
so equal scores keep their order in the collection.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, datetime, timedelta
from typing import Protocol, TypeVar

from sitecontent.shared.dates import ensure_utc

# Signal weights -------------------------------------------------------------

TAG_MATCH_POINTS: int = 10
CATEGORY_MATCH_POINTS: int = 5
RECENCY_POINTS: int = 2

DEFAULT_RECENCY_WINDOW = timedelta(days=30)
DEFAULT_RELATED_LIMIT = 3


class Relatable(Protocol):
    """What the scorer reads from an item."""

    @property
    def slug(self) -> str: ...

    @property
    def tags(self) -> list[str]: ...

    @property
    def category_slug(self) -> str | None: ...

    @property
    def published(self) -> datetime | None: ...


R = TypeVar("R", bound=Relatable)


class RelatednessScorer:
    """Score and rank sibling items by similarity to a current item.

    Args:
        recency_window: Candidates published less than this long before
            *now* earn the recency bonus.
        now: Fixed evaluation time; defaults to the wall clock per call.
    """

    def __init__(
        self,
        *,
        recency_window: timedelta = DEFAULT_RECENCY_WINDOW,
        now: datetime | None = None,
    ) -> None:
        self._recency_window = recency_window
        self._now = now

    @property
    def recency_window(self) -> timedelta:
        return self._recency_window

    def _resolve_now(self, now: datetime | None) -> datetime:
        """Return *now* (parameter) > constructor *now* > wall clock."""
        return ensure_utc(now or self._now or datetime.now(tz=UTC))

    # -- individual signals ---------------------------------------------------

    @staticmethod
    def tag_points(current_tags: Sequence[str], candidate: Relatable) -> int:
        if not current_tags:
            return 0
        wanted = set(current_tags)
        return TAG_MATCH_POINTS * sum(1 for tag in candidate.tags if tag in wanted)

    @staticmethod
    def category_points(category_slug: str | None, candidate: Relatable) -> int:
        if category_slug is None:
            return 0
        return CATEGORY_MATCH_POINTS if candidate.category_slug == category_slug else 0

    def recency_points(self, candidate: Relatable, now: datetime) -> int:
        published = candidate.published
        if published is None:
            return 0
        age = now - ensure_utc(published)
        return RECENCY_POINTS if age < self._recency_window else 0

    def extra_points(self, current: R | None, candidate: R) -> int:
        """Type-specific signals; none for plain content."""
        return 0

    # -- scoring --------------------------------------------------------------

    def score(
        self,
        current: R | None,
        candidate: R,
        *,
        category_slug: str | None = None,
        now: datetime | None = None,
    ) -> int:
        """Return the weighted-sum score of *candidate* against *current*."""
        reference = self._resolve_now(now)
        current_tags = current.tags if current is not None else []
        return (
            self.tag_points(current_tags, candidate)
            + self.category_points(category_slug, candidate)
            + self.recency_points(candidate, reference)
            + self.extra_points(current, candidate)
        )

    def score_all(
        self,
        items: Sequence[R],
        current_slug: str,
        category_slug: str | None = None,
        *,
        now: datetime | None = None,
    ) -> list[tuple[R, int]]:
        """Score every item except the current one, in collection order."""
        reference = self._resolve_now(now)
        current = next((item for item in items if item.slug == current_slug), None)
        if category_slug is None and current is not None:
            category_slug = current.category_slug

        return [
            (item, self.score(current, item, category_slug=category_slug, now=reference))
            for item in items
            if item.slug != current_slug
        ]

    def rank(
        self,
        items: Sequence[R],
        current_slug: str,
        category_slug: str | None = None,
        *,
        limit: int = DEFAULT_RELATED_LIMIT,
        now: datetime | None = None,
    ) -> list[R]:
        """Return the top *limit* related items, best first."""
        scored = self.score_all(items, current_slug, category_slug, now=now)
        scored.sort(key=lambda pair: pair[1], reverse=True)
        return [item for item, _ in scored[: max(limit, 0)]]

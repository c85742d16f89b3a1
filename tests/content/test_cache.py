"""Tests for ContentCache: snapshot reuse, staleness, slug fallback."""

import asyncio
import math
from pathlib import Path

import pytest
from sitecontent.content.cache import INFINITE_MAX_AGE, ContentCache
from sitecontent.content.models import Article
from sitecontent.content.store import ArticleStore


class FakeClock:
    """Manually advanced seconds clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class CountingStore(ArticleStore):
    """ArticleStore that counts full-collection reads."""

    def __init__(self, directory: Path) -> None:
        super().__init__(directory)
        self.read_all_calls = 0

    async def read_all(self) -> list[Article]:
        self.read_all_calls += 1
        return await super().read_all()


def _write_article(directory: Path, slug: str, title: str = "") -> None:
    directory.mkdir(parents=True, exist_ok=True)
    (directory / f"{slug}.md").write_text(
        f"---\ntitle: {title or slug}\n---\nBody\n", encoding="utf-8"
    )


@pytest.fixture
def posts(tmp_path: Path) -> Path:
    directory = tmp_path / "posts"
    _write_article(directory, "alpha")
    _write_article(directory, "bravo")
    return directory


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


class TestConstruction:
    @pytest.mark.parametrize("max_age", [0, -1, -0.5])
    def test_non_positive_max_age_rejected(self, posts: Path, max_age: float):
        with pytest.raises(ValueError, match="max_age"):
            ContentCache(ArticleStore(posts), max_age=max_age)

    def test_starts_empty_and_stale(self, posts: Path):
        cache = ContentCache(ArticleStore(posts))
        assert cache.snapshot is None
        assert cache.is_stale()
        assert cache.max_age == 300


class TestGetAll:
    @pytest.mark.asyncio
    async def test_fresh_snapshot_is_reused(self, posts: Path, clock: FakeClock):
        store = CountingStore(posts)
        cache = ContentCache(store, max_age=60, clock=clock)

        first = await cache.get_all()
        clock.advance(59)
        second = await cache.get_all()

        assert [a.slug for a in first] == ["alpha", "bravo"]
        assert second is first
        assert store.read_all_calls == 1

    @pytest.mark.asyncio
    async def test_reloads_once_max_age_is_reached(self, posts: Path, clock: FakeClock):
        store = CountingStore(posts)
        cache = ContentCache(store, max_age=60, clock=clock)

        first = await cache.get_all()
        clock.advance(60)
        assert cache.is_stale()
        second = await cache.get_all()

        assert second is not first
        assert store.read_all_calls == 2
        assert cache.snapshot.populated_at == clock.now

    @pytest.mark.asyncio
    async def test_reload_picks_up_new_files(self, posts: Path, clock: FakeClock):
        cache = ContentCache(ArticleStore(posts), max_age=60, clock=clock)
        await cache.get_all()

        _write_article(posts, "charlie")
        assert len(await cache.get_all()) == 2

        clock.advance(61)
        assert [a.slug for a in await cache.get_all()] == ["alpha", "bravo", "charlie"]

    @pytest.mark.asyncio
    async def test_infinite_max_age_never_reloads(self, posts: Path, clock: FakeClock):
        store = CountingStore(posts)
        cache = ContentCache(store, max_age=INFINITE_MAX_AGE, clock=clock)

        await cache.get_all()
        clock.advance(10**9)
        await cache.get_all()

        assert math.isinf(cache.max_age)
        assert store.read_all_calls == 1

    @pytest.mark.asyncio
    async def test_empty_directory_is_cached(self, tmp_path: Path, clock: FakeClock):
        store = CountingStore(tmp_path / "missing")
        cache = ContentCache(store, clock=clock)

        assert await cache.get_all() == ()
        assert await cache.get_all() == ()
        assert store.read_all_calls == 1

    @pytest.mark.asyncio
    async def test_concurrent_reloads_both_read(self, posts: Path, clock: FakeClock):
        store = CountingStore(posts)
        cache = ContentCache(store, clock=clock)

        first, second = await asyncio.gather(cache.get_all(), cache.get_all())

        assert [a.slug for a in first] == [a.slug for a in second]
        assert store.read_all_calls == 2
        assert cache.snapshot.items in (first, second)


class TestGetBySlug:
    @pytest.mark.asyncio
    async def test_found_in_snapshot(self, posts: Path, clock: FakeClock):
        cache = ContentCache(ArticleStore(posts), clock=clock)
        items = await cache.get_all()

        article = await cache.get_by_slug("bravo")
        assert article is items[1]

    @pytest.mark.asyncio
    async def test_missing_slug_is_none(self, posts: Path, clock: FakeClock):
        cache = ContentCache(ArticleStore(posts), clock=clock)
        assert await cache.get_by_slug("zulu") is None

    @pytest.mark.asyncio
    async def test_new_item_visible_by_slug_before_reload(self, posts: Path, clock: FakeClock):
        store = CountingStore(posts)
        cache = ContentCache(store, max_age=60, clock=clock)
        await cache.get_all()

        _write_article(posts, "charlie", "Fresh")
        found = await cache.get_by_slug("charlie")

        assert found is not None
        assert found.title == "Fresh"
        # The fallback read does not touch the snapshot.
        assert [a.slug for a in await cache.get_all()] == ["alpha", "bravo"]
        assert store.read_all_calls == 1

        clock.advance(60)
        assert [a.slug for a in await cache.get_all()] == ["alpha", "bravo", "charlie"]
        assert store.read_all_calls == 2
        assert (await cache.get_by_slug("charlie")).title == "Fresh"


class TestInvalidate:
    @pytest.mark.asyncio
    async def test_invalidate_forces_reload(self, posts: Path, clock: FakeClock):
        store = CountingStore(posts)
        cache = ContentCache(store, max_age=INFINITE_MAX_AGE, clock=clock)
        await cache.get_all()

        cache.invalidate()
        assert cache.snapshot is None
        await cache.get_all()

        assert store.read_all_calls == 2

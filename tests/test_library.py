"""Tests for ContentLibrary: wiring loaders from configuration."""

import json
import math
from pathlib import Path

import pytest
from sitecontent.config import SiteContentConfig
from sitecontent.library import ContentLibrary


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for key in ("SITECONTENT_ENV", "SITECONTENT_RUNTIME"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def content_root(tmp_path: Path) -> Path:
    root = tmp_path / "content"
    posts = root / "posts"
    posts.mkdir(parents=True)
    (posts / "hello.md").write_text("---\ntitle: Hello\n---\nHi\n", encoding="utf-8")

    guide = root / "guides" / "k8s"
    guide.mkdir(parents=True)
    (guide / "index.md").write_text(
        "---\ntitle: K8s\npublishedAt: 2026-01-01\n---\nIntro\n", encoding="utf-8"
    )

    quizzes = root / "quizzes"
    quizzes.mkdir()
    (quizzes / "git.json").write_text(
        json.dumps({"id": "git", "title": "Git", "category": "vcs"}), encoding="utf-8"
    )
    return root


def _config(root: Path, **cache: object) -> SiteContentConfig:
    return SiteContentConfig.model_validate(
        {"content": {"root": str(root)}, "cache": cache, "related": {"limit": 2}}
    )


class TestContentLibrary:
    @pytest.mark.asyncio
    async def test_loads_every_collection(self, content_root: Path):
        library = ContentLibrary.from_config(_config(content_root))

        assert [a.slug for a in await library.articles.get_all()] == ["hello"]
        assert [g.slug for g in await library.guides.get_all()] == ["k8s"]
        assert [q.id for q in await library.quizzes.get_all()] == ["git"]

    def test_runtime_mode_shares_max_age(self, content_root: Path):
        library = ContentLibrary.from_config(
            _config(content_root, mode="runtime", runtime_max_age_seconds=30)
        )
        loaders = (library.articles, library.guides, library.quizzes)
        ages = {loader.cache.max_age for loader in loaders}
        assert ages == {30.0}

    def test_build_mode_is_infinite(self, content_root: Path, monkeypatch):
        monkeypatch.setenv("SITECONTENT_ENV", "production")
        library = ContentLibrary.from_config(_config(content_root))
        assert math.isinf(library.articles.cache.max_age)

    @pytest.mark.asyncio
    async def test_related_limit_from_config(self, content_root: Path):
        posts = content_root / "posts"
        for slug in ("a", "b", "c"):
            (posts / f"{slug}.md").write_text(f"---\ntitle: {slug}\n---\n", encoding="utf-8")
        library = ContentLibrary.from_config(_config(content_root))

        assert len(await library.articles.get_related("hello")) == 2

    @pytest.mark.asyncio
    async def test_invalidate_drops_all_snapshots(self, content_root: Path):
        clock = FakeClock()
        library = ContentLibrary.from_config(_config(content_root, mode="build"), clock=clock)
        await library.articles.get_all()
        await library.quizzes.get_all()

        later = content_root / "posts" / "later.md"
        later.write_text("---\ntitle: Later\n---\n", encoding="utf-8")
        assert len(await library.articles.get_all()) == 1

        library.invalidate()
        assert library.articles.cache.snapshot is None
        assert library.quizzes.cache.snapshot is None
        assert len(await library.articles.get_all()) == 2

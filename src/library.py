"""Composition root: build the three content loaders from configuration."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

from sitecontent.config import SiteContentConfig
from sitecontent.content.cache import Clock, ContentCache
from sitecontent.content.loaders import ArticleLoader, GuideLoader
from sitecontent.content.store import ArticleStore, GuideStore
from sitecontent.quiz.loader import QuizLoader
from sitecontent.quiz.store import QuizStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContentLibrary:
    """Loaders for every collection, each with its own cache.

    Page code receives this object (or one of its loaders) instead of
    reaching for module-level state.
    """

    articles: ArticleLoader
    guides: GuideLoader
    quizzes: QuizLoader

    @classmethod
    def from_config(
        cls,
        config: SiteContentConfig,
        *,
        clock: Clock = time.monotonic,
    ) -> ContentLibrary:
        """Wire stores, caches and loaders.

        The staleness threshold is resolved here, once, and shared by
        all three caches.
        """
        max_age = config.cache_max_age()
        limit = config.related.limit
        logger.info(
            "Content library at %s (cache mode %s, max age %s s)",
            config.content_root,
            config.resolve_cache_mode(),
            max_age,
        )

        return cls(
            articles=ArticleLoader(
                ContentCache(ArticleStore(config.posts_path), max_age=max_age, clock=clock),
                related_limit=limit,
            ),
            guides=GuideLoader(
                ContentCache(GuideStore(config.guides_path), max_age=max_age, clock=clock),
                related_limit=limit,
            ),
            quizzes=QuizLoader(
                ContentCache(QuizStore(config.quizzes_path), max_age=max_age, clock=clock),
                related_limit=limit,
            ),
        )

    def invalidate(self) -> None:
        """Drop every cached snapshot."""
        for loader in (self.articles, self.guides, self.quizzes):
            loader.cache.invalidate()

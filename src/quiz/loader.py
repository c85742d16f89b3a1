"""Quiz loader: cached quiz collection plus listing helpers."""

from __future__ import annotations

from sitecontent.content.cache import ContentCache
from sitecontent.content.loaders import ContentLoader
from sitecontent.content.related import DEFAULT_RELATED_LIMIT
from sitecontent.quiz.models import Quiz, QuizSummary
from sitecontent.quiz.related import QuizRelatednessScorer


class QuizLoader(ContentLoader[Quiz]):
    """Quizzes from ``content/quizzes``, looked up by quiz id."""

    def __init__(
        self,
        cache: ContentCache[Quiz],
        *,
        scorer: QuizRelatednessScorer | None = None,
        related_limit: int = DEFAULT_RELATED_LIMIT,
    ) -> None:
        super().__init__(
            cache,
            scorer=scorer or QuizRelatednessScorer(),
            related_limit=related_limit,
        )

    async def get_metadata(self) -> list[QuizSummary]:
        """Listing data for every quiz, without question bodies."""
        return [QuizSummary.from_quiz(quiz) for quiz in await self._cache.get_all()]

    async def get_categories(self) -> list[str]:
        """Unique quiz categories, sorted."""
        return sorted({quiz.category for quiz in await self._cache.get_all()})

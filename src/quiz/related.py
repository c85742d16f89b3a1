"""Quiz-specific relatedness: difficulty closeness and creation recency."""

from __future__ import annotations

from datetime import datetime, timedelta

from sitecontent.content.related import RelatednessScorer
from sitecontent.quiz.models import DifficultyLevels, Quiz

QUIZ_RECENCY_WINDOW = timedelta(days=90)

# (maximum summed difference, points), checked in order.
DIFFICULTY_SIMILARITY_BANDS: tuple[tuple[int, int], ...] = ((3, 3), (6, 2), (9, 1))


def difficulty_similarity_points(current: DifficultyLevels, candidate: DifficultyLevels) -> int:
    """Points for how close two difficulty distributions are (0-3)."""
    difference = current.distance(candidate)
    for limit, points in DIFFICULTY_SIMILARITY_BANDS:
        if difference <= limit:
            return points
    return 0


class QuizRelatednessScorer(RelatednessScorer):
    """Tags, category, difficulty closeness, and a 90-day creation bonus."""

    def __init__(
        self,
        *,
        recency_window: timedelta = QUIZ_RECENCY_WINDOW,
        now: datetime | None = None,
    ) -> None:
        super().__init__(recency_window=recency_window, now=now)

    def extra_points(self, current: Quiz | None, candidate: Quiz) -> int:
        if current is None:
            return 0
        return difficulty_similarity_points(
            current.difficulty_levels, candidate.difficulty_levels
        )

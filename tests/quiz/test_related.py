"""Tests for quiz relatedness scoring."""

from datetime import UTC, datetime, timedelta

import pytest
from sitecontent.quiz.models import DifficultyLevels, Quiz
from sitecontent.quiz.related import QuizRelatednessScorer, difficulty_similarity_points

NOW = datetime(2026, 10, 19, tzinfo=UTC)


def _make_quiz(
    quiz_id: str,
    tags: list[str] | None = None,
    category: str = "",
    days_old: int | None = None,
    levels: tuple[int, int, int] = (1, 1, 1),
) -> Quiz:
    created = (NOW - timedelta(days=days_old)).isoformat() if days_old is not None else None
    beginner, intermediate, advanced = levels
    return Quiz.model_validate(
        {
            "id": quiz_id,
            "title": quiz_id,
            "category": category,
            "metadata": {
                "tags": tags or [],
                "createdDate": created,
                "difficultyLevels": {
                    "beginner": beginner,
                    "intermediate": intermediate,
                    "advanced": advanced,
                },
            },
        }
    )


class TestDifficultySimilarity:
    @pytest.mark.parametrize(
        ("other", "points"),
        [
            ((3, 3, 3), 3),
            ((5, 3, 4), 3),
            ((6, 3, 3), 3),
            ((7, 3, 3), 2),
            ((3, 9, 3), 2),
            ((3, 10, 3), 1),
            ((0, 2, 6), 1),
            ((13, 3, 3), 0),
        ],
    )
    def test_bands(self, other: tuple[int, int, int], points: int):
        base = DifficultyLevels(beginner=3, intermediate=3, advanced=3)
        candidate = DifficultyLevels(beginner=other[0], intermediate=other[1], advanced=other[2])
        assert difficulty_similarity_points(base, candidate) == points


class TestQuizRelatednessScorer:
    @pytest.fixture
    def scorer(self) -> QuizRelatednessScorer:
        return QuizRelatednessScorer(now=NOW)

    def test_recency_window_is_ninety_days(self, scorer: QuizRelatednessScorer):
        assert scorer.recency_window == timedelta(days=90)

    def test_all_signals(self, scorer: QuizRelatednessScorer):
        current = _make_quiz("current", tags=["git", "cli"], category="git")
        candidate = _make_quiz("other", tags=["git"], category="git", days_old=60)
        # 10 tag + 5 category + 2 recent + 3 same difficulty
        assert scorer.score(current, candidate, category_slug="git") == 20

    def test_old_quiz_gets_no_recency(self, scorer: QuizRelatednessScorer):
        current = _make_quiz("current", levels=(10, 0, 0))
        candidate = _make_quiz("other", days_old=120, levels=(0, 0, 10))
        assert scorer.score(current, candidate) == 0

    def test_no_current_quiz_skips_difficulty(self, scorer: QuizRelatednessScorer):
        candidate = _make_quiz("other")
        assert scorer.score(None, candidate) == 0

    def test_rank(self, scorer: QuizRelatednessScorer):
        quizzes = [
            _make_quiz("current", tags=["git"], category="git", levels=(2, 2, 2)),
            _make_quiz("far", levels=(20, 0, 0)),
            _make_quiz("close", levels=(2, 2, 3)),
            _make_quiz("tagged", tags=["git"], levels=(20, 0, 0)),
        ]
        ranked = scorer.rank(quizzes, "current")
        assert [quiz.id for quiz in ranked] == ["tagged", "close", "far"]

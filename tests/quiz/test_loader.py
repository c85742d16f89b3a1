"""Tests for QuizLoader."""

import json
from datetime import UTC, datetime
from pathlib import Path

import pytest
from sitecontent.content.cache import ContentCache
from sitecontent.quiz.loader import QuizLoader
from sitecontent.quiz.related import QuizRelatednessScorer
from sitecontent.quiz.store import QuizStore

NOW = datetime(2026, 10, 19, tzinfo=UTC)


def _write_quiz(
    directory: Path,
    quiz_id: str,
    category: str,
    tags: list[str],
    difficulties: list[str],
) -> None:
    directory.mkdir(parents=True, exist_ok=True)
    document = {
        "id": quiz_id,
        "title": quiz_id.replace("-", " ").title(),
        "description": f"About {quiz_id}",
        "category": category,
        "questions": [
            {
                "id": f"q{i}",
                "options": ["a", "b"],
                "correctAnswer": 0,
                "difficulty": difficulty,
                "points": 10,
            }
            for i, difficulty in enumerate(difficulties)
        ],
        "metadata": {"estimatedTime": "5 minutes", "tags": tags},
    }
    (directory / f"{quiz_id}.json").write_text(json.dumps(document), encoding="utf-8")


@pytest.fixture
def loader(tmp_path: Path) -> QuizLoader:
    _write_quiz(tmp_path, "git-basics", "git", ["git"], ["beginner", "beginner"])
    _write_quiz(tmp_path, "git-rebase", "git", ["git", "rebase"], ["beginner", "advanced"])
    _write_quiz(tmp_path, "docker-101", "containers", ["docker"], ["intermediate"] * 12)
    return QuizLoader(
        ContentCache(QuizStore(tmp_path)), scorer=QuizRelatednessScorer(now=NOW)
    )


class TestQuizLoader:
    def test_default_scorer_is_quiz_scorer(self, tmp_path: Path):
        loader = QuizLoader(ContentCache(QuizStore(tmp_path)))
        assert isinstance(loader.scorer, QuizRelatednessScorer)

    @pytest.mark.asyncio
    async def test_get_by_slug_uses_quiz_id(self, loader: QuizLoader):
        quiz = await loader.get_by_slug("git-rebase")
        assert quiz.title == "Git Rebase"
        assert len(quiz.questions) == 2

    @pytest.mark.asyncio
    async def test_get_related(self, loader: QuizLoader):
        related = await loader.get_related("git-basics")
        # rebase: 10 tag + 5 category + 3 difficulty; docker: 0
        assert [quiz.id for quiz in related] == ["git-rebase", "docker-101"]

    @pytest.mark.asyncio
    async def test_get_by_category(self, loader: QuizLoader):
        quizzes = await loader.get_by_category("git")
        assert [quiz.id for quiz in quizzes] == ["git-basics", "git-rebase"]

    @pytest.mark.asyncio
    async def test_get_metadata(self, loader: QuizLoader):
        summaries = {summary.id: summary for summary in await loader.get_metadata()}
        assert summaries["docker-101"].total_questions == 12
        assert summaries["docker-101"].total_points == 120
        assert summaries["git-rebase"].difficulty_levels.advanced == 1

    @pytest.mark.asyncio
    async def test_get_categories(self, loader: QuizLoader):
        assert await loader.get_categories() == ["containers", "git"]

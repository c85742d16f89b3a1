"""Quiz domain: quiz models, JSON store, loader, ranking and validation."""

from sitecontent.quiz.loader import QuizLoader
from sitecontent.quiz.models import (
    Difficulty,
    DifficultyLevels,
    Quiz,
    QuizBranch,
    QuizMetadata,
    QuizQuestion,
    QuizSummary,
    QuizTheme,
)
from sitecontent.quiz.related import QuizRelatednessScorer
from sitecontent.quiz.store import QuizStore
from sitecontent.quiz.validation import (
    ValidationIssue,
    ValidationResult,
    validate_all_quizzes,
    validate_quiz,
)

__all__ = [
    "Difficulty",
    "DifficultyLevels",
    "Quiz",
    "QuizBranch",
    "QuizLoader",
    "QuizMetadata",
    "QuizQuestion",
    "QuizRelatednessScorer",
    "QuizStore",
    "QuizSummary",
    "QuizTheme",
    "ValidationIssue",
    "ValidationResult",
    "validate_all_quizzes",
    "validate_quiz",
]

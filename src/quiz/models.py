"""Quiz domain models: pure Pydantic v2 data types.

A quiz file is one JSON document (``content/quizzes/<id>.json``) with
camelCase keys. ``total_points`` and ``metadata.difficulty_levels`` are
derived from the questions when the file leaves them out.
"""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import Field, field_validator, model_validator

from sitecontent.content.models import ContentModel
from sitecontent.shared.dates import parse_timestamp


class Difficulty(StrEnum):
    """Question difficulty levels."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class QuizBranch(ContentModel):
    """A git branch drawn in a scenario question."""

    name: str
    commits: list[str] = Field(default_factory=list)
    current: bool = False


class QuizQuestion(ContentModel):
    """A single multiple-choice question."""

    id: str
    title: str = ""
    description: str = ""
    situation: str | None = None
    branches: list[QuizBranch] | None = None
    conflict: str | None = None
    code_example: str | None = None
    options: list[str] = Field(default_factory=list)
    correct_answer: int
    explanation: str = ""
    difficulty: Difficulty
    points: int | float = 0
    hint: str | None = None


class DifficultyLevels(ContentModel):
    """Question counts per difficulty."""

    beginner: int = 0
    intermediate: int = 0
    advanced: int = 0

    @classmethod
    def from_questions(cls, questions: list[QuizQuestion]) -> DifficultyLevels:
        counts = {level: 0 for level in Difficulty}
        for question in questions:
            counts[question.difficulty] += 1
        return cls(
            beginner=counts[Difficulty.BEGINNER],
            intermediate=counts[Difficulty.INTERMEDIATE],
            advanced=counts[Difficulty.ADVANCED],
        )

    def distance(self, other: DifficultyLevels) -> int:
        """Summed absolute difference across the three buckets."""
        return (
            abs(self.beginner - other.beginner)
            + abs(self.intermediate - other.intermediate)
            + abs(self.advanced - other.advanced)
        )


class QuizTheme(ContentModel):
    primary_color: str = ""
    gradient_from: str = ""
    gradient_to: str = ""


class QuizMetadata(ContentModel):
    estimated_time: str = ""
    difficulty_levels: DifficultyLevels | None = None
    created_date: datetime | None = None
    tags: list[str] = Field(default_factory=list)

    @field_validator("created_date", mode="before")
    @classmethod
    def _coerce_created(cls, value: Any) -> datetime | None:
        return parse_timestamp(value)


class Quiz(ContentModel):
    """A quiz configuration.

    Exposes ``slug``, ``tags``, ``category_slug`` and ``published`` so
    the relatedness scorer can treat it like any other content item.
    """

    id: str
    title: str
    description: str = ""
    category: str = ""
    icon: str = ""
    total_points: int | float = 0
    questions: list[QuizQuestion] = Field(default_factory=list)
    theme: QuizTheme | None = None
    metadata: QuizMetadata = Field(default_factory=QuizMetadata)

    @model_validator(mode="after")
    def _fill_derived_fields(self) -> Quiz:
        if not self.total_points:
            self.total_points = sum(question.points for question in self.questions)
        if self.metadata.difficulty_levels is None:
            self.metadata.difficulty_levels = DifficultyLevels.from_questions(self.questions)
        return self

    @property
    def slug(self) -> str:
        return self.id

    @property
    def tags(self) -> list[str]:
        return self.metadata.tags

    @property
    def category_slug(self) -> str | None:
        return self.category or None

    @property
    def published(self) -> datetime | None:
        return self.metadata.created_date

    @property
    def difficulty_levels(self) -> DifficultyLevels:
        return self.metadata.difficulty_levels or DifficultyLevels.from_questions(self.questions)


class QuizSummary(ContentModel):
    """Listing metadata for a quiz, without its questions."""

    id: str
    title: str
    description: str
    category: str
    icon: str
    total_questions: int
    total_points: int | float
    estimated_time: str
    theme: QuizTheme | None = None
    difficulty_levels: DifficultyLevels
    created_date: datetime | None = None

    @classmethod
    def from_quiz(cls, quiz: Quiz) -> QuizSummary:
        return cls(
            id=quiz.id,
            title=quiz.title,
            description=quiz.description,
            category=quiz.category,
            icon=quiz.icon,
            total_questions=len(quiz.questions),
            total_points=quiz.total_points,
            estimated_time=quiz.metadata.estimated_time,
            theme=quiz.theme,
            difficulty_levels=quiz.difficulty_levels,
            created_date=quiz.metadata.created_date,
        )

"""Structural and statistical checks for quiz configurations.

``validate_quiz`` never raises on bad data: every problem becomes a
``ValidationIssue`` in the result. Errors make a quiz unacceptable;
warnings are advisory. All checks run even when earlier ones fail.

Beyond per-field schema rules the validator looks at the quiz as a
whole: declared vs. summed points, duplicate question ids, difficulty
spread, which option index holds the correct answer (skew), and
near-identical answer options measured by Levenshtein distance.
"""

from __future__ import annotations

import asyncio
import json
import logging
import math
from collections import Counter
from collections.abc import Mapping
from enum import StrEnum
from itertools import combinations
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, computed_field

from sitecontent.quiz.models import Difficulty, Quiz
from sitecontent.quiz.store import QUIZ_SUFFIX

logger = logging.getLogger(__name__)

REQUIRED_QUIZ_FIELDS: dict[str, str] = {
    "id": "ID",
    "title": "title",
    "description": "description",
    "category": "category",
}
REQUIRED_QUESTION_FIELDS: dict[str, str] = {
    "id": "ID",
    "title": "title",
    "description": "description",
    "explanation": "explanation",
}

MAX_TITLE_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 300
MIN_EXPLANATION_LENGTH = 50

SIMILARITY_THRESHOLD = 0.8
SKEW_THRESHOLD_PERCENT = 50
MIN_QUESTIONS_FOR_COVERAGE = 8
COVERED_OPTION_INDICES = range(4)
DIFFICULTY_VALUES = tuple(level.value for level in Difficulty)
ADVANCED_EXPECTED_ABOVE = 5


class Severity(StrEnum):
    ERROR = "error"
    WARNING = "warning"


class ValidationIssue(BaseModel):
    """One problem, located by a structural path like ``questions[2].options``."""

    path: str
    message: str
    severity: Severity


class ValidationResult(BaseModel):
    """Errors block acceptance; warnings are advisory."""

    errors: list[ValidationIssue] = Field(default_factory=list)
    warnings: list[ValidationIssue] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_valid(self) -> bool:
        return not self.errors


class _Issues:
    """Accumulates issues while the checks run."""

    def __init__(self) -> None:
        self.errors: list[ValidationIssue] = []
        self.warnings: list[ValidationIssue] = []

    def error(self, path: str, message: str) -> None:
        self.errors.append(ValidationIssue(path=path, message=message, severity=Severity.ERROR))

    def warning(self, path: str, message: str) -> None:
        self.warnings.append(
            ValidationIssue(path=path, message=message, severity=Severity.WARNING)
        )

    def result(self) -> ValidationResult:
        return ValidationResult(errors=self.errors, warnings=self.warnings)


# ---------------------------------------------------------------------------
# String similarity
# ---------------------------------------------------------------------------


def levenshtein_distance(first: str, second: str) -> int:
    """Classic edit distance (insert, delete, substitute all cost 1).

    Fills the full ``(len(second) + 1) x (len(first) + 1)`` table.
    """
    rows, cols = len(second) + 1, len(first) + 1
    table = [[0] * cols for _ in range(rows)]
    for i in range(rows):
        table[i][0] = i
    for j in range(cols):
        table[0][j] = j

    for i in range(1, rows):
        for j in range(1, cols):
            if second[i - 1] == first[j - 1]:
                table[i][j] = table[i - 1][j - 1]
            else:
                table[i][j] = 1 + min(
                    table[i - 1][j - 1],
                    table[i][j - 1],
                    table[i - 1][j],
                )
    return table[-1][-1]


def string_similarity(first: str, second: str) -> float:
    """Return 1 - distance / len(longer); 1.0 for two empty strings."""
    longer, shorter = (first, second) if len(first) > len(second) else (second, first)
    if not longer:
        return 1.0
    return (len(longer) - levenshtein_distance(longer, shorter)) / len(longer)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def _is_scalar_id(value: Any) -> bool:
    return isinstance(value, str) or _is_int(value)


def _percent(count: int, total: int) -> int:
    """Percentage rounded half up (60.5 -> 61)."""
    return math.floor(count * 100 / total + 0.5)


# ---------------------------------------------------------------------------
# Per-question checks
# ---------------------------------------------------------------------------


def _check_question(question: Any, path: str, issues: _Issues) -> None:
    if not isinstance(question, Mapping):
        issues.error(path, "Question must be an object")
        return

    for field, label in REQUIRED_QUESTION_FIELDS.items():
        if _is_blank(question.get(field)):
            issues.error(f"{path}.{field}", f"Question {label} is required")

    qid = question.get("id")
    if not _is_blank(qid) and not _is_scalar_id(qid):
        issues.error(f"{path}.id", "Question ID must be a string or integer")

    options = question.get("options")
    if not isinstance(options, list) or len(options) < 2:
        issues.error(f"{path}.options", "Question must have at least 2 options")
    else:
        for index, option in enumerate(options):
            if not isinstance(option, str) or not option.strip():
                issues.error(f"{path}.options[{index}]", "Option cannot be empty")
        _check_correct_answer(question.get("correctAnswer"), len(options), path, issues)
        _check_similar_options(options, path, issues)

    difficulty = question.get("difficulty")
    if _is_blank(difficulty):
        issues.error(f"{path}.difficulty", "Question difficulty is required")
    elif not isinstance(difficulty, str) or difficulty not in DIFFICULTY_VALUES:
        allowed = ", ".join(DIFFICULTY_VALUES)
        issues.error(f"{path}.difficulty", f"Question difficulty must be one of: {allowed}")

    points = question.get("points")
    if not _is_number(points) or points <= 0:
        issues.error(f"{path}.points", "Question points must be a positive number")

    title = question.get("title")
    if isinstance(title, str) and len(title) > MAX_TITLE_LENGTH:
        issues.warning(
            f"{path}.title", "Question title is quite long - consider shortening for better UX"
        )
    description = question.get("description")
    if isinstance(description, str) and len(description) > MAX_DESCRIPTION_LENGTH:
        issues.warning(
            f"{path}.description", "Question description is quite long - consider shortening"
        )
    explanation = question.get("explanation")
    if isinstance(explanation, str) and 0 < len(explanation.strip()) < MIN_EXPLANATION_LENGTH:
        issues.warning(
            f"{path}.explanation",
            "Explanation seems quite short - consider providing more detail",
        )


def _check_correct_answer(answer: Any, option_count: int, path: str, issues: _Issues) -> None:
    answer_path = f"{path}.correctAnswer"
    if answer is None:
        issues.error(answer_path, "Correct answer index is required")
    elif not _is_int(answer):
        issues.error(answer_path, f"Correct answer index ({answer!r}) must be an integer")
    elif not 0 <= answer < option_count:
        issues.error(
            answer_path,
            f"Correct answer index ({answer}) is out of range (0-{option_count - 1})",
        )


def _check_similar_options(options: list[Any], path: str, issues: _Issues) -> None:
    for (i, first), (j, second) in combinations(enumerate(options), 2):
        if not (isinstance(first, str) and isinstance(second, str)):
            continue
        if string_similarity(first, second) > SIMILARITY_THRESHOLD:
            issues.warning(
                f"{path}.options",
                f"Options {i} and {j} are very similar - this might confuse users",
            )


# ---------------------------------------------------------------------------
# Whole-quiz checks
# ---------------------------------------------------------------------------


def _check_theme(theme: Any, issues: _Issues) -> None:
    if not isinstance(theme, Mapping):
        issues.warning("theme", "Theme configuration is missing")
        return
    if _is_blank(theme.get("gradientFrom")):
        issues.warning("theme.gradientFrom", "Gradient from color is missing")
    if _is_blank(theme.get("gradientTo")):
        issues.warning("theme.gradientTo", "Gradient to color is missing")


def _check_metadata(metadata: Any, issues: _Issues) -> None:
    if not isinstance(metadata, Mapping):
        issues.warning("metadata", "Metadata is missing")
        return
    if _is_blank(metadata.get("estimatedTime")):
        issues.warning("metadata.estimatedTime", "Estimated time is missing")


def _check_total_points(declared: Any, questions: list[Mapping[str, Any]], issues: _Issues) -> None:
    # Some quizzes override the total on purpose, so drift is only a warning.
    calculated = sum(q.get("points") for q in questions if _is_number(q.get("points")))
    if declared and _is_number(declared) and declared != calculated:
        issues.warning(
            "totalPoints",
            f"Total points ({declared}) doesn't match sum of question points ({calculated})",
        )


def _check_duplicate_ids(questions: list[Mapping[str, Any]], issues: _Issues) -> None:
    counts = Counter(
        q.get("id")
        for q in questions
        if not _is_blank(q.get("id")) and _is_scalar_id(q.get("id"))
    )
    duplicates = [str(qid) for qid, count in counts.items() if count > 1]
    if duplicates:
        issues.error("questions", f"Duplicate question IDs found: {', '.join(duplicates)}")


def _check_difficulty_spread(questions: list[Mapping[str, Any]], issues: _Issues) -> None:
    counts = Counter(
        q.get("difficulty") for q in questions if isinstance(q.get("difficulty"), str)
    )
    if counts[Difficulty.BEGINNER.value] == 0:
        issues.warning(
            "questions",
            "No beginner questions found - consider adding some for accessibility",
        )
    if len(questions) > ADVANCED_EXPECTED_ABOVE and counts[Difficulty.ADVANCED.value] == 0:
        issues.warning(
            "questions",
            "No advanced questions found - consider adding some for experienced users",
        )


def _check_answer_distribution(questions: list[Mapping[str, Any]], issues: _Issues) -> None:
    total = len(questions)
    if total == 0:
        return

    distribution = Counter(
        q.get("correctAnswer") for q in questions if _is_int(q.get("correctAnswer"))
    )
    summary = ", ".join(
        f"Option {answer}: {count} questions ({_percent(count, total)}%)"
        for answer, count in sorted(distribution.items())
    )

    for answer, count in sorted(distribution.items()):
        if count * 100 / total > SKEW_THRESHOLD_PERCENT:
            issues.warning(
                "questions.correctAnswer",
                f"Answer option {answer} is used {count}/{total} times "
                f"({_percent(count, total)}%) - Distribution: {summary}. "
                "Consider redistributing answers more evenly.",
            )

    if total >= MIN_QUESTIONS_FOR_COVERAGE:
        for option in COVERED_OPTION_INDICES:
            if distribution[option] == 0:
                issues.warning(
                    "questions.correctAnswer",
                    f"Answer option {option} is never used - Distribution: {summary}. "
                    "Consider using all answer options for better balance.",
                )


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------


def validate_quiz(config: Quiz | Mapping[str, Any]) -> ValidationResult:
    """Validate a quiz model or a raw (camelCase) quiz mapping.

    Raw mappings are accepted so that files too broken to load as a
    ``Quiz`` can still be reported on field by field.
    """
    data: Mapping[str, Any] = (
        config.model_dump(by_alias=True, mode="json") if isinstance(config, Quiz) else config
    )
    issues = _Issues()

    for field, label in REQUIRED_QUIZ_FIELDS.items():
        if _is_blank(data.get(field)):
            issues.error(field, f"Quiz {label} is required")

    raw_questions = data.get("questions")
    questions: list[Any] = raw_questions if isinstance(raw_questions, list) else []
    if not questions:
        issues.error("questions", "Quiz must have at least one question")
    for index, question in enumerate(questions):
        _check_question(question, f"questions[{index}]", issues)

    _check_theme(data.get("theme"), issues)
    _check_metadata(data.get("metadata"), issues)

    well_formed = [q for q in questions if isinstance(q, Mapping)]
    _check_total_points(data.get("totalPoints"), well_formed, issues)
    _check_duplicate_ids(well_formed, issues)
    if well_formed:
        _check_difficulty_spread(well_formed, issues)
    _check_answer_distribution(well_formed, issues)

    return issues.result()


def _list_quiz_files(directory: Path) -> list[Path]:
    return sorted(
        path for path in directory.iterdir() if path.is_file() and path.suffix == QUIZ_SUFFIX
    )


def _file_error(message: str) -> ValidationResult:
    return ValidationResult(
        errors=[ValidationIssue(path="file", message=message, severity=Severity.ERROR)]
    )


async def validate_all_quizzes(directory: Path | str) -> dict[str, ValidationResult]:
    """Validate every quiz file in *directory*, keyed by file name.

    Files that are not valid JSON objects get a single ``file`` error.
    An unreadable directory is logged and yields ``{}``.
    """
    directory = Path(directory)
    try:
        paths = await asyncio.to_thread(_list_quiz_files, directory)
    except OSError as exc:
        logger.error("Failed to read quizzes directory %s: %s", directory, exc)
        return {}

    results: dict[str, ValidationResult] = {}
    for path in paths:
        try:
            raw = json.loads(await asyncio.to_thread(path.read_text, encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            results[path.name] = _file_error(f"Failed to parse quiz file: {exc}")
            continue
        if not isinstance(raw, Mapping):
            results[path.name] = _file_error("Quiz file must contain a JSON object")
            continue
        results[path.name] = validate_quiz(raw)

    invalid = sum(1 for result in results.values() if not result.is_valid)
    logger.info("Validated %d quiz files in %s (%d invalid)", len(results), directory, invalid)
    return results

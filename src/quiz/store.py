"""JSON-backed quiz collection store."""

from __future__ import annotations

import json

from sitecontent.content.store import CollectionStore
from sitecontent.quiz.models import Quiz

QUIZ_SUFFIX = ".json"


class QuizStore(CollectionStore[Quiz]):
    """Quizzes stored as ``<id>.json`` files.

    Direct lookups read ``<id>.json``; collection reads take the ``id``
    from each document.
    """

    def _list_slugs(self) -> list[str]:
        return [
            path.stem
            for path in sorted(self._directory.iterdir())
            if path.is_file() and path.suffix == QUIZ_SUFFIX
        ]

    def _read(self, slug: str) -> Quiz:
        path = self._directory / f"{slug}{QUIZ_SUFFIX}"
        return Quiz.model_validate(json.loads(path.read_text(encoding="utf-8")))

"""Content domain models: pure Pydantic v2 data types.

Articles and guides share the ``ContentItem`` base: a slug-identified
record with optional category, ordered tags, and publication dates.
Header keys on disk are camelCase (``publishedAt``); attributes are
snake_case and either spelling is accepted on input.
"""

from __future__ import annotations

import math
import re
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from sitecontent.shared.dates import parse_timestamp

WORDS_PER_MINUTE = 200

_SLUG_STRIP = re.compile(r"[^a-z0-9]+")


def slugify(value: str) -> str:
    """Lowercase *value* and collapse non-alphanumerics into single dashes."""
    return _SLUG_STRIP.sub("-", value.lower()).strip("-")


class ContentModel(BaseModel):
    """Base config: camelCase aliases, snake_case names, unknown keys ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class Category(ContentModel):
    """A category as a display name plus URL slug."""

    name: str
    slug: str


class Author(ContentModel):
    """Byline of an article or guide."""

    name: str
    slug: str = ""


class ContentItem(ContentModel):
    """Fields common to every slug-identified content record."""

    slug: str
    title: str = ""
    content: str = ""
    category: Category | None = None
    tags: list[str] = Field(default_factory=list)
    published_at: datetime | None = None
    updated_at: datetime | None = None
    author: Author | None = None
    image: str | None = None
    reading_time: str | None = None

    @field_validator("published_at", "updated_at", mode="before")
    @classmethod
    def _coerce_timestamp(cls, value: Any) -> datetime | None:
        return parse_timestamp(value)

    @field_validator("category", mode="before")
    @classmethod
    def _coerce_category(cls, value: Any) -> Any:
        # Older files carry a bare category name.
        if isinstance(value, str):
            return {"name": value, "slug": slugify(value)} if value.strip() else None
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def _coerce_tags(cls, value: Any) -> Any:
        """Accept a single tag string and drop repeats, keeping first-seen order."""
        if value is None:
            return []
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, list):
            return value
        seen: set[str] = set()
        unique: list[Any] = []
        for tag in value:
            if tag in seen:
                continue
            seen.add(tag)
            unique.append(tag)
        return unique

    @property
    def category_slug(self) -> str | None:
        return self.category.slug if self.category else None

    @property
    def published(self) -> datetime | None:
        """Publication timestamp used for recency and date ordering."""
        return self.published_at


class Article(ContentItem):
    """A single markdown article (``content/posts/<slug>.md``)."""

    excerpt: str | None = None
    date: datetime | None = None
    featured: bool = False

    @field_validator("date", mode="before")
    @classmethod
    def _coerce_date(cls, value: Any) -> datetime | None:
        return parse_timestamp(value)

    @property
    def published(self) -> datetime | None:
        return self.published_at or self.date


class GuidePart(ContentModel):
    """One chapter file of a multi-part guide."""

    slug: str
    title: str = ""
    order: int | None = None
    content: str = ""
    description: str | None = None

    @property
    def word_count(self) -> int:
        return len(self.content.split())


class Guide(ContentItem):
    """A multi-part guide (``content/guides/<slug>/``).

    Parts are kept sorted by ``order`` (missing order counts as 0, ties
    keep file order). ``parts_count`` and ``reading_time`` are derived
    from the parts on construction.
    """

    description: str | None = None
    parts: list[GuidePart] = Field(default_factory=list)
    parts_count: int = 0

    @model_validator(mode="after")
    def _derive_part_fields(self) -> Guide:
        self.parts = sorted(self.parts, key=lambda part: part.order or 0)
        self.parts_count = len(self.parts)
        minutes = sum(math.ceil(part.word_count / WORDS_PER_MINUTE) for part in self.parts)
        self.reading_time = f"{minutes} min read"
        return self

    def get_part(self, part_slug: str) -> GuidePart | None:
        """Return the part with *part_slug*, or ``None``."""
        for part in self.parts:
            if part.slug == part_slug:
                return part
        return None

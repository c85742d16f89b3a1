"""YAML front matter splitting for markdown content files.

A content file looks like::

    ---
    title: Docker for CI
    tags: [docker, ci]
    ---
    Body text...

``parse_frontmatter`` returns the decoded header, the body, and the raw
header block, so ``fm.raw + fm.body`` reproduces the file exactly.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from sitecontent.errors import FrontmatterError

_FRONTMATTER_RE = re.compile(
    r"\A---[ \t]*\r?\n(.*?)^---[ \t]*(?:\r?\n|\Z)",
    re.DOTALL | re.MULTILINE,
)


@dataclass(frozen=True)
class Frontmatter:
    """A markdown file split into header data and body."""

    data: dict[str, Any] = field(default_factory=dict)
    body: str = ""
    raw: str = ""

    def render(self) -> str:
        """Return the original file text."""
        return self.raw + self.body


def parse_frontmatter(text: str, *, path: Path | str = "<string>") -> Frontmatter:
    """Split *text* into front matter and body.

    Text without a leading ``---`` block has empty data and the whole
    text as body.

    Raises:
        FrontmatterError: If the header is not valid YAML or not a mapping.
    """
    match = _FRONTMATTER_RE.match(text)
    if match is None:
        return Frontmatter(data={}, body=text, raw="")

    try:
        data = yaml.safe_load(match.group(1))
    except yaml.YAMLError as exc:
        raise FrontmatterError(path, f"invalid YAML front matter: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FrontmatterError(path, "front matter must be a mapping")

    return Frontmatter(data=data, body=text[match.end():], raw=match.group(0))

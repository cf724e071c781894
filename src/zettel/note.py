"""Core Note dataclass."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass
class Note:
    """A single note file in the Zettelkasten."""

    id: str
    title: str
    path: Path
    body: str = ""
    tags: list[str] = field(default_factory=list)
    #: Ids this note links to, in first-seen order
    links: list[str] = field(default_factory=list)
    frontmatter: dict[str, Any] = field(default_factory=dict)

    @property
    def filename(self) -> str:
        return self.path.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "path": str(self.path),
            "tags": self.tags,
            "links": self.links,
            "frontmatter": self.frontmatter,
        }

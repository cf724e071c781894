"""Graph queries over the link network: backlinks, forward links, dead links,
unlinked notes, and the combined network view of one note.

An empty result is a normal outcome and comes back as an empty list.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from zettel.errors import NoteDecodeError
from zettel.parser import extract_links, extract_tags, read_text
from zettel.patterns import link_pattern

if TYPE_CHECKING:
    from zettel.config import ZettelConfig
    from zettel.corpus import CorpusIndex
    from zettel.ids import IdentifierCodec
    from zettel.search import ContentSearch

logger = logging.getLogger(__name__)


@dataclass
class Network:
    """Backlinks and forward links of one note.

    A file can legitimately sit in both groups (mutual or self links).
    """

    note_id: str
    backlinks: list[Path] = field(default_factory=list)
    forward_links: list[Path] = field(default_factory=list)

    def groups(self) -> dict[str, list[Path]]:
        return {"backlinks": self.backlinks, "forward_links": self.forward_links}

    def is_empty(self) -> bool:
        return not self.backlinks and not self.forward_links


class GraphQueries:
    def __init__(
        self,
        config: "ZettelConfig",
        codec: "IdentifierCodec",
        corpus: "CorpusIndex",
        search: "ContentSearch",
    ) -> None:
        self.config = config
        self.codec = codec
        self.corpus = corpus
        self.search = search
        self.link_re = re.compile(self.link_pattern())
        self.tag_re = re.compile(config.tag_pattern)

    def link_pattern(self, note_id: str | None = None, capture: bool = True) -> str:
        return link_pattern(
            self.config.link_format,
            self.config.id_pattern,
            self.config.title_pattern,
            note_id=note_id,
            capture=capture,
        )

    # ------------------------------------------------------------------
    # Corpus snapshot helpers
    # ------------------------------------------------------------------

    def id_map(self) -> dict[str, Path]:
        """Map every corpus id to its file, from a single snapshot."""
        result: dict[str, Path] = {}
        for path in self.corpus.list_files(full_paths=True):
            note_id = self.codec.path_to_id(path)
            if note_id is None:
                continue
            if note_id in result:
                logger.warning("Duplicate id %s: %s and %s", note_id, result[note_id], path)
                continue
            result[note_id] = path
        return result

    def linked_ids(self) -> list[str]:
        """Ids that appear as a link target anywhere in the corpus (de-duped)."""
        matches = self.search.extract(self.link_pattern(capture=False), unique=True)
        ids: list[str] = []
        for text in matches:
            ids.extend(extract_links(text, self.link_re))
        return list(dict.fromkeys(ids))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def backlinks(self, note_id: str) -> list[Path]:
        """Files containing a link to *note_id*."""
        return sorted(self.search.search(self.link_pattern(note_id=note_id, capture=False)))

    def forward_links(self, note_path: Path) -> list[Path]:
        """Files of the existing notes that *note_path* links to, in link order."""
        text = read_text(note_path)
        ids = extract_links(text, self.link_re)
        if not ids:
            logger.debug("No links found in %s", note_path)
            return []
        known = self.id_map()
        return [known[note_id] for note_id in ids if note_id in known]

    def dead_links(self) -> list[str]:
        """Linked ids that have no note in the corpus."""
        known = self.id_map()
        return [note_id for note_id in self.linked_ids() if note_id not in known]

    def unlinked_notes(self) -> list[str]:
        """Corpus ids that no link anywhere points to."""
        linked = set(self.linked_ids())
        return [note_id for note_id in self.id_map() if note_id not in linked]

    def network(self, note_path: Path) -> Network:
        note_id = self.codec.path_to_id(note_path)
        if note_id is None:
            raise NoteDecodeError(Path(note_path).name)
        return Network(
            note_id=note_id,
            backlinks=self.backlinks(note_id),
            forward_links=self.forward_links(note_path),
        )

    # ------------------------------------------------------------------
    # Tags
    # ------------------------------------------------------------------

    def tags(self) -> list[str]:
        """Every tag used in the corpus, sorted."""
        return sorted(set(self.search.extract(self.config.tag_pattern, unique=True)))

    def tags_in_note(self, note_path: Path) -> list[str]:
        return extract_tags(read_text(note_path), self.tag_re)

    def notes_with_tag(self, tag: str) -> list[Path]:
        return sorted(self.search.search(re.escape(tag) + r"\b"))

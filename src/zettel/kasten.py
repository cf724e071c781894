"""Zettelkasten: one object wiring config, corpus, resolver, and queries.

Usage::

    zk = Zettelkasten(ZettelConfig(directory=Path("~/notes")))

    path = zk.create_note("Linking your thinking")
    zk.backlinks(zk.path_to_id(path))
    zk.dead_links()
    zk.network(path).groups()

Strategies can be injected: the content-search backend, the formatter
used for links and completion candidates, and the header function used for
new notes.  The corpus cache is a plain mapping that can be shared.
"""

from __future__ import annotations

import logging
import random
import re
from pathlib import Path
from typing import MutableMapping

from zettel.config import ZettelConfig
from zettel.corpus import CacheKey, CorpusIndex
from zettel.errors import NoteExistsError
from zettel.formatter import Formatter, HeaderFunction, format_note, header_function
from zettel.ids import IdentifierCodec
from zettel.note import Note
from zettel.parser import read_note, read_text
from zettel.patterns import link_pattern
from zettel.queries import GraphQueries, Network
from zettel.resolver import NoteResolver
from zettel.search import ContentSearch, GrepSearch, RegexSearch

logger = logging.getLogger(__name__)

_WORD_RE = re.compile(r"\S+")


class Zettelkasten:
    def __init__(
        self,
        config: ZettelConfig | None = None,
        *,
        cache: MutableMapping[CacheKey, list[Path]] | None = None,
        search: ContentSearch | None = None,
        formatter: Formatter = format_note,
        header: HeaderFunction | None = None,
    ) -> None:
        self.config = config or ZettelConfig()
        self.codec = IdentifierCodec(self.config)
        self.corpus = CorpusIndex(self.config, cache)
        self.resolver = NoteResolver(self.config, self.codec)
        self.search = search or self._default_search()
        self.queries = GraphQueries(self.config, self.codec, self.corpus, self.search)
        self.formatter = formatter
        self.header = header or header_function(self.config.header)

    def _default_search(self) -> ContentSearch:
        if self.config.search_backend == "regex":
            return RegexSearch(self.files)
        return GrepSearch(
            self.config.directory,
            self.config.extension,
            recursive=self.config.recursive,
            basic=self.config.grep_basic,
            executable=self.config.grep_executable,
            files=self.files,
        )

    # ------------------------------------------------------------------
    # Enumerations
    # ------------------------------------------------------------------

    def files(self, refresh: bool = False) -> list[Path]:
        return self.corpus.list_files(full_paths=True, refresh=refresh)

    def refresh(self) -> list[Path]:
        """Rescan the directory; call after notes are added, renamed or removed."""
        self.corpus.invalidate()
        return self.files(refresh=True)

    def ids(self) -> list[str]:
        return [i for i in (self.codec.path_to_id(p) for p in self.files()) if i is not None]

    def titles(self) -> list[str]:
        return [decoded[1] for decoded in map(self.codec.decode_filename, self.files()) if decoded]

    def notes(self) -> list[Note]:
        link_re = self.queries.link_re
        tag_re = self.queries.tag_re
        return [read_note(path, self.codec, link_re, tag_re) for path in self.files()]

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def id_to_path(self, note_id: str) -> Path:
        return self.resolver.id_to_path(note_id)

    def path_to_id(self, path: str | Path) -> str | None:
        return self.resolver.path_to_id(path)

    def id_to_title(self, note_id: str) -> str:
        return self.resolver.id_to_title(note_id)

    def note_file_path(self, note_id: str, title: str) -> Path:
        return self.resolver.note_file_path(note_id, title)

    def read(self, note_id: str) -> Note:
        return read_note(
            self.id_to_path(note_id), self.codec, self.queries.link_re, self.queries.tag_re
        )

    # ------------------------------------------------------------------
    # Creating and renaming notes
    # ------------------------------------------------------------------

    def new_id(self) -> str:
        return self.codec.generate_id(self.ids())

    def create_note(self, title: str, body: str = "") -> Path:
        """Write a new note with a fresh id and return its path."""
        note_id = self.new_id()
        path = self.note_file_path(note_id, title)
        if path.exists():
            raise NoteExistsError(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.header(title, note_id) + body, encoding="utf-8")
        logger.info("Created note %s", path)
        self.refresh()
        return path

    def rename_note(self, note_id: str, new_title: str) -> Path:
        """Give note *note_id* a new title; the id (and so every link) is kept."""
        source = self.id_to_path(note_id)
        target = self.note_file_path(note_id, new_title)
        if target == source:
            return source
        if target.exists():
            raise NoteExistsError(target)
        target.parent.mkdir(parents=True, exist_ok=True)
        source.rename(target)
        logger.info("Renamed %s -> %s", source.name, target.name)
        self.refresh()
        return target

    # ------------------------------------------------------------------
    # Formatting and completion
    # ------------------------------------------------------------------

    def link_to(self, note_id: str) -> str:
        return self.formatter(self.config.link_format, note_id, "")

    def link_with_title(self, note_id: str) -> str:
        return self.formatter(self.config.link_title_format, note_id, self.id_to_title(note_id))

    def completion_candidates(self) -> list[str]:
        return [
            self.formatter(self.config.completion_format, note_id, title)
            for note_id, title in filter(None, map(self.codec.decode_filename, self.files()))
        ]

    def id_from_candidate(self, candidate: str) -> str | None:
        """Recover the id from a string rendered with ``completion_format``."""
        pattern = link_pattern(
            self.config.completion_format, self.config.id_pattern, r".*"
        )
        match = re.fullmatch(pattern, candidate)
        return match.group(1) if match else None

    # ------------------------------------------------------------------
    # Graph queries
    # ------------------------------------------------------------------

    def backlinks(self, note_id: str) -> list[Path]:
        return self.queries.backlinks(note_id)

    def forward_links(self, note_path: Path) -> list[Path]:
        return self.queries.forward_links(note_path)

    def dead_links(self) -> list[str]:
        return self.queries.dead_links()

    def unlinked_notes(self) -> list[str]:
        return self.queries.unlinked_notes()

    def network(self, note_path: Path) -> Network:
        return self.queries.network(note_path)

    # ------------------------------------------------------------------
    # Tags and corpus statistics
    # ------------------------------------------------------------------

    def tags(self) -> list[str]:
        return self.queries.tags()

    def tags_in_note(self, note_path: Path) -> list[str]:
        return self.queries.tags_in_note(note_path)

    def notes_with_tag(self, tag: str) -> list[Path]:
        return self.queries.notes_with_tag(tag)

    def random_note(self, rng: random.Random | None = None) -> Path | None:
        files = self.files()
        if not files:
            return None
        return (rng or random).choice(files)

    def word_count(self) -> int:
        return sum(
            len(_WORD_RE.findall(read_text(path)))
            for path in self.files()
        )

"""Zettelkasten note-identity and link-resolution engine."""

from zettel.config import ZettelConfig
from zettel.corpus import CacheKey, CorpusIndex
from zettel.errors import (
    AmbiguousNoteError,
    ConfigError,
    ConfigurationWarning,
    NoteDecodeError,
    NoteExistsError,
    NoteNotFoundError,
    SearchError,
    ZettelError,
)
from zettel.formatter import format_note
from zettel.ids import IdentifierCodec
from zettel.kasten import Zettelkasten
from zettel.note import Note
from zettel.patterns import filename_pattern, link_pattern, to_posix
from zettel.queries import GraphQueries, Network
from zettel.resolver import NoteResolver
from zettel.search import ContentSearch, GrepSearch, RegexSearch

__all__ = [
    "Zettelkasten",
    "ZettelConfig",
    "Note",
    "IdentifierCodec",
    "CorpusIndex",
    "CacheKey",
    "NoteResolver",
    "GraphQueries",
    "Network",
    "ContentSearch",
    "GrepSearch",
    "RegexSearch",
    "format_note",
    "link_pattern",
    "filename_pattern",
    "to_posix",
    "ZettelError",
    "ConfigError",
    "NoteNotFoundError",
    "AmbiguousNoteError",
    "NoteDecodeError",
    "NoteExistsError",
    "SearchError",
    "ConfigurationWarning",
]

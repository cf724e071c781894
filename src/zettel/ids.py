"""Identifier codec: new ids, and filename <-> (id, title) conversion.

A note file is named ``<id><separator><title>.<extension>`` where the
separator also stands in for every space of the title::

    codec = IdentifierCodec(ZettelConfig(separator="-"))
    codec.encode_filename("202012091130", "my first note")
    # -> "202012091130-my-first-note.md"
    codec.decode_filename("202012091130-my-first-note.md")
    # -> ("202012091130", "my first note")
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Collection

from zettel.errors import ConfigError
from zettel.patterns import filename_pattern

if TYPE_CHECKING:
    from zettel.config import ZettelConfig

logger = logging.getLogger(__name__)

_TRAILING_DIGITS_RE = re.compile(r"(\d+)$")


class IdentifierCodec:
    def __init__(self, config: "ZettelConfig") -> None:
        self.config = config
        self.id_re = re.compile(config.id_pattern)
        self.filename_re = re.compile(filename_pattern(config.id_pattern, config.extension))

    # ------------------------------------------------------------------
    # Ids
    # ------------------------------------------------------------------

    def is_id(self, text: str) -> bool:
        return self.id_re.fullmatch(text) is not None

    def generate_id(self, existing: Collection[str] = (), now: datetime | None = None) -> str:
        """Return a new id from *now* (default: the current time).

        If the id is already in *existing* it is incremented numerically
        until it is free, so ``202012091130`` becomes ``202012091131``.
        Uniqueness only holds against *existing* at call time.
        """
        candidate = (now or datetime.now()).strftime(self.config.id_format)
        if not self.is_id(candidate):
            raise ConfigError(
                f"id_format {self.config.id_format!r} produced {candidate!r}, "
                f"which does not match id_pattern {self.config.id_pattern!r}"
            )
        taken = set(existing)
        while candidate in taken:
            logger.debug("Id %s already taken, incrementing", candidate)
            candidate = increment_id(candidate)
        return candidate

    # ------------------------------------------------------------------
    # Titles
    # ------------------------------------------------------------------

    def decode_title(self, raw: str) -> str:
        """On-disk title -> display title (separator becomes a space)."""
        return raw.replace(self.config.separator, " ")

    def encode_title(self, title: str) -> str:
        """Display title -> on-disk title (spaces become the separator).

        Line breaks count as spaces; other whitespace is kept so the title
        decodes back unchanged.
        """
        flat = " ".join(title.splitlines())
        return flat.replace(" ", self.config.separator)

    # ------------------------------------------------------------------
    # Filenames
    # ------------------------------------------------------------------

    def decode_filename(self, name: str | Path) -> tuple[str, str] | None:
        """Return ``(id, title)`` for a note filename, or ``None``."""
        match = self.filename_re.match(Path(name).name)
        if match is None:
            return None
        return match.group(1), self.decode_title(match.group(2))

    def encode_filename(self, note_id: str, title: str) -> str:
        return f"{note_id}{self.config.separator}{self.encode_title(title)}.{self.config.extension}"

    def path_to_id(self, path: str | Path) -> str | None:
        decoded = self.decode_filename(path)
        return decoded[0] if decoded else None


def increment_id(note_id: str) -> str:
    """Add one to the trailing number of *note_id*, keeping its width."""
    match = _TRAILING_DIGITS_RE.search(note_id)
    if match is None:
        raise ConfigError(f"Cannot increment id {note_id!r}: it does not end in digits")
    digits = match.group(1)
    return note_id[: match.start()] + str(int(digits) + 1).zfill(len(digits))

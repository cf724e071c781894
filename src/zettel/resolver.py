"""Note resolver: id <-> path lookups.

:meth:`NoteResolver.id_to_path` globs the filesystem directly rather than
reading the corpus cache, so it always reflects what is on disk.
"""

from __future__ import annotations

import glob
import re
from pathlib import Path
from typing import TYPE_CHECKING

from zettel.corpus import is_editor_artifact
from zettel.errors import AmbiguousNoteError, NoteDecodeError, NoteNotFoundError

if TYPE_CHECKING:
    from zettel.config import ZettelConfig
    from zettel.ids import IdentifierCodec


class NoteResolver:
    def __init__(self, config: "ZettelConfig", codec: "IdentifierCodec") -> None:
        self.config = config
        self.codec = codec

    def id_to_path(self, note_id: str) -> Path:
        """Return the single file for *note_id*.

        Raises :class:`NoteNotFoundError` when nothing matches and
        :class:`AmbiguousNoteError` when several files share the id.
        """
        matches = self._glob(note_id)
        if not matches:
            raise NoteNotFoundError(note_id)
        if len(matches) > 1:
            raise AmbiguousNoteError(note_id, matches)
        return matches[0]

    def path_to_id(self, path: str | Path) -> str | None:
        return self.codec.path_to_id(path)

    def id_to_title(self, note_id: str) -> str:
        path = self.id_to_path(note_id)
        decoded = self.codec.decode_filename(path.name)
        if decoded is None:
            raise NoteDecodeError(path.name, note_id)
        return decoded[1]

    def note_file_path(self, note_id: str, title: str) -> Path:
        """Canonical location of a note, used when creating or renaming it."""
        return self.config.subdirectory_for(note_id) / self.codec.encode_filename(note_id, title)

    def _glob(self, note_id: str) -> list[Path]:
        pattern = f"{glob.escape(note_id)}*.{glob.escape(self.config.extension)}"
        base = self.config.subdirectory_for(note_id)
        if self.config.recursive and self.config.subdirectory_function is None:
            ignore_re = re.compile(self.config.ignore_pattern)
            candidates = [
                p
                for p in base.rglob(pattern)
                if not any(ignore_re.search(part) for part in p.relative_to(base).parts[:-1])
            ]
        else:
            candidates = list(base.glob(pattern))
        # "<id>*" also matches longer ids sharing the prefix; keep exact ids only
        return sorted(
            p
            for p in candidates
            if p.is_file()
            and not is_editor_artifact(p.name)
            and (self.codec.path_to_id(p) in (None, note_id))
        )

"""Exception and warning types raised by the zettel engine."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence


class ZettelError(Exception):
    """Base class for every error raised by :mod:`zettel`."""


class ConfigError(ZettelError, ValueError):
    """A configuration value is unusable (bad pattern, unknown strategy)."""


class NoteNotFoundError(ZettelError, LookupError):
    def __init__(self, note_id: str) -> None:
        self.note_id = note_id
        super().__init__(f"No note found for id {note_id!r}")


class AmbiguousNoteError(ZettelError, LookupError):
    """More than one file claims the same id.

    This is a corpus integrity problem; the engine never picks one of the
    candidates on the caller's behalf.
    """

    def __init__(self, note_id: str, matches: Sequence[Path]) -> None:
        self.note_id = note_id
        self.matches = list(matches)
        self.count = len(self.matches)
        names = ", ".join(p.name for p in self.matches)
        super().__init__(f"Id {note_id!r} matches {self.count} files: {names}")


class NoteDecodeError(ZettelError, ValueError):
    def __init__(self, filename: str, note_id: str | None = None) -> None:
        self.filename = filename
        self.note_id = note_id
        context = f" (looked up as {note_id!r})" if note_id else ""
        super().__init__(f"Cannot decode note filename {filename!r}{context}")


class NoteExistsError(ZettelError, FileExistsError):
    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Note file already exists: {path}")


class SearchError(ZettelError, RuntimeError):
    """The external content-search tool failed."""

    def __init__(self, command: Sequence[str], returncode: int, stderr: str = "") -> None:
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr
        detail = f": {stderr.strip()}" if stderr.strip() else ""
        super().__init__(f"{self.command[0]} exited with status {returncode}{detail}")


class ConfigurationWarning(UserWarning):
    """Non-fatal advisory: the operation went ahead with best-effort output."""

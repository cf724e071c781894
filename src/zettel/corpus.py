"""Corpus index: cached enumeration of the note files in a directory."""

from __future__ import annotations

import logging
import os
import re
import threading
from pathlib import Path
from typing import TYPE_CHECKING, MutableMapping, NamedTuple

from zettel.patterns import filename_pattern

if TYPE_CHECKING:
    from zettel.config import ZettelConfig

logger = logging.getLogger(__name__)

# Lock files (.#name), backups (name~), autosaves (#name#) and vim swap files
_EDITOR_ARTIFACT_RE = re.compile(r"^\.#|~$|^#.*#$|\.sw[a-p]$")


class CacheKey(NamedTuple):
    directory: str
    full_paths: bool
    id_pattern: str


def is_editor_artifact(name: str) -> bool:
    return _EDITOR_ARTIFACT_RE.search(name) is not None


class CorpusIndex:
    """Lists note files and caches the result per ``(directory, full_paths, id_pattern)``.

    A snapshot stays valid until it is explicitly refreshed: creating,
    renaming or deleting a note on disk is not noticed until the caller asks
    for ``refresh=True`` (or calls :meth:`invalidate`).
    """

    def __init__(
        self,
        config: "ZettelConfig",
        cache: MutableMapping[CacheKey, list[Path]] | None = None,
    ) -> None:
        self.config = config
        self.cache: MutableMapping[CacheKey, list[Path]] = {} if cache is None else cache
        self._lock = threading.Lock()

    def list_files(
        self,
        directory: Path | str | None = None,
        full_paths: bool = True,
        id_pattern: str | None = None,
        refresh: bool = False,
    ) -> list[Path]:
        """Return note files, from the cache unless *refresh* is set.

        With ``full_paths=False`` (shallow mode only) the returned paths are
        bare filenames.  Recursive mode always yields full paths.
        """
        directory = Path(directory) if directory is not None else self.config.directory
        id_pattern = id_pattern if id_pattern is not None else self.config.id_pattern
        key = CacheKey(str(directory), bool(full_paths), id_pattern)
        with self._lock:
            if refresh or key not in self.cache:
                self.cache[key] = self._scan(directory, full_paths, id_pattern)
            return list(self.cache[key])

    def invalidate(self) -> None:
        """Drop every cached snapshot."""
        with self._lock:
            self.cache.clear()

    # ------------------------------------------------------------------
    # Scanning
    # ------------------------------------------------------------------

    def _scan(self, directory: Path, full_paths: bool, id_pattern: str) -> list[Path]:
        name_re = re.compile(filename_pattern(id_pattern, self.config.extension))
        if self.config.recursive:
            paths = self._walk(directory)
        else:
            paths = [p for p in directory.iterdir() if p.is_file()] if directory.is_dir() else []
        result = sorted(
            p for p in paths if not is_editor_artifact(p.name) and name_re.match(p.name)
        )
        logger.debug("Scanned %s: %d note files", directory, len(result))
        if full_paths or self.config.recursive:
            return result
        return [Path(p.name) for p in result]

    def _walk(self, directory: Path) -> list[Path]:
        ignore_re = re.compile(self.config.ignore_pattern)
        found: list[Path] = []
        for root, dirs, files in os.walk(directory):
            dirs[:] = [d for d in dirs if not ignore_re.search(d)]
            found.extend(Path(root) / name for name in files)
        return found

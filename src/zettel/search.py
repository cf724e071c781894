"""Content search over the note corpus.

The graph queries only need two primitives, captured by
:class:`ContentSearch`:

- ``search(pattern, invert=False)``: files that contain (or, inverted, do
  not contain) a match;
- ``extract(pattern, unique=False)``: every matched substring, without
  filenames.

Patterns are always given in Python :mod:`re` syntax.  :class:`GrepSearch`
translates them with :func:`zettel.patterns.to_posix` and shells out to
``grep``; :class:`RegexSearch` runs them in-process.
"""

from __future__ import annotations

import logging
import re
import subprocess
from pathlib import Path
from typing import Callable, Protocol, Sequence, runtime_checkable

from zettel.errors import SearchError
from zettel.parser import read_text
from zettel.patterns import to_posix

logger = logging.getLogger(__name__)


@runtime_checkable
class ContentSearch(Protocol):
    """Common interface shared by all search backends."""

    def search(self, pattern: str, invert: bool = False) -> list[Path]:
        """Return files containing a match for *pattern* (or none, if *invert*)."""
        ...

    def extract(self, pattern: str, unique: bool = False) -> list[str]:
        """Return all substrings matching *pattern* across the corpus."""
        ...


def _dedupe(items: Sequence[str]) -> list[str]:
    return list(dict.fromkeys(items))


# ---------------------------------------------------------------------------
# grep
# ---------------------------------------------------------------------------


class GrepSearch:
    """Search backend running ``grep`` once per query.

    When *files* is given grep gets that explicit file list; otherwise it
    searches ``*.<extension>`` under *directory*, recursing with ``-r`` when
    *recursive* is set.
    """

    def __init__(
        self,
        directory: Path,
        extension: str,
        *,
        recursive: bool = False,
        basic: bool = False,
        executable: str = "grep",
        exclude_dirs: Sequence[str] = (".*",),
        files: Callable[[], Sequence[Path]] | None = None,
    ) -> None:
        self.directory = Path(directory)
        self.extension = extension
        self.recursive = recursive
        self.basic = basic
        self.executable = executable
        self.exclude_dirs = list(exclude_dirs)
        self.files = files

    def search(self, pattern: str, invert: bool = False) -> list[Path]:
        lines = self._run(pattern, ["-L" if invert else "-l"])
        return [Path(line) for line in lines]

    def extract(self, pattern: str, unique: bool = False) -> list[str]:
        lines = self._run(pattern, ["-o", "-h"])
        return _dedupe(lines) if unique else lines

    def command(self, pattern: str, mode: Sequence[str]) -> list[str] | None:
        """Build the grep argument list, or ``None`` when there is nothing to search."""
        cmd = [self.executable, "-G" if self.basic else "-E", *mode]
        if self.files is not None:
            targets = [str(p) for p in self.files()]
        elif self.recursive:
            cmd += ["-r", f"--include=*.{self.extension}"]
            cmd += [f"--exclude-dir={d}" for d in self.exclude_dirs]
            targets = [str(self.directory.resolve())]
        else:
            targets = [str(p) for p in sorted(self.directory.glob(f"*.{self.extension}"))]
        if not targets:
            return None
        cmd += ["-e", to_posix(pattern, basic=self.basic), "--", *targets]
        return cmd

    def _run(self, pattern: str, mode: Sequence[str]) -> list[str]:
        cmd = self.command(pattern, mode)
        if cmd is None:
            return []
        logger.debug("Running %s", cmd)
        try:
            proc = subprocess.run(cmd, capture_output=True, text=True, check=False)
        except OSError as exc:
            raise SearchError(cmd, -1, str(exc)) from exc
        # 0: matches, 1: no matches; anything else is a real failure
        if proc.returncode not in (0, 1):
            raise SearchError(cmd, proc.returncode, proc.stderr)
        return [line for line in (raw.strip() for raw in proc.stdout.splitlines()) if line]


# ---------------------------------------------------------------------------
# In-process regex
# ---------------------------------------------------------------------------


class RegexSearch:
    """Search backend that reads every corpus file with :mod:`re`.

    *files* returns the note paths to search; the Zettelkasten facade passes
    its corpus listing so both backends see the same file set.  Matches are
    line-based, like grep's.
    """

    def __init__(self, files: Callable[[], Sequence[Path]]) -> None:
        self.files = files

    def search(self, pattern: str, invert: bool = False) -> list[Path]:
        regex = re.compile(pattern)
        return [
            path
            for path in self.files()
            if any(regex.search(line) for line in self._lines(path)) != invert
        ]

    def extract(self, pattern: str, unique: bool = False) -> list[str]:
        regex = re.compile(pattern)
        found = [
            m.group(0)
            for path in self.files()
            for line in self._lines(path)
            for m in regex.finditer(line)
            if m.group(0)
        ]
        return _dedupe(found) if unique else found

    @staticmethod
    def _lines(path: Path) -> list[str]:
        return read_text(path).splitlines()

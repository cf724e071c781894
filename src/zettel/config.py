"""Configuration for a Zettelkasten directory.

Settings live in a :class:`ZettelConfig` dataclass.  They can be built in
code, read from a TOML file::

    [zettel]
    directory   = "~/notes"
    extension   = "md"
    separator   = "-"
    recursive   = true
    link_format = "[[{id}]]"

    # Optional: per-id subdirectory, given as "module:function"
    subdirectory_function = "mynotes.layout:year_folder"

or taken from ``ZETTEL_*`` environment variables (see :meth:`from_env`).
"""

from __future__ import annotations

import importlib
import os
import tomllib
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Callable

from zettel.errors import ConfigError
from zettel.patterns import check_pattern

SubdirectoryFunction = Callable[[str], "str | Path"]

HEADER_STYLES = ("yaml", "org", "none")
SEARCH_BACKENDS = ("grep", "regex")

_BOOL_FIELDS = {"recursive", "grep_basic"}


@dataclass
class ZettelConfig:
    directory: Path = field(default_factory=Path.cwd)
    extension: str = "md"
    #: Identifier pattern (Python ``re`` syntax, no capturing groups)
    id_pattern: str = r"\d{12}"
    #: ``strftime`` format producing new ids; must yield ``id_pattern`` matches
    id_format: str = "%Y%m%d%H%M"
    title_pattern: str = r"[^\n]*"
    tag_pattern: str = r"#[A-Za-z0-9]+"
    #: Stands in for spaces in on-disk filenames
    separator: str = " "
    recursive: bool = False
    #: Subdirectories whose name matches this are skipped in recursive scans
    ignore_pattern: str = r"^\."
    subdirectory_function: SubdirectoryFunction | str | None = None
    link_format: str = "[[{id}]]"
    link_title_format: str = "[[{id}]] {title}"
    completion_format: str = "{id} {title}"
    header: str = "yaml"
    search_backend: str = "grep"
    grep_basic: bool = False
    grep_executable: str = "grep"

    def __post_init__(self) -> None:
        self.directory = Path(self.directory).expanduser()
        self.extension = self.extension.lstrip(".")
        if len(self.separator) != 1:
            raise ConfigError(f"separator must be a single character, got {self.separator!r}")
        if not self.extension:
            raise ConfigError("extension must not be empty")
        for name in ("id_pattern", "title_pattern", "tag_pattern", "ignore_pattern"):
            check_pattern(getattr(self, name), name)
        if self.header not in HEADER_STYLES:
            raise ConfigError(f"header must be one of {HEADER_STYLES}, got {self.header!r}")
        if self.search_backend not in SEARCH_BACKENDS:
            raise ConfigError(
                f"search_backend must be one of {SEARCH_BACKENDS}, got {self.search_backend!r}"
            )
        for name in ("link_format", "link_title_format", "completion_format"):
            if "{id}" not in getattr(self, name):
                raise ConfigError(f"{name} must contain an {{id}} placeholder")
        if isinstance(self.subdirectory_function, str):
            self.subdirectory_function = resolve_callable(self.subdirectory_function)

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ZettelConfig":
        """Build a config from a mapping, with or without a ``[zettel]`` table."""
        section = data.get("zettel", data)
        known = {f.name for f in fields(cls)}
        unknown = set(section) - known
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")
        return cls(**section)

    @classmethod
    def from_toml(cls, path: Path | str) -> "ZettelConfig":
        with open(path, "rb") as fh:
            data = tomllib.load(fh)
        return cls.from_dict(data)

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None, **overrides: Any) -> "ZettelConfig":
        """Build a config from ``ZETTEL_<FIELD>`` environment variables.

        Direct keyword arguments take precedence over the environment, e.g.
        ``ZETTEL_DIRECTORY=~/notes ZETTEL_RECURSIVE=true``.
        """
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}
        for f in fields(cls):
            raw = env.get(f"ZETTEL_{f.name.upper()}")
            if raw is None:
                continue
            values[f.name] = _parse_bool(raw) if f.name in _BOOL_FIELDS else raw
        values.update(overrides)
        return cls(**values)

    # ------------------------------------------------------------------
    # Derived helpers
    # ------------------------------------------------------------------

    def subdirectory_for(self, note_id: str) -> Path:
        """Directory a note with *note_id* lives in."""
        if self.subdirectory_function is None:
            return self.directory
        return self.directory / self.subdirectory_function(note_id)


def _parse_bool(raw: str) -> bool:
    value = raw.strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off", ""}:
        return False
    raise ConfigError(f"Expected a boolean, got {raw!r}")


def resolve_callable(ref: str) -> Callable[..., Any]:
    """Import ``"package.module:function"`` and return the function."""
    module_name, _, attr = ref.partition(":")
    if not module_name or not attr:
        raise ConfigError(f"Expected 'module:function', got {ref!r}")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ConfigError(f"Cannot import {module_name!r}: {exc}") from exc
    func = getattr(module, attr, None)
    if not callable(func):
        raise ConfigError(f"Module {module_name!r} has no callable {attr!r}")
    return func

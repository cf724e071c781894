"""Rendering (id, title) pairs, and the headers written into new notes.

Both are plain functions so callers can swap in their own:

- a *formatter* takes ``(template, note_id, title)`` and returns a string;
- a *header function* takes ``(title, note_id)`` and returns the text that
  opens a new note.
"""

from __future__ import annotations

from datetime import date
from typing import Callable

import yaml

from zettel.errors import ConfigError
from zettel.patterns import template_parts

Formatter = Callable[[str, str, str], str]
HeaderFunction = Callable[[str, str], str]


def format_note(template: str, note_id: str, title: str) -> str:
    """Fill the ``{id}`` and ``{title}`` placeholders of *template*."""
    rendered: list[str] = []
    for literal, field_name in template_parts(template):
        rendered.append(literal)
        if field_name == "id":
            rendered.append(note_id)
        elif field_name == "title":
            rendered.append(title)
    return "".join(rendered)


# ---------------------------------------------------------------------------
# Header strategies
# ---------------------------------------------------------------------------


def yaml_header(title: str, note_id: str) -> str:
    meta = {"title": title, "id": note_id, "date": date.today().isoformat()}
    return "---\n" + yaml.safe_dump(meta, sort_keys=False, allow_unicode=True) + "---\n\n"


def org_header(title: str, note_id: str) -> str:
    return f"#+title: {title}\n#+id: {note_id}\n\n"


def no_header(title: str, note_id: str) -> str:  # noqa: ARG001
    return ""


HEADERS: dict[str, HeaderFunction] = {
    "yaml": yaml_header,
    "org": org_header,
    "none": no_header,
}


def header_function(style: str) -> HeaderFunction:
    try:
        return HEADERS[style]
    except KeyError:
        raise ConfigError(f"Unknown header style {style!r}") from None

"""Note text parsing: headers, links, and tags."""

from __future__ import annotations

import re
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from zettel.errors import NoteDecodeError
from zettel.note import Note

if TYPE_CHECKING:
    from zettel.ids import IdentifierCodec

# YAML front-matter block
_FRONTMATTER_RE = re.compile(r"^---[ \t]*\n(.*?)\n---[ \t]*\n", re.DOTALL)
# Org-mode keyword lines at the top of a file: "#+title: Foo"
_ORG_KEYWORD_RE = re.compile(r"^#\+(\w+):[ \t]*(.*)$")


def read_text(path: Path | str) -> str:
    """Read a note file; bytes that are not valid UTF-8 become U+FFFD."""
    return Path(path).read_text(encoding="utf-8", errors="replace")


def parse_frontmatter(content: str) -> tuple[dict[str, Any], str]:
    """Split YAML front-matter from body text.

    Returns ``(metadata_dict, body)``; ``metadata_dict`` is empty when there
    is no front-matter block.
    """
    match = _FRONTMATTER_RE.match(content)
    if not match:
        return {}, content
    try:
        meta = yaml.safe_load(match.group(1)) or {}
    except yaml.YAMLError:
        meta = {}
    if not isinstance(meta, dict):
        meta = {}
    return meta, content[match.end() :]


def parse_org_header(content: str) -> tuple[dict[str, Any], str]:
    """Split leading ``#+key: value`` lines from the body (keys lower-cased)."""
    meta: dict[str, Any] = {}
    lines = content.splitlines(keepends=True)
    consumed = 0
    for line in lines:
        match = _ORG_KEYWORD_RE.match(line.rstrip("\n"))
        if not match:
            break
        meta[match.group(1).lower()] = match.group(2).strip()
        consumed += 1
    return meta, "".join(lines[consumed:])


def parse_header(content: str) -> tuple[dict[str, Any], str]:
    if content.startswith("---"):
        return parse_frontmatter(content)
    if content.startswith("#+"):
        return parse_org_header(content)
    return {}, content


def extract_links(text: str, link_re: re.Pattern[str]) -> list[str]:
    """Return the ids of all links in *text* (de-duped, ordered).

    *link_re* must put the id in group 1, as the link patterns built by
    :func:`zettel.patterns.link_pattern` do.
    """
    return list(dict.fromkeys(m.group(1) for m in link_re.finditer(text)))


def extract_tags(text: str, tag_re: re.Pattern[str]) -> list[str]:
    """Return all tags found in *text* (de-duped, ordered)."""
    return list(dict.fromkeys(m.group(0) for m in tag_re.finditer(text)))


def read_note(
    path: Path,
    codec: "IdentifierCodec",
    link_re: re.Pattern[str],
    tag_re: re.Pattern[str],
) -> Note:
    """Read a note file and return a fully-populated :class:`Note`."""
    decoded = codec.decode_filename(path.name)
    if decoded is None:
        raise NoteDecodeError(path.name)
    note_id, title = decoded

    content = read_text(path)
    header, body = parse_header(content)

    return Note(
        id=note_id,
        title=title,
        path=path,
        body=body,
        tags=extract_tags(content, tag_re),
        links=extract_links(content, link_re),
        frontmatter=header,
    )

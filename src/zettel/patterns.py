"""Regular expressions for identifiers, filenames, links, and tags.

All patterns are built in Python :mod:`re` syntax.  :func:`to_posix`
translates them for external search tools such as ``grep``.

Link templates use ``{id}`` and ``{title}`` placeholders, e.g. ``[[{id}]]``
or ``[[{id}]] {title}``.  Literal template text is escaped; placeholders
become capturing groups so every link pattern has exactly two groups:
group 1 is the id, group 2 the title (empty when the template has no
``{title}``).
"""

from __future__ import annotations

import re
import string
import warnings

from zettel.errors import ConfigError, ConfigurationWarning

PLACEHOLDERS = ("id", "title")


def check_pattern(pattern: str, name: str = "pattern") -> re.Pattern[str]:
    """Compile a user-supplied pattern and reject capturing groups in it."""
    try:
        compiled = re.compile(pattern)
    except re.error as exc:
        raise ConfigError(f"{name} is not a valid regular expression: {exc}") from exc
    if compiled.groups:
        raise ConfigError(
            f"{name} must not contain capturing groups, use (?:...) instead: {pattern!r}"
        )
    return compiled


def template_parts(template: str) -> list[tuple[str, str | None]]:
    """Split a link template into ``(literal, placeholder)`` pairs."""
    parts: list[tuple[str, str | None]] = []
    try:
        parsed = list(string.Formatter().parse(template))
    except ValueError as exc:
        raise ConfigError(f"Malformed template {template!r}: {exc}") from exc
    for literal, field_name, _spec, _conversion in parsed:
        if field_name is not None and field_name not in PLACEHOLDERS:
            raise ConfigError(f"Unknown placeholder {{{field_name}}} in template {template!r}")
        parts.append((literal, field_name))
    return parts


def link_pattern(
    template: str,
    id_pattern: str,
    title_pattern: str,
    note_id: str | None = None,
    title: str | None = None,
    capture: bool = True,
) -> str:
    """Expand *template* into a regex matching links it would render.

    *note_id* / *title* pin the corresponding group to a literal value;
    otherwise the general id / title pattern is used.  With ``capture=False``
    the result has no capturing groups, which is all a content search needs.
    """
    id_re = re.escape(note_id) if note_id is not None else id_pattern
    title_re = re.escape(title) if title is not None else title_pattern
    parts = template_parts(template)
    order = [field_name for _literal, field_name in parts if field_name is not None]
    if "id" not in order:
        raise ConfigError(f"Link template {template!r} has no {{id}} placeholder")

    if not capture:
        return _assemble(parts, id_re, title_re, set())
    if "title" not in order:
        return _assemble(parts, id_re, title_re, {"id"}) + "()"
    if order[0] == "id":
        return _assemble(parts, id_re, title_re, {"id", "title"})
    # Title precedes the id in the text: a lookahead captures the id first so
    # group 1 stays the id and group 2 the title.
    ahead = _assemble(parts, id_re, title_re, {"id"})
    return f"(?={ahead}){_assemble(parts, id_re, title_re, {'title'})}"


def _assemble(
    parts: list[tuple[str, str | None]], id_re: str, title_re: str, capture: set[str]
) -> str:
    chunks: list[str] = []
    captured: set[str] = set()
    for literal, field_name in parts:
        chunks.append(re.escape(literal))
        if field_name is None:
            continue
        sub = id_re if field_name == "id" else title_re
        if field_name in capture and field_name not in captured:
            captured.add(field_name)
            chunks.append(f"({sub})")
        else:
            chunks.append(f"(?:{sub})")
    return "".join(chunks)


def filename_pattern(id_pattern: str, extension: str) -> str:
    """``<id>.<title>.<ext>...`` where the first ``.`` is any separator char.

    Group 1 is the id, group 2 the title.  The title stops at the first
    literal period; anything after the extension is tolerated.
    """
    return rf"^({id_pattern}).([^.]*)\.{re.escape(extension)}.*$"


# ---------------------------------------------------------------------------
# POSIX translation
# ---------------------------------------------------------------------------

_CLASS_ESCAPES = {
    "d": "[0-9]",
    "D": "[^0-9]",
    "w": "[[:alnum:]_]",
    "W": "[^[:alnum:]_]",
    "s": "[[:space:]]",
    "S": "[^[:space:]]",
}
_BRACKET_ESCAPES = {"d": "0-9", "w": "[:alnum:]_", "s": "[:space:]"}
_CHAR_ESCAPES = {"t": "\t"}
# Escaped in every POSIX dialect
_POSIX_SPECIAL = set(".[*^$\\")
# Operators in ERE, literals in BRE
_ERE_OPERATORS = set("(){}+?|")
# GNU word-boundary escapes, valid in both dialects
_GNU_ANCHORS = set("bB<>")


def to_posix(pattern: str, basic: bool = False) -> str:
    """Translate a Python regex into POSIX extended (default) or basic syntax.

    Group markers ``(?:`` and ``(?P<name>`` are stripped to plain groups,
    ``\\d``/``\\w``/``\\s`` become bracket classes and escapes POSIX does not
    need are dropped.  Basic syntax has no alternation: when *pattern*
    contains ``|`` a :class:`ConfigurationWarning` is issued and *pattern* is
    returned unmodified.
    """
    out: list[str] = []
    i = 0
    n = len(pattern)
    while i < n:
        c = pattern[i]
        if c == "\\":
            if i + 1 >= n:
                raise ConfigError(f"Trailing backslash in pattern {pattern!r}")
            nxt = pattern[i + 1]
            i += 2
            if nxt in _CLASS_ESCAPES:
                out.append(_CLASS_ESCAPES[nxt])
            elif nxt in _ERE_OPERATORS:
                out.append(nxt if basic or nxt == "}" else "\\" + nxt)
            elif nxt in _POSIX_SPECIAL or nxt in _GNU_ANCHORS or nxt.isdigit():
                out.append("\\" + nxt)
            elif nxt == "n":
                raise ConfigError(f"Line-based search cannot match a newline in {pattern!r}")
            elif nxt in _CHAR_ESCAPES:
                out.append(_CHAR_ESCAPES[nxt])
            elif nxt.isalpha():
                raise ConfigError(f"Escape \\{nxt} has no POSIX equivalent in {pattern!r}")
            else:
                out.append(nxt)
        elif c == "[":
            i, bracket = _translate_bracket(pattern, i)
            out.append(bracket)
        elif c == "(":
            i += 1
            if pattern.startswith("?:", i):
                i += 2
            elif pattern.startswith("?P<", i):
                i = pattern.index(">", i) + 1
            elif pattern.startswith("?", i):
                raise ConfigError(f"Group extension at offset {i} has no POSIX equivalent in {pattern!r}")
            out.append("\\(" if basic else "(")
        elif c == "|":
            if basic:
                warnings.warn(
                    f"POSIX basic regex has no alternation; passing {pattern!r} through unchanged",
                    ConfigurationWarning,
                    stacklevel=2,
                )
                return pattern
            out.append(c)
            i += 1
        elif c in _ERE_OPERATORS:
            out.append("\\" + c if basic else c)
            i += 1
        else:
            out.append(c)
            i += 1
    return "".join(out)


def _translate_bracket(pattern: str, start: int) -> tuple[int, str]:
    """Translate the ``[...]`` expression at *start*; return (end, text)."""
    n = len(pattern)
    i = start + 1
    negate = pattern.startswith("^", i)
    if negate:
        i += 1
    items: list[str] = []
    close = dash = caret = False
    first = True
    while True:
        if i >= n:
            raise ConfigError(f"Unterminated character class in {pattern!r}")
        c = pattern[i]
        if c == "]":
            i += 1
            if first:
                close = True
                first = False
                continue
            break
        first = False
        if c == "\\":
            if i + 1 >= n:
                raise ConfigError(f"Trailing backslash in pattern {pattern!r}")
            nxt = pattern[i + 1]
            i += 2
            if nxt in _BRACKET_ESCAPES:
                items.append(_BRACKET_ESCAPES[nxt])
            elif nxt == "n":
                # Lines handed to a POSIX tool never contain a newline
                pass
            elif nxt in _CHAR_ESCAPES:
                items.append(_CHAR_ESCAPES[nxt])
            elif nxt == "]":
                close = True
            elif nxt == "-":
                dash = True
            elif nxt == "^":
                caret = True
            elif nxt.isalpha():
                raise ConfigError(f"Escape \\{nxt} is not supported inside [] for POSIX")
            else:
                items.append(nxt)
        elif c == "[" and pattern.startswith("[:", i):
            end = pattern.index(":]", i) + 2
            items.append(pattern[i:end])
            i = end
        else:
            items.append(c)
            i += 1
    body = "".join(items)
    if negate and not (body or close or dash or caret):
        return i, "."
    if not body and not close and not dash and caret and not negate:
        return i, "\\^"
    return i, (
        "["
        + ("^" if negate else "")
        + ("]" if close else "")
        + body
        + ("^" if caret else "")
        + ("-" if dash else "")
        + "]"
    )

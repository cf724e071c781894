"""Shared fixtures: a small Zettelkasten directory on disk."""

from __future__ import annotations

import shutil
import textwrap
from pathlib import Path

import pytest

from zettel.config import ZettelConfig
from zettel.kasten import Zettelkasten

from note_ids import ALPHA, BETA, GAMMA, MISSING


def write_note(directory: Path, name: str, content: str = "") -> Path:
    path = directory / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(content), encoding="utf-8")
    return path


@pytest.fixture()
def notes_dir(tmp_path: Path) -> Path:
    """Alpha and Beta link to each other and to a missing note; Gamma is unlinked."""
    write_note(tmp_path, f"{ALPHA} Alpha.md", f"""\
        ---
        title: Alpha
        ---
        Links to [[{BETA}]] and [[{MISSING}]]. #idea
    """)
    write_note(tmp_path, f"{BETA} Beta.md", f"""\
        Back to [[{ALPHA}]].
        Again [[{MISSING}]]. #idea #draft
    """)
    write_note(tmp_path, f"{GAMMA} Gamma.md", "No links here.\n")
    # Not a note: ignored by the corpus and therefore by every query
    write_note(tmp_path, "README.md", f"See [[{GAMMA}]].\n")
    return tmp_path


def _backend_params() -> list:
    has_grep = shutil.which("grep") is not None
    return [
        "regex",
        pytest.param("grep", marks=pytest.mark.skipif(not has_grep, reason="grep not installed")),
    ]


@pytest.fixture(params=_backend_params())
def kasten(notes_dir: Path, request: pytest.FixtureRequest) -> Zettelkasten:
    """A Zettelkasten over ``notes_dir``, once per search backend."""
    config = ZettelConfig(directory=notes_dir, search_backend=request.param)
    return Zettelkasten(config)

"""Graph queries, run against both search backends (see conftest.kasten)."""

import shutil
from pathlib import Path

import pytest

from zettel.config import ZettelConfig
from zettel.errors import NoteDecodeError
from zettel.kasten import Zettelkasten

from note_ids import ALPHA, BETA, GAMMA, MISSING


def _path(kasten: Zettelkasten, name: str) -> Path:
    return kasten.config.directory / name


# ---------------------------------------------------------------------------
# Backlinks / forward links
# ---------------------------------------------------------------------------


class TestBacklinks:
    def test_alpha_is_linked_by_beta(self, kasten: Zettelkasten):
        assert kasten.backlinks(ALPHA) == [_path(kasten, f"{BETA} Beta.md")]

    def test_beta_is_linked_by_alpha(self, kasten: Zettelkasten):
        assert kasten.backlinks(BETA) == [_path(kasten, f"{ALPHA} Alpha.md")]

    def test_missing_note_has_backlinks(self, kasten: Zettelkasten):
        assert len(kasten.backlinks(MISSING)) == 2

    def test_no_backlinks_is_empty(self, kasten: Zettelkasten):
        # README.md links to Gamma but is not part of the corpus
        assert kasten.backlinks(GAMMA) == []


class TestForwardLinks:
    def test_existing_targets_only(self, kasten: Zettelkasten):
        alpha = _path(kasten, f"{ALPHA} Alpha.md")
        assert kasten.forward_links(alpha) == [_path(kasten, f"{BETA} Beta.md")]

    def test_no_links_is_empty(self, kasten: Zettelkasten):
        assert kasten.forward_links(_path(kasten, f"{GAMMA} Gamma.md")) == []

    def test_dedup_preserves_order(self, notes_dir: Path):
        source = notes_dir / "202012091133 Hub.md"
        source.write_text(f"[[{GAMMA}]] [[{ALPHA}]] [[{GAMMA}]] [[{BETA}]]\n", encoding="utf-8")
        kasten = Zettelkasten(ZettelConfig(directory=notes_dir, search_backend="regex"))
        names = [p.name for p in kasten.forward_links(source)]
        assert names == [f"{GAMMA} Gamma.md", f"{ALPHA} Alpha.md", f"{BETA} Beta.md"]

    def test_uses_corpus_snapshot(self, notes_dir: Path):
        kasten = Zettelkasten(ZettelConfig(directory=notes_dir, search_backend="regex"))
        kasten.files()
        (notes_dir / f"{MISSING} Late.md").write_text("", encoding="utf-8")
        alpha = notes_dir / f"{ALPHA} Alpha.md"
        assert len(kasten.forward_links(alpha)) == 1
        kasten.refresh()
        assert len(kasten.forward_links(alpha)) == 2


# ---------------------------------------------------------------------------
# Dead links / unlinked notes
# ---------------------------------------------------------------------------


class TestDeadLinks:
    def test_reported_once(self, kasten: Zettelkasten):
        assert kasten.dead_links() == [MISSING]

    def test_none_when_all_resolve(self, tmp_path: Path):
        (tmp_path / f"{ALPHA} A.md").write_text(f"[[{BETA}]]\n", encoding="utf-8")
        (tmp_path / f"{BETA} B.md").write_text(f"[[{ALPHA}]]\n", encoding="utf-8")
        kasten = Zettelkasten(ZettelConfig(directory=tmp_path, search_backend="regex"))
        assert kasten.dead_links() == []


class TestUnlinkedNotes:
    def test_gamma_is_unlinked(self, kasten: Zettelkasten):
        assert kasten.unlinked_notes() == [GAMMA]

    def test_linked_once_is_excluded(self, notes_dir: Path):
        (notes_dir / "202012091133 Hub.md").write_text(f"[[{GAMMA}]]\n", encoding="utf-8")
        kasten = Zettelkasten(ZettelConfig(directory=notes_dir, search_backend="regex"))
        assert kasten.unlinked_notes() == ["202012091133"]


# ---------------------------------------------------------------------------
# Network
# ---------------------------------------------------------------------------


class TestNetwork:
    def test_mutual_link_in_both_groups(self, kasten: Zettelkasten):
        beta = _path(kasten, f"{BETA} Beta.md")
        network = kasten.network(_path(kasten, f"{ALPHA} Alpha.md"))
        assert network.note_id == ALPHA
        assert beta in network.backlinks
        assert beta in network.forward_links

    def test_groups(self, kasten: Zettelkasten):
        network = kasten.network(_path(kasten, f"{GAMMA} Gamma.md"))
        assert network.groups() == {"backlinks": [], "forward_links": []}
        assert network.is_empty()

    def test_self_link(self, tmp_path: Path):
        note = tmp_path / f"{ALPHA} Self.md"
        note.write_text(f"I am [[{ALPHA}]]\n", encoding="utf-8")
        kasten = Zettelkasten(ZettelConfig(directory=tmp_path, search_backend="regex"))
        network = kasten.network(note)
        assert network.backlinks == [note]
        assert network.forward_links == [note]

    def test_not_a_note(self, kasten: Zettelkasten):
        with pytest.raises(NoteDecodeError):
            kasten.network(_path(kasten, "README.md"))


# ---------------------------------------------------------------------------
# Notes that are not valid UTF-8
# ---------------------------------------------------------------------------


class TestUndecodableBytes:
    @pytest.fixture()
    def latin1_note(self, notes_dir: Path) -> Path:
        path = notes_dir / "202012091133 Cafe.md"
        path.write_bytes(f"caf\xe9 [[{BETA}]] #latin\n".encode("latin-1"))
        return path

    def test_forward_links(self, kasten: Zettelkasten, latin1_note: Path):
        assert kasten.forward_links(latin1_note) == [_path(kasten, f"{BETA} Beta.md")]

    def test_network(self, kasten: Zettelkasten, latin1_note: Path):
        network = kasten.network(latin1_note)
        assert network.backlinks == []
        assert network.forward_links == [_path(kasten, f"{BETA} Beta.md")]

    def test_backlinks_still_found(self, kasten: Zettelkasten, latin1_note: Path):
        assert latin1_note in kasten.backlinks(BETA)

    def test_tags_in_note(self, kasten: Zettelkasten, latin1_note: Path):
        assert kasten.tags_in_note(latin1_note) == ["#latin"]

    def test_notes(self, kasten: Zettelkasten, latin1_note: Path):
        cafe = next(n for n in kasten.notes() if n.path == latin1_note)
        assert cafe.links == [BETA]
        assert cafe.body.startswith("caf\ufffd ")


# ---------------------------------------------------------------------------
# Tags
# ---------------------------------------------------------------------------


class TestTags:
    def test_all_tags(self, kasten: Zettelkasten):
        assert kasten.tags() == ["#draft", "#idea"]

    def test_tags_in_note(self, kasten: Zettelkasten):
        assert kasten.tags_in_note(_path(kasten, f"{BETA} Beta.md")) == ["#idea", "#draft"]

    def test_notes_with_tag(self, kasten: Zettelkasten):
        assert [p.name for p in kasten.notes_with_tag("#idea")] == [
            f"{ALPHA} Alpha.md",
            f"{BETA} Beta.md",
        ]

    def test_tag_prefix_does_not_match(self, kasten: Zettelkasten):
        assert kasten.notes_with_tag("#dra") == []


# ---------------------------------------------------------------------------
# Other link templates and dialects
# ---------------------------------------------------------------------------


class TestCustomTemplates:
    def test_link_with_title_template(self, tmp_path: Path):
        (tmp_path / f"{ALPHA} A.md").write_text(f"See §{BETA}: Beta note\n", encoding="utf-8")
        (tmp_path / f"{BETA} B.md").write_text("", encoding="utf-8")
        config = ZettelConfig(
            directory=tmp_path, link_format="§{id}: {title}", search_backend="regex"
        )
        kasten = Zettelkasten(config)
        assert [p.name for p in kasten.backlinks(BETA)] == [f"{ALPHA} A.md"]
        assert kasten.unlinked_notes() == [ALPHA]

    @pytest.mark.skipif(shutil.which("grep") is None, reason="grep not installed")
    def test_grep_basic_dialect(self, notes_dir: Path):
        config = ZettelConfig(directory=notes_dir, search_backend="grep", grep_basic=True)
        kasten = Zettelkasten(config)
        assert kasten.dead_links() == [MISSING]
        assert kasten.unlinked_notes() == [GAMMA]

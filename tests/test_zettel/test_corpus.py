"""Unit tests for zettel.corpus.CorpusIndex."""

from pathlib import Path

import pytest

from zettel.config import ZettelConfig
from zettel.corpus import CacheKey, CorpusIndex, is_editor_artifact


def _touch(directory: Path, name: str) -> Path:
    path = directory / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("", encoding="utf-8")
    return path


@pytest.fixture()
def corpus_dir(tmp_path: Path) -> Path:
    _touch(tmp_path, "202012091130 Alpha.md")
    _touch(tmp_path, "202012091131 Beta.md")
    _touch(tmp_path, "README.md")
    _touch(tmp_path, "202012091130 Alpha.md~")
    _touch(tmp_path, "202012091131 Beta.md.swp")
    _touch(tmp_path, ".#202012091131 Beta.md")
    _touch(tmp_path, "sub/202012091140 Deep.md")
    _touch(tmp_path, ".hidden/202012091141 Hidden.md")
    return tmp_path


# ---------------------------------------------------------------------------
# Scanning
# ---------------------------------------------------------------------------


class TestShallowScan:
    def test_full_paths(self, corpus_dir: Path):
        index = CorpusIndex(ZettelConfig(directory=corpus_dir))
        assert index.list_files(full_paths=True) == [
            corpus_dir / "202012091130 Alpha.md",
            corpus_dir / "202012091131 Beta.md",
        ]

    def test_names_only(self, corpus_dir: Path):
        index = CorpusIndex(ZettelConfig(directory=corpus_dir))
        assert index.list_files(full_paths=False) == [
            Path("202012091130 Alpha.md"),
            Path("202012091131 Beta.md"),
        ]

    def test_missing_directory(self, tmp_path: Path):
        index = CorpusIndex(ZettelConfig(directory=tmp_path / "nope"))
        assert index.list_files() == []

    def test_id_pattern_parameter(self, corpus_dir: Path):
        _touch(corpus_dir, "abc Letters.md")
        index = CorpusIndex(ZettelConfig(directory=corpus_dir))
        assert index.list_files(full_paths=False, id_pattern="[a-z]{3}") == [Path("abc Letters.md")]


class TestRecursiveScan:
    def test_descends_but_skips_ignored(self, corpus_dir: Path):
        index = CorpusIndex(ZettelConfig(directory=corpus_dir, recursive=True))
        names = [p.name for p in index.list_files()]
        assert "202012091140 Deep.md" in names
        assert "202012091141 Hidden.md" not in names
        assert len(names) == 3

    def test_always_full_paths(self, corpus_dir: Path):
        index = CorpusIndex(ZettelConfig(directory=corpus_dir, recursive=True))
        assert all(p.is_absolute() for p in index.list_files(full_paths=False))

    def test_custom_ignore_pattern(self, corpus_dir: Path):
        config = ZettelConfig(directory=corpus_dir, recursive=True, ignore_pattern="^sub$")
        names = [p.name for p in CorpusIndex(config).list_files()]
        assert "202012091140 Deep.md" not in names
        assert "202012091141 Hidden.md" in names


class TestEditorArtifacts:
    @pytest.mark.parametrize(
        "name", [".#note.md", "note.md~", "#note.md#", "note.md.swp", "note.md.swo"]
    )
    def test_artifacts(self, name: str):
        assert is_editor_artifact(name)

    def test_regular_note(self):
        assert not is_editor_artifact("202012091130 Alpha.md")


# ---------------------------------------------------------------------------
# Caching
# ---------------------------------------------------------------------------


class TestCache:
    def test_stale_until_refresh(self, corpus_dir: Path):
        index = CorpusIndex(ZettelConfig(directory=corpus_dir))
        before = index.list_files()
        new = _touch(corpus_dir, "202012091132 Gamma.md")

        assert index.list_files(refresh=False) == before
        assert new in index.list_files(refresh=True)
        assert new in index.list_files(refresh=False)

    def test_invalidate(self, corpus_dir: Path):
        index = CorpusIndex(ZettelConfig(directory=corpus_dir))
        index.list_files()
        new = _touch(corpus_dir, "202012091132 Gamma.md")
        index.invalidate()
        assert new in index.list_files()

    def test_injected_store(self, corpus_dir: Path):
        store: dict = {}
        index = CorpusIndex(ZettelConfig(directory=corpus_dir), cache=store)
        index.list_files(full_paths=True)
        assert list(store) == [CacheKey(str(corpus_dir), True, r"\d{12}")]

    def test_views_coexist(self, corpus_dir: Path):
        store: dict = {}
        index = CorpusIndex(ZettelConfig(directory=corpus_dir), cache=store)
        full = index.list_files(full_paths=True)
        names = index.list_files(full_paths=False)
        assert len(store) == 2
        assert full != names
        assert index.list_files(full_paths=True) == full

    def test_key_equality_is_by_value(self):
        assert CacheKey("/notes", True, r"\d{12}") == CacheKey("/notes", True, r"\d{12}")
        assert CacheKey("/notes", True, r"\d{12}") != CacheKey("/notes", False, r"\d{12}")

    def test_returned_list_is_a_copy(self, corpus_dir: Path):
        index = CorpusIndex(ZettelConfig(directory=corpus_dir))
        index.list_files().clear()
        assert len(index.list_files()) == 2

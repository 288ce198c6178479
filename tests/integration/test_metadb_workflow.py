"""End-to-end workflows through the MetaDB facade."""

import json
import shutil
from pathlib import Path

import pytest

from metadb import FileLocation, JsonLibData, JsonMetadata, MetaDB, Missing, Remap

pytestmark = pytest.mark.integration


@pytest.fixture
def registry_path(tmp_path: Path) -> str:
    return str(tmp_path / "config" / "libraries.json")


def _reopen(registry_path: str) -> MetaDB:
    """A second engine over the same registry document and mirrors."""
    engine = MetaDB(JsonMetadata(), JsonLibData())
    engine.load_config(registry_path)
    engine.init_libraries()
    return engine


class TestBooksScenario:
    """Create a library, annotate it, persist it, and reopen it."""

    def test_round_trip(self, engine: MetaDB, books_root: Path, registry_path: str) -> None:
        # Arrange
        engine.new_library("Books", str(books_root), {"version": 1})
        engine.init_library("Books")
        engine.set_entry("Books", "b/c.pdf", {"title": "Charlie"})

        # Act
        engine.write_config(registry_path)
        assert engine.flush_metadata() == 2
        reopened = _reopen(registry_path)

        # Assert
        assert list(reopened.get_entries("Books")) == [("a.pdf", {}), ("b/c.pdf", {"title": "Charlie"})]
        assert reopened.get_libdata() == [("Books", {"version": 1})]
        assert reopened.flush_metadata() == 0
        mirror = books_root / ".metadata"
        assert json.loads((mirror / "b" / "c.pdf.json").read_text(encoding="utf-8")) == {"title": "Charlie"}

    def test_reopen_with_refresh_keeps_saved_metadata(
        self, books: MetaDB, books_root: Path, registry_path: str
    ) -> None:
        # Arrange - first session saves metadata and the registry
        books.set_entry("Books", "a.pdf", {"title": "Alpha"})
        books.flush_metadata()
        books.write_config(registry_path)

        # Act - second session refreshes instead of initializing
        reopened = MetaDB(JsonMetadata(), JsonLibData())
        reopened.load_config(registry_path)
        added = reopened.refresh_library("Books")
        changed = reopened.flush_metadata()

        # Assert
        assert added == [("a.pdf", {"title": "Alpha"}), ("b/c.pdf", {})]
        assert changed == 0
        assert reopened.get_entry("Books", "a.pdf") == {"title": "Alpha"}
        mirror = books_root / ".metadata"
        assert json.loads((mirror / "a.pdf.json").read_text(encoding="utf-8")) == {"title": "Alpha"}

    def test_refresh_is_idempotent(self, books: MetaDB, books_root: Path, write_files) -> None:
        write_files(books_root, {"d/e.pdf": b"echo"})

        assert books.refresh_library("Books") == [("d/e.pdf", {})]
        assert books.refresh_library("Books") == []

    def test_rename_then_reopen(self, books: MetaDB, books_root: Path, registry_path: str) -> None:
        books.set_entry("Books", "a.pdf", {"title": "Alpha"})
        books.flush_metadata()

        books.rename_file("Books", "a.pdf", "renamed.pdf")
        books.write_config(registry_path)
        books.flush_metadata()
        reopened = _reopen(registry_path)

        assert reopened.get_entry("Books", "renamed.pdf") == {"title": "Alpha"}
        assert not reopened.has_entry("Books", "a.pdf")
        assert not (books_root / ".metadata" / "a.pdf.json").exists()


class TestExternalMoves:
    """Files moved behind the engine's back are found again by content."""

    def test_resolution_after_move(self, two_libraries: MetaDB, books_root: Path, papers_root: Path) -> None:
        # Arrange - annotate, index, then move files outside the engine
        two_libraries.set_entry("Books", "a.pdf", {"title": "Alpha"})
        two_libraries.set_entry("Books", "b/c.pdf", {"title": "Charlie"})
        two_libraries.flush_metadata()
        two_libraries.index_files()

        shutil.move(str(books_root / "a.pdf"), str(papers_root / "moved-a.pdf"))
        (books_root / "b" / "c.pdf").unlink()

        two_libraries.refresh_library("Books")
        two_libraries.refresh_library("Papers")
        two_libraries.index_files()

        # Act
        results = two_libraries.resolve_missing_files("Books")
        two_libraries.flush_metadata()

        # Assert
        assert results == [
            Remap("a.pdf", FileLocation("Papers", "moved-a.pdf")),
            Missing("b/c.pdf"),
        ]
        assert two_libraries.get_entry("Papers", "moved-a.pdf") == {"title": "Alpha"}
        assert not (books_root / ".metadata" / "a.pdf.json").exists()
        assert json.loads((papers_root / ".metadata" / "moved-a.pdf.json").read_text(encoding="utf-8")) == {
            "title": "Alpha"
        }
        assert two_libraries.get_entry("Books", "b/c.pdf") == {"title": "Charlie"}

    def test_duplicates_across_libraries(self, two_libraries: MetaDB, papers_root: Path, write_files) -> None:
        write_files(papers_root, {"copies/a.pdf": b"alpha", "copies/c.pdf": b"charlie"})
        two_libraries.refresh_library("Papers")
        two_libraries.index_files()

        assert two_libraries.find_duplicates() == [
            [FileLocation("Books", "a.pdf"), FileLocation("Papers", "copies/a.pdf")],
            [FileLocation("Books", "b/c.pdf"), FileLocation("Papers", "copies/c.pdf")],
        ]


class TestLibraryAdministration:
    def test_migrate_then_reopen(
        self, two_libraries: MetaDB, books_root: Path, papers_root: Path, registry_path: str
    ) -> None:
        # Arrange
        two_libraries.set_entry("Books", "b/c.pdf", {"title": "Charlie"})
        two_libraries.flush_metadata()

        # Act
        two_libraries.migrate_entry("Books", "Papers", "b/c.pdf")
        two_libraries.write_config(registry_path)
        two_libraries.flush_metadata()
        reopened = _reopen(registry_path)

        # Assert
        assert reopened.get_entry("Papers", "b/c.pdf") == {"title": "Charlie"}
        assert not reopened.has_entry("Books", "b/c.pdf")
        assert not (books_root / ".metadata" / "b" / "c.pdf.json").exists()

    def test_move_rename_remove(self, books: MetaDB, books_root: Path, tmp_path: Path, registry_path: str) -> None:
        # Arrange
        books.set_entry("Books", "a.pdf", {"title": "Alpha"})
        books.flush_metadata()
        new_root = tmp_path / "archive" / "books"

        # Act
        books.move_library("Books", str(new_root))
        books.rename_library("Books", "Archive")
        books.write_config(registry_path)
        reopened = _reopen(registry_path)

        # Assert
        assert reopened.get_library_root("Archive") == str(new_root)
        assert reopened.get_entry("Archive", "a.pdf") == {"title": "Alpha"}

        reopened.remove_library("Archive", delete_metadata=True)
        assert reopened.library_names() == []
        assert not (new_root / ".metadata").exists()
        assert (new_root / "a.pdf").exists()

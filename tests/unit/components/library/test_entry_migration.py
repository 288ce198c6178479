"""Unit tests for the entry migration component."""

from pathlib import Path

import pytest

from metadb.components.library.entry_migration_comp import migrate_entry
from metadb.helpers.exceptions import CouldNotRename, EntryDoesNotExist, EntryExists, FileExists
from metadb.services.metadb_svc import MetaDB

pytestmark = pytest.mark.unit


class TestMigrateEntry:
    def test_moves_file_and_entry(self, two_libraries: MetaDB, books_root: Path, papers_root: Path) -> None:
        # Arrange
        registry = two_libraries.registry
        registry.get("Books").store.set("b/c.pdf", {"title": "Charlie"})

        # Act
        migrate_entry(registry.get("Books"), registry.get("Papers"), "b/c.pdf", two_libraries.fs)

        # Assert
        assert (papers_root / "b" / "c.pdf").read_bytes() == b"charlie"
        assert not (books_root / "b" / "c.pdf").exists()
        assert registry.get("Papers").store.get("b/c.pdf") == {"title": "Charlie"}
        assert "b/c.pdf" not in registry.get("Books").store

    def test_missing_source_entry(self, two_libraries: MetaDB) -> None:
        registry = two_libraries.registry
        with pytest.raises(EntryDoesNotExist):
            migrate_entry(registry.get("Books"), registry.get("Papers"), "nope.pdf", two_libraries.fs)

    def test_target_entry_exists(self, two_libraries: MetaDB) -> None:
        registry = two_libraries.registry
        registry.get("Papers").store.add("a.pdf", {})
        with pytest.raises(EntryExists) as exc_info:
            migrate_entry(registry.get("Books"), registry.get("Papers"), "a.pdf", two_libraries.fs)
        assert exc_info.value.library == "Papers"

    def test_target_file_exists(self, two_libraries: MetaDB, books_root: Path, papers_root: Path, write_files) -> None:
        write_files(papers_root, {"a.pdf": b"other"})
        registry = two_libraries.registry

        with pytest.raises(FileExists):
            migrate_entry(registry.get("Books"), registry.get("Papers"), "a.pdf", two_libraries.fs)
        assert (books_root / "a.pdf").read_bytes() == b"alpha"
        assert "a.pdf" in registry.get("Books").store

    def test_failed_move_leaves_stores_untouched(self, two_libraries: MetaDB, books_root: Path) -> None:
        registry = two_libraries.registry
        (books_root / "a.pdf").unlink()

        with pytest.raises(CouldNotRename):
            migrate_entry(registry.get("Books"), registry.get("Papers"), "a.pdf", two_libraries.fs)
        assert "a.pdf" in registry.get("Books").store
        assert "a.pdf" not in registry.get("Papers").store

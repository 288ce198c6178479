"""Entry operations - reading and modifying per-file metadata.

Keys given by callers are validated as relative paths before they reach the
entry store.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING, Generic, TypeVar

from metadb.components.library.entry_migration_comp import migrate_entry
from metadb.helpers.path_helper import make_rel

if TYPE_CHECKING:
    from metadb.components.library.library_registry_comp import LibraryRegistry
    from metadb.helpers.files_helper import FileSystem

D = TypeVar("D")
LD = TypeVar("LD")


class LibraryEntriesMixin(Generic[D, LD]):
    """Mixin providing entry access and file operations."""

    registry: LibraryRegistry[D, LD]
    fs: FileSystem

    def get_entries(self, library: str) -> Iterator[tuple[str, D]]:
        """
        ``(key, value)`` pairs of a library, sorted by key.

        Each call walks the current state again.
        """
        return self.registry.get(library).store.items()

    def has_entry(self, library: str, key: str) -> bool:
        return make_rel(key) in self.registry.get(library).store

    def get_entry(self, library: str, key: str) -> D:
        """Raises EntryDoesNotExist if ``key`` is not tracked."""
        return self.registry.get(library).store.get(make_rel(key))

    def new_entry(self, library: str, key: str, value: D) -> None:
        """Raises EntryExists if ``key`` is already tracked."""
        self.registry.get(library).store.add(make_rel(key), value)

    def set_entry(self, library: str, key: str, value: D) -> None:
        """Raises EntryDoesNotExist if ``key`` is not tracked."""
        self.registry.get(library).store.set(make_rel(key), value)

    def remove_entry(self, library: str, key: str) -> None:
        """Forget an entry but leave its file."""
        self.registry.get(library).store.remove_entry(make_rel(key))

    def remove_file(self, library: str, key: str) -> None:
        """Delete a file but leave its entry."""
        lib = self.registry.get(library)
        lib.store.remove_file(lib.root, make_rel(key))

    def rename_file(self, library: str, old_key: str, new_key: str) -> None:
        """Rename a file and its entry. Raises CouldNotRename on filesystem failure."""
        lib = self.registry.get(library)
        lib.store.rename_file(lib.root, make_rel(old_key), make_rel(new_key))

    def migrate_entry(self, from_lib: str, to_lib: str, key: str) -> None:
        """
        Move entry and file from one library to another, keeping the key.

        Raises:
            EntryDoesNotExist: If the entry does not exist in ``from_lib``
            EntryExists: If the entry already exists in ``to_lib``
            FileExists: If the file already exists in ``to_lib``
        """
        source = self.registry.get(from_lib)
        target = self.registry.get(to_lib)
        migrate_entry(source, target, make_rel(key), self.fs)

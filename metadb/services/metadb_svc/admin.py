"""Library administration - registry and library lifecycle.

This module handles:
- Loading and writing the registry document
- Library CRUD (create, remove, rename, move)
- Initializing and refreshing libraries
- Flushing entry metadata to disk
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Generic, TypeVar

from metadb.components.library.library_registry_comp import default_registry_path

if TYPE_CHECKING:
    from metadb.components.library.hash_index_comp import HashIndex
    from metadb.components.library.library_registry_comp import LibraryRegistry
    from metadb.helpers.dto.config_dto import EngineConfig

D = TypeVar("D")
LD = TypeVar("LD")


class LibraryAdminMixin(Generic[D, LD]):
    """Mixin providing registry and library lifecycle methods."""

    registry: LibraryRegistry[D, LD]
    config: EngineConfig
    index: HashIndex | None

    # ------------------------------------------------------------------
    # Registry document
    # ------------------------------------------------------------------

    def load_config(self, path: str | None = None) -> None:
        """
        Replace the registry with the libraries described in the registry document.

        Args:
            path: Document location (default: configured registry_path)

        Raises:
            CouldNotParse: If the document is malformed
        """
        self.registry.load_config(path or default_registry_path(self.config))
        self.index = None

    def write_config(self, path: str | None = None, order: Sequence[str] | None = None) -> None:
        """
        Write the registry document.

        Args:
            path: Document location (default: configured registry_path)
            order: Library names to emit first, in this order
        """
        self.registry.write_config(path or default_registry_path(self.config), order=order)

    # ------------------------------------------------------------------
    # Library management
    # ------------------------------------------------------------------

    def new_library(self, library: str, root: str, data: LD) -> None:
        """Register a new, uninitialized library. Raises LibraryExists if taken."""
        self.registry.new_library(library, root, data)

    def remove_library(self, library: str, delete_metadata: bool = False) -> None:
        """Unregister a library, optionally deleting its metadata mirror."""
        self.registry.remove_library(library, delete_metadata)
        self.index = None

    def rename_library(self, library: str, new_name: str) -> None:
        """Change a library name. Like removal and moves, this discards the content index."""
        self.registry.rename_library(library, new_name)
        self.index = None

    def move_library(self, library: str, new_root: str) -> None:
        """Move all files and metadata of a library. Raises DirNotEmpty if occupied."""
        self.registry.move_library(library, new_root)
        self.index = None

    def library_names(self) -> list[str]:
        return self.registry.names()

    def get_libdata(self) -> list[tuple[str, LD]]:
        """All libraries and their library metadata, in name order."""
        return [(lib.name, lib.data) for lib in self.registry]

    def get_library_root(self, library: str) -> str:
        return self.registry.get(library).root

    # ------------------------------------------------------------------
    # Initializing and refreshing
    # ------------------------------------------------------------------

    def init_library(self, library: str) -> None:
        """
        Load existing entries and add a default entry for every untracked file.

        Raises:
            NotADirectory: If the library root is not a directory
            CorruptMetadata: If a persisted document cannot be decoded
        """
        lib = self.registry.get(library)
        lib.store.init(lib.root)
        lib.initialized = True

    def init_libraries(self) -> None:
        for name in self.registry.names():
            self.init_library(name)

    def refresh_library(self, library: str) -> list[tuple[str, D]]:
        """
        Add an entry for every file without one, loading persisted documents.

        Returns:
            Newly added ``(key, value)`` pairs
        """
        lib = self.registry.get(library)
        added = lib.store.refresh(lib.root)
        lib.initialized = True
        return added

    # ------------------------------------------------------------------
    # Writing data to disk
    # ------------------------------------------------------------------

    def flush_library_metadata(self, library: str) -> int:
        """Write modified entry metadata of one library. Returns documents changed."""
        lib = self.registry.get(library)
        return lib.store.flush(lib.root)

    def flush_metadata(self) -> int:
        """Flush every library. Returns documents changed."""
        changed = 0
        for name in self.registry.names():
            changed += self.flush_library_metadata(name)
        return changed

    def library_to_string(self, library: str) -> str:
        """Dump a library for debugging: header line, then one line per entry."""
        lib = self.registry.get(library)
        header = f"{lib.name} ({lib.root}): {len(lib.store)} entries"
        body = lib.store.to_string()
        return f"{header}\n{body}" if body else header

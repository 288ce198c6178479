"""Library registry component.

Named collection of libraries (root path + library metadata + entry store),
loaded from and written to a single registry document.

Registry operations never scan files: populating a library's entries is
``EntryStore.init``'s job. Renaming or removing one library never touches
another library's entries.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, TypeVar

from metadb.components.library.entry_store_comp import EntryStore
from metadb.helpers import path_helper
from metadb.helpers.dto.library_dto import LibraryRecord
from metadb.helpers.exceptions import (
    CouldNotParse,
    CouldNotRename,
    DirNotEmpty,
    LibraryDoesNotExist,
    LibraryExists,
    NotADirectory,
)
from metadb.persistence.metadata_mirror import mirror_root
from metadb.persistence.registry_document import read_registry_document, write_registry_document

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from metadb.components.metadata.codec_comp import LibData, Metadata
    from metadb.helpers.dto.config_dto import EngineConfig
    from metadb.helpers.files_helper import FileSystem

logger = logging.getLogger(__name__)

D = TypeVar("D")
LD = TypeVar("LD")


@dataclass
class Library(Generic[D, LD]):
    """A named root directory with its library metadata and entries."""

    name: str
    root: str
    data: LD
    store: EntryStore[D]
    initialized: bool = False

    @property
    def dirty(self) -> bool:
        """True if entries changed since the last flush."""
        return self.store.dirty


class LibraryRegistry(Generic[D, LD]):
    """
    Name -> Library mapping.

    Args:
        metadata: Codec for entry metadata
        libdata: Codec for library metadata
        fs: Filesystem capability
        config: Engine settings
    """

    def __init__(self, metadata: Metadata[D], libdata: LibData[LD], fs: FileSystem, config: EngineConfig) -> None:
        self.metadata = metadata
        self.libdata = libdata
        self.fs = fs
        self.config = config
        self.libraries: dict[str, Library[D, LD]] = {}

    def __contains__(self, name: object) -> bool:
        return name in self.libraries

    def __iter__(self) -> Iterator[Library[D, LD]]:
        """Libraries in name order."""
        for name in sorted(self.libraries):
            yield self.libraries[name]

    def names(self) -> list[str]:
        return sorted(self.libraries)

    def get(self, name: str) -> Library[D, LD]:
        """
        Raises:
            LibraryDoesNotExist: If ``name`` is not registered
        """
        try:
            return self.libraries[name]
        except KeyError:
            raise LibraryDoesNotExist(name) from None

    def _make_library(self, name: str, root: str, data: LD) -> Library[D, LD]:
        store = EntryStore(name, self.metadata, self.fs, self.config)
        return Library(name=name, root=root, data=data, store=store)

    # ------------------------------------------------------------------
    # Registry document
    # ------------------------------------------------------------------

    def load_config(self, path: str) -> None:
        """
        Replace the whole registry with the libraries described at ``path``.

        Raises:
            CouldNotParse: If the document or a library metadata value is malformed
        """
        records = read_registry_document(path, self.fs)
        libraries: dict[str, Library[D, LD]] = {}
        for record in records:
            try:
                data = self.libdata.from_json(record.data)
                root = path_helper.make_root(record.root)
            except (ValueError, TypeError, KeyError) as e:
                raise CouldNotParse(path, f"library {record.name!r}: {e}") from e
            libraries[record.name] = self._make_library(record.name, root, data)

        self.libraries = libraries
        logger.info(f"[LibraryRegistry] Registry loaded: {', '.join(sorted(libraries)) or '(empty)'}")

    def write_config(self, path: str, order: Sequence[str] | None = None) -> None:
        """
        Write the registry to ``path``.

        With ``order``, libraries are written in that order; unknown names in
        ``order`` are ignored and unlisted libraries follow in name order.
        """
        names: list[str] = []
        if order is not None:
            for name in order:
                if name in self.libraries and name not in names:
                    names.append(name)
        names.extend(name for name in sorted(self.libraries) if name not in names)

        records = [
            LibraryRecord(
                name=name,
                root=self.libraries[name].root,
                data=self.libdata.to_json(self.libraries[name].data),
            )
            for name in names
        ]
        write_registry_document(path, records, self.fs, indent=self.config.json_indent)

    # ------------------------------------------------------------------
    # Library management
    # ------------------------------------------------------------------

    def new_library(self, name: str, root: str, data: LD) -> Library[D, LD]:
        """
        Register an empty, uninitialized library.

        Raises:
            LibraryExists: If ``name`` is already registered
            InvalidPath: If ``root`` is not absolute
        """
        if name in self.libraries:
            raise LibraryExists(name)
        library = self._make_library(name, path_helper.make_root(root), data)
        self.libraries[name] = library
        logger.info(f"[LibraryRegistry] Created library: {name} at {library.root}")
        return library

    def remove_library(self, name: str, delete_metadata: bool) -> None:
        """
        Unregister a library. Tracked files are never deleted.

        Args:
            delete_metadata: Also delete the metadata mirror directory
        """
        library = self.get(name)
        if delete_metadata:
            mirror = mirror_root(library.root, self.config)
            if self.fs.exists(mirror):
                self.fs.remove_tree(mirror)
                logger.info(f"[LibraryRegistry] Deleted metadata directory {mirror}")
        del self.libraries[name]
        logger.info(f"[LibraryRegistry] Removed library: {name}")

    def rename_library(self, name: str, new_name: str) -> None:
        """
        Change a library's registry key. No filesystem effect.

        Raises:
            LibraryExists: If ``new_name`` is taken
        """
        library = self.get(name)
        if new_name == name:
            return
        if new_name in self.libraries:
            raise LibraryExists(new_name)
        del self.libraries[name]
        library.name = new_name
        library.store.library = new_name
        self.libraries[new_name] = library
        logger.info(f"[LibraryRegistry] Renamed library: {name} -> {new_name}")

    def move_library(self, name: str, new_root: str) -> None:
        """
        Move a library's whole tree (files and metadata mirror) to ``new_root``.

        An existing destination must be a directory without files; it is
        replaced by the moved tree.

        Raises:
            DirNotEmpty: If ``new_root`` already contains files
            NotADirectory: If ``new_root`` exists but is not a directory
            CouldNotRename: If the filesystem move fails
        """
        library = self.get(name)
        destination = path_helper.make_root(new_root)
        if destination == library.root:
            return
        if path_helper.is_within(library.root, destination):
            raise CouldNotRename(library.root)

        if self.fs.exists(destination):
            if not self.fs.is_dir(destination):
                raise NotADirectory(destination)
            if not self.fs.is_empty_dir(destination):
                raise DirNotEmpty(destination)

        try:
            if self.fs.exists(destination):
                self.fs.remove_tree(destination)
            self.fs.make_parent_dirs(destination)
            self.fs.move(library.root, destination)
        except OSError as e:
            raise CouldNotRename(library.root) from e

        logger.info(f"[LibraryRegistry] Moved library {name}: {library.root} -> {destination}")
        library.root = destination


def default_registry_path(config: EngineConfig) -> str:
    """Registry document location from config, else ``$XDG_CONFIG_HOME/metadb/libraries.json``."""
    if config.registry_path:
        return os.path.expanduser(config.registry_path)
    base = os.environ.get("XDG_CONFIG_HOME") or os.path.join(os.path.expanduser("~"), ".config")
    return os.path.join(base, "metadb", "libraries.json")

"""Missing and duplicate files.

``index_files`` must run (after init/refresh) before resolution or duplicate
search; both read the snapshot it produces.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Generic, TypeVar

from metadb.components.library.duplicate_detection_comp import find_duplicates
from metadb.components.library.hash_index_comp import HashIndex, build_hash_index
from metadb.components.library.missing_file_resolution_comp import resolve_missing_files
from metadb.helpers.exceptions import IndexNotBuilt

if TYPE_CHECKING:
    from metadb.components.library.library_registry_comp import LibraryRegistry
    from metadb.components.metadata.codec_comp import Metadata
    from metadb.helpers.dto.library_dto import FileLocation, LibraryIndexReport
    from metadb.helpers.dto.resolution_dto import Resolution
    from metadb.helpers.files_helper import FileSystem

D = TypeVar("D")
LD = TypeVar("LD")


class LibraryIndexMixin(Generic[D, LD]):
    """Mixin providing indexing, resolution and duplicate search."""

    registry: LibraryRegistry[D, LD]
    metadata: Metadata[D]
    fs: FileSystem
    index: HashIndex | None

    def index_files(self) -> None:
        """Digest every file of every initialized library."""
        self.index = build_hash_index(self.registry, self.fs)

    def _require_index(self) -> HashIndex:
        if self.index is None:
            raise IndexNotBuilt()
        return self.index

    def index_report(self, library: str) -> LibraryIndexReport:
        """Orphans and missing entries of ``library`` as of the last index_files."""
        self.registry.get(library)
        return self._require_index().report(library)

    def resolve_missing_files(self, library: str) -> list[Resolution]:
        """
        Reconcile entries of ``library`` whose file disappeared.

        Flush afterwards to persist the re-keyed and merged entries.

        Raises:
            IndexNotBuilt: If index_files has not been called
        """
        lib = self.registry.get(library)
        return resolve_missing_files(lib, self.registry.libraries, self._require_index(), self.metadata)

    def find_duplicates(self) -> list[list[FileLocation]]:
        """
        Groups of byte-identical files across all libraries.

        Raises:
            IndexNotBuilt: If index_files has not been called
        """
        return find_duplicates(self._require_index())

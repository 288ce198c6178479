"""MetaDB service package.

This package provides the engine facade composed from focused mixins:
- LibraryAdminMixin: registry document, library CRUD, init/refresh, flush
- LibraryEntriesMixin: entry access, file rename/removal, cross-library migration
- LibraryIndexMixin: content index, missing file resolution, duplicate search
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

from metadb.components.library.library_registry_comp import LibraryRegistry
from metadb.helpers.dto.config_dto import EngineConfig
from metadb.helpers.files_helper import LocalFileSystem

from .admin import LibraryAdminMixin
from .entries import LibraryEntriesMixin
from .index import LibraryIndexMixin

if TYPE_CHECKING:
    from metadb.components.library.hash_index_comp import HashIndex
    from metadb.components.metadata.codec_comp import LibData, Metadata
    from metadb.helpers.files_helper import FileSystem
    from metadb.services.config_svc import ConfigService

D = TypeVar("D")
LD = TypeVar("LD")


class MetaDB(LibraryAdminMixin[D, LD], LibraryEntriesMixin[D, LD], LibraryIndexMixin[D, LD]):
    """
    File metadata database over one or more libraries.

    One instance owns all registry and entry state; nothing is global and
    nothing persists until ``flush_metadata``/``write_config`` is called.
    The engine is synchronous and not thread-safe: callers sharing an
    instance across threads must serialize access themselves.

    Usage:
        db = MetaDB(JsonMetadata(), JsonLibData())
        db.load_config()
        db.init_libraries()
        db.index_files()
        for resolution in db.resolve_missing_files("Books"):
            ...
        db.flush_metadata()
    """

    def __init__(
        self,
        metadata: Metadata[D],
        libdata: LibData[LD],
        config: EngineConfig | None = None,
        fs: FileSystem | None = None,
    ) -> None:
        """
        Initialize MetaDB.

        Args:
            metadata: Codec, default and merge policy for entry metadata
            libdata: Codec for library metadata
            config: Engine settings (defaults apply when omitted)
            fs: Filesystem capability (local disk when omitted)
        """
        self.metadata = metadata
        self.libdata = libdata
        self.config = config or EngineConfig()
        self.fs = fs or LocalFileSystem(self.config.digest_algorithm, self.config.read_chunk_size)
        self.registry: LibraryRegistry[D, LD] = LibraryRegistry(metadata, libdata, self.fs, self.config)
        self.index: HashIndex | None = None

    @classmethod
    def from_config_service(
        cls,
        metadata: Metadata[D],
        libdata: LibData[LD],
        config_service: ConfigService,
    ) -> MetaDB[D, LD]:
        """Build an engine from layered configuration (YAML files and METADB_* env vars)."""
        return cls(metadata, libdata, config=config_service.make_engine_config())


__all__ = ["LibraryAdminMixin", "LibraryEntriesMixin", "LibraryIndexMixin", "MetaDB"]

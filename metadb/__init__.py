"""
metadb - local file metadata database.

Associates caller-defined metadata with files under one or more library
directories, follows files across renames and moves by content digest, and
reports duplicate content across libraries.
"""

from .__version__ import __version__
from .components.metadata.codec_comp import JsonLibData, JsonMetadata, LibData, Metadata
from .helpers.dto import EngineConfig, FileLocation, LibraryIndexReport, Missing, Remap, Resolution
from .helpers.exceptions import (
    CorruptMetadata,
    CouldNotParse,
    CouldNotRename,
    DirNotEmpty,
    EntryDoesNotExist,
    EntryExists,
    FileExists,
    IndexNotBuilt,
    InvalidPath,
    LibraryDoesNotExist,
    LibraryExists,
    MetadbError,
    NotADirectory,
)
from .services import ConfigService, MetaDB

__all__ = [
    "ConfigService",
    "CorruptMetadata",
    "CouldNotParse",
    "CouldNotRename",
    "DirNotEmpty",
    "EngineConfig",
    "EntryDoesNotExist",
    "EntryExists",
    "FileExists",
    "FileLocation",
    "IndexNotBuilt",
    "InvalidPath",
    "JsonLibData",
    "JsonMetadata",
    "LibData",
    "LibraryDoesNotExist",
    "LibraryExists",
    "LibraryIndexReport",
    "MetaDB",
    "Metadata",
    "MetadbError",
    "Missing",
    "NotADirectory",
    "Remap",
    "Resolution",
    "__version__",
]

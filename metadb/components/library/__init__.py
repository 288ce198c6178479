"""
Library package.
"""

from .duplicate_detection_comp import find_duplicates
from .entry_migration_comp import migrate_entry
from .entry_store_comp import Entry, EntryStore
from .hash_index_comp import HashIndex, build_hash_index
from .library_registry_comp import Library, LibraryRegistry, default_registry_path
from .missing_file_resolution_comp import resolve_missing_files

__all__ = [
    "Entry",
    "EntryStore",
    "HashIndex",
    "Library",
    "LibraryRegistry",
    "build_hash_index",
    "default_registry_path",
    "find_duplicates",
    "migrate_entry",
    "resolve_missing_files",
]

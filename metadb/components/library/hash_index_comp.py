"""Hash index component.

Maps content digest -> locations ``(library, key)`` across every initialized
library. The index is a snapshot: it is rebuilt from a full scan on every
``build_hash_index`` call and never updated incrementally.

While scanning, each library is also split into:
- orphans: files on disk without an entry
- missing: entries whose file is no longer on disk
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from metadb.helpers import path_helper
from metadb.helpers.dto.library_dto import FileLocation, LibraryIndexReport

if TYPE_CHECKING:
    from metadb.components.library.library_registry_comp import Library
    from metadb.helpers.files_helper import FileSystem

logger = logging.getLogger(__name__)


@dataclass
class HashIndex:
    """Digest -> ordered locations, plus the reverse lookup and per-library reports."""

    buckets: dict[str, list[FileLocation]] = field(default_factory=dict)
    digests: dict[FileLocation, str] = field(default_factory=dict)
    reports: dict[str, LibraryIndexReport] = field(default_factory=dict)

    def add(self, location: FileLocation, digest: str) -> None:
        self.buckets.setdefault(digest, []).append(location)
        self.digests[location] = digest

    def locations(self, digest: str) -> list[FileLocation]:
        """Locations sharing ``digest``, in (library, key) order."""
        return sorted(self.buckets.get(digest, []))

    def digest_of(self, location: FileLocation) -> str | None:
        return self.digests.get(location)

    def report(self, library: str) -> LibraryIndexReport:
        return self.reports.get(library) or LibraryIndexReport(library=library)

    def __len__(self) -> int:
        return len(self.digests)


def build_hash_index(libraries: Iterable[Library[Any, Any]], fs: FileSystem) -> HashIndex:
    """
    Digest every file of every initialized library.

    Entries whose file is present get their cached digest refreshed; entries
    whose file is gone keep the digest from their last indexing so the
    resolver can look for relocated copies.

    Args:
        libraries: Registered libraries (uninitialized ones are skipped)
        fs: Filesystem capability used for listing and hashing

    Returns:
        HashIndex snapshot
    """
    index = HashIndex()

    for library in libraries:
        if not library.initialized:
            logger.debug(f"Skipping uninitialized library {library.name}")
            continue

        report = LibraryIndexReport(library=library.name)
        store = library.store
        present: set[str] = set()

        for path in fs.list_files(library.root, hidden=False):
            key = path_helper.strip_root(library.root, path)
            digest = fs.digest(path)
            index.add(FileLocation(library.name, key), digest)
            present.add(key)
            report.files_indexed += 1

            if key in store.entries:
                store.entries[key].digest = digest
            else:
                report.orphans.append(key)

        report.missing = sorted(key for key in store.entries if key not in present)
        index.reports[library.name] = report

        logger.info(
            f"Indexed library {library.name}: {report.files_indexed} files, "
            f"{len(report.orphans)} orphans, {len(report.missing)} missing"
        )

    logger.info(f"Hash index built: {len(index)} files, {len(index.buckets)} distinct digests")
    return index

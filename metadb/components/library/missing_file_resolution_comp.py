"""Missing file resolution component.

Reconciles entries whose file disappeared by matching their cached digest
against the hash index. Matching mirrors move detection: candidates are
visited in a fixed order and a location claimed by one stale entry is not
offered to the next one while an unclaimed location remains.

Per missing entry ``(library, key)`` with digest ``h``:
- no other location has ``h``: ``Missing(key)``, the entry stays in place
- target location has no entry: the stale entry is moved onto it
- target location has an entry: ``merge(stale, current)``; a value replaces
  the target entry and the stale entry is dropped, ``None`` keeps both
  entries untouched (conflict left for manual resolution)
In both relocation cases the result is ``Remap(key, target)``.

Assumes every library was freshly initialized or refreshed and the index was
just built.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeVar

from metadb.helpers.dto.library_dto import FileLocation
from metadb.helpers.dto.resolution_dto import Missing, Remap, Resolution

if TYPE_CHECKING:
    from metadb.components.library.hash_index_comp import HashIndex
    from metadb.components.library.library_registry_comp import Library
    from metadb.components.metadata.codec_comp import Metadata

logger = logging.getLogger(__name__)

D = TypeVar("D")


# Component-local DTOs (not promoted to helpers/dto)
@dataclass
class ResolutionStats:
    """Counters for one resolve_missing_files call."""

    moved: int = 0
    merged: int = 0
    conflicts: int = 0
    missing: int = 0


def pick_candidate(
    candidates: list[FileLocation],
    origin: FileLocation,
    claimed: set[FileLocation],
) -> FileLocation | None:
    """
    Deterministically choose a relocation target.

    The smallest unclaimed location wins; if every location is already
    claimed, the smallest claimed one is used.
    """
    others = [c for c in sorted(candidates) if c != origin]
    if not others:
        return None
    for candidate in others:
        if candidate not in claimed:
            return candidate
    return others[0]


def resolve_missing_files(
    library: Library[D, Any],
    libraries: Mapping[str, Library[D, Any]],
    index: HashIndex,
    metadata: Metadata[D],
) -> list[Resolution]:
    """
    Resolve every missing entry of ``library``.

    Args:
        library: Library whose missing entries are resolved
        libraries: All registered libraries by name (relocation targets)
        index: Hash index built by the most recent index_files
        metadata: Codec providing the merge policy

    Returns:
        One Resolution per missing entry, in key order
    """
    results: list[Resolution] = []
    claimed: set[FileLocation] = set()
    stats = ResolutionStats()
    store = library.store

    missing_keys = [key for key in index.report(library.name).missing if key in store.entries]

    for key in missing_keys:
        stale = store.entries[key]
        origin = FileLocation(library.name, key)
        target = None
        if stale.digest is not None:
            target = pick_candidate(index.locations(stale.digest), origin, claimed)

        if target is None:
            logger.debug(f"No relocated copy found for {origin}")
            results.append(Missing(key))
            stats.missing += 1
            continue

        claimed.add(target)
        target_store = libraries[target.library].store

        if target.key not in target_store.entries:
            entry = store.detach(key)
            entry.digest = index.digest_of(target)
            target_store.attach(target.key, entry)
            stats.moved += 1
            logger.info(f"Resolved {origin} -> {target} (entry moved)")
        else:
            current = target_store.entries[target.key]
            merged = metadata.merge(stale.value, current.value)
            if merged is None:
                stats.conflicts += 1
                logger.warning(f"Could not merge {origin} into {target}; both entries kept")
            else:
                target_store.set(target.key, merged)
                store.detach(key)
                stats.merged += 1
                logger.info(f"Resolved {origin} -> {target} (entries merged)")

        results.append(Remap(key, target))

    logger.info(
        f"Resolution for library {library.name} complete: {stats.moved} moved, "
        f"{stats.merged} merged, {stats.conflicts} conflicts, {stats.missing} missing"
    )
    return results

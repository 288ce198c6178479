"""Duplicate detection component.

Partitions indexed locations by exact content digest and keeps every
bucket holding more than one location.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from metadb.components.library.hash_index_comp import HashIndex
    from metadb.helpers.dto.library_dto import FileLocation

logger = logging.getLogger(__name__)


def find_duplicates(index: HashIndex) -> list[list[FileLocation]]:
    """
    Group byte-identical files across all indexed libraries.

    Returns:
        One group per shared digest, members sorted by (library, key),
        groups sorted by their first member. Unique files are omitted.
    """
    groups = [sorted(locations) for locations in index.buckets.values() if len(locations) > 1]
    groups.sort(key=lambda group: group[0])

    if groups:
        logger.info(
            f"Found {len(groups)} duplicate groups covering {sum(len(g) for g in groups)} files"
        )
    return groups

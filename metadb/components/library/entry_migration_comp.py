"""Entry migration component.

Moves one entry and its file between two libraries, keeping the key.
The file is moved before the entry is transplanted, so a failed move
leaves both entry stores exactly as they were.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, TypeVar

from metadb.helpers import path_helper
from metadb.helpers.exceptions import CouldNotRename, EntryExists, FileExists

if TYPE_CHECKING:
    from metadb.components.library.library_registry_comp import Library
    from metadb.helpers.files_helper import FileSystem

logger = logging.getLogger(__name__)

D = TypeVar("D")


def migrate_entry(source: Library[D, Any], target: Library[D, Any], key: str, fs: FileSystem) -> None:
    """
    Move the entry and file at ``key`` from ``source`` to ``target``.

    Preconditions are checked in this order:

    Raises:
        EntryDoesNotExist: If ``source`` has no entry for ``key``
        EntryExists: If ``target`` already has an entry for ``key``
        FileExists: If a file already exists at ``key`` under ``target``
        CouldNotRename: If the filesystem move fails
    """
    source.store.entry(key)
    if key in target.store.entries:
        raise EntryExists(target.name, key)

    src = path_helper.join(source.root, key)
    dst = path_helper.join(target.root, key)
    if fs.exists(dst):
        raise FileExists(dst)

    try:
        fs.make_parent_dirs(dst)
        fs.move(src, dst)
    except OSError as e:
        raise CouldNotRename(src) from e

    target.store.attach(key, source.store.detach(key))
    logger.info(f"Migrated {key}: {source.name} -> {target.name}")

"""Entry store component.

In-memory map from key (relative path) to metadata for one library, plus
persistence to the library's metadata mirror.

Dirty tracking is explicit: every mutation flags the touched entry (and the
store), removals are remembered until the next flush, and ``flush`` only
writes what changed.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, TypeVar

from metadb.helpers import path_helper
from metadb.helpers.exceptions import CouldNotRename, EntryDoesNotExist, EntryExists, FileExists
from metadb.persistence.metadata_mirror import delete_document, document_path, read_document, write_document

if TYPE_CHECKING:
    from metadb.components.metadata.codec_comp import Metadata
    from metadb.helpers.dto.config_dto import EngineConfig
    from metadb.helpers.files_helper import FileSystem

logger = logging.getLogger(__name__)

D = TypeVar("D")


# Component-local DTOs (not promoted to helpers/dto)
@dataclass
class Entry(Generic[D]):
    """Metadata tracked for one key."""

    value: D
    digest: str | None = None  # set by the most recent index_files that saw the file
    dirty: bool = False


class EntryStore(Generic[D]):
    """
    Entries of a single library.

    Args:
        library: Owning library name (used in error conditions)
        codec: Caller-supplied metadata codec
        fs: Filesystem capability
        config: Engine settings (mirror directory name, document suffix)
    """

    def __init__(self, library: str, codec: Metadata[D], fs: FileSystem, config: EngineConfig) -> None:
        self.library = library
        self.codec = codec
        self.fs = fs
        self.config = config
        self.entries: dict[str, Entry[D]] = {}
        self.removed: set[str] = set()
        self.dirty = False

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, key: object) -> bool:
        return key in self.entries

    # ------------------------------------------------------------------
    # Scanning
    # ------------------------------------------------------------------

    def scan_keys(self, root: str) -> Iterator[str]:
        """Keys of every non-hidden file under ``root``."""
        for path in self.fs.list_files(root, hidden=False):
            yield path_helper.strip_root(root, path)

    def init(self, root: str) -> None:
        """
        Replace the in-memory state with one entry per file under ``root``.

        Previously persisted documents are loaded; files without one get the
        codec default and are flagged dirty so the next flush writes them.
        The new state is assembled aside, so a corrupt document leaves the
        current state untouched.

        Raises:
            NotADirectory: If ``root`` is not a directory
            CorruptMetadata: If a persisted document cannot be decoded
        """
        entries: dict[str, Entry[D]] = {}
        loaded = 0
        for key in self.scan_keys(root):
            doc = document_path(root, key, self.config)
            if self.fs.exists(doc):
                entries[key] = Entry(value=read_document(doc, self.codec, self.fs))
                loaded += 1
            else:
                entries[key] = Entry(value=self.codec.default(), dirty=True)

        self.entries = entries
        self.removed = set()
        self.dirty = loaded != len(entries)
        logger.info(
            f"Initialized library {self.library}: {len(entries)} entries "
            f"({loaded} loaded, {len(entries) - loaded} new)"
        )

    def refresh(self, root: str) -> list[tuple[str, D]]:
        """
        Add an entry for every file under ``root`` that has none in memory.

        A file with a persisted document gets the stored value (clean); any
        other file gets the codec default (dirty). Keys removed since the last
        flush are not reloaded from their stale document. Existing entries are
        left untouched, including ones whose file has disappeared.

        Returns:
            Newly added ``(key, value)`` pairs in scan order

        Raises:
            CorruptMetadata: If a persisted document cannot be decoded
        """
        added: list[tuple[str, D]] = []
        for key in self.scan_keys(root):
            if key in self.entries:
                continue
            doc = document_path(root, key, self.config)
            if key not in self.removed and self.fs.exists(doc):
                value = read_document(doc, self.codec, self.fs)
                self.entries[key] = Entry(value=value)
            else:
                value = self.codec.default()
                self._put(key, Entry(value=value))
            added.append((key, value))

        if added:
            logger.info(f"Refreshed library {self.library}: {len(added)} new entries")
        return added

    # ------------------------------------------------------------------
    # Entry access
    # ------------------------------------------------------------------

    def items(self) -> Iterator[tuple[str, D]]:
        """``(key, value)`` pairs sorted by key."""
        for key in sorted(self.entries):
            yield key, self.entries[key].value

    def entry(self, key: str) -> Entry[D]:
        """
        Raises:
            EntryDoesNotExist: If ``key`` has no entry
        """
        try:
            return self.entries[key]
        except KeyError:
            raise EntryDoesNotExist(self.library, key) from None

    def get(self, key: str) -> D:
        return self.entry(key).value

    def set(self, key: str, value: D) -> None:
        """
        Replace the value of an existing entry.

        Raises:
            EntryDoesNotExist: If ``key`` has no entry
        """
        entry = self.entry(key)
        entry.value = value
        entry.dirty = True
        self.dirty = True

    def add(self, key: str, value: D) -> None:
        """
        Create a new entry.

        Raises:
            EntryExists: If ``key`` already has an entry
        """
        if key in self.entries:
            raise EntryExists(self.library, key)
        self._put(key, Entry(value=value))

    def attach(self, key: str, entry: Entry[D]) -> None:
        """Insert an entry detached from another key or store."""
        if key in self.entries:
            raise EntryExists(self.library, key)
        self._put(key, entry)

    def detach(self, key: str) -> Entry[D]:
        """Remove and return an entry; its document is deleted on flush."""
        entry = self.entry(key)
        del self.entries[key]
        self.removed.add(key)
        self.dirty = True
        return entry

    def remove_entry(self, key: str) -> None:
        """
        Forget ``key``; the tracked file stays on disk.

        Raises:
            EntryDoesNotExist: If ``key`` has no entry
        """
        self.detach(key)
        logger.debug(f"Removed entry {self.library}:{key}")

    def _put(self, key: str, entry: Entry[D]) -> None:
        entry.dirty = True
        self.entries[key] = entry
        self.removed.discard(key)
        self.dirty = True

    # ------------------------------------------------------------------
    # File operations
    # ------------------------------------------------------------------

    def remove_file(self, root: str, key: str) -> None:
        """
        Delete the tracked file, keeping its entry (and cached digest).

        Raises:
            EntryDoesNotExist: If ``key`` has no entry
            OSError: If the file cannot be removed
        """
        self.entry(key)
        path = path_helper.join(root, key)
        self.fs.remove(path)
        logger.info(f"Removed file {path} (entry kept)")

    def rename_file(self, root: str, old_key: str, new_key: str) -> None:
        """
        Rename a tracked file and re-key its entry.

        The filesystem move happens first; the entry is only re-keyed once it
        succeeded. A destination that already has an entry or a file is
        rejected before anything is touched.

        Raises:
            EntryDoesNotExist: If ``old_key`` has no entry
            EntryExists: If ``new_key`` already has an entry
            FileExists: If a file already exists at ``new_key``
            CouldNotRename: If the filesystem move fails
        """
        self.entry(old_key)
        if new_key in self.entries:
            raise EntryExists(self.library, new_key)

        src = path_helper.join(root, old_key)
        dst = path_helper.join(root, new_key)
        if self.fs.exists(dst):
            raise FileExists(dst)

        try:
            self.fs.make_parent_dirs(dst)
            self.fs.move(src, dst)
        except OSError as e:
            raise CouldNotRename(src) from e

        self.attach(new_key, self.detach(old_key))
        logger.info(f"Renamed {self.library}:{old_key} -> {new_key}")

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def flush(self, root: str) -> int:
        """
        Write dirty entries and delete documents of removed entries.

        Returns:
            Number of documents written or deleted
        """
        if not self.dirty:
            return 0

        changed = 0
        for key in sorted(self.removed):
            if delete_document(document_path(root, key, self.config), self.fs):
                changed += 1
        self.removed.clear()

        for key, entry in sorted(self.entries.items()):
            if not entry.dirty:
                continue
            write_document(
                document_path(root, key, self.config),
                entry.value,
                self.codec,
                self.fs,
                self.config.json_indent,
            )
            entry.dirty = False
            changed += 1

        self.dirty = False
        logger.info(f"Flushed library {self.library}: {changed} document(s) changed")
        return changed

    def to_string(self) -> str:
        """One ``key: value`` line per entry, for debugging."""
        return "\n".join(f"{key}: {self.codec.to_string(value)}" for key, value in self.items())

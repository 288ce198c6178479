"""
DTOs for library-related operations.

Cross-layer data contracts shared by components, persistence and services.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, order=True)
class FileLocation:
    """A file addressed by owning library name and key (relative path)."""

    library: str
    key: str

    def __str__(self) -> str:
        return f"{self.library}:{self.key}"


@dataclass
class LibraryRecord:
    """
    One library as stored in the registry configuration document.

    ``data`` is the library metadata already encoded to a JSON value.
    """

    name: str
    root: str
    data: Any = None


@dataclass
class LibraryIndexReport:
    """Per-library outcome of the most recent index_files call."""

    library: str
    files_indexed: int = 0
    orphans: list[str] = field(default_factory=list)  # on disk, no entry
    missing: list[str] = field(default_factory=list)  # entry, no file on disk

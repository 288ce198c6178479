"""Custom exceptions used across multiple layers.

Rules:
- Only put exceptions here if they need to be raised in one layer and caught in another.
- Keep exceptions simple and focused: they carry the offending library, key or path.
- No I/O, no config loading, no complex logic.
"""

from __future__ import annotations


class MetadbError(Exception):
    """Base class for every error condition raised by the engine."""


class InvalidPath(MetadbError, ValueError):
    """Raised when a root or relative path fails structural validation."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid path {path!r}: {reason}")


class LibraryExists(MetadbError):
    """Raised when a library name is already registered."""

    def __init__(self, library: str) -> None:
        self.library = library
        super().__init__(f"Library already exists: {library}")


class LibraryDoesNotExist(MetadbError):
    """Raised when an operation addresses an unregistered library."""

    def __init__(self, library: str) -> None:
        self.library = library
        super().__init__(f"Library not found: {library}")


class EntryExists(MetadbError):
    """Raised when an entry already exists for a key."""

    def __init__(self, library: str, key: str) -> None:
        self.library = library
        self.key = key
        super().__init__(f"Entry already exists: {library}:{key}")


class EntryDoesNotExist(MetadbError):
    """Raised when an entry is absent for a key."""

    def __init__(self, library: str, key: str) -> None:
        self.library = library
        self.key = key
        super().__init__(f"Entry does not exist: {library}:{key}")


class FileExists(MetadbError):
    """Raised when a file already occupies a destination path."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"File already exists: {path}")


class CouldNotRename(MetadbError):
    """Raised when the filesystem refused a move or rename."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Could not rename: {path}")


class DirNotEmpty(MetadbError):
    """Raised when the destination of a library move already contains files."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Directory not empty: {path}")


class NotADirectory(MetadbError):
    """Raised when a path expected to be a directory is not one or does not exist."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Not a directory: {path}")


class CouldNotParse(MetadbError):
    """Raised when the registry configuration document cannot be decoded."""

    def __init__(self, path: str, reason: str | None = None) -> None:
        self.path = path
        self.reason = reason
        message = f"Could not parse: {path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class CorruptMetadata(MetadbError):
    """Raised when a persisted entry document cannot be decoded."""

    def __init__(self, path: str, reason: str | None = None) -> None:
        self.path = path
        self.reason = reason
        message = f"Corrupt metadata: {path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class IndexNotBuilt(MetadbError):
    """Raised when resolution or duplicate search runs before index_files."""

    def __init__(self) -> None:
        super().__init__("Files have not been indexed; call index_files() first")

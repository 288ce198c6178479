"""
Path handling utilities for library-scoped operations.

Two kinds of path circulate through the engine:
- roots: absolute, normalized filesystem paths (library roots, file locations)
- keys: POSIX-style relative paths identifying a file within a library

Rules:
- Only import from standard library (os, pathlib)
- Keep pure: no I/O, no config loading, no side effects
"""

from __future__ import annotations

import os
from pathlib import Path, PurePath, PurePosixPath

from metadb.helpers.exceptions import InvalidPath


def make_root(path: str | Path) -> str:
    """
    Validate and normalize an absolute root path.

    Expands ``~`` and collapses redundant separators and ``.``/``..`` segments.
    Symlinks are not resolved so the stored root matches what the user gave.

    Raises:
        InvalidPath: If the path is empty, contains NUL bytes, or is relative
    """
    path_str = os.path.expanduser(str(path))
    if not path_str:
        raise InvalidPath(path_str, "empty path")
    if "\x00" in path_str:
        raise InvalidPath(path_str, "NUL byte in path")
    if not os.path.isabs(path_str):
        raise InvalidPath(path_str, "root must be absolute")
    return os.path.normpath(path_str)


def make_rel(path: str | PurePath) -> str:
    """
    Validate and normalize a library key (relative path).

    Structural blacklist:
    - Absolute paths
    - Any ``..`` component
    - NUL bytes
    - Hidden segments (reserved for the metadata mirror)

    Returns:
        POSIX-style relative path, e.g. ``"b/c.pdf"``

    Raises:
        InvalidPath: If the key fails validation

    Examples:
        >>> make_rel("b//c.pdf")
        'b/c.pdf'
        >>> make_rel("../etc/passwd")
        InvalidPath: Invalid path '../etc/passwd': parent directory segment
    """
    path_str = str(path)
    if not path_str or path_str == ".":
        raise InvalidPath(path_str, "empty path")
    if "\x00" in path_str:
        raise InvalidPath(path_str, "NUL byte in path")

    # Accept native separators from callers on any platform
    pure = PurePosixPath(path_str.replace(os.sep, "/"))
    if pure.is_absolute() or PurePath(path_str).is_absolute():
        raise InvalidPath(path_str, "key must be relative")
    if ".." in pure.parts:
        raise InvalidPath(path_str, "parent directory segment")
    if any(part.startswith(".") for part in pure.parts):
        raise InvalidPath(path_str, "hidden segment")
    return pure.as_posix()


def join(root: str, rel: str) -> str:
    """Join a root and a library key into an absolute path."""
    return os.path.join(root, *PurePosixPath(rel).parts)


def strip_root(root: str, path: str) -> str:
    """
    Return ``path`` relative to ``root`` as a POSIX key.

    Raises:
        InvalidPath: If ``path`` is not inside ``root``
    """
    try:
        relative = Path(path).relative_to(root)
    except ValueError as e:
        raise InvalidPath(path, f"not within root {root}") from e
    return relative.as_posix()


def leaf(path: str) -> str:
    """Last segment of a root or key."""
    return os.path.basename(path.rstrip("/" + os.sep)) if path else ""


def is_hidden(path: str) -> bool:
    """True if the last segment of ``path`` starts with a dot."""
    return leaf(path).startswith(".")


def add_suffix(path: str, suffix: str) -> str:
    """Append a document suffix (``a.pdf`` -> ``a.pdf.json``)."""
    return f"{path}{suffix}"


def is_within(root: str, path: str) -> bool:
    """True if ``path`` equals ``root`` or lies beneath it."""
    root_norm = os.path.normpath(root)
    path_norm = os.path.normpath(path)
    return path_norm == root_norm or path_norm.startswith(root_norm.rstrip(os.sep) + os.sep)

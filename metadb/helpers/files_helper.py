"""
File system helpers for library file operations.

This module provides the filesystem capability consumed by the engine.
Components never touch ``os``/``shutil`` directly; they receive a
``FileSystem`` so tests and embedders can substitute their own.

Listing rule: a path whose last segment starts with a dot is hidden.
Hidden directories are pruned entirely when ``hidden=False``, which keeps
the metadata mirror out of every library scan.
"""

from __future__ import annotations

import hashlib
import logging
import os
import shutil
from collections.abc import Iterator
from typing import Protocol

from metadb.helpers import path_helper
from metadb.helpers.exceptions import NotADirectory

logger = logging.getLogger(__name__)


class FileSystem(Protocol):
    """Filesystem primitives required by the engine."""

    def list_files(self, root: str, hidden: bool = False) -> Iterator[str]: ...

    def remove(self, path: str) -> None: ...

    def remove_tree(self, path: str) -> None: ...

    def make_dirs(self, path: str) -> None: ...

    def make_parent_dirs(self, path: str) -> None: ...

    def move(self, src: str, dst: str) -> None: ...

    def exists(self, path: str) -> bool: ...

    def is_dir(self, path: str) -> bool: ...

    def is_empty_dir(self, path: str) -> bool: ...

    def digest(self, path: str) -> str: ...

    def read_bytes(self, path: str) -> bytes: ...

    def write_bytes_atomic(self, path: str, data: bytes) -> None: ...


class LocalFileSystem:
    """
    ``FileSystem`` backed by the local disk.

    Args:
        digest_algorithm: Any ``hashlib`` algorithm name (default: md5)
        read_chunk_size: Bytes read per chunk while hashing
    """

    def __init__(self, digest_algorithm: str = "md5", read_chunk_size: int = 1 << 20) -> None:
        if digest_algorithm not in hashlib.algorithms_available:
            raise ValueError(f"Unsupported digest algorithm: {digest_algorithm}")
        self.digest_algorithm = digest_algorithm
        self.read_chunk_size = read_chunk_size

    def list_files(self, root: str, hidden: bool = False) -> Iterator[str]:
        """
        Recursively yield absolute file paths under ``root``.

        Entries are visited in sorted order so scans are reproducible.
        Symlinked directories are not followed.

        Raises:
            NotADirectory: If ``root`` is not an existing directory
        """
        if not os.path.isdir(root):
            raise NotADirectory(root)
        return self._walk(root, hidden)

    def _walk(self, directory: str, hidden: bool) -> Iterator[str]:
        with os.scandir(directory) as it:
            children = sorted(it, key=lambda e: e.name)
        for child in children:
            if not hidden and path_helper.is_hidden(child.name):
                continue
            if child.is_dir(follow_symlinks=False):
                yield from self._walk(child.path, hidden)
            elif child.is_file():
                yield child.path

    def remove(self, path: str) -> None:
        os.remove(path)

    def remove_tree(self, path: str) -> None:
        """
        Recursively delete a directory.

        Raises:
            NotADirectory: If ``path`` is not an existing directory
        """
        if not os.path.isdir(path):
            raise NotADirectory(path)
        shutil.rmtree(path)

    def make_dirs(self, path: str) -> None:
        """``mkdir -p`` for ``path`` itself."""
        os.makedirs(path, exist_ok=True)

    def make_parent_dirs(self, path: str) -> None:
        """``mkdir -p`` for the directory containing ``path``."""
        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, exist_ok=True)

    def move(self, src: str, dst: str) -> None:
        shutil.move(src, dst)

    def exists(self, path: str) -> bool:
        return os.path.lexists(path)

    def is_dir(self, path: str) -> bool:
        return os.path.isdir(path)

    def is_empty_dir(self, path: str) -> bool:
        """
        True if the directory holds no files (hidden ones included).

        Empty subdirectories do not count as content.

        Raises:
            NotADirectory: If ``path`` is not an existing directory
        """
        return next(iter(self.list_files(path, hidden=True)), None) is None

    def digest(self, path: str) -> str:
        """Hex digest of the file content, read in chunks."""
        hasher = hashlib.new(self.digest_algorithm)
        with open(path, "rb") as f:
            for chunk in iter(lambda: f.read(self.read_chunk_size), b""):
                hasher.update(chunk)
        return hasher.hexdigest()

    def read_bytes(self, path: str) -> bytes:
        with open(path, "rb") as f:
            return f.read()

    def write_bytes_atomic(self, path: str, data: bytes) -> None:
        """
        Write ``data`` to ``path`` through a sibling ``.tmp`` file.

        Parent directories are created. Readers see either the old or the new
        content, never a partial write.
        """
        self.make_parent_dirs(path)
        tmp_path = f"{path}.tmp"
        with open(tmp_path, "wb") as f:
            f.write(data)
        os.replace(tmp_path, path)

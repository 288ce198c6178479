"""Per-entry metadata documents.

Each tracked file ``<root>/<key>`` has its metadata stored at
``<root>/<metadata_dir>/<key><document_suffix>``, e.g.
``/lib1/.metadata/b/c.pdf.json``. The document body is exactly the
caller's encoded value.
"""

from __future__ import annotations

import json
import logging
import os
from typing import TYPE_CHECKING, TypeVar

from metadb.helpers import path_helper
from metadb.helpers.exceptions import CorruptMetadata

if TYPE_CHECKING:
    from metadb.components.metadata.codec_comp import Metadata
    from metadb.helpers.dto.config_dto import EngineConfig
    from metadb.helpers.files_helper import FileSystem

logger = logging.getLogger(__name__)

D = TypeVar("D")


def mirror_root(root: str, config: EngineConfig) -> str:
    """Absolute path of a library's metadata mirror directory."""
    return os.path.join(root, config.metadata_dir)


def document_path(root: str, key: str, config: EngineConfig) -> str:
    """Absolute path of the metadata document for ``key``."""
    return path_helper.add_suffix(path_helper.join(mirror_root(root, config), key), config.document_suffix)


def read_document(path: str, codec: Metadata[D], fs: FileSystem) -> D:
    """
    Read and decode one metadata document.

    Raises:
        CorruptMetadata: If the file is unreadable, not valid JSON, or the codec rejects it
    """
    try:
        raw = json.loads(fs.read_bytes(path))
        return codec.from_json(raw)
    except (OSError, ValueError, TypeError, KeyError) as e:
        raise CorruptMetadata(path, str(e)) from e


def write_document(path: str, value: D, codec: Metadata[D], fs: FileSystem, indent: int | None) -> None:
    """Encode ``value`` and write it to ``path``, creating parent directories."""
    payload = json.dumps(codec.to_json(value), indent=indent, ensure_ascii=False)
    fs.write_bytes_atomic(path, payload.encode("utf-8"))
    logger.debug(f"Wrote metadata document {path}")


def delete_document(path: str, fs: FileSystem) -> bool:
    """Delete a metadata document if present. Returns True if a file was removed."""
    if not fs.exists(path):
        return False
    fs.remove(path)
    logger.debug(f"Deleted metadata document {path}")
    return True

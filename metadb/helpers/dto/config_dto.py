"""
Config domain DTOs.

Rules:
- Import only stdlib and typing (no metadb.* imports)
- Pure data structures only (no I/O, no business logic)
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass


@dataclass(frozen=True)
class EngineConfig:
    """
    Settings consumed by the engine.

    Attributes:
        metadata_dir: Name of the mirror directory under each library root (must be hidden)
        document_suffix: Suffix appended to a key to name its metadata document
        digest_algorithm: hashlib algorithm used for content digests
        read_chunk_size: Bytes read per chunk while hashing
        json_indent: Indentation for written JSON documents (None for compact)
        registry_path: Default location of the registry configuration document
    """

    metadata_dir: str = ".metadata"
    document_suffix: str = ".json"
    digest_algorithm: str = "md5"
    read_chunk_size: int = 1 << 20
    json_indent: int | None = 2
    registry_path: str | None = None

    def __post_init__(self) -> None:
        if not self.metadata_dir.startswith(".") or "/" in self.metadata_dir or self.metadata_dir in (".", ".."):
            msg = f"metadata_dir must be a single hidden directory name: {self.metadata_dir!r}"
            raise ValueError(msg)
        if not self.document_suffix:
            msg = "document_suffix cannot be empty"
            raise ValueError(msg)
        if self.digest_algorithm not in hashlib.algorithms_available:
            msg = f"Unsupported digest algorithm: {self.digest_algorithm}"
            raise ValueError(msg)
        if self.read_chunk_size <= 0:
            msg = "read_chunk_size must be positive"
            raise ValueError(msg)

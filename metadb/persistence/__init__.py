"""
Persistence package.

On-disk formats: the registry configuration document and the per-entry
metadata mirror.
"""

from .metadata_mirror import delete_document, document_path, mirror_root, read_document, write_document
from .registry_document import read_registry_document, write_registry_document

__all__ = [
    "delete_document",
    "document_path",
    "mirror_root",
    "read_document",
    "read_registry_document",
    "write_document",
    "write_registry_document",
]

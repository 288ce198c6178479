"""
Metadata package.
"""

from .codec_comp import JsonLibData, JsonMetadata, LibData, Metadata

__all__ = ["JsonLibData", "JsonMetadata", "LibData", "Metadata"]

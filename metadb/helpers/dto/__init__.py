"""
DTO package.
"""

from .config_dto import EngineConfig
from .library_dto import FileLocation, LibraryIndexReport, LibraryRecord
from .resolution_dto import Missing, Remap, Resolution

__all__ = [
    "EngineConfig",
    "FileLocation",
    "LibraryIndexReport",
    "LibraryRecord",
    "Missing",
    "Remap",
    "Resolution",
]

"""
Helpers package.
"""

from .files_helper import FileSystem, LocalFileSystem
from .logging_helper import MetadbLogFilter, clear_log_context, configure_logging, set_log_context

__all__ = [
    "FileSystem",
    "LocalFileSystem",
    "MetadbLogFilter",
    "clear_log_context",
    "configure_logging",
    "set_log_context",
]

"""
Services package.
"""

from .config_svc import ConfigService
from .metadb_svc import MetaDB

__all__ = ["ConfigService", "MetaDB"]

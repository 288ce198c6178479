#!/usr/bin/env python3
# ======================================================================
#  Config Service - Configuration loading and caching
#  - Loads config from YAML files and METADB_* env vars
#  - Caches composed config for performance
#  - Provides reload() for runtime changes
# ======================================================================

from __future__ import annotations

import logging
import os
from typing import Any

import yaml

from metadb.helpers.dto.config_dto import EngineConfig
from metadb.helpers.logging_helper import configure_logging


class ConfigService:
    """
    Service for loading and caching engine configuration.

    Loads config from multiple sources (defaults → YAML → overrides → env),
    caches the result, and provides reload capability.
    """

    ENV_PREFIX = "METADB_"

    def __init__(self, overrides: dict[str, Any] | None = None) -> None:
        """Initialize ConfigService with empty cache."""
        self._overrides = overrides or {}
        self._config: dict[str, Any] | None = None
        self._logger = logging.getLogger(__name__)

    def get_config(self, force_reload: bool = False) -> dict[str, Any]:
        """
        Get the composed configuration.

        Args:
            force_reload: If True, bypass cache and reload from sources

        Returns:
            Complete configuration dict
        """
        if self._config is None or force_reload:
            self._config = self._compose()
        return self._config

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get a config value by dotted path.

        Example:
            >>> service.get("metadata_dir")
            '.metadata'
        """
        node: Any = self.get_config()
        for part in key_path.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def reload(self) -> dict[str, Any]:
        """Force reload configuration from all sources."""
        self._logger.info("Reloading configuration from all sources")
        return self.get_config(force_reload=True)

    def make_engine_config(self) -> EngineConfig:
        """
        Build an EngineConfig from the current configuration.

        This is the boundary where raw config values are typed and validated.

        Raises:
            ValueError: If a value is out of range (see EngineConfig)
        """
        cfg = self.get_config()
        indent = cfg.get("json_indent")
        return EngineConfig(
            metadata_dir=str(cfg["metadata_dir"]),
            document_suffix=str(cfg["document_suffix"]),
            digest_algorithm=str(cfg["digest_algorithm"]),
            read_chunk_size=int(cfg["read_chunk_size"]),
            json_indent=None if indent is None else int(indent),
            registry_path=str(cfg["registry_path"]) if cfg.get("registry_path") else None,
        )

    def apply_logging(self) -> None:
        """Install the metadb log handler at the configured ``log_level``."""
        configure_logging(str(self.get("log_level", "INFO")))

    # ----------------------------------------------------------------------
    # Private composition logic
    # ----------------------------------------------------------------------

    def _compose(self) -> dict[str, Any]:
        """
        Load final configuration from:
          1) Built-in defaults
          2) /etc/metadb/config.yaml  (if present)
          3) $XDG_CONFIG_HOME/metadb/config.yaml (default ~/.config)
          4) $METADB_CONFIG_PATH (if set)
          5) overrides dict passed to the constructor
          6) Environment variables (METADB_*)
        """
        cfg = self._default_config()

        self._deep_merge(cfg, self._load_yaml("/etc/metadb/config.yaml"))
        self._deep_merge(cfg, self._load_yaml(os.path.join(self._xdg_config_home(), "metadb", "config.yaml")))

        env_path = os.getenv("METADB_CONFIG_PATH")
        if env_path:
            self._deep_merge(cfg, self._load_yaml(env_path))

        if self._overrides:
            self._deep_merge(cfg, self._overrides)

        self._apply_env_overrides(cfg)

        self._logger.debug("compose() loaded config; keys: %s", list(cfg.keys()))
        return cfg

    def _xdg_config_home(self) -> str:
        return os.getenv("XDG_CONFIG_HOME") or os.path.join(os.path.expanduser("~"), ".config")

    def _default_config(self) -> dict[str, Any]:
        """
        Base defaults; all fields present so no KeyErrors downstream.
        """
        return {
            # Metadata mirror layout
            "metadata_dir": ".metadata",
            "document_suffix": ".json",
            # Content hashing
            "digest_algorithm": "md5",
            "read_chunk_size": 1 << 20,
            # Document output
            "json_indent": 2,
            # Registry document location
            "registry_path": os.path.join(self._xdg_config_home(), "metadb", "libraries.json"),
            "log_level": "INFO",
        }

    def _deep_merge(self, a: dict[str, Any], b: dict[str, Any]) -> dict[str, Any]:
        """
        Recursively merge dict b into dict a (mutates a, returns it).
        """
        for k, v in b.items():
            if isinstance(v, dict) and isinstance(a.get(k), dict):
                self._deep_merge(a[k], v)
            else:
                a[k] = v
        return a

    def _load_yaml(self, path: str) -> dict[str, Any]:
        """
        Load a YAML file; returns {} if not found, invalid, or not a mapping.
        """
        if not path or not os.path.exists(path):
            return {}
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            self._logger.warning(f"Ignoring unreadable config file {path}: {e}")
            return {}
        if not isinstance(data, dict):
            self._logger.warning(f"Ignoring config file {path}: top level is not a mapping")
            return {}
        return data

    def _apply_env_overrides(self, cfg: dict[str, Any]) -> None:
        """
        Support environment overrides of the form:
          METADB_METADATA_DIR=.meta
          METADB_JSON_INDENT=4
          METADB_DIGEST_ALGORITHM=sha256
        """
        for k, v in os.environ.items():
            if not k.startswith(self.ENV_PREFIX):
                continue
            key = k[len(self.ENV_PREFIX) :].lower()
            if key not in cfg:
                continue

            val: Any
            if v.lower() in ("true", "false"):
                val = v.lower() == "true"
            elif v.lower() in ("none", "null"):
                val = None
            elif v.isdigit():
                val = int(v)
            else:
                val = v
            cfg[key] = val

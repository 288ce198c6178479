"""Metadata codec capabilities.

The engine never interprets metadata. Callers describe their entry type ``D``
with a ``Metadata[D]`` codec and their library-level type ``LD`` with a
``LibData[LD]`` codec; the engine is generic over both.

``JsonMetadata`` and ``JsonLibData`` cover the common case where values are
plain JSON already.
"""

from __future__ import annotations

import copy
import json
from typing import Any, Protocol, TypeVar

D = TypeVar("D")
LD = TypeVar("LD")

JsonValue = Any


class Metadata(Protocol[D]):
    """Codec, default and merge policy for per-entry metadata."""

    def to_json(self, value: D) -> JsonValue: ...

    def from_json(self, data: JsonValue) -> D:
        """Decode a JSON value; raise ``ValueError``/``TypeError``/``KeyError`` on bad input."""
        ...

    def default(self) -> D:
        """Value assigned to a newly discovered file. Must return a fresh object."""
        ...

    def merge(self, stale: D, current: D) -> D | None:
        """Combine two values for the same content, or ``None`` to keep both."""
        ...

    def to_string(self, value: D) -> str: ...


class LibData(Protocol[LD]):
    """Codec for library-level metadata."""

    def to_json(self, value: LD) -> JsonValue: ...

    def from_json(self, data: JsonValue) -> LD: ...


class JsonMetadata:
    """
    Entry metadata stored as a JSON object.

    Merge policy:
    - an empty side yields the other side
    - otherwise the union of both objects, unless a shared key holds
      different values, in which case the conflict is left to the caller
    """

    def to_json(self, value: dict[str, Any]) -> JsonValue:
        return value

    def from_json(self, data: JsonValue) -> dict[str, Any]:
        if not isinstance(data, dict):
            raise TypeError(f"Expected JSON object, got {type(data).__name__}")
        return data

    def default(self) -> dict[str, Any]:
        return {}

    def merge(self, stale: dict[str, Any], current: dict[str, Any]) -> dict[str, Any] | None:
        if not current:
            return copy.deepcopy(stale)
        if not stale:
            return copy.deepcopy(current)
        for key in stale.keys() & current.keys():
            if stale[key] != current[key]:
                return None
        merged = copy.deepcopy(stale)
        merged.update(copy.deepcopy(current))
        return merged

    def to_string(self, value: dict[str, Any]) -> str:
        return json.dumps(value, sort_keys=True, ensure_ascii=False)


class JsonLibData:
    """Library metadata stored as any JSON value (``None`` allowed)."""

    def to_json(self, value: JsonValue) -> JsonValue:
        return value

    def from_json(self, data: JsonValue) -> JsonValue:
        return data

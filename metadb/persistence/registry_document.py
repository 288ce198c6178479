"""Registry configuration document.

The document is a JSON array with one object per library::

    [
      {"library": "Books", "root": "/home/me/Books", "data": {"version": 1}},
      {"library": "Papers", "root": "/home/me/Papers", "data": null}
    ]

Records are validated with pydantic before the registry is replaced, so a
malformed document never leaves a half-loaded registry behind.
"""

from __future__ import annotations

import json
import logging
import os
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from metadb.helpers.dto.library_dto import LibraryRecord
from metadb.helpers.exceptions import CouldNotParse

if TYPE_CHECKING:
    from metadb.helpers.files_helper import FileSystem

logger = logging.getLogger(__name__)


class LibraryRecordModel(BaseModel):
    """Wire shape of one library record."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: str = Field(alias="library", min_length=1)
    root: str
    data: Any = None

    @field_validator("root")
    @classmethod
    def _root_must_be_absolute(cls, value: str) -> str:
        if not os.path.isabs(os.path.expanduser(value)):
            raise ValueError(f"root must be an absolute path: {value!r}")
        return value

    @classmethod
    def from_dto(cls, record: LibraryRecord) -> LibraryRecordModel:
        return cls(name=record.name, root=record.root, data=record.data)

    def to_dto(self) -> LibraryRecord:
        return LibraryRecord(name=self.name, root=self.root, data=self.data)


_RECORDS = TypeAdapter(list[LibraryRecordModel])


def read_registry_document(path: str, fs: FileSystem) -> list[LibraryRecord]:
    """
    Parse the registry document at ``path``.

    Raises:
        CouldNotParse: If the content is not UTF-8 JSON, does not match the
            record shape, or names the same library twice
        OSError: If the file cannot be read
    """
    content = fs.read_bytes(path)

    try:
        models = _RECORDS.validate_json(content.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise CouldNotParse(path, f"not valid UTF-8: {e.reason}") from e
    except ValidationError as e:
        raise CouldNotParse(path, f"{e.error_count()} validation error(s)") from e

    records = [m.to_dto() for m in models]
    seen: set[str] = set()
    for record in records:
        if record.name in seen:
            raise CouldNotParse(path, f"duplicate library name {record.name!r}")
        seen.add(record.name)

    logger.info(f"Loaded {len(records)} library record(s) from {path}")
    return records


def write_registry_document(path: str, records: list[LibraryRecord], fs: FileSystem, indent: int | None = 2) -> None:
    """Serialize ``records`` to ``path``, creating parent directories."""
    payload = [LibraryRecordModel.from_dto(r).model_dump(by_alias=True) for r in records]
    fs.write_bytes_atomic(path, json.dumps(payload, indent=indent, ensure_ascii=False).encode("utf-8"))
    logger.info(f"Wrote {len(records)} library record(s) to {path}")

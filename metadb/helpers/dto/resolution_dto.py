"""Resolution results produced by resolve_missing_files."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from metadb.helpers.dto.library_dto import FileLocation


@dataclass(frozen=True)
class Remap:
    """The file behind ``key`` was found again at ``target``."""

    key: str
    target: FileLocation


@dataclass(frozen=True)
class Missing:
    """No relocated copy of the file behind ``key`` could be found."""

    key: str


Resolution = Union[Remap, Missing]

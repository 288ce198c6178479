"""
Pytest fixtures and configuration for the test suite.

Strategy:
- Real temporary directories (tmp_path) instead of mocked filesystems
- JSON-dict metadata codec for engine-level tests
- Environment isolated from the user's config files
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path

import pytest

# Add project root to path so tests can import metadb package
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from metadb.components.metadata.codec_comp import JsonLibData, JsonMetadata  # noqa: E402
from metadb.helpers.dto.config_dto import EngineConfig  # noqa: E402
from metadb.helpers.files_helper import LocalFileSystem  # noqa: E402
from metadb.services.metadb_svc import MetaDB  # noqa: E402

FileTree = dict[str, bytes | str]


@pytest.fixture(autouse=True)
def isolated_config_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Point XDG config lookups at an empty directory and clear METADB_* variables."""
    import os

    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    for key in list(os.environ):
        if key.startswith("METADB_"):
            monkeypatch.delenv(key)


@pytest.fixture
def write_files() -> Callable[[Path, FileTree], Path]:
    """Return a helper that creates ``{relative path: content}`` under a root."""

    def _write(root: Path, files: FileTree) -> Path:
        root.mkdir(parents=True, exist_ok=True)
        for rel, content in files.items():
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(content, encoding="utf-8")
        return root

    return _write


@pytest.fixture
def engine_config() -> EngineConfig:
    return EngineConfig()


@pytest.fixture
def fs() -> LocalFileSystem:
    return LocalFileSystem()


@pytest.fixture
def engine(engine_config: EngineConfig) -> MetaDB:
    """A MetaDB over JSON-object metadata and JSON library data."""
    return MetaDB(JsonMetadata(), JsonLibData(), config=engine_config)


@pytest.fixture
def books_root(tmp_path: Path, write_files) -> Path:
    """Library root holding ``a.pdf`` and ``b/c.pdf``."""
    return write_files(tmp_path / "lib1", {"a.pdf": b"alpha", "b/c.pdf": b"charlie"})


@pytest.fixture
def papers_root(tmp_path: Path, write_files) -> Path:
    """Second library root holding ``x.djvu``."""
    return write_files(tmp_path / "lib2", {"x.djvu": b"xray"})


@pytest.fixture
def books(engine: MetaDB, books_root: Path) -> MetaDB:
    """Engine with an initialized ``Books`` library."""
    engine.new_library("Books", str(books_root), {"version": 1})
    engine.init_library("Books")
    return engine


@pytest.fixture
def two_libraries(books: MetaDB, papers_root: Path) -> MetaDB:
    """Engine with initialized ``Books`` and ``Papers`` libraries."""
    books.new_library("Papers", str(papers_root), None)
    books.init_library("Papers")
    return books

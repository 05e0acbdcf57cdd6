"""Pytest fixtures for codectx tests."""

from __future__ import annotations

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

import pytest
import structlog

from codectx.context.repo_map.chunker import Chunk, ParserFactory
from codectx.exceptions import ChunkParseError, ContentReadError, FileEnumerationError
from codectx.resources.base import Resource, ResourceKind
from codectx.resources.registry import ResourceRegistry
from codectx.state import CodebaseSession


class StaticEnumerator:
    """Enumerator returning a fixed list of paths."""

    def __init__(self, files: list[str], *, error: Exception | None = None) -> None:
        self.files = files
        self.error = error
        self.calls = 0

    async def add_files_to_set(self, files: set[str], session=None) -> None:
        self.calls += 1
        if self.error is not None:
            raise self.error
        files.update(self.files)


class FakeAccessor:
    """In-memory content accessor."""

    def __init__(self, contents: dict[str, str]) -> None:
        self.contents = contents
        self.reads: list[str] = []

    async def get_file(self, path: str, session=None) -> str:
        self.reads.append(path)
        if path not in self.contents:
            msg = f"File not found: {path}"
            raise ContentReadError(msg, path=path)
        return self.contents[path]


class TrackingFactory(ParserFactory):
    """Parser factory that records disposal."""

    def __init__(self) -> None:
        super().__init__()
        self.dispose_calls = 0

    def dispose(self) -> None:
        self.dispose_calls += 1
        super().dispose()


class FakeChunker:
    """Chunker treating each blank-line separated block as one symbol.

    Text containing ``SYNTAX ERROR`` fails to parse.
    """

    def __init__(self) -> None:
        self.factories: list[TrackingFactory] = []
        self.calls: list[tuple[str, str]] = []

    def create_factory(self) -> TrackingFactory:
        factory = TrackingFactory()
        self.factories.append(factory)
        return factory

    def chunk(self, text: str, language: str, factory: ParserFactory) -> list[Chunk]:
        self.calls.append((text, language))
        if "SYNTAX ERROR" in text:
            msg = "unexpected token"
            raise ChunkParseError(msg, language=language)
        return [Chunk(text=block) for block in text.split("\n\n") if block.strip()]


def make_resource(
    name: str,
    kind: ResourceKind = ResourceKind.FILE_TREE,
    files: list[str] | None = None,
    *,
    error: Exception | None = None,
) -> Resource:
    """Build a resource backed by a static enumerator."""
    return Resource(name=name, kind=kind, enumerator=StaticEnumerator(files or [], error=error))


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Undo global logging configuration applied by CLI invocations."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def registry() -> ResourceRegistry:
    """Create a registry with a few hierarchical names."""
    registry = ResourceRegistry()
    for name in ["src/foo", "src/bar", "src/bar/baz", "other/baz", "readme"]:
        registry.register(name, make_resource(name))
    return registry


@pytest.fixture
def session() -> CodebaseSession:
    """Create an empty session."""
    return CodebaseSession()


@pytest.fixture
def fake_chunker() -> FakeChunker:
    """Create a deterministic chunker."""
    return FakeChunker()


@pytest.fixture
def failing_enumerator() -> StaticEnumerator:
    """Create an enumerator that always fails."""
    return StaticEnumerator([], error=FileEnumerationError("disk gone", path="src"))


@pytest.fixture
def tmp_project(tmp_path: Path) -> Path:
    """Create a small project tree on disk.

    Layout:
    - src/app.py, src/util/helpers.py, src/app.pyc
    - docs/guide.md
    - README.md
    - .git/HEAD
    """
    project = tmp_path / "project"
    (project / "src" / "util").mkdir(parents=True)
    (project / "docs").mkdir()
    (project / ".git").mkdir()

    (project / "src" / "app.py").write_text(
        "import os\n\n\ndef main():\n    return os.getcwd()\n\n\nclass App:\n    pass\n"
    )
    (project / "src" / "util" / "helpers.py").write_text("def helper():\n    return 1\n")
    (project / "src" / "app.pyc").write_bytes(b"\x00\x01")
    (project / "docs" / "guide.md").write_text("# Guide\n")
    (project / "README.md").write_text("# Project\n\nHello.\n")
    (project / ".git" / "HEAD").write_text("ref: refs/heads/main\n")
    return project

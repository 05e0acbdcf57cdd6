"""File content access for context assembly."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

import structlog

from codectx.exceptions import ContentReadError

if TYPE_CHECKING:
    from codectx.state import CodebaseSession

logger = structlog.get_logger()


@runtime_checkable
class ContentAccessor(Protocol):
    """Anything that can return the text content of a file path."""

    async def get_file(
        self,
        path: str,
        session: CodebaseSession | None = None,
    ) -> str:
        """Return the raw text of ``path``.

        Raises:
            ContentReadError: If the path is missing or unreadable.
        """
        ...


class LocalFileSystem:
    """Reads files relative to a root directory on local disk.

    Example:
        >>> fs = LocalFileSystem(Path("/repo"))
        >>> text = await fs.get_file("README.md")
    """

    def __init__(self, root: Path, *, encoding: str = "utf-8") -> None:
        """Initialize the accessor.

        Args:
            root: Directory paths are resolved against.
            encoding: Text encoding used for reads.
        """
        self.root = root
        self.encoding = encoding

    async def get_file(
        self,
        path: str,
        session: CodebaseSession | None = None,
    ) -> str:
        """Read a root-relative file.

        Raises:
            ContentReadError: If the file is missing, not a file, or undecodable.
        """
        return await asyncio.to_thread(self.read_text, path)

    def read_text(self, path: str) -> str:
        """Read a root-relative file synchronously."""
        target = self.root / path
        if not target.is_file():
            msg = f"File not found: {path}"
            raise ContentReadError(msg, path=path)
        try:
            return target.read_text(encoding=self.encoding)
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("Failed to read file", path=path, error=str(e))
            msg = f"Failed to read {path}: {e}"
            raise ContentReadError(msg, path=path) from e

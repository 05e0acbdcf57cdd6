"""Glob-based file enumeration for codebase resources."""

from __future__ import annotations

import asyncio
import fnmatch
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from codectx.exceptions import FileEnumerationError

if TYPE_CHECKING:
    from codectx.state import CodebaseSession

logger = structlog.get_logger()

ALWAYS_SKIPPED_DIRS = frozenset({".git", ".hg", ".svn"})


def matches_pattern(file_path: str, pattern: str) -> bool:
    """Check if a file path matches a glob pattern.

    Supports patterns like:
    - src/**/*.py (matches any .py file under src/ or src/subdir/)
    - *.pyc (matches any .pyc file)
    - node_modules (matches any path containing that segment)

    Args:
        file_path: Root-relative path to check.
        pattern: The glob pattern.

    Returns:
        True if the path matches the pattern.
    """
    normalized_path = file_path.replace("\\", "/")
    normalized_pattern = pattern.replace("\\", "/").rstrip("/")

    if "**" in normalized_pattern:
        # src/**/*.py -> src/(.*/)?[^/]*\.py
        regex_pattern = re.escape(normalized_pattern)
        regex_pattern = regex_pattern.replace(r"\*\*/", "\0DIRS\0")
        regex_pattern = regex_pattern.replace(r"/\*\*", "\0TAIL\0")
        regex_pattern = regex_pattern.replace(r"\*\*", "\0ANY\0")
        regex_pattern = regex_pattern.replace(r"\*", "[^/]*")
        regex_pattern = regex_pattern.replace(r"\?", "[^/]")
        regex_pattern = (
            regex_pattern.replace("\0DIRS\0", "(.*/)?")
            .replace("\0TAIL\0", "(/.*)?")
            .replace("\0ANY\0", ".*")
        )
        if re.match(f"^{regex_pattern}$", normalized_path):
            return True

    if fnmatch.fnmatch(normalized_path, normalized_pattern):
        return True

    if fnmatch.fnmatch(Path(normalized_path).name, normalized_pattern):
        return True

    parts = normalized_path.split("/")
    return any(fnmatch.fnmatch(part, normalized_pattern) for part in parts)


def _split_ignore(ignore: str | list[str]) -> list[str]:
    """Normalize a gitignore-style block or list into patterns."""
    lines = ignore.splitlines() if isinstance(ignore, str) else ignore
    patterns = []
    for line in lines:
        stripped = line.strip()
        if stripped and not stripped.startswith("#"):
            patterns.append(stripped)
    return patterns


@dataclass
class FileMatchItem:
    """One path entry of a file-matching resource.

    Attributes:
        path: Root-relative file or directory.
        include: Globs a file must match (any of); empty means everything.
        ignore: Globs excluding files (gitignore-style block or list).
    """

    path: str
    include: list[str] = field(default_factory=list)
    ignore: str | list[str] = field(default_factory=list)

    @property
    def ignore_patterns(self) -> list[str]:
        """Get the ignore globs as a list."""
        return _split_ignore(self.ignore)


class FileMatchResource:
    """Enumerates files under a root directory matching configured items.

    Example:
        >>> resource = FileMatchResource(Path("/repo"), [FileMatchItem("src", include=["*.py"])])
        >>> files: set[str] = set()
        >>> await resource.add_files_to_set(files)
    """

    def __init__(self, root: Path, items: list[FileMatchItem]) -> None:
        """Initialize the resource.

        Args:
            root: Directory item paths are resolved against.
            items: Paths to match.
        """
        self.root = root
        self.items = items

    async def add_files_to_set(
        self,
        files: set[str],
        session: CodebaseSession | None = None,
    ) -> None:
        """Insert every matched root-relative path into ``files``.

        Raises:
            FileEnumerationError: If an item path does not exist.
        """
        matched = await asyncio.to_thread(self.match_files)
        files.update(matched)

    def match_files(self) -> list[str]:
        """Walk the configured items synchronously.

        Returns:
            Matched root-relative paths, sorted.
        """
        matched: set[str] = set()
        for item in self.items:
            matched.update(self._match_item(item))
        logger.debug("Matched files", root=str(self.root), count=len(matched))
        return sorted(matched)

    def _match_item(self, item: FileMatchItem) -> list[str]:
        target = self.root / item.path
        if not target.exists():
            msg = f"Resource path not found: {item.path}"
            raise FileEnumerationError(msg, path=item.path)

        if target.is_file():
            candidates = [self._relative(target)]
        else:
            candidates = list(self._walk(target))

        ignore = item.ignore_patterns
        return [
            path
            for path in candidates
            if self._is_included(path, item.include)
            and not any(matches_pattern(path, p) for p in ignore)
        ]

    def _walk(self, directory: Path):
        for dirpath, dirnames, filenames in os.walk(directory):
            dirnames[:] = sorted(d for d in dirnames if d not in ALWAYS_SKIPPED_DIRS)
            for filename in sorted(filenames):
                yield self._relative(Path(dirpath) / filename)

    def _relative(self, path: Path) -> str:
        return path.relative_to(self.root).as_posix()

    @staticmethod
    def _is_included(path: str, include: list[str]) -> bool:
        if not include:
            return True
        return any(matches_pattern(path, p) for p in include)

"""Source file extension to language tag mapping."""

from __future__ import annotations

from pathlib import PurePosixPath

EXTENSION_LANGUAGES: dict[str, str] = {
    ".js": "javascript",
    ".jsx": "javascript",
    ".ts": "typescript",
    ".tsx": "typescript",
    ".py": "python",
    ".h": "c",
    ".c": "c",
    ".hxx": "cpp",
    ".cxx": "cpp",
    ".hpp": "cpp",
    ".cpp": "cpp",
    ".rs": "rust",
    ".go": "go",
    ".java": "java",
    ".rb": "ruby",
    ".sh": "bash",
    ".bash": "bash",
}


def language_for_path(path: str) -> str | None:
    """Get the language tag for a file path, or None if unmapped."""
    return EXTENSION_LANGUAGES.get(PurePosixPath(path).suffix)

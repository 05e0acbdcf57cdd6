"""Context item definitions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ContextItemKind(str, Enum):
    """Which assembly phase produced an item."""

    FILE_TREE = "file_tree"
    REPO_MAP = "repo_map"
    WHOLE_FILE = "whole_file"


@dataclass(frozen=True)
class ContextItem:
    """A unit of context text handed to the consuming agent.

    Attributes:
        content: The text payload.
        kind: Phase that produced the item.
        role: Message role the consumer should attach it under.
    """

    content: str
    kind: ContextItemKind
    role: str = "user"

    def to_dict(self) -> dict[str, str]:
        """Convert to the ``{role, content}`` message shape."""
        return {"role": self.role, "content": self.content}

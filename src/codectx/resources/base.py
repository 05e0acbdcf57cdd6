"""Resource records and the file enumeration contract."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from codectx.state import CodebaseSession


class ResourceKind(str, Enum):
    """Which assembly phase a resource contributes to."""

    FILE_TREE = "fileTree"
    REPO_MAP = "repoMap"
    WHOLE_FILE = "wholeFile"


@runtime_checkable
class FileEnumerator(Protocol):
    """Anything that can list the files a resource currently matches."""

    async def add_files_to_set(
        self,
        files: set[str],
        session: CodebaseSession | None = None,
    ) -> None:
        """Insert every matched file path into ``files``."""
        ...


@dataclass(frozen=True)
class Resource:
    """A named, kind-tagged provider of a file set.

    Attributes:
        name: Registry key, hierarchical by convention (``src/app``).
        kind: Assembly phase the resource feeds.
        enumerator: Produces the matched file paths.
        description: Optional human-readable summary.
    """

    name: str
    kind: ResourceKind
    enumerator: FileEnumerator
    description: str = ""

    async def add_files_to_set(
        self,
        files: set[str],
        session: CodebaseSession | None = None,
    ) -> None:
        """Delegate to the underlying enumerator."""
        await self.enumerator.add_files_to_set(files, session)

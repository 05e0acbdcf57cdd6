"""Three-phase context assembly over a session's enabled resources."""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterable

import structlog

from codectx.context.blocks import ContextItem, ContextItemKind
from codectx.context.repo_map.builder import generate_repo_map
from codectx.context.repo_map.chunker import SymbolChunker
from codectx.exceptions import ContentReadError, FileEnumerationError
from codectx.infra.filesystem import ContentAccessor
from codectx.resources.base import Resource, ResourceKind
from codectx.resources.registry import ResourceRegistry
from codectx.state import CodebaseSession

logger = structlog.get_logger()

FILE_TREE_HEADER = "// Directory Tree of project files:"


async def collect_files(
    resources: Iterable[Resource],
    session: CodebaseSession | None = None,
) -> list[str]:
    """Union the files matched by ``resources``, sorted.

    Raises:
        FileEnumerationError: If any resource fails to enumerate.
    """
    files: set[str] = set()
    for resource in resources:
        try:
            await resource.add_files_to_set(files, session)
        except FileEnumerationError as e:
            if not e.resource_name:
                e.resource_name = resource.name
            raise
        except Exception as e:
            msg = f"Failed to enumerate files for resource '{resource.name}': {e}"
            raise FileEnumerationError(msg, resource_name=resource.name) from e
    return sorted(files)


async def read_whole_file(
    accessor: ContentAccessor,
    path: str,
    session: CodebaseSession | None = None,
) -> str:
    """Read a file that must be included verbatim.

    Raises:
        ContentReadError: If the accessor fails for any reason.
    """
    try:
        return await accessor.get_file(path, session)
    except ContentReadError:
        raise
    except Exception as e:
        msg = f"Failed to read {path}: {e}"
        raise ContentReadError(msg, path=path) from e


def format_file_tree(files: list[str]) -> str:
    """Render the directory tree block."""
    return "\n".join([FILE_TREE_HEADER, *sorted(files)])


def format_whole_file(path: str, content: str) -> str:
    """Render a whole-file block."""
    return f"{path}\n{content}"


class ContextAssembler:
    """Assembles context items from a session's enabled resources.

    Phases always run in the order tree, repo map, whole files. Items are
    produced lazily; a consumer may stop iterating at any point.

    Example:
        >>> assembler = ContextAssembler(registry, LocalFileSystem(root))
        >>> async for item in assembler.assemble(session):
        ...     print(item.content)
    """

    def __init__(
        self,
        registry: ResourceRegistry,
        accessor: ContentAccessor,
        *,
        chunker: SymbolChunker | None = None,
    ) -> None:
        """Initialize the assembler.

        Args:
            registry: Registry holding the resources.
            accessor: Source of file content.
            chunker: Symbol chunker for the repo-map phase.
        """
        self.registry = registry
        self.accessor = accessor
        self.chunker = chunker

    async def assemble(self, session: CodebaseSession) -> AsyncIterator[ContextItem]:
        """Yield context items for the session's enabled resources.

        Raises:
            FileEnumerationError: If any enabled resource fails to enumerate.
            ContentReadError: If a whole-file read fails.
        """
        log = logger.bind(enabled=len(session.enabled_resources))
        resources = self.registry.get_enabled_resources(session)

        tree_resources = [
            r for r in resources if r.kind not in (ResourceKind.REPO_MAP, ResourceKind.WHOLE_FILE)
        ]
        tree_files = await collect_files(tree_resources, session)
        log.debug("File tree phase", files=len(tree_files))
        if tree_files:
            yield ContextItem(content=format_file_tree(tree_files), kind=ContextItemKind.FILE_TREE)

        repo_map = await self.build_repo_map(session)
        if repo_map is not None:
            yield ContextItem(content=repo_map, kind=ContextItemKind.REPO_MAP)

        whole_files = await collect_files(
            [r for r in resources if r.kind == ResourceKind.WHOLE_FILE],
            session,
        )
        log.debug("Whole file phase", files=len(whole_files))
        for path in whole_files:
            content = await read_whole_file(self.accessor, path, session)
            yield ContextItem(content=format_whole_file(path, content), kind=ContextItemKind.WHOLE_FILE)

        log.info("Context assembled", tree_files=len(tree_files), whole_files=len(whole_files))

    async def collect(self, session: CodebaseSession) -> list[ContextItem]:
        """Assemble every item eagerly."""
        return [item async for item in self.assemble(session)]

    async def build_repo_map(self, session: CodebaseSession) -> str | None:
        """Run only the repo-map phase.

        Returns:
            The repo map, or None if no RepoMap resource is enabled or no
            symbols were found.
        """
        map_resources = self.registry.get_enabled_by_kind(session, ResourceKind.REPO_MAP)
        files = await collect_files(map_resources, session)
        logger.debug("Repo map phase", files=len(files))
        if not files:
            return None
        return await generate_repo_map(files, self.accessor, self.chunker, session)

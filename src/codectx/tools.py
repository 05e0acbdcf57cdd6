"""Agent-facing tools over the resource registry."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import structlog

from codectx.context.assembler import collect_files, read_whole_file
from codectx.context.repo_map.builder import generate_repo_map
from codectx.context.repo_map.chunker import SymbolChunker
from codectx.infra.filesystem import ContentAccessor
from codectx.resources.base import ResourceKind
from codectx.resources.registry import ResourceRegistry
from codectx.state import CodebaseSession

logger = structlog.get_logger()


def list_resources(registry: ResourceRegistry, session: CodebaseSession) -> dict[str, Any]:
    """List available and currently enabled resources."""
    return {
        "ok": True,
        "available_resources": registry.list_available(),
        "active_resources": sorted(registry.get_enabled(session)),
    }


async def retrieve_content(
    resource_names: Iterable[str],
    registry: ResourceRegistry,
    session: CodebaseSession,
    accessor: ContentAccessor,
    chunker: SymbolChunker | None = None,
) -> dict[str, Any]:
    """Render the content of specific resources, regardless of enablement.

    Every name is checked before any content is read.

    Args:
        resource_names: Exact resource names to retrieve.
        registry: Registry holding the resources.
        session: Session passed through to enumerators and the accessor.
        accessor: Source of file content.
        chunker: Symbol chunker for RepoMap resources.

    Returns:
        ``{"ok": True, "content": ...}`` with one section per resource output,
        or ``{"ok": False, "content": "", "error": ...}`` naming the first
        unknown resource.
    """
    names = list(resource_names)
    available = registry.list_available()
    for name in names:
        if name not in registry:
            logger.debug("Unknown resource requested", name=name)
            return {
                "ok": False,
                "content": "",
                "error": f"Resource '{name}' not found. Available: {', '.join(available)}",
            }

    results: list[str] = []

    for name in names:
        resource = registry.get(name)
        files = await collect_files([resource], session)

        if resource.kind == ResourceKind.REPO_MAP:
            repo_map = await generate_repo_map(files, accessor, chunker, session)
            if repo_map:
                results.append(f"=== {name} (Repo Map) ===\n{repo_map}")
        elif resource.kind == ResourceKind.WHOLE_FILE:
            for path in files:
                content = await read_whole_file(accessor, path, session)
                results.append(f"=== {name} - {path} ===\n{content}")
        elif files:
            results.append(f"=== {name} (File Tree) ===\n" + "\n".join(files))

    return {"ok": True, "content": "\n\n".join(results)}

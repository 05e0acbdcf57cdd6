"""Repository map synthesis: per-file symbol summaries."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

import structlog

from codectx.context.repo_map.chunker import Chunk, SymbolChunker, TreeSitterChunker
from codectx.context.repo_map.languages import language_for_path

if TYPE_CHECKING:
    from codectx.infra.filesystem import ContentAccessor
    from codectx.state import CodebaseSession

logger = structlog.get_logger()

REPO_MAP_PREAMBLE = (
    "// Repository map of project source files.\n"
    "// Each section names a file followed by the top-level symbols it defines,\n"
    "// using the first line of each definition:\n"
)


def format_section(path: str, chunks: list[Chunk]) -> str:
    """Render one file's header and symbol bullets.

    Chunks with a blank label are left out.
    """
    lines = [f"{path}:"]
    for chunk in chunks:
        label = chunk.label
        if label:
            lines.append(f"- {label}")
    return "\n".join(lines) + "\n"


async def generate_repo_map(
    files: Iterable[str],
    accessor: ContentAccessor,
    chunker: SymbolChunker | None = None,
    session: CodebaseSession | None = None,
) -> str | None:
    """Build a repo map for ``files``, processed in the order given.

    Per-file problems (unreadable or empty content, unmapped extension,
    parse failure) skip that file and never fail the call.

    Args:
        files: File paths to summarize.
        accessor: Source of file content.
        chunker: Symbol chunker; tree-sitter by default.
        session: Session passed through to the accessor.

    Returns:
        The formatted map, or None when no file produced any symbols.
    """
    chunker = chunker or TreeSitterChunker()
    sections: list[str] = []
    log = logger.bind(component="repo_map")

    with chunker.create_factory() as factory:
        for path in files:
            language = language_for_path(path)
            if language is None:
                continue

            try:
                content = await accessor.get_file(path, session)
            except Exception as e:
                log.warning("Skipping unreadable file", path=path, error=str(e))
                continue
            if not content:
                continue

            try:
                chunks = chunker.chunk(content, language, factory)
            except Exception as e:
                log.warning("Failed to chunk file", path=path, language=language, error=str(e))
                chunks = []

            if chunks:
                sections.append(format_section(path, chunks))

    if not sections:
        log.debug("Repo map empty")
        return None

    log.debug("Repo map built", sections=len(sections))
    return REPO_MAP_PREAMBLE + "\n".join(sections)

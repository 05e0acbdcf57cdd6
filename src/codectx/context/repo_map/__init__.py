"""Repository map synthesis.

Turns source files into a compact listing of the symbols each defines.
"""

from codectx.context.repo_map.builder import REPO_MAP_PREAMBLE, generate_repo_map
from codectx.context.repo_map.chunker import Chunk, ParserFactory, SymbolChunker, TreeSitterChunker
from codectx.context.repo_map.languages import EXTENSION_LANGUAGES, language_for_path

__all__ = [
    "EXTENSION_LANGUAGES",
    "REPO_MAP_PREAMBLE",
    "Chunk",
    "ParserFactory",
    "SymbolChunker",
    "TreeSitterChunker",
    "generate_repo_map",
    "language_for_path",
]

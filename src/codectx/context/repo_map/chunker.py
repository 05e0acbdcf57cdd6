"""Symbol-level chunking of source files with tree-sitter."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, Protocol

import structlog
from tree_sitter_language_pack import get_parser

from codectx.exceptions import ChunkParseError

logger = structlog.get_logger()

# Node types reported as symbols, per language.
DEFINITION_NODES: dict[str, frozenset[str]] = {
    "python": frozenset({"function_definition", "class_definition"}),
    "javascript": frozenset(
        {
            "function_declaration",
            "generator_function_declaration",
            "class_declaration",
            "method_definition",
        }
    ),
    "typescript": frozenset(
        {
            "function_declaration",
            "generator_function_declaration",
            "class_declaration",
            "abstract_class_declaration",
            "method_definition",
            "interface_declaration",
            "type_alias_declaration",
            "enum_declaration",
        }
    ),
    "c": frozenset({"function_definition", "struct_specifier", "enum_specifier", "type_definition"}),
    "cpp": frozenset(
        {
            "function_definition",
            "class_specifier",
            "struct_specifier",
            "enum_specifier",
            "type_definition",
            "namespace_definition",
        }
    ),
    "rust": frozenset(
        {
            "function_item",
            "struct_item",
            "enum_item",
            "trait_item",
            "impl_item",
            "mod_item",
            "type_item",
            "macro_definition",
        }
    ),
    "go": frozenset({"function_declaration", "method_declaration", "type_declaration"}),
    "java": frozenset(
        {
            "class_declaration",
            "interface_declaration",
            "enum_declaration",
            "record_declaration",
            "method_declaration",
            "constructor_declaration",
        }
    ),
    "ruby": frozenset({"class", "module", "method", "singleton_method"}),
    "bash": frozenset({"function_definition"}),
}

# Definitions whose members are reported too.
CONTAINER_NODES = frozenset(
    {
        "class_definition",
        "class_declaration",
        "abstract_class_declaration",
        "interface_declaration",
        "class_specifier",
        "struct_specifier",
        "namespace_definition",
        "impl_item",
        "trait_item",
        "mod_item",
        "enum_declaration",
        "record_declaration",
        "class",
        "module",
    }
)


@dataclass(frozen=True)
class Chunk:
    """A parsed symbol of a source file.

    Attributes:
        text: Source text of the symbol.
        node_type: Grammar node type that produced it.
        start_line: 1-based line the symbol starts on.
    """

    text: str
    node_type: str = ""
    start_line: int = 0

    @property
    def label(self) -> str:
        """First non-blank line of the symbol text, stripped."""
        for line in self.text.splitlines():
            stripped = line.strip()
            if stripped:
                return stripped
        return ""


class ParserFactory:
    """Caches tree-sitter parsers for the lifetime of one repo-map call.

    Use as a context manager so the cache is always released:

        >>> with chunker.create_factory() as factory:
        ...     chunks = chunker.chunk(text, "python", factory)
    """

    def __init__(self) -> None:
        self._parsers: dict[str, Any] = {}
        self.disposed = False

    def __enter__(self) -> ParserFactory:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.dispose()

    def get(self, language: str) -> Any:
        """Get (and cache) the parser for a language tag."""
        if self.disposed:
            msg = "Parser factory has been disposed"
            raise RuntimeError(msg)
        if language not in self._parsers:
            self._parsers[language] = get_parser(language)
        return self._parsers[language]

    def dispose(self) -> None:
        """Drop every cached parser."""
        self._parsers.clear()
        self.disposed = True


class SymbolChunker(Protocol):
    """Splits source text into ordered symbol chunks."""

    def create_factory(self) -> ParserFactory: ...

    def chunk(self, text: str, language: str, factory: ParserFactory) -> list[Chunk]: ...


class TreeSitterChunker:
    """Extracts definition-level chunks using tree-sitter grammars."""

    def create_factory(self) -> ParserFactory:
        """Create a parser cache scoped to one call."""
        return ParserFactory()

    def chunk(self, text: str, language: str, factory: ParserFactory) -> list[Chunk]:
        """Parse ``text`` and return its symbols in source order.

        Args:
            text: File content.
            language: Language tag (see ``languages.EXTENSION_LANGUAGES``).
            factory: Parser cache for this call.

        Returns:
            Chunks for every definition, members following their container.

        Raises:
            ChunkParseError: If the grammar is unavailable or parsing fails.
        """
        definitions = DEFINITION_NODES.get(language)
        if definitions is None:
            msg = f"No symbol grammar for language: {language}"
            raise ChunkParseError(msg, language=language)

        source = text.encode("utf-8")
        try:
            parser = factory.get(language)
            tree = parser.parse(source)
        except Exception as e:
            msg = f"Failed to parse {language} source: {e}"
            raise ChunkParseError(msg, language=language) from e

        return list(self._walk(tree.root_node, source, definitions))

    def _walk(self, node: Any, source: bytes, definitions: frozenset[str]) -> Iterator[Chunk]:
        for child in node.named_children:
            if child.type in definitions:
                yield Chunk(
                    text=source[child.start_byte : child.end_byte].decode("utf-8", errors="replace"),
                    node_type=child.type,
                    start_line=child.start_point[0] + 1,
                )
                if child.type in CONTAINER_NODES:
                    yield from self._walk(child, source, definitions)
            else:
                # Wrappers such as decorators, export statements and bodies.
                yield from self._walk(child, source, definitions)

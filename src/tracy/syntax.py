"""Syntax tree adapter over tree-sitter.

tree-sitter parses a file; the resulting tree is copied once into an arena
of SyntaxNode records addressed by integer index. Each record keeps its
parent index and child indices, so ancestor walks are plain index chasing
and no node holds a reference to another.

Besides raw spans, every node carries a *code extent*: the first and last
line holding a non-blank token that is not part of a comment. Context and
line classification use code extents, so a trailing comment that a grammar
attaches to the end of a block does not stretch the block.

Lines are 0-indexed throughout this module. A node whose raw end position
is column 0 of a later row ends on the previous row.

Example:
    >>> parser = SyntaxParser()
    >>> tree = parser.parse(b"fn main() {}\\n", language_for_path(Path("main.rs")))
    >>> tree.nodes[tree.root].kind
    'source_file'
"""

from __future__ import annotations

import importlib
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

import structlog
from tree_sitter import Language, Node, Parser

from tracy.errors import FileReadError, GrammarUnavailableError
from tracy.languages import LanguageSpec, language_for_path

logger = structlog.get_logger(__name__)


@dataclass
class SyntaxNode:
    """One node of the arena.

    Attributes:
        index: Position in SyntaxTree.nodes (pre-order).
        kind: Grammar node kind.
        is_named: False for anonymous tokens such as ``{`` or ``;``.
        start_line: 0-indexed first line.
        end_line: 0-indexed last line.
        start_byte: Byte offset of the first byte.
        end_byte: Byte offset one past the last byte.
        parent: Index of the parent, None for the root.
        field_name: Field under which the parent holds this node.
        in_comment: True for comment nodes and everything inside them.
        children: Child indices in source order.
        code_start: First line with a code token in this subtree.
        code_end: Last line with a code token in this subtree.
    """

    index: int
    kind: str
    is_named: bool
    start_line: int
    end_line: int
    start_byte: int
    end_byte: int
    parent: int | None
    field_name: str | None
    in_comment: bool
    children: list[int] = field(default_factory=list)
    code_start: int | None = None
    code_end: int | None = None

    @property
    def has_code(self) -> bool:
        return self.code_start is not None


@dataclass
class SyntaxTree:
    """Arena-backed parse tree of one source file."""

    source: bytes
    language: LanguageSpec
    nodes: list[SyntaxNode]
    code_lines: set[int] = field(default_factory=set)
    comment_lines: set[int] = field(default_factory=set)
    first_code_leaf: dict[int, int] = field(default_factory=dict)
    starts_on: dict[int, list[int]] = field(default_factory=dict)
    ends_on: dict[int, list[int]] = field(default_factory=dict)

    root: int = 0

    @property
    def last_line(self) -> int:
        return self.nodes[self.root].end_line

    def text(self, index: int) -> str:
        """Verbatim source text of a node."""
        node = self.nodes[index]
        return self.source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")

    def first_line_text(self, index: int) -> str:
        """First source line of a node, trailing whitespace removed."""
        return self.text(index).split("\n", 1)[0].rstrip()

    def walk(self) -> Iterator[int]:
        """Yield node indices in depth-first pre-order."""
        return iter(range(len(self.nodes)))

    def ancestors(self, index: int) -> Iterator[int]:
        """Yield parent indices from ``index`` up to the root, nearest first."""
        parent = self.nodes[index].parent
        while parent is not None:
            yield parent
            parent = self.nodes[parent].parent

    def named_children(self, index: int) -> list[int]:
        return [child for child in self.nodes[index].children if self.nodes[child].is_named]

    def child_by_field(self, index: int, field_name: str) -> int | None:
        """Return the first child held under ``field_name``, if any."""
        for child in self.nodes[index].children:
            if self.nodes[child].field_name == field_name:
                return child
        return None

    def is_context_candidate(self, index: int) -> bool:
        """True for named, non-comment, non-root, non-container nodes with code."""
        node = self.nodes[index]
        return (
            index != self.root
            and node.is_named
            and node.has_code
            and not node.in_comment
            and not self.language.is_container(node.kind)
        )

    @classmethod
    def from_tree_sitter(cls, root: Node, source: bytes, language: LanguageSpec) -> SyntaxTree:
        """Copy a tree-sitter tree into an arena and index its lines."""
        nodes: list[SyntaxNode] = []
        parents: list[int] = []
        cursor = root.walk()

        while True:
            node = cursor.node
            parent = parents[-1] if parents else None
            inherited = nodes[parent].in_comment if parent is not None else False
            index = len(nodes)
            start_row = node.start_point[0]
            end_row, end_col = node.end_point[0], node.end_point[1]
            if end_col == 0 and end_row > start_row:
                end_row -= 1
            nodes.append(
                SyntaxNode(
                    index=index,
                    kind=node.type,
                    is_named=node.is_named,
                    start_line=start_row,
                    end_line=end_row,
                    start_byte=node.start_byte,
                    end_byte=node.end_byte,
                    parent=parent,
                    field_name=cursor.field_name,
                    in_comment=inherited or language.is_comment(node.type),
                )
            )
            if parent is not None:
                nodes[parent].children.append(index)

            if cursor.goto_first_child():
                parents.append(index)
                continue
            while not cursor.goto_next_sibling():
                if not cursor.goto_parent():
                    tree = cls(source=source, language=language, nodes=nodes)
                    tree._index_lines()
                    return tree
                parents.pop()

    def _index_lines(self) -> None:
        # Children always follow their parent in pre-order, so a reverse pass
        # sees every subtree before its root.
        for node in reversed(self.nodes):
            if not node.children and not node.in_comment:
                if self.source[node.start_byte : node.end_byte].strip():
                    node.code_start, node.code_end = node.start_line, node.end_line
                    for line in range(node.start_line, node.end_line + 1):
                        self.code_lines.add(line)
                        self.first_code_leaf[line] = node.index
            if node.code_start is not None and node.parent is not None:
                parent = self.nodes[node.parent]
                if parent.code_start is None or node.code_start < parent.code_start:
                    parent.code_start = node.code_start
                if parent.code_end is None or node.code_end > parent.code_end:
                    parent.code_end = node.code_end

        for node in self.nodes:
            if node.in_comment and (node.parent is None or not self.nodes[node.parent].in_comment):
                self.comment_lines.update(range(node.start_line, node.end_line + 1))
            if self.is_context_candidate(node.index):
                self.starts_on.setdefault(node.code_start, []).append(node.index)
                self.ends_on.setdefault(node.code_end, []).append(node.index)


class SyntaxParser:
    """Loads grammars on first use and parses sources into SyntaxTrees.

    Grammar objects are cached per instance; a run creates one parser and
    reuses it for every file.
    """

    def __init__(self) -> None:
        self._parsers: dict[str, Parser] = {}

    def _parser_for(self, language: LanguageSpec) -> Parser:
        parser = self._parsers.get(language.name)
        if parser is not None:
            return parser
        try:
            module = importlib.import_module(language.grammar_module)
        except ImportError as e:
            raise GrammarUnavailableError(language.name, language.grammar_module) from e
        grammar = Language(getattr(module, language.language_func)())
        parser = Parser(grammar)
        self._parsers[language.name] = parser
        logger.debug("grammar_loaded", language=language.name, module=language.grammar_module)
        return parser

    def parse(self, source: bytes, language: LanguageSpec) -> SyntaxTree:
        """Parse ``source`` with the grammar of ``language``."""
        tree = self._parser_for(language).parse(source)
        return SyntaxTree.from_tree_sitter(tree.root_node, source, language)

    def parse_path(self, path: Path) -> SyntaxTree | None:
        """Read and parse ``path``.

        Args:
            path: Source file to parse.

        Returns:
            The parsed tree, or None when the extension is not supported.

        Raises:
            FileReadError: If the file cannot be read or is not valid UTF-8.
        """
        language = language_for_path(path)
        if language is None:
            return None
        try:
            source = path.read_bytes()
            source.decode("utf-8")
        except OSError as e:
            raise FileReadError(path, e.strerror or str(e)) from e
        except UnicodeDecodeError as e:
            raise FileReadError(path, f"not valid UTF-8 ({e.reason} at byte {e.start})") from e
        return self.parse(source, language)


__all__ = ["SyntaxNode", "SyntaxParser", "SyntaxTree"]

"""Context extraction for marker comments.

For a comment, three neighbouring constructs are resolved independently:

inline
    A construct sharing the comment's first line (trailing comment).
below
    The first construct after the comment, skipping blank lines and
    further comments. Stacked comment lines therefore all resolve to the
    same declaration.
above
    The last construct before the comment, skipping blank lines and
    further comments.

Lines are classified once per tree: a line is *code* if a non-comment
token covers it, *comment* if only comment nodes cover it, else blank.
Candidate constructs are named, non-container nodes. For inline and above
the outermost construct starting or ending on the line that has its own
token there wins, so a signature line resolves to the whole function and
the last line of a wrapped statement resolves to the statement. Below only
considers constructs starting on the line.
"""

from __future__ import annotations

from tracy.models import CodeContext
from tracy.syntax import SyntaxTree

_QUALIFIED_KINDS = frozenset(
    {
        "attribute",
        "field_expression",
        "generic_type",
        "member_expression",
        "qualified_identifier",
        "qualified_name",
        "scope_resolution",
        "scoped_identifier",
        "scoped_type_identifier",
        "selector_expression",
    }
)
_MAX_NAME_DEPTH = 4


class ContextExtractor:
    """Resolves inline, above and below context for comments of one tree."""

    def __init__(self, tree: SyntaxTree) -> None:
        self.tree = tree

    def inline(self, comment: int) -> CodeContext | None:
        tree = self.tree
        line = tree.nodes[comment].start_line
        if line not in tree.code_lines:
            return None
        outermost = self._outermost(line)
        if outermost is not None:
            return self._context(outermost)
        # Only tokens without a construct of their own on this line, e.g. "{".
        leaf = tree.first_code_leaf[line]
        for index in (leaf, *tree.ancestors(leaf)):
            if index != tree.root and tree.nodes[index].is_named:
                return self._context(index)
        return None

    def below(self, comment: int) -> CodeContext | None:
        tree = self.tree
        line = self._next_code_line(tree.nodes[comment].end_line + 1, step=1)
        if line is None:
            return None
        candidates = tree.starts_on.get(line)
        return self._context(candidates[0]) if candidates else None

    def above(self, comment: int) -> CodeContext | None:
        tree = self.tree
        line = self._next_code_line(tree.nodes[comment].start_line - 1, step=-1)
        if line is None:
            return None
        outermost = self._outermost(line)
        return self._context(outermost) if outermost is not None else None

    def _outermost(self, line: int) -> int | None:
        """Pick the construct that owns ``line``.

        Candidates are the constructs whose code starts or ends on the line,
        outermost first (ancestors precede descendants in pre-order). The
        first one holding a code token on the line outside any nested body
        wins; a line with only a closing token (``}``) falls back to the
        outermost candidate.
        """
        tree = self.tree
        candidates = sorted({*tree.starts_on.get(line, ()), *tree.ends_on.get(line, ())})
        for index in candidates:
            if self._owns_token_on(index, line):
                return index
        return candidates[0] if candidates else None

    def _owns_token_on(self, index: int, line: int) -> bool:
        tree = self.tree
        stack = [index]
        while stack:
            node = tree.nodes[stack.pop()]
            if node.code_start is None or not node.code_start <= line <= node.code_end:
                continue
            if not node.children:
                return True
            stack.extend(
                child
                for child in node.children
                if not tree.language.is_container(tree.nodes[child].kind)
            )
        return False

    def _next_code_line(self, line: int, step: int) -> int | None:
        tree = self.tree
        while 0 <= line <= tree.last_line:
            if line in tree.code_lines:
                return line
            line += step
        return None

    def _context(self, index: int) -> CodeContext:
        return CodeContext(
            kind=self.tree.nodes[index].kind,
            name=resolve_name(self.tree, index),
            text=self.tree.first_line_text(index),
        )


def resolve_name(tree: SyntaxTree, index: int, depth: int = 0) -> str | None:
    """Find the declared name of a node.

    Probes the language's name fields in order. An identifier-like or leaf
    child is the name; a qualified name is taken whole; any other child is
    searched the same way. Nodes without name fields (wrappers such as
    ``expression_statement`` or ``lexical_declaration``) are searched
    through their first named child.

    Args:
        tree: Tree that holds the node.
        index: Node to name.
        depth: Current recursion depth.

    Returns:
        The name text, or None if the node shape exposes no name.
    """
    if depth > _MAX_NAME_DEPTH:
        return None
    fields = tree.language.name_fields
    for field_name in fields:
        child = tree.child_by_field(index, field_name)
        if child is None:
            continue
        if _is_name_node(tree, child):
            return tree.text(child)
        name = resolve_name(tree, child, depth + 1)
        if name is not None:
            return name

    if any(tree.nodes[child].field_name in fields for child in tree.nodes[index].children):
        return None
    named = tree.named_children(index)
    if named and not tree.nodes[named[0]].in_comment:
        first = named[0]
        if depth > 0 and _is_name_node(tree, first):
            return tree.text(first)
        return resolve_name(tree, first, depth + 1)
    return None


def _is_name_node(tree: SyntaxTree, index: int) -> bool:
    node = tree.nodes[index]
    if node.in_comment or not node.is_named:
        return False
    kind = node.kind
    return (
        kind.endswith("identifier")
        or kind.endswith("name")
        or kind == "constant"
        or kind in _QUALIFIED_KINDS
        or not tree.named_children(index)
    )


__all__ = ["ContextExtractor", "resolve_name"]

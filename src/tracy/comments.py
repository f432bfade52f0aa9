"""Comment locator.

Walks a SyntaxTree depth-first and yields its comment nodes. A node is a
comment when its kind contains the language's comment token. Nodes nested
inside another comment (for example the ``doc_comment`` child of a Rust
``line_comment``) belong to their outer comment and are not yielded again.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from tracy.syntax import SyntaxTree


@dataclass(frozen=True)
class Comment:
    """A comment node found in a tree.

    Attributes:
        node: Arena index of the comment node.
        line: 1-indexed start line.
        text: Verbatim text, delimiters included.
    """

    node: int
    line: int
    text: str


def iter_comments(tree: SyntaxTree) -> Iterator[Comment]:
    """Yield the outermost comment nodes of ``tree`` in source order."""
    for index in tree.walk():
        node = tree.nodes[index]
        if not node.in_comment:
            continue
        if node.parent is not None and tree.nodes[node.parent].in_comment:
            continue
        text = tree.text(index).rstrip("\r\n")
        yield Comment(node=index, line=node.start_line + 1, text=text)


__all__ = ["Comment", "iter_comments"]

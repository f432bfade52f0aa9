"""Scope resolution: the named constructs enclosing a comment."""

from __future__ import annotations

from tracy.context import resolve_name
from tracy.models import ScopeItem
from tracy.syntax import SyntaxTree


def resolve_scope(tree: SyntaxTree, node: int) -> tuple[ScopeItem, ...]:
    """Collect the named scopes enclosing ``node``, innermost first.

    Walks parent indices up to the root and keeps every ancestor whose kind
    is one of the language's scope kinds. Top-level nodes get an empty chain.

    Example:
        For a comment inside ``fn measure`` inside ``impl Sensor`` inside
        ``mod hw`` the chain is
        ``(function_item measure, impl_item Sensor, mod_item hw)``.
    """
    return tuple(
        ScopeItem(kind=tree.nodes[ancestor].kind, name=resolve_name(tree, ancestor))
        for ancestor in tree.ancestors(node)
        if tree.language.is_scope(tree.nodes[ancestor].kind)
    )


__all__ = ["resolve_scope"]

"""Per-language lookup table.

Each supported language is described once by a LanguageSpec: which file
extensions select it, which grammar package parses it, which node kinds
count as comments and as named scopes, which body kinds are never reported
as context, and which fields carry a node's name. Nothing else in tracy
branches on the language.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

DEFAULT_NAME_FIELDS: tuple[str, ...] = (
    "name",
    "definition",
    "declaration",
    "declarator",
    "pattern",
    "left",
    "type",
)
"""Field names probed, in order, when looking for a node's declared name."""


@dataclass(frozen=True)
class LanguageSpec:
    """Grammar and node-kind taxonomy for one language.

    Attributes:
        name: Language identifier.
        extensions: Lower-case file suffixes, dot included.
        grammar_module: Importable module that ships the tree-sitter grammar.
        language_func: Function in ``grammar_module`` returning the language pointer.
        scope_kinds: Node kinds that open a named scope.
        container_kinds: Body node kinds never reported as context.
        name_fields: Field names that may hold a declared name, in priority order.
        comment_token: Substring that marks a node kind as a comment.
    """

    name: str
    extensions: tuple[str, ...]
    grammar_module: str
    scope_kinds: frozenset[str]
    container_kinds: frozenset[str]
    language_func: str = "language"
    name_fields: tuple[str, ...] = DEFAULT_NAME_FIELDS
    comment_token: str = "comment"

    def is_comment(self, kind: str) -> bool:
        """Return True if nodes of ``kind`` are comments."""
        return self.comment_token in kind

    def is_scope(self, kind: str) -> bool:
        return kind in self.scope_kinds

    def is_container(self, kind: str) -> bool:
        return kind in self.container_kinds


_JS_SCOPES = frozenset(
    {
        "function_declaration",
        "generator_function_declaration",
        "method_definition",
        "class_declaration",
        "class",
    }
)
_JS_CONTAINERS = frozenset({"statement_block", "class_body"})

_TS_SCOPES = _JS_SCOPES | {
    "abstract_class_declaration",
    "interface_declaration",
    "enum_declaration",
    "module",
    "internal_module",
}
_TS_CONTAINERS = _JS_CONTAINERS | {"interface_body", "object_type", "enum_body"}

_C_SCOPES = frozenset(
    {"function_definition", "struct_specifier", "union_specifier", "enum_specifier"}
)
_C_CONTAINERS = frozenset({"compound_statement", "field_declaration_list", "enumerator_list"})


LANGUAGES: tuple[LanguageSpec, ...] = (
    LanguageSpec(
        name="python",
        extensions=(".py", ".pyi"),
        grammar_module="tree_sitter_python",
        scope_kinds=frozenset({"function_definition", "class_definition"}),
        container_kinds=frozenset({"block"}),
    ),
    LanguageSpec(
        name="rust",
        extensions=(".rs",),
        grammar_module="tree_sitter_rust",
        scope_kinds=frozenset(
            {
                "function_item",
                "impl_item",
                "trait_item",
                "mod_item",
                "struct_item",
                "enum_item",
                "union_item",
            }
        ),
        container_kinds=frozenset(
            {
                "block",
                "declaration_list",
                "field_declaration_list",
                "ordered_field_declaration_list",
                "enum_variant_list",
            }
        ),
    ),
    LanguageSpec(
        name="javascript",
        extensions=(".js", ".mjs", ".cjs", ".jsx"),
        grammar_module="tree_sitter_javascript",
        scope_kinds=_JS_SCOPES,
        container_kinds=_JS_CONTAINERS,
    ),
    LanguageSpec(
        name="typescript",
        extensions=(".ts", ".mts", ".cts"),
        grammar_module="tree_sitter_typescript",
        language_func="language_typescript",
        scope_kinds=_TS_SCOPES,
        container_kinds=_TS_CONTAINERS,
    ),
    LanguageSpec(
        name="tsx",
        extensions=(".tsx",),
        grammar_module="tree_sitter_typescript",
        language_func="language_tsx",
        scope_kinds=_TS_SCOPES,
        container_kinds=_TS_CONTAINERS,
    ),
    LanguageSpec(
        name="go",
        extensions=(".go",),
        grammar_module="tree_sitter_go",
        scope_kinds=frozenset({"function_declaration", "method_declaration", "type_spec"}),
        container_kinds=frozenset({"block", "field_declaration_list"}),
    ),
    LanguageSpec(
        name="java",
        extensions=(".java",),
        grammar_module="tree_sitter_java",
        scope_kinds=frozenset(
            {
                "method_declaration",
                "constructor_declaration",
                "class_declaration",
                "interface_declaration",
                "enum_declaration",
                "record_declaration",
            }
        ),
        container_kinds=frozenset(
            {"block", "class_body", "interface_body", "enum_body", "constructor_body"}
        ),
    ),
    LanguageSpec(
        name="c",
        extensions=(".c", ".h"),
        grammar_module="tree_sitter_c",
        scope_kinds=_C_SCOPES,
        container_kinds=_C_CONTAINERS,
    ),
    LanguageSpec(
        name="cpp",
        extensions=(".cc", ".cpp", ".cxx", ".hh", ".hpp", ".hxx"),
        grammar_module="tree_sitter_cpp",
        scope_kinds=_C_SCOPES | {"class_specifier", "namespace_definition"},
        container_kinds=_C_CONTAINERS | {"declaration_list"},
    ),
    LanguageSpec(
        name="csharp",
        extensions=(".cs",),
        grammar_module="tree_sitter_c_sharp",
        scope_kinds=frozenset(
            {
                "method_declaration",
                "constructor_declaration",
                "class_declaration",
                "struct_declaration",
                "interface_declaration",
                "record_declaration",
                "enum_declaration",
                "namespace_declaration",
            }
        ),
        container_kinds=frozenset({"block", "declaration_list"}),
    ),
    LanguageSpec(
        name="ruby",
        extensions=(".rb",),
        grammar_module="tree_sitter_ruby",
        scope_kinds=frozenset({"method", "singleton_method", "class", "module"}),
        container_kinds=frozenset({"body_statement"}),
    ),
    LanguageSpec(
        name="bash",
        extensions=(".sh", ".bash"),
        grammar_module="tree_sitter_bash",
        scope_kinds=frozenset({"function_definition"}),
        container_kinds=frozenset({"compound_statement", "do_group"}),
    ),
)

_BY_EXTENSION: dict[str, LanguageSpec] = {
    ext: spec for spec in LANGUAGES for ext in spec.extensions
}


def language_for_path(path: Path) -> LanguageSpec | None:
    """Return the language for ``path`` by extension, or None if unsupported."""
    return _BY_EXTENSION.get(path.suffix.lower())


def supported_extensions() -> list[str]:
    """Return every recognised file extension, sorted."""
    return sorted(_BY_EXTENSION)


__all__ = [
    "DEFAULT_NAME_FIELDS",
    "LANGUAGES",
    "LanguageSpec",
    "language_for_path",
    "supported_extensions",
]

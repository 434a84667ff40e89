"""Language packs: the static extension -> grammar + tag query table.

Every supported language has exactly ONE LanguagePack holding:
- Grammar metadata (PyPI package, import module, loader function)
- File extensions (with leading dot, matched against the final suffix)
- The tag query (S-expression patterns)

Tag query capture conventions:
- ``@name.definition.<kind>`` on the identifier that a definition introduces
- ``@name.reference.<kind>`` on the identifier a call or type use points at

Adding a language means adding a ``Language`` member and a pack here; the
graph builder and scorer never look at language-specific details.

The extension table is consumed downstream, so the set of recognized
extensions is fixed: .ts .tsx .js .jsx .py .java .cs .cpp .hpp .rs .rb .go
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePosixPath

from codemap.index.models import Language


@dataclass(frozen=True)
class LanguagePack:
    """Complete tree-sitter configuration for a single language."""

    language: Language
    grammar_package: str  # PyPI package ("tree-sitter-python")
    grammar_module: str  # Python import ("tree_sitter_python")
    tag_query: str
    # Non-standard function name (e.g. "language_typescript", "language_tsx")
    language_func: str | None = None
    extensions: frozenset[str] = field(default_factory=frozenset)

    @property
    def grammar_id(self) -> str:
        return self.language.value


# =========================================================================
# Tag queries
# =========================================================================

_TYPESCRIPT_TAGS = """
(function_declaration
    name: (identifier) @name.definition.function)
(generator_function_declaration
    name: (identifier) @name.definition.function)
(function_signature
    name: (identifier) @name.definition.function)
(variable_declarator
    name: (identifier) @name.definition.function
    value: (arrow_function))
(class_declaration
    name: (type_identifier) @name.definition.class)
(abstract_class_declaration
    name: (type_identifier) @name.definition.class)
(interface_declaration
    name: (type_identifier) @name.definition.interface)
(method_definition
    name: (property_identifier) @name.definition.method)
(method_signature
    name: (property_identifier) @name.definition.method)
(abstract_method_signature
    name: (property_identifier) @name.definition.method)

(call_expression
    function: (identifier) @name.reference.call)
(call_expression
    function: (member_expression
        property: (property_identifier) @name.reference.call))
(new_expression
    constructor: (identifier) @name.reference.class)
(type_annotation
    (type_identifier) @name.reference.type)
"""

_JAVASCRIPT_TAGS = """
(function_declaration
    name: (identifier) @name.definition.function)
(generator_function_declaration
    name: (identifier) @name.definition.function)
(variable_declarator
    name: (identifier) @name.definition.function
    value: (arrow_function))
(class_declaration
    name: (identifier) @name.definition.class)
(method_definition
    name: (property_identifier) @name.definition.method)

(call_expression
    function: (identifier) @name.reference.call)
(call_expression
    function: (member_expression
        property: (property_identifier) @name.reference.call))
(new_expression
    constructor: (identifier) @name.reference.class)
"""

_PYTHON_TAGS = """
(class_definition
    name: (identifier) @name.definition.class)
(function_definition
    name: (identifier) @name.definition.function)

(call
    function: (identifier) @name.reference.call)
(call
    function: (attribute
        attribute: (identifier) @name.reference.call))
"""

_JAVA_TAGS = """
(class_declaration
    name: (identifier) @name.definition.class)
(interface_declaration
    name: (identifier) @name.definition.interface)
(enum_declaration
    name: (identifier) @name.definition.enum)
(record_declaration
    name: (identifier) @name.definition.class)
(method_declaration
    name: (identifier) @name.definition.method)

(method_invocation
    name: (identifier) @name.reference.call)
(object_creation_expression
    type: (type_identifier) @name.reference.class)
(superclass
    (type_identifier) @name.reference.class)
(type_list
    (type_identifier) @name.reference.implementation)
"""

_CSHARP_TAGS = """
(class_declaration
    name: (identifier) @name.definition.class)
(interface_declaration
    name: (identifier) @name.definition.interface)
(struct_declaration
    name: (identifier) @name.definition.struct)
(enum_declaration
    name: (identifier) @name.definition.enum)
(record_declaration
    name: (identifier) @name.definition.class)
(method_declaration
    name: (identifier) @name.definition.method)

(invocation_expression
    function: (identifier) @name.reference.call)
(invocation_expression
    function: (member_access_expression
        name: (identifier) @name.reference.call))
(object_creation_expression
    type: (identifier) @name.reference.class)
"""

_CPP_TAGS = """
(function_definition
    declarator: (function_declarator
        declarator: (identifier) @name.definition.function))
(function_definition
    declarator: (function_declarator
        declarator: (field_identifier) @name.definition.method))
(function_definition
    declarator: (function_declarator
        declarator: (qualified_identifier
            name: (identifier) @name.definition.method)))
(field_declaration
    declarator: (function_declarator
        declarator: (field_identifier) @name.definition.method))
(class_specifier
    name: (type_identifier) @name.definition.class)
(struct_specifier
    name: (type_identifier) @name.definition.struct)

(call_expression
    function: (identifier) @name.reference.call)
(call_expression
    function: (field_expression
        field: (field_identifier) @name.reference.call))
(call_expression
    function: (qualified_identifier
        name: (identifier) @name.reference.call))
(new_expression
    type: (type_identifier) @name.reference.class)
"""

_RUST_TAGS = """
(function_item
    name: (identifier) @name.definition.function)
(function_signature_item
    name: (identifier) @name.definition.function)
(struct_item
    name: (type_identifier) @name.definition.class)
(enum_item
    name: (type_identifier) @name.definition.class)
(trait_item
    name: (type_identifier) @name.definition.interface)
(mod_item
    name: (identifier) @name.definition.module)

(call_expression
    function: (identifier) @name.reference.call)
(call_expression
    function: (field_expression
        field: (field_identifier) @name.reference.call))
(call_expression
    function: (scoped_identifier
        name: (identifier) @name.reference.call))
(scoped_identifier
    path: (identifier) @name.reference.class)
(macro_invocation
    macro: (identifier) @name.reference.call)
(struct_expression
    name: (type_identifier) @name.reference.class)
(impl_item
    trait: (type_identifier) @name.reference.implementation)
"""

_RUBY_TAGS = """
(method
    name: (identifier) @name.definition.method)
(singleton_method
    name: (identifier) @name.definition.method)
(class
    name: (constant) @name.definition.class)
(module
    name: (constant) @name.definition.module)

(call
    method: (identifier) @name.reference.call)
(call
    receiver: (constant) @name.reference.class)

; Calls without parentheses or arguments parse as a bare identifier
(body_statement
    (identifier) @name.reference.call)
(program
    (identifier) @name.reference.call)
(then
    (identifier) @name.reference.call)
(else
    (identifier) @name.reference.call)
(argument_list
    (identifier) @name.reference.call)
(assignment
    right: (identifier) @name.reference.call)
"""

_GO_TAGS = """
(function_declaration
    name: (identifier) @name.definition.function)
(method_declaration
    name: (field_identifier) @name.definition.method)
(type_spec
    name: (type_identifier) @name.definition.class
    type: (struct_type))
(type_spec
    name: (type_identifier) @name.definition.interface
    type: (interface_type))

(call_expression
    function: (identifier) @name.reference.call)
(call_expression
    function: (selector_expression
        field: (field_identifier) @name.reference.call))
(composite_literal
    type: (type_identifier) @name.reference.class)
"""


# =========================================================================
# Packs
# =========================================================================

TYPESCRIPT_PACK = LanguagePack(
    language=Language.TYPESCRIPT,
    grammar_package="tree-sitter-typescript",
    grammar_module="tree_sitter_typescript",
    language_func="language_typescript",
    extensions=frozenset({".ts"}),
    tag_query=_TYPESCRIPT_TAGS,
)

TSX_PACK = LanguagePack(
    language=Language.TSX,
    grammar_package="tree-sitter-typescript",
    grammar_module="tree_sitter_typescript",
    language_func="language_tsx",
    extensions=frozenset({".tsx"}),
    tag_query=_TYPESCRIPT_TAGS,
)

JAVASCRIPT_PACK = LanguagePack(
    language=Language.JAVASCRIPT,
    grammar_package="tree-sitter-javascript",
    grammar_module="tree_sitter_javascript",
    extensions=frozenset({".js", ".jsx"}),
    tag_query=_JAVASCRIPT_TAGS,
)

PYTHON_PACK = LanguagePack(
    language=Language.PYTHON,
    grammar_package="tree-sitter-python",
    grammar_module="tree_sitter_python",
    extensions=frozenset({".py"}),
    tag_query=_PYTHON_TAGS,
)

JAVA_PACK = LanguagePack(
    language=Language.JAVA,
    grammar_package="tree-sitter-java",
    grammar_module="tree_sitter_java",
    extensions=frozenset({".java"}),
    tag_query=_JAVA_TAGS,
)

CSHARP_PACK = LanguagePack(
    language=Language.CSHARP,
    grammar_package="tree-sitter-c-sharp",
    grammar_module="tree_sitter_c_sharp",
    extensions=frozenset({".cs"}),
    tag_query=_CSHARP_TAGS,
)

CPP_PACK = LanguagePack(
    language=Language.CPP,
    grammar_package="tree-sitter-cpp",
    grammar_module="tree_sitter_cpp",
    extensions=frozenset({".cpp", ".hpp"}),
    tag_query=_CPP_TAGS,
)

RUST_PACK = LanguagePack(
    language=Language.RUST,
    grammar_package="tree-sitter-rust",
    grammar_module="tree_sitter_rust",
    extensions=frozenset({".rs"}),
    tag_query=_RUST_TAGS,
)

RUBY_PACK = LanguagePack(
    language=Language.RUBY,
    grammar_package="tree-sitter-ruby",
    grammar_module="tree_sitter_ruby",
    extensions=frozenset({".rb"}),
    tag_query=_RUBY_TAGS,
)

GO_PACK = LanguagePack(
    language=Language.GO,
    grammar_package="tree-sitter-go",
    grammar_module="tree_sitter_go",
    extensions=frozenset({".go"}),
    tag_query=_GO_TAGS,
)


# =========================================================================
# Canonical registries
# =========================================================================

# Language -> Pack (one entry per Language member; checked by tests)
LANGUAGE_PACKS: dict[Language, LanguagePack] = {
    pack.language: pack
    for pack in (
        TYPESCRIPT_PACK,
        TSX_PACK,
        JAVASCRIPT_PACK,
        PYTHON_PACK,
        JAVA_PACK,
        CSHARP_PACK,
        CPP_PACK,
        RUST_PACK,
        RUBY_PACK,
        GO_PACK,
    )
}

# Extension -> Pack
_EXT_TO_PACK: dict[str, LanguagePack] = {}
for _pack in LANGUAGE_PACKS.values():
    for _ext in _pack.extensions:
        _EXT_TO_PACK[_ext] = _pack


# =========================================================================
# Public API
# =========================================================================


def get_pack(language: Language) -> LanguagePack:
    """Get the LanguagePack for a language."""
    return LANGUAGE_PACKS[language]


def get_pack_for_ext(ext: str) -> LanguagePack | None:
    """Get a LanguagePack for a file extension (with leading dot)."""
    return _EXT_TO_PACK.get(ext)


def get_pack_for_path(file_path: str) -> LanguagePack | None:
    """Get a LanguagePack by the final suffix of a path."""
    return get_pack_for_ext(PurePosixPath(file_path.replace("\\", "/")).suffix)


def supported_extensions() -> list[str]:
    """All recognized extensions, sorted."""
    return sorted(_EXT_TO_PACK)

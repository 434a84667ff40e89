"""Tree-sitter parsing and tag extraction."""

from codemap.index._internal.parsing.packs import (
    LANGUAGE_PACKS,
    LanguagePack,
    get_pack,
    get_pack_for_ext,
    get_pack_for_path,
    supported_extensions,
)
from codemap.index._internal.parsing.registry import (
    GrammarRegistry,
    LanguageProfile,
    resolve_language,
)
from codemap.index._internal.parsing.treesitter import (
    ParseFailure,
    ParseFailureReason,
    ParseResult,
    TreeSitterParser,
    classify_capture,
)

__all__ = [
    "LANGUAGE_PACKS",
    "LanguagePack",
    "get_pack",
    "get_pack_for_ext",
    "get_pack_for_path",
    "supported_extensions",
    "GrammarRegistry",
    "LanguageProfile",
    "resolve_language",
    "ParseFailure",
    "ParseFailureReason",
    "ParseResult",
    "TreeSitterParser",
    "classify_capture",
]

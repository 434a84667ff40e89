"""Symbol graph building and definition scoring."""

from codemap.index._internal.indexing.graph import (
    SymbolGraphBuilder,
    attribute_callers,
    select_canonical_definers,
)
from codemap.index._internal.indexing.scoring import (
    ScoringContext,
    path_depth,
    score_definition,
)

__all__ = [
    "SymbolGraphBuilder",
    "attribute_callers",
    "select_canonical_definers",
    "ScoringContext",
    "path_depth",
    "score_definition",
]

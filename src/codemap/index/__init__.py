"""Index module - cross-file symbol resolution.

This module provides:
- Grammar registry: extension -> tree-sitter grammar + tag query
- Tag extraction: definition and reference captures per file
- Symbol graph: canonical definer per token, caller lists
- Scoring: path-depth based definition scores

Public API is in `codemap.index.ops`:
- get_file_token_scores: batch entry point
- FileTokenScores: result type

Internal implementations are in `codemap.index._internal/`.
"""

from codemap.index.models import (
    BuildStats,
    Capture,
    CaptureKind,
    FileFacts,
    FileTokenScores,
    Language,
)
from codemap.index.ops import get_file_token_scores

__all__ = [
    "BuildStats",
    "Capture",
    "CaptureKind",
    "FileFacts",
    "FileTokenScores",
    "Language",
    "get_file_token_scores",
]

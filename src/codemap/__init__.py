"""codemap - cross-file, multi-language symbol resolution for file relevance ranking."""

from codemap.index import FileTokenScores, Language, get_file_token_scores

__version__ = "0.1.0"

__all__ = [
    "FileTokenScores",
    "Language",
    "get_file_token_scores",
    "__version__",
]

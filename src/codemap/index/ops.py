"""Public entry point for token scoring.

``get_file_token_scores`` is what the file-relevance picker calls: given a
root directory and paths relative to it, it returns which file canonically
defines each symbol and which files call it.
"""

from __future__ import annotations

import os
from collections.abc import Sequence
from pathlib import Path, PurePath

from codemap.config.loader import load_config
from codemap.config.models import CodeMapConfig
from codemap.core.errors import InvalidArgumentError
from codemap.index._internal.indexing.graph import SymbolGraphBuilder
from codemap.index._internal.parsing.registry import GrammarRegistry
from codemap.index._internal.parsing.treesitter import TreeSitterParser
from codemap.index.models import FileTokenScores


def _validate_root(root_dir: str | os.PathLike[str]) -> Path:
    root = Path(root_dir)
    if not root.exists():
        raise InvalidArgumentError.root_not_found(str(root_dir))
    if not root.is_dir():
        raise InvalidArgumentError.root_not_directory(str(root_dir))
    return root


def _normalize_paths(file_paths: Sequence[str | os.PathLike[str]]) -> list[str]:
    if isinstance(file_paths, (str, bytes)):
        raise InvalidArgumentError.bad_file_list("expected a sequence of paths, got a single string")
    try:
        items = list(file_paths)
    except TypeError as e:
        raise InvalidArgumentError.bad_file_list(f"not iterable: {type(file_paths).__name__}") from e

    paths: list[str] = []
    for item in items:
        if isinstance(item, PurePath):
            paths.append(item.as_posix())
        elif isinstance(item, str):
            paths.append(item)
        else:
            raise InvalidArgumentError.bad_file_list(f"path entries must be str, got {type(item).__name__}")
    return paths


def get_file_token_scores(
    root_dir: str | os.PathLike[str],
    file_paths: Sequence[str | os.PathLike[str]],
    *,
    config: CodeMapConfig | None = None,
    registry: GrammarRegistry | None = None,
) -> FileTokenScores:
    """Score definitions and attribute callers across ``file_paths``.

    Args:
        root_dir: Directory the paths are relative to. Must exist.
        file_paths: Paths relative to ``root_dir``. These exact strings are
            the keys of the result tables.
        config: Resolved configuration. Loaded from ``root_dir`` and the
            environment when omitted.
        registry: Grammar registry. The process-wide one when omitted.

    Returns:
        FileTokenScores with ``token_scores`` and ``token_callers``.

    Raises:
        InvalidArgumentError: If the root is missing or not a directory, or
            ``file_paths`` is not a sequence of paths.
        ConfigError: If configuration files or overrides are invalid.
    """
    root = _validate_root(root_dir)
    paths = _normalize_paths(file_paths)
    if config is None:
        config = load_config(root)

    parser = TreeSitterParser(registry=registry or GrammarRegistry.get())
    builder = SymbolGraphBuilder(root, config=config, parser=parser)
    return builder.build(paths)

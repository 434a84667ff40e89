"""Definition scoring.

A definition's score is mostly a function of how close its file sits to the
root: top-level modules are more likely to be the public home of a name than
something nested several directories down. Path depth is cheap, needs no
cross-file analysis, and yields the same answer on every run.

    score = depth_decay ** depth * (1 + density_weight * d / (1 + d))
    d     = sqrt(lines / (definitions + 1))

The density term rewards files that define few symbols relative to their
size. It lies in [0, density_weight), and ``ScoringConfig`` caps
density_weight below ``(1 - depth_decay) / depth_decay``, so one extra
path segment always costs more than the largest possible density bonus.
"""

from __future__ import annotations

import math
import posixpath
from dataclasses import dataclass

from codemap.config.models import ScoringConfig


@dataclass(frozen=True)
class ScoringContext:
    """Per-file inputs to :func:`score_definition`."""

    depth: int
    line_count: int
    definition_count: int


def path_depth(file_path: str) -> int:
    """Number of path segments from the root, ``.`` segments ignored.

    ``utils.ts`` is depth 1, ``deep/utils.ts`` is depth 2.
    """
    normalized = posixpath.normpath(file_path.replace("\\", "/")).lstrip("/")
    return len([part for part in normalized.split("/") if part and part != "."])


def density_factor(line_count: int, definition_count: int) -> float:
    """Return d / (1 + d) in [0, 1)."""
    d = math.sqrt(max(line_count, 0) / (definition_count + 1))
    return d / (1 + d)


def score_definition(
    file_path: str,  # noqa: ARG001
    token: str,  # noqa: ARG001
    context: ScoringContext,
    config: ScoringConfig,
) -> float:
    """Score one definition of ``token`` in ``file_path``.

    Every definition in a file shares the file's score; the token and path
    are accepted so a scorer can later weigh them without changing callers.
    """
    depth_score = config.depth_decay**context.depth
    bonus = config.density_weight * density_factor(context.line_count, context.definition_count)
    return depth_score * (1 + bonus)


def call_boost(external_calls: int) -> float:
    """Multiplier applied to reported scores of a token called from elsewhere."""
    return 1 + math.log1p(external_calls)

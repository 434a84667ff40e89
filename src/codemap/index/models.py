"""Data models for token scoring.

Everything here is created fresh per ``get_file_token_scores`` call and
discarded on return. Only the grammar registry outlives a call.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Language(str, Enum):
    """Closed set of languages with a registered grammar and tag query."""

    TYPESCRIPT = "typescript"
    TSX = "tsx"
    JAVASCRIPT = "javascript"
    PYTHON = "python"
    JAVA = "java"
    CSHARP = "csharp"
    CPP = "cpp"
    RUST = "rust"
    RUBY = "ruby"
    GO = "go"


class CaptureKind(str, Enum):
    """Classification of a tag-query capture."""

    DEFINITION = "definition"
    REFERENCE = "reference"


@dataclass(frozen=True, slots=True)
class Capture:
    """A classified tag-query capture."""

    name: str  # Token text
    kind: CaptureKind
    tag: str  # Sub-kind after the classifier: function, class, call, ...
    file_path: str
    line: int  # 1-based
    column: int  # 0-based
    start_byte: int


@dataclass
class FileFacts:
    """Per-file extraction output consumed by the graph builder."""

    file_path: str
    language: Language | None = None
    # Token names in first-definition order (dict used as an ordered set)
    definitions: dict[str, int] = field(default_factory=dict)
    # Referenced token names in capture order, duplicates kept
    references: list[str] = field(default_factory=list)
    line_count: int = 0
    error_count: int = 0
    # Set when the file was read but contributed nothing (oversized, unreadable, ...)
    error: str | None = None
    # Extension has no registered language; file gets no score table entry
    skipped_unsupported: bool = False

    @property
    def is_supported(self) -> bool:
        return not self.skipped_unsupported


@dataclass
class BuildStats:
    """Counters for one graph build."""

    files_processed: int = 0
    files_unsupported: int = 0
    files_failed: int = 0
    definitions: int = 0
    references: int = 0
    references_dropped: int = 0
    duration_ms: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "files_processed": self.files_processed,
            "files_unsupported": self.files_unsupported,
            "files_failed": self.files_failed,
            "definitions": self.definitions,
            "references": self.references,
            "references_dropped": self.references_dropped,
            "duration_ms": self.duration_ms,
        }


@dataclass
class FileTokenScores:
    """Result of a token scoring run.

    ``token_scores``: file -> token -> score, one entry per definition.
    ``token_callers``: canonical defining file -> token -> caller files. A token
    is present here only when the file is its canonical definer; an empty
    list means "defined here, never referenced".
    """

    token_scores: dict[str, dict[str, float]] = field(default_factory=dict)
    token_callers: dict[str, dict[str, list[str]]] = field(default_factory=dict)
    stats: BuildStats = field(default_factory=BuildStats)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the wire shape consumed by the file picker."""
        return {
            "tokenScores": self.token_scores,
            "tokenCallers": self.token_callers,
        }

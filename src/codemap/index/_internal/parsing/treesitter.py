"""Tree-sitter parsing and tag extraction.

This module provides:
- Parsing a file into a syntax tree (or a typed parse failure)
- Running a language's tag query and classifying its captures as
  definitions or references

Note: a "reference" here is syntactic. We only know that an identifier
named X is called or used as a type at some location; which definition it
means is decided later, across files, by the graph builder.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import tree_sitter
from tree_sitter import QueryCursor as _TSQueryCursor

from codemap.index._internal.parsing.registry import GrammarRegistry, LanguageProfile
from codemap.index.models import Capture, CaptureKind

_DEFINITION_PREFIX = "name.definition."
_REFERENCE_PREFIX = "name.reference."


class ParseFailureReason(str, Enum):
    """Why a file produced no syntax tree."""

    UNSUPPORTED = "unsupported"  # No registered language, or its grammar failed to load
    MALFORMED = "malformed"  # The grammar could not produce any tree


@dataclass
class ParseFailure:
    """A file that could not be parsed."""

    file_path: str
    reason: ParseFailureReason
    message: str = ""


@dataclass
class ParseResult:
    """Result of parsing a file."""

    file_path: str
    tree: Any  # Tree-sitter Tree (owned by this result)
    root_node: Any  # Tree-sitter Node
    profile: LanguageProfile
    error_count: int
    total_nodes: int
    line_count: int


def classify_capture(capture_name: str) -> tuple[CaptureKind, str] | None:
    """Split a capture name into (kind, tag), or None for helper captures."""
    if capture_name.startswith(_DEFINITION_PREFIX):
        return CaptureKind.DEFINITION, capture_name[len(_DEFINITION_PREFIX) :]
    if capture_name.startswith(_REFERENCE_PREFIX):
        return CaptureKind.REFERENCE, capture_name[len(_REFERENCE_PREFIX) :]
    return None


def count_lines(content: bytes) -> int:
    return content.count(b"\n") + (1 if content and not content.endswith(b"\n") else 0)


def _count_nodes(tree: Any) -> tuple[int, int]:
    """Return (total_nodes, error_nodes) with an iterative cursor walk."""
    cursor = tree.walk()
    total = 0
    errors = 0
    while True:
        node = cursor.node
        total += 1
        if node.type == "ERROR" or node.is_missing:
            errors += 1
        if cursor.goto_first_child():
            continue
        while not cursor.goto_next_sibling():
            if not cursor.goto_parent():
                return total, errors


@dataclass
class TreeSitterParser:
    """
    Tree-sitter parser for tag extraction.

    Language grammars and compiled tag queries come from a
    :class:`GrammarRegistry` (the process-wide one unless given). A new
    ``tree_sitter.Parser`` is made per call, so one instance can be shared by
    worker threads.

    Usage::

        parser = TreeSitterParser()

        result = parser.parse("src/foo.py", content)
        if isinstance(result, ParseResult):
            captures = parser.extract_captures(result)
    """

    registry: GrammarRegistry = field(default_factory=GrammarRegistry.get)

    def parse(self, file_path: str, content: bytes) -> ParseResult | ParseFailure:
        """
        Parse a file with Tree-sitter.

        Malformed source still yields a ParseResult: tree-sitter recovers
        with ERROR nodes, and ``error_count`` records how many.

        Args:
            file_path: Path to file (used for language detection only)
            content: File content as bytes

        Returns:
            ParseResult, or ParseFailure when the language is unsupported or
            the grammar produced no tree at all.
        """
        profile = self.registry.resolve(file_path)
        if profile is None:
            return ParseFailure(
                file_path=file_path,
                reason=ParseFailureReason.UNSUPPORTED,
                message="No usable grammar for this file type",
            )

        try:
            parser = tree_sitter.Parser(profile.ts_language)
            tree = parser.parse(content)
        except (ValueError, RuntimeError, TypeError) as err:
            return ParseFailure(
                file_path=file_path,
                reason=ParseFailureReason.MALFORMED,
                message=str(err),
            )
        if tree is None:
            return ParseFailure(
                file_path=file_path,
                reason=ParseFailureReason.MALFORMED,
                message="Parser returned no tree",
            )

        total_nodes, error_count = _count_nodes(tree)

        return ParseResult(
            file_path=file_path,
            tree=tree,
            root_node=tree.root_node,
            profile=profile,
            error_count=error_count,
            total_nodes=total_nodes,
            line_count=count_lines(content),
        )

    def extract_captures(self, result: ParseResult) -> list[Capture]:
        """
        Run the language's tag query and classify its captures.

        Captures are returned in source order (start byte), so that callers
        building ordered lists get the same order on every run. A node caught
        by two patterns of the same kind is reported once.

        Args:
            result: ParseResult from parse()

        Returns:
            List of Capture objects; empty for empty or pattern-less files.
        """
        cursor = _TSQueryCursor(result.profile.query)
        captured: dict[str, list[Any]] = cursor.captures(result.root_node)

        seen: set[tuple[int, CaptureKind]] = set()
        captures: list[Capture] = []
        for capture_name in sorted(captured):
            classified = classify_capture(capture_name)
            if classified is None:
                continue
            kind, tag = classified
            for node in captured[capture_name]:
                key = (node.start_byte, kind)
                if key in seen:
                    continue
                name = node.text.decode("utf-8", errors="replace") if node.text else ""
                if not name:
                    continue
                seen.add(key)
                captures.append(
                    Capture(
                        name=name,
                        kind=kind,
                        tag=tag,
                        file_path=result.file_path,
                        line=node.start_point[0] + 1,
                        column=node.start_point[1],
                        start_byte=node.start_byte,
                    )
                )

        captures.sort(key=lambda c: (c.start_byte, c.kind.value, c.tag))
        return captures

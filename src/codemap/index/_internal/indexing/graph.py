"""Symbol graph builder: canonical definers and caller lists.

Pipeline for one batch of files:

1. Extract (parallel): parse each file and split its tag captures into a
   definition set and an ordered reference list. A file that can't be read
   or parsed contributes empty sets; nothing a single file does can fail
   the batch.
2. Score: every definition gets the score of its file (see ``scoring``).
3. Resolve (single-threaded): reduce all per-file scores into one read-only
   token -> canonical file map. Highest score wins; equal scores go to the
   lexically first path.
4. Attribute: every reference to a token with a canonical definer appends
   the calling file to that definer's caller list. References to tokens
   with no definer among the supplied files are dropped.

Step 3 needs every file's definitions, so it is the one point where the
extraction workers must all have finished.
"""

from __future__ import annotations

import os
import time
from collections import Counter
from collections.abc import Iterable, Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from types import MappingProxyType

from codemap.config.models import CodeMapConfig, ScoringConfig
from codemap.core.logging import get_logger
from codemap.index._internal.indexing.scoring import (
    ScoringContext,
    call_boost,
    path_depth,
    score_definition,
)
from codemap.index._internal.parsing.treesitter import (
    ParseFailure,
    ParseFailureReason,
    TreeSitterParser,
)
from codemap.index.models import BuildStats, CaptureKind, FileFacts, FileTokenScores

log = get_logger(__name__)


def _extract_file(
    parser: TreeSitterParser,
    repo_root: Path,
    file_path: str,
    max_bytes: int,
) -> FileFacts:
    """Extract definitions and references from a single file (worker function).

    Never raises for file-level problems: unsupported extensions, unreadable
    or oversized files, and grammar failures all come back as FileFacts.
    """
    language = parser.registry.language_for(file_path)
    if language is None:
        return FileFacts(file_path=file_path, skipped_unsupported=True)

    facts = FileFacts(file_path=file_path, language=language)
    full_path = repo_root / file_path

    try:
        size = full_path.stat().st_size
        if size > max_bytes:
            facts.error = f"File too large ({size} bytes)"
            log.warning("file_too_large", file=file_path, size=size, limit=max_bytes)
            return facts
        content = full_path.read_bytes()
    except OSError as e:
        facts.error = f"Unreadable: {e.strerror or e}"
        log.warning("file_unreadable", file=file_path, error=str(e))
        return facts

    result = parser.parse(file_path, content)
    if isinstance(result, ParseFailure):
        if result.reason is ParseFailureReason.UNSUPPORTED:
            # Grammar failed to load; already logged once by the registry
            facts.skipped_unsupported = True
            return facts
        facts.error = f"{result.reason.value}: {result.message}"
        log.warning("file_parse_failed", file=file_path, reason=result.message)
        return facts

    facts.line_count = result.line_count
    facts.error_count = result.error_count
    if result.error_count:
        log.debug("file_parsed_with_errors", file=file_path, error_nodes=result.error_count)

    for capture in parser.extract_captures(result):
        if capture.kind is CaptureKind.DEFINITION:
            facts.definitions[capture.name] = facts.definitions.get(capture.name, 0) + 1
        else:
            facts.references.append(capture.name)

    return facts


def select_canonical_definers(
    token_scores: Mapping[str, Mapping[str, float]],
) -> Mapping[str, str]:
    """Reduce per-file scores into a read-only token -> defining file map.

    The file with the strictly highest score wins. On an exact tie the
    lexically first path wins, independent of input order.
    """
    best: dict[str, tuple[float, str]] = {}
    for file_path, scores in token_scores.items():
        for token, score in scores.items():
            candidate = (-score, file_path)
            current = best.get(token)
            if current is None or candidate < current:
                best[token] = candidate
    return MappingProxyType({token: path for token, (_, path) in best.items()})


def attribute_callers(
    token_scores: Mapping[str, Mapping[str, float]],
    facts: Iterable[FileFacts],
    definers: Mapping[str, str],
) -> tuple[dict[str, dict[str, list[str]]], int]:
    """Build caller lists for canonical definitions.

    Every canonical definition gets an entry, empty if nothing calls it.
    Each reference appends its file once per call site, in file order and
    then source order.

    Returns:
        (token_callers, number of references with no canonical definer)
    """
    token_callers: dict[str, dict[str, list[str]]] = {}
    for file_path, scores in token_scores.items():
        for token in scores:
            if definers.get(token) == file_path:
                token_callers.setdefault(file_path, {})[token] = []

    dropped = 0
    for file_facts in facts:
        for token in file_facts.references:
            definer = definers.get(token)
            if definer is None:
                dropped += 1
                continue
            token_callers[definer][token].append(file_facts.file_path)

    return token_callers, dropped


def count_external_calls(facts: Iterable[FileFacts]) -> Counter[str]:
    """Count references made from files that don't define the token themselves."""
    external: Counter[str] = Counter()
    for file_facts in facts:
        for token in file_facts.references:
            if token not in file_facts.definitions:
                external[token] += 1
    return external


def report_scores(
    token_scores: Mapping[str, Mapping[str, float]],
    external_calls: Counter[str],
    config: ScoringConfig,
) -> dict[str, dict[str, float]]:
    """Apply the call-frequency boost and rounding to raw scores.

    The boost depends only on the token, so every definer of a token is
    scaled by the same factor and the canonical choice is unaffected.
    Scores are rounded to ``config.precision`` significant digits, except
    for tokens where rounding would make two different scores equal; those
    are reported exactly so a deeper definer always stays lower-valued.
    """
    boosted: dict[str, dict[str, float]] = {}
    by_token: dict[str, set[float]] = {}
    for file_path, scores in token_scores.items():
        out: dict[str, float] = {}
        for token, score in scores.items():
            if config.call_boost:
                score *= call_boost(external_calls[token])
            out[token] = score
            by_token.setdefault(token, set()).add(score)
        boosted[file_path] = out

    exact = {
        token
        for token, values in by_token.items()
        if len({_round_significant(v, config.precision) for v in values}) < len(values)
    }
    return {
        file_path: {
            token: score if token in exact else _round_significant(score, config.precision)
            for token, score in scores.items()
        }
        for file_path, scores in boosted.items()
    }


def _round_significant(value: float, digits: int) -> float:
    return float(f"{value:.{digits}g}")


class SymbolGraphBuilder:
    """Builds token scores and caller lists for one batch of files.

    Usage::

        builder = SymbolGraphBuilder(Path("/repo"), config=config)
        result = builder.build(["src/a.ts", "src/b.py"])
        result.token_callers["src/a.ts"]["helper"]
    """

    def __init__(
        self,
        repo_root: Path | str,
        *,
        config: CodeMapConfig | None = None,
        parser: TreeSitterParser | None = None,
    ) -> None:
        self.repo_root = Path(repo_root)
        self.config = config or CodeMapConfig()
        self.parser = parser or TreeSitterParser()

    # ------------------------------------------------------------------
    # Extraction
    # ------------------------------------------------------------------

    def extract_files(self, file_paths: Sequence[str]) -> list[FileFacts]:
        """Extract facts for every path, results in input order."""
        workers = self._worker_count(len(file_paths))
        if workers > 1:
            return self._parallel_extract(file_paths, workers)
        return self._sequential_extract(file_paths)

    def _worker_count(self, n_files: int) -> int:
        configured = self.config.indexer.max_workers or os.cpu_count() or 1
        return max(1, min(configured, n_files))

    @property
    def _max_bytes(self) -> int:
        return int(self.config.indexer.max_file_size_mb * 1024 * 1024)

    def _sequential_extract(self, file_paths: Sequence[str]) -> list[FileFacts]:
        """Extract facts sequentially."""
        results = []
        for path in file_paths:
            try:
                results.append(_extract_file(self.parser, self.repo_root, path, self._max_bytes))
            except Exception as e:
                results.append(self._failed_facts(path, e))
        return results

    def _parallel_extract(self, file_paths: Sequence[str], workers: int) -> list[FileFacts]:
        """Extract facts in parallel using a thread pool."""
        results = []
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="codemap-extract") as pool:
            futures = [
                pool.submit(_extract_file, self.parser, self.repo_root, path, self._max_bytes)
                for path in file_paths
            ]
            for path, future in zip(file_paths, futures, strict=True):
                try:
                    results.append(future.result())
                except Exception as e:
                    results.append(self._failed_facts(path, e))
        return results

    def _failed_facts(self, file_path: str, error: Exception) -> FileFacts:
        log.warning("file_extraction_failed", file=file_path, error=str(error), exc_info=True)
        return FileFacts(
            file_path=file_path,
            language=self.parser.registry.language_for(file_path),
            error=str(error),
        )

    # ------------------------------------------------------------------
    # Build
    # ------------------------------------------------------------------

    def build(self, file_paths: Sequence[str]) -> FileTokenScores:
        """Compute token scores and caller lists for ``file_paths``.

        Paths are relative to the builder's root. Duplicates are processed
        once, at their first position.
        """
        start = time.monotonic()
        paths = list(dict.fromkeys(file_paths))
        if len(paths) != len(file_paths):
            log.debug("duplicate_paths_ignored", count=len(file_paths) - len(paths))

        facts = [f for f in self.extract_files(paths) if f.is_supported]
        stats = BuildStats(
            files_processed=len(facts),
            files_unsupported=len(paths) - len(facts),
            files_failed=sum(1 for f in facts if f.error is not None),
        )

        raw_scores: dict[str, dict[str, float]] = {}
        for file_facts in facts:
            context = ScoringContext(
                depth=path_depth(file_facts.file_path),
                line_count=file_facts.line_count,
                definition_count=len(file_facts.definitions),
            )
            raw_scores[file_facts.file_path] = {
                token: score_definition(file_facts.file_path, token, context, self.config.scoring)
                for token in file_facts.definitions
            }
            stats.definitions += len(file_facts.definitions)
            stats.references += len(file_facts.references)

        definers = select_canonical_definers(raw_scores)
        token_callers, stats.references_dropped = attribute_callers(raw_scores, facts, definers)
        token_scores = report_scores(raw_scores, count_external_calls(facts), self.config.scoring)

        stats.duration_ms = int((time.monotonic() - start) * 1000)
        log.debug("token_scores_computed", root=str(self.repo_root), **stats.to_dict())

        return FileTokenScores(
            token_scores=token_scores,
            token_callers=token_callers,
            stats=stats,
        )

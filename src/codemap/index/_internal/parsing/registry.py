"""Grammar registry: lazy, memoized grammar + tag-query loading.

The registry resolves a file path to a :class:`LanguageProfile` (loaded
grammar plus compiled tag query). Loading happens on first use of a
language and is guarded by a per-language lock, so concurrent workers
hitting the same language compile it once.

A failed load (missing grammar package, incompatible grammar ABI, tag query
that doesn't compile) is logged once and remembered for the lifetime of the
registry; later lookups for that language return ``None`` without retrying.

Usage::

    registry = GrammarRegistry.get()
    profile = registry.resolve("src/app.ts")
    if profile is not None:
        ...
"""

from __future__ import annotations

import importlib
import threading
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Any

import tree_sitter
from tree_sitter import Query as _TSQuery
from tree_sitter import QueryError as _TSQueryError

from codemap.core.errors import GrammarError
from codemap.core.logging import get_logger
from codemap.index._internal.parsing.packs import LANGUAGE_PACKS, LanguagePack
from codemap.index.models import Language

log = get_logger(__name__)


@dataclass(frozen=True)
class LanguageProfile:
    """A loaded language: static pack plus grammar and compiled tag query."""

    pack: LanguagePack
    ts_language: Any  # tree_sitter.Language
    query: Any  # tree_sitter.Query

    @property
    def language(self) -> Language:
        return self.pack.language


def load_grammar(pack: LanguagePack) -> Any:
    """Import a grammar module and wrap it in a ``tree_sitter.Language``.

    Raises:
        GrammarError: If the module is missing or the grammar is unusable.
    """
    func_name = pack.language_func or "language"
    try:
        mod = importlib.import_module(pack.grammar_module)
        lang_fn = getattr(mod, func_name)
        return tree_sitter.Language(lang_fn())
    except (ImportError, AttributeError, TypeError, ValueError) as err:
        raise GrammarError.load_failed(pack.language.value, str(err)) from err


def compile_query(pack: LanguagePack, ts_language: Any) -> Any:
    """Compile a pack's tag query against a loaded grammar.

    Raises:
        GrammarError: If the query does not compile for this grammar.
    """
    try:
        return _TSQuery(ts_language, pack.tag_query)
    except (_TSQueryError, ValueError, SyntaxError, NameError) as err:
        raise GrammarError.query_compile_failed(pack.language.value, str(err)) from err


class GrammarRegistry:
    """Loads and caches one :class:`LanguageProfile` per language.

    Constructible fresh (tests pass their own packs); :meth:`get` returns the
    process-wide instance shared by every scoring call.
    """

    _instance: GrammarRegistry | None = None
    _instance_lock = threading.Lock()

    def __init__(self, packs: Mapping[Language, LanguagePack] | None = None) -> None:
        self._packs: dict[Language, LanguagePack] = dict(
            LANGUAGE_PACKS if packs is None else packs
        )
        self._ext_to_language: dict[str, Language] = {
            ext: lang for lang, pack in self._packs.items() for ext in pack.extensions
        }
        self._profiles: dict[Language, LanguageProfile] = {}
        self._failures: dict[Language, GrammarError] = {}
        self._locks: dict[Language, threading.Lock] = {
            lang: threading.Lock() for lang in self._packs
        }

    @classmethod
    def get(cls) -> GrammarRegistry:
        """Return the process-wide registry."""
        with cls._instance_lock:
            if cls._instance is None:
                cls._instance = cls()
            return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Discard the process-wide registry (mainly for testing)."""
        with cls._instance_lock:
            cls._instance = None

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def language_for(self, file_path: str) -> Language | None:
        """Map a path to its registered language by final suffix."""
        return self._ext_to_language.get(_suffix(file_path))

    def resolve(self, file_path: str) -> LanguageProfile | None:
        """Resolve a path to a loaded profile.

        Returns ``None`` for unregistered extensions and for languages whose
        grammar or query failed to load. Neither case raises.
        """
        language = self.language_for(file_path)
        if language is None:
            return None
        return self.profile_for(language)

    def profile_for(self, language: Language) -> LanguageProfile | None:
        """Load (once) and return the profile for a language."""
        profile = self._profiles.get(language)
        if profile is not None:
            return profile
        if language in self._failures or language not in self._packs:
            return None

        with self._locks[language]:
            # Another worker may have finished while we waited
            profile = self._profiles.get(language)
            if profile is not None:
                return profile
            if language in self._failures:
                return None

            pack = self._packs[language]
            try:
                ts_language = load_grammar(pack)
                query = compile_query(pack, ts_language)
            except GrammarError as err:
                self._failures[language] = err
                log.warning(
                    "grammar_unavailable",
                    language=language.value,
                    error=err.error_name,
                    reason=err.details.get("reason"),
                )
                return None

            profile = LanguageProfile(pack=pack, ts_language=ts_language, query=query)
            self._profiles[language] = profile
            log.debug("grammar_loaded", language=language.value)
            return profile

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def languages(self) -> list[LanguagePack]:
        """Registered packs, in table order."""
        return list(self._packs.values())

    def failed_languages(self) -> dict[Language, GrammarError]:
        """Languages permanently marked unsupported, with the cached error."""
        return dict(self._failures)

    def is_loaded(self, language: Language) -> bool:
        return language in self._profiles


def _suffix(file_path: str) -> str:
    return PurePosixPath(file_path.replace("\\", "/")).suffix


def resolve_language(file_path: str) -> LanguageProfile | None:
    """Resolve a path against the process-wide registry."""
    return GrammarRegistry.get().resolve(file_path)

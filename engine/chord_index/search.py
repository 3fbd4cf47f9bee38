"""
engine/chord_index/search.py — Chord search and typeahead suggestions.

search() collects candidates in five ordered stages, each one running only
while fewer than ``limit`` chords have been found:

    1. Exact keys: the normalised query and its predictive rewrite
    2. Enharmonic spellings of the query's root
    3. Prefix buckets for the normalised query and its predictive rewrite
    4. Quality synonyms and common suffixes (exact key, then prefix bucket)
    5. Substring scan over display names and search tokens

Stage order is the relevance prior (exact > enharmonic > prefix > expansion >
substring). Candidates are de-duplicated by chord id, then sorted once by
rank_results().

suggest() puts synthesized note/typing suggestions in front of real search
results for autocomplete.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from engine.chord_index.expansion import (
    ENHARMONIC_ROOTS,
    apply_predictive_patterns,
    enharmonic_queries,
    expand_query,
    normalize_key,
    quality_priority,
)
from engine.chord_index.index import ChordIndex
from engine.chord_index.models import ChordDefinition, SearchSuggestion
from engine.config import DEFAULT_SEARCH_CONFIG, SearchConfig

logger = logging.getLogger(__name__)

_SINGLE_ROOT = re.compile(r"^[a-g]$")
_SHARP_TYPING = re.compile(r"^([a-g])s(h|ha|har|harp)?$")
_FLAT_TYPING = re.compile(r"^([a-g])f(l|la|lat)?$")


class _Collector:
    """Ordered, id-deduplicated result list with a hard cap."""

    def __init__(self, limit: int) -> None:
        self.limit = limit
        self.results: list[ChordDefinition] = []
        self._seen: set[str] = set()

    @property
    def full(self) -> bool:
        return len(self.results) >= self.limit

    def add(self, chord: ChordDefinition | None) -> None:
        if chord is None or self.full or chord.id in self._seen:
            return
        self.results.append(chord)
        self._seen.add(chord.id)

    def extend(self, chords: Iterable[ChordDefinition]) -> None:
        for chord in chords:
            if self.full:
                break
            self.add(chord)

    def seen(self, chord: ChordDefinition) -> bool:
        return chord.id in self._seen


def _matches_substring(chord: ChordDefinition, query: str) -> bool:
    if query in normalize_key(chord.display_name):
        return True
    return any(query in normalize_key(token) for token in chord.search_tokens)


def rank_results(results: Iterable[ChordDefinition], query: str) -> tuple[ChordDefinition, ...]:
    """Sort chords for display against a normalised query.

    Order: exact display-name match, then names starting with the query,
    then shorter names, then common qualities first, then alphabetical.
    """

    def sort_key(chord: ChordDefinition) -> tuple[int, int, int, int, str]:
        name = normalize_key(chord.display_name)
        return (
            0 if name == query else 1,
            0 if name.startswith(query) else 1,
            len(name),
            quality_priority(chord.quality),
            name,
        )

    return tuple(sorted(results, key=sort_key))


def search(
    index: ChordIndex,
    query: str,
    limit: int | None = None,
) -> tuple[ChordDefinition, ...]:
    """Resolve free text to ranked chords.

    Args:
        index: Built chord index
        query: User text, complete or partial ("c#m7", "gsh", "B flat")
        limit: Maximum number of results (default ``SearchConfig.default_limit``)

    Returns:
        Ranked chords, at most *limit*. Empty for a blank query or an empty
        index.
    """
    if limit is None:
        limit = DEFAULT_SEARCH_CONFIG.default_limit
    normalized = normalize_key(query)
    if not normalized or limit <= 0:
        return ()

    predicted = apply_predictive_patterns(query)
    found = _Collector(limit)

    # 1. exact
    found.add(index.aliases.get(normalized))
    found.add(index.aliases.get(predicted))

    # 2. enharmonic
    for key in enharmonic_queries(normalized):
        found.add(index.aliases.get(key))
    if found.full:
        return rank_results(found.results, normalized)

    # 3. prefix
    found.extend(index.prefix_matches(normalized))
    found.extend(index.prefix_matches(predicted))

    # 4. expansions
    for expansion in expand_query(normalized):
        if found.full:
            break
        found.add(index.aliases.get(expansion))
        found.extend(index.prefix_matches(expansion))

    # 5. substring
    for chord in index.chords:
        if found.full:
            break
        if not found.seen(chord) and _matches_substring(chord, normalized):
            found.add(chord)

    logger.debug("search %r (predicted %r): %d results", normalized, predicted, len(found.results))
    return rank_results(found.results, normalized)


def _root_display(root: str) -> str:
    return root[:1].upper() + root[1:]


def suggest(
    index: ChordIndex,
    query: str,
    limit: int | None = None,
) -> tuple[SearchSuggestion, ...]:
    """Autocomplete suggestions for partial input.

    Short inputs that look like a note or partial accidental typing get
    synthesized suggestions whether or not the dictionary has the chord:

        "g"   → G, Gm, G7, G#, Gb
        "gsh" → G#, G#m, G#7
        "cb"  → b  ("Cb = B (enharmonic)")

    Real search results fill the rest, hinted with their notes. Texts are
    unique case-insensitively.

    Args:
        index: Built chord index
        query: Partial user text
        limit: Maximum suggestions (default ``SearchConfig.suggestion_limit``)
    """
    if limit is None:
        limit = DEFAULT_SEARCH_CONFIG.suggestion_limit
    q = normalize_key(query)
    if not q or limit <= 0:
        return ()

    suggestions: list[SearchSuggestion] = []
    seen: set[str] = set()

    def add(text: str, hint: str) -> None:
        if len(suggestions) >= limit or text.lower() in seen:
            return
        seen.add(text.lower())
        suggestions.append(SearchSuggestion(text=text, hint=hint))

    if _SINGLE_ROOT.match(q):
        note = q.upper()
        add(note, f"{note} major triad")
        add(f"{note}m", f"{note} minor triad")
        add(f"{note}7", f"{note} dominant 7th")
        add(f"{note}#", f"{note} sharp")
        add(f"{note}b", f"{note} flat")

    sharp = _SHARP_TYPING.match(q)
    if sharp is not None:
        root = sharp.group(1).upper()
        add(f"{root}#", f"{root} sharp")
        add(f"{root}#m", f"{root} sharp minor")
        add(f"{root}#7", f"{root} sharp dominant 7")

    flat = _FLAT_TYPING.match(q)
    if flat is not None:
        root = flat.group(1).upper()
        add(f"{root}b", f"{root} flat")
        add(f"{root}bm", f"{root} flat minor")
        add(f"{root}b7", f"{root} flat dominant 7")

    if len(q) >= 2:
        typed_root, quality = q[:2], q[2:]
        enharmonic = ENHARMONIC_ROOTS.get(typed_root)
        if enharmonic is not None:
            add(
                enharmonic + quality,
                f"{_root_display(typed_root)} = {_root_display(enharmonic)} (enharmonic)",
            )

    remaining = limit - len(suggestions)
    if remaining > 0:
        for chord in search(index, q, limit=remaining):
            add(chord.display_name, " - ".join(chord.notes))

    return tuple(suggestions)


class ChordSearch:
    """A chord index bound to its search limits.

    This is the handle the presentation layer holds: built once at startup
    and passed to callers, never a module-level global.
    """

    def __init__(self, index: ChordIndex, config: SearchConfig = DEFAULT_SEARCH_CONFIG) -> None:
        self._index = index
        self._config = config

    @property
    def index(self) -> ChordIndex:
        return self._index

    @property
    def config(self) -> SearchConfig:
        return self._config

    def search(self, query: str, limit: int | None = None) -> tuple[ChordDefinition, ...]:
        return search(
            self._index,
            query,
            self._config.default_limit if limit is None else limit,
        )

    def suggest(self, query: str, limit: int | None = None) -> tuple[SearchSuggestion, ...]:
        return suggest(
            self._index,
            query,
            self._config.suggestion_limit if limit is None else limit,
        )

    def find_by_name(self, name: str) -> ChordDefinition | None:
        return self._index.find_by_name(name)

    def find_by_root(self, root: str) -> tuple[ChordDefinition, ...]:
        return self._index.find_by_root(root)

    def get_categories(self) -> list[str]:
        return self._index.get_categories()

    def get_by_category(self, category: str) -> tuple[ChordDefinition, ...]:
        return self._index.get_by_category(category)

    def all(self) -> tuple[ChordDefinition, ...]:
        return self._index.all()

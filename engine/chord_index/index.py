"""
engine/chord_index/index.py — Immutable chord dictionary index.

Two explicit structures back every lookup:

    AliasTable   exact ``normalized key → ChordDefinition``; when two chords
                 normalise to the same key the later record wins
    PrefixIndex  ``prefix → chords`` for incremental typing; each bucket keeps
                 first-insertion order and holds a chord id at most once

ChordIndex.build() fills both in one pass and freezes them. After that the
index is never mutated and can be shared read-only by any number of callers.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType

from engine.chord_index.expansion import (
    ENHARMONIC_ROOTS,
    apply_predictive_patterns,
    enharmonic_queries,
    enharmonic_roots,
    normalize_key,
)
from engine.chord_index.models import ChordDefinition

logger = logging.getLogger(__name__)


class AliasTable:
    """Exact-match table from normalised key to chord."""

    def __init__(self) -> None:
        self._entries: dict[str, ChordDefinition] = {}

    def add(self, key: str, chord: ChordDefinition) -> None:
        """Register *chord* under the normalised *key*. Empty keys are ignored."""
        normalized = normalize_key(key)
        if normalized:
            self._entries[normalized] = chord

    def freeze(self) -> Mapping[str, ChordDefinition]:
        return MappingProxyType(dict(self._entries))


class PrefixIndex:
    """Every prefix of every normalised key, mapped to the chords carrying it."""

    def __init__(self) -> None:
        self._buckets: dict[str, dict[str, ChordDefinition]] = {}

    def add(self, key: str, chord: ChordDefinition) -> None:
        """Register *chord* under each prefix of the normalised *key*."""
        normalized = normalize_key(key)
        for end in range(1, len(normalized) + 1):
            bucket = self._buckets.setdefault(normalized[:end], {})
            bucket.setdefault(chord.id, chord)

    def freeze(self) -> Mapping[str, tuple[ChordDefinition, ...]]:
        return MappingProxyType(
            {prefix: tuple(bucket.values()) for prefix, bucket in self._buckets.items()}
        )


@dataclass(frozen=True, eq=False)
class ChordIndex:
    """Read-only view over a chord dictionary snapshot.

    Build with ``ChordIndex.build(records)``; the constructor takes the
    already-frozen structures. Indexes compare and hash by identity.
    """

    chords: tuple[ChordDefinition, ...]
    aliases: Mapping[str, ChordDefinition]
    prefixes: Mapping[str, tuple[ChordDefinition, ...]]

    @classmethod
    def build(cls, records: Iterable[ChordDefinition]) -> ChordIndex:
        """Index every record by name, alias, search token, root and enharmonic root.

        Args:
            records: Validated dictionary records, in dictionary order

        Returns:
            A frozen index. An empty *records* gives an index that answers
            every lookup with an empty result.
        """
        chords = tuple(records)
        alias_table = AliasTable()
        prefix_index = PrefixIndex()

        for chord in chords:
            # dict preserves order and drops repeated keys
            keys = dict.fromkeys((chord.display_name, *chord.aliases, *chord.search_tokens, chord.root))
            for key in keys:
                alias_table.add(key, chord)
                prefix_index.add(key, chord)
            for key in _enharmonic_keys(chord):
                alias_table.add(key, chord)
                prefix_index.add(key, chord)

        index = cls(chords=chords, aliases=alias_table.freeze(), prefixes=prefix_index.freeze())
        logger.info(
            "Chord index built: %d chords, %d alias keys, %d prefixes",
            len(chords),
            len(index.aliases),
            len(index.prefixes),
        )
        return index

    # -- Filter API ---------------------------------------------------------

    def all(self) -> tuple[ChordDefinition, ...]:
        """Every chord, in dictionary order."""
        return self.chords

    def __len__(self) -> int:
        return len(self.chords)

    def find_by_alias(self, query: str) -> ChordDefinition | None:
        """Exact lookup of the normalised *query*."""
        return self.aliases.get(normalize_key(query))

    def find_by_name(self, name: str) -> ChordDefinition | None:
        """Best single match for a chord name.

        Tries the exact key, then the predictive rewrite ("gsm7" style
        typing), then enharmonic spellings of the root.
        """
        exact = self.find_by_alias(name)
        if exact is not None:
            return exact

        predicted = apply_predictive_patterns(name)
        if predicted != normalize_key(name):
            match = self.aliases.get(predicted)
            if match is not None:
                return match

        for key in enharmonic_queries(normalize_key(name)):
            match = self.aliases.get(key)
            if match is not None:
                return match
        return None

    def find_by_root(self, root: str) -> tuple[ChordDefinition, ...]:
        """Chords whose root is *root* or its enharmonic counterpart."""
        wanted = normalize_key(root)
        counterpart = ENHARMONIC_ROOTS.get(wanted)
        return tuple(c for c in self.chords if normalize_key(c.root) in (wanted, counterpart))

    def get_categories(self) -> list[str]:
        """Sorted, distinct, non-empty category names."""
        return sorted({c.category for c in self.chords if c.category})

    def get_by_category(self, category: str) -> tuple[ChordDefinition, ...]:
        return tuple(c for c in self.chords if c.category == category)

    def prefix_matches(self, prefix: str) -> Sequence[ChordDefinition]:
        """Chords registered under an already-normalised *prefix*."""
        return self.prefixes.get(prefix, ())


def _enharmonic_keys(chord: ChordDefinition) -> list[str]:
    """Keys spelling *chord*'s display name with each enharmonic root.

    The quality part is whatever follows the root in the lowercased display
    name, giving "dbm7" for a "C#m7" record.
    """
    root = normalize_key(chord.root)
    display = chord.display_name.lower()
    quality = display[len(root):] if len(display) > len(root) else ""
    return [alt + quality for alt in enharmonic_roots(root)]

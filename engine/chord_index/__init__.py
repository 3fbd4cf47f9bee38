"""
engine/chord_index/ — Chord dictionary index and search.

Exports:
    Models:    ChordDefinition, SearchSuggestion
    Index:     ChordIndex, AliasTable, PrefixIndex
    Search:    ChordSearch, search, suggest, rank_results
    Expansion: normalize_key, apply_predictive_patterns, enharmonic_queries,
               expand_query
"""

from engine.chord_index.expansion import (
    apply_predictive_patterns,
    enharmonic_queries,
    expand_query,
    normalize_key,
)
from engine.chord_index.index import AliasTable, ChordIndex, PrefixIndex
from engine.chord_index.models import ChordDefinition, SearchSuggestion
from engine.chord_index.search import ChordSearch, rank_results, search, suggest

__all__ = [
    # Models
    "ChordDefinition",
    "SearchSuggestion",
    # Index
    "ChordIndex",
    "AliasTable",
    "PrefixIndex",
    # Search
    "ChordSearch",
    "search",
    "suggest",
    "rank_results",
    # Expansion
    "normalize_key",
    "apply_predictive_patterns",
    "enharmonic_queries",
    "expand_query",
]

"""
Tests for engine/chord_index/search.py — staged search, ranking, suggestions.

Validates:
    - search: exact, enharmonic, prefix, expansion and substring stages,
      limit, blank queries, empty index
    - enharmonic and predictive equivalence ("c#" ~ "db", "gs" ~ "g#")
    - rank_results: exact > starts-with > shorter > quality priority > name
    - suggest: note variations, typing patterns, enharmonic hint, dedup
    - ChordSearch facade and SearchConfig limits
"""

import pytest

from engine.chord_index import ChordIndex, ChordSearch, SearchSuggestion, rank_results, search, suggest
from engine.config import SearchConfig


def _ids(chords) -> list[str]:
    return [c.id for c in chords]


# ---------------------------------------------------------------------------
# search
# ---------------------------------------------------------------------------


class TestSearch:
    def test_exact_display_name_first(self, chord_index):
        assert search(chord_index, "C")[0].id == "c_maj"

    def test_alias(self, chord_index):
        assert search(chord_index, "C minor")[0].id == "c_min"

    def test_enharmonic_overlap(self, chord_index):
        sharp = search(chord_index, "c#")
        flat = search(chord_index, "db")
        assert _ids(sharp) == _ids(flat) == ["cs_maj", "cs_min"]

    def test_predictive_typing(self, chord_index):
        assert _ids(search(chord_index, "gs")) == _ids(search(chord_index, "g#"))
        assert _ids(search(chord_index, "gsharp")) == ["gs_maj", "gs_min"]

    def test_unicode_query(self, chord_index):
        assert search(chord_index, "C♯")[0].id == "cs_maj"

    def test_theoretical_flat_finds_natural(self, chord_index):
        assert _ids(search(chord_index, "cb")) == ["b_maj", "b_dim"]

    def test_prefix_incremental(self, chord_index):
        assert "c_sus4" in _ids(search(chord_index, "csu"))

    def test_substring_fallback(self, chord_index):
        assert _ids(search(chord_index, "pended")) == ["c_sus4"]

    def test_limit(self, chord_index):
        assert len(search(chord_index, "c", limit=2)) == 2

    def test_limit_keeps_highest_stage(self, chord_index):
        assert _ids(search(chord_index, "db", limit=1)) == ["cs_maj"]

    def test_zero_limit(self, chord_index):
        assert search(chord_index, "c", limit=0) == ()

    @pytest.mark.parametrize("query", ["", "   "])
    def test_blank_query(self, chord_index, query):
        assert search(chord_index, query) == ()

    def test_no_match(self, chord_index):
        assert search(chord_index, "xyz") == ()

    def test_empty_index(self):
        assert search(ChordIndex.build([]), "c") == ()

    def test_results_unique(self, chord_index):
        ids = _ids(search(chord_index, "c"))
        assert len(ids) == len(set(ids))


# ---------------------------------------------------------------------------
# rank_results
# ---------------------------------------------------------------------------


class TestRankResults:
    def test_order(self, chord_records):
        by_id = {c.id: c for c in chord_records}
        shuffled = [by_id["c_sus4"], by_id["c_7"], by_id["cs_maj"], by_id["c_min"], by_id["c_maj"]]
        ranked = rank_results(shuffled, "c")
        assert _ids(ranked) == ["c_maj", "cs_maj", "c_min", "c_7", "c_sus4"]

    def test_non_prefix_sorted_last(self, chord_records):
        by_id = {c.id: c for c in chord_records}
        ranked = rank_results([by_id["b_maj"], by_id["c_min"]], "c")
        assert _ids(ranked) == ["c_min", "b_maj"]


# ---------------------------------------------------------------------------
# suggest
# ---------------------------------------------------------------------------


class TestSuggest:
    def test_single_letter_variations(self, chord_index):
        suggestions = suggest(chord_index, "g")
        assert suggestions[:5] == (
            SearchSuggestion(text="G", hint="G major triad"),
            SearchSuggestion(text="Gm", hint="G minor triad"),
            SearchSuggestion(text="G7", hint="G dominant 7th"),
            SearchSuggestion(text="G#", hint="G sharp"),
            SearchSuggestion(text="Gb", hint="G flat"),
        )

    def test_search_results_fill_and_dedup(self, chord_index):
        texts = [s.text for s in suggest(chord_index, "g")]
        assert texts == ["G", "Gm", "G7", "G#", "Gb", "G#m"]

    def test_dictionary_hint_is_notes(self, chord_index):
        last = suggest(chord_index, "g")[-1]
        assert last.hint == "G# - B - D#"

    def test_sharp_typing(self, chord_index):
        suggestions = suggest(chord_index, "gsh")
        assert [s.text for s in suggestions] == ["G#", "G#m", "G#7"]
        assert suggestions[1].hint == "G sharp minor"

    def test_flat_typing(self, chord_index):
        suggestions = suggest(chord_index, "ef")
        assert [s.text for s in suggestions][:3] == ["Eb", "Ebm", "Eb7"]
        assert suggestions[2].hint == "E flat dominant 7"

    def test_enharmonic_hint(self, chord_index):
        suggestions = suggest(chord_index, "cb")
        assert suggestions[0] == SearchSuggestion(text="b", hint="Cb = B (enharmonic)")
        assert [s.text for s in suggestions] == ["b", "Bdim"]

    def test_enharmonic_hint_keeps_quality(self, chord_index):
        first = suggest(chord_index, "dbm")[0]
        assert first == SearchSuggestion(text="c#m", hint="Db = C# (enharmonic)")

    def test_only_search_results(self, chord_index):
        assert suggest(chord_index, "Csus") == (SearchSuggestion(text="Csus4", hint="C - F - G"),)

    def test_limit(self, chord_index):
        assert [s.text for s in suggest(chord_index, "g", limit=3)] == ["G", "Gm", "G7"]

    def test_blank(self, chord_index):
        assert suggest(chord_index, " ") == ()


# ---------------------------------------------------------------------------
# ChordSearch facade
# ---------------------------------------------------------------------------


class TestChordSearch:
    def test_uses_config_limits(self, chord_index):
        facade = ChordSearch(chord_index, SearchConfig(default_limit=1, suggestion_limit=2))
        assert len(facade.search("c")) == 1
        assert len(facade.suggest("g")) == 2

    def test_explicit_limit_overrides_config(self, chord_index):
        facade = ChordSearch(chord_index, SearchConfig(default_limit=1))
        assert len(facade.search("c", limit=3)) == 3

    def test_filter_api_passthrough(self, chord_search, chord_index):
        assert chord_search.index is chord_index
        assert chord_search.all() == chord_index.all()
        assert chord_search.get_categories() == ["seventh", "sus", "triad"]
        assert _ids(chord_search.get_by_category("seventh")) == ["c_7"]
        assert _ids(chord_search.find_by_root("Ab")) == ["gs_maj", "gs_min"]
        assert chord_search.find_by_name("Db").id == "cs_maj"

    def test_repeatable(self, chord_search):
        assert chord_search.search("c") == chord_search.search("c")

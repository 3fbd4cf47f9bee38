"""
Tests for engine/music_theory/query.py and qualities.py.

Validates:
    - normalize_user_chord_query: punctuation, spacing, word forms, unicode
    - should_show_sounds_like: double accidental + differing alternative
    - classify_quality: dim/aug/minor/major precedence
"""

import pytest

from engine.music_theory.qualities import TriadQuality, classify_quality
from engine.music_theory.query import normalize_user_chord_query, should_show_sounds_like

# ---------------------------------------------------------------------------
# normalize_user_chord_query
# ---------------------------------------------------------------------------


class TestNormalizeUserChordQuery:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("C - major", "cmaj"),
            ("g flat", "gb"),
            ("F♯ minor", "f#m"),
            ("c sharp minor", "c#m"),
            ("Bb_diminished", "bbdim"),
            ("E augmented", "e+"),
            ("asharp7", "a#7"),
        ],
    )
    def test_rewrites(self, text, expected):
        assert normalize_user_chord_query(text) == expected

    def test_strict_spellings_untouched(self):
        assert normalize_user_chord_query("E#") == "e#"
        assert normalize_user_chord_query("Cb") == "cb"

    def test_idempotent(self):
        once = normalize_user_chord_query("D flat major 7")
        assert normalize_user_chord_query(once) == once


# ---------------------------------------------------------------------------
# should_show_sounds_like
# ---------------------------------------------------------------------------


class TestShouldShowSoundsLike:
    def test_double_sharp_with_alternative(self):
        assert should_show_sounds_like(["F##", "A#", "C#"], ["G", "A#", "C#"])

    def test_no_double_accidental(self):
        assert not should_show_sounds_like(["C#", "E#", "G#"], ["Db", "F", "Ab"])

    def test_missing_alternative(self):
        assert not should_show_sounds_like(["F##", "A#", "C#"], None)
        assert not should_show_sounds_like(["F##", "A#", "C#"], [])

    def test_identical_alternative(self):
        assert not should_show_sounds_like(["Ebb", "G"], ["Ebb", "G"])


# ---------------------------------------------------------------------------
# classify_quality
# ---------------------------------------------------------------------------


class TestClassifyQuality:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("", TriadQuality.MAJOR),
            ("maj7", TriadQuality.MAJOR),
            ("7", TriadQuality.MAJOR),
            ("m", TriadQuality.MINOR),
            ("m7", TriadQuality.MINOR),
            ("Minor", TriadQuality.MINOR),
            ("dim", TriadQuality.DIMINISHED),
            ("°", TriadQuality.DIMINISHED),
            ("m7b5 dim", TriadQuality.DIMINISHED),
            ("aug", TriadQuality.AUGMENTED),
            ("+", TriadQuality.AUGMENTED),
        ],
    )
    def test_classification(self, text, expected):
        assert classify_quality(text) is expected

    def test_intervals(self):
        assert (TriadQuality.DIMINISHED.third, TriadQuality.DIMINISHED.fifth) == (3, 6)
        assert (TriadQuality.AUGMENTED.third, TriadQuality.AUGMENTED.fifth) == (4, 8)

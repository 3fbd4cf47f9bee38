"""
Tests for engine/music_theory/transpose.py — chord parsing and transposition.

Validates:
    - parse_chord_symbol: partial accidental typing, word forms, non-chords
    - transpose_progression: interval shift, sharp/flat target spelling,
      pass-through tokens, dictionary enrichment via a lookup callable
"""

import pytest

from engine.music_theory.transpose import parse_chord_symbol, transpose_progression
from engine.music_theory.types import TransposedChord


def _names(chords: tuple[TransposedChord, ...]) -> list[str]:
    return [c.name for c in chords]


# ---------------------------------------------------------------------------
# parse_chord_symbol
# ---------------------------------------------------------------------------


class TestParseChordSymbol:
    @pytest.mark.parametrize(
        ("token", "expected"),
        [
            ("F#m7", ("F#", "m7")),
            ("Bbm", ("Bb", "m")),
            ("gsharpmaj7", ("G#", "maj7")),
            ("gsharpm7", ("G#", "m7")),
            ("gsham", ("G#", "m")),
            ("bflmaj7", ("Bb", "maj7")),
            ("eflatm", ("Eb", "m")),
            ("ebm", ("Eb", "m")),
            ("dflat", ("Db", "")),
            ("Csus4", ("C", "sus4")),
            ("Aminor", ("A", "m")),
            ("C♯dim", ("C#", "dim")),
        ],
    )
    def test_parsing(self, token, expected):
        assert parse_chord_symbol(token) == expected

    @pytest.mark.parametrize("token", ["|", "N.C.", "x7", ""])
    def test_non_chords(self, token):
        assert parse_chord_symbol(token) is None


# ---------------------------------------------------------------------------
# transpose_progression
# ---------------------------------------------------------------------------


class TestTransposeProgression:
    def test_up_a_whole_step(self):
        assert _names(transpose_progression("Am F C G", "C", "D")) == ["Bm", "G", "D", "A"]

    def test_flat_target_key(self):
        assert _names(transpose_progression("C G Am F", "C", "Eb")) == ["Eb", "Bb", "Cm", "Ab"]

    def test_sharp_target_key(self):
        assert _names(transpose_progression("C F", "C", "E")) == ["E", "A"]

    def test_quality_preserved(self):
        assert _names(transpose_progression("Cmaj7 Dm7 G7 Csus4", "C", "D")) == [
            "Dmaj7",
            "Em7",
            "A7",
            "Dsus4",
        ]

    def test_non_chord_tokens_pass_through(self):
        result = transpose_progression("C | N.C. G", "C", "D")
        assert _names(result) == ["D", "|", "N.C.", "A"]
        assert result[1].notes == ()

    def test_spelled_out_accidentals(self):
        assert _names(transpose_progression("dflat gsharpm7 bflatmaj7", "C", "D")) == [
            "D#",
            "A#m7",
            "Cmaj7",
        ]

    def test_same_key_is_identity(self):
        assert _names(transpose_progression("Am F", "A", "A")) == ["Am", "F"]

    def test_empty_or_invalid_input(self):
        assert transpose_progression("", "C", "D") == ()
        assert transpose_progression("C G", "H", "D") == ()
        assert transpose_progression("C G", "C", "") == ()

    def test_without_lookup_has_no_notes(self):
        (chord,) = transpose_progression("G", "C", "D")
        assert chord == TransposedChord("A")

    def test_lookup_attaches_dictionary_spelling(self, chord_index):
        (chord,) = transpose_progression("G", "C", "Db", lookup=chord_index.find_by_name)
        assert chord.name == "Ab"
        assert chord.notes == ("G#", "B#", "D#")
        assert chord.notes_enharmonic_alt == ("Ab", "C", "Eb")

    def test_lookup_miss_keeps_name(self, chord_index):
        (chord,) = transpose_progression("Em", "C", "D", lookup=chord_index.find_by_name)
        assert chord == TransposedChord("F#m")

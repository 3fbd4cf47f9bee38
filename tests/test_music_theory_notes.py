"""
Tests for engine/music_theory/notes.py — pitch-class arithmetic and spelling.

Validates:
    - pitch_class: naturals, single/double accidentals, unicode, invalid text
    - pitch_class_to_note: sharp/flat tables, modulo reduction, round trip
    - interval: ascending distance, invalid input
    - spell_note / alter_same_letter: strict same-letter spelling
    - has_double_accidental / find_by_pitch_class
"""

import pytest

from engine.music_theory.notes import (
    LETTER_VALUES,
    NATURAL_PITCH_CLASSES,
    alter_same_letter,
    find_by_pitch_class,
    has_double_accidental,
    interval,
    normalize_accidentals,
    parse_note,
    pitch_class,
    pitch_class_to_note,
    spell_note,
)

# ---------------------------------------------------------------------------
# pitch_class
# ---------------------------------------------------------------------------


class TestPitchClass:
    def test_naturals(self):
        for letter, value in LETTER_VALUES.items():
            assert pitch_class(letter) == value

    def test_lowercase_letter(self):
        assert pitch_class("f#") == 6

    @pytest.mark.parametrize(
        ("spelling", "expected"),
        [
            ("F#", 6),
            ("Bb", 10),
            ("F##", 7),
            ("Dbb", 0),
            ("E#", 5),
            ("Cb", 11),
            ("B#", 0),
        ],
    )
    def test_accidentals(self, spelling, expected):
        assert pitch_class(spelling) == expected

    @pytest.mark.parametrize(
        ("a", "b"),
        [("C#", "Db"), ("F#", "Gb"), ("B", "Cb"), ("E", "Fb")],
    )
    def test_enharmonic_pairs_share_pitch_class(self, a, b):
        assert pitch_class(a) == pitch_class(b)

    def test_unicode_accidentals(self):
        assert pitch_class("C♯") == 1
        assert pitch_class("B♭") == 10

    def test_mojibake_accidentals(self):
        assert normalize_accidentals("Câ™¯") == "C#"
        assert pitch_class("Eâ™­") == 3

    @pytest.mark.parametrize("text", ["", "H", "X#", "C#x", "#", "  "])
    def test_invalid_returns_none(self, text):
        assert pitch_class(text) is None

    def test_parse_note_offset(self):
        assert parse_note("f##") == ("F", 2)
        assert parse_note("Bbb") == ("B", -2)
        assert parse_note("Q") is None


# ---------------------------------------------------------------------------
# pitch_class_to_note
# ---------------------------------------------------------------------------


class TestPitchClassToNote:
    def test_sharps_by_default(self):
        assert pitch_class_to_note(6) == "F#"
        assert pitch_class_to_note(1) == "C#"

    def test_flats_when_preferred(self):
        assert pitch_class_to_note(6, prefer_flats=True) == "Gb"
        assert pitch_class_to_note(10, prefer_flats=True) == "Bb"

    def test_reduces_modulo_12(self):
        assert pitch_class_to_note(-1) == "B"
        assert pitch_class_to_note(14) == "D"

    def test_naturals_spell_identically(self):
        for pc in NATURAL_PITCH_CLASSES:
            assert pitch_class_to_note(pc, True) == pitch_class_to_note(pc, False)

    @pytest.mark.parametrize("spelling", ["C", "C#", "Db", "E#", "Fb", "F##", "Gbb", "B#"])
    @pytest.mark.parametrize("prefer_flats", [True, False])
    def test_round_trip_on_pitch_class(self, spelling, prefer_flats):
        pc = pitch_class(spelling)
        assert pitch_class(pitch_class_to_note(pc, prefer_flats)) == pc


# ---------------------------------------------------------------------------
# interval
# ---------------------------------------------------------------------------


class TestInterval:
    def test_ascending_fifth(self):
        assert interval("C", "G") == 7

    def test_wraps_around_octave(self):
        assert interval("G", "C") == 5

    def test_enharmonic_unison(self):
        assert interval("E#", "F") == 0

    def test_invalid_note(self):
        assert interval("C", "H") is None
        assert interval("", "C") is None


# ---------------------------------------------------------------------------
# Strict spelling helpers
# ---------------------------------------------------------------------------


class TestSpellNote:
    def test_single_accidental(self):
        assert spell_note("E", 5) == "E#"
        assert spell_note("C", 11) == "Cb"

    def test_double_accidental(self):
        assert spell_note("F", 7) == "F##"
        assert spell_note("E", 2) == "Ebb"

    def test_too_far_from_letter(self):
        assert spell_note("C", 6) is None

    def test_unknown_letter(self):
        assert spell_note("H", 0) is None


class TestAlterSameLetter:
    def test_raise_sharp_to_double_sharp(self):
        assert alter_same_letter("F#", 1) == "F##"

    def test_raise_flat_to_natural(self):
        assert alter_same_letter("Bb", 1) == "B"

    def test_unparseable_is_unchanged(self):
        assert alter_same_letter("??", 1) == "??"


class TestNoteCollections:
    def test_double_accidental_detection(self):
        assert has_double_accidental(["D#", "F##", "A#"])
        assert has_double_accidental(["Ebb"])
        assert not has_double_accidental(["Bb", "D", "F"])

    def test_find_by_pitch_class(self):
        assert find_by_pitch_class(["C", "E#", "G"], 5) == "E#"
        assert find_by_pitch_class(["C", "E", "G"], 1) is None

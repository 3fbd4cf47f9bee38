"""
engine/music_theory/notes.py — Pitch-class arithmetic and note spelling.

A note *spelling* is a letter A–G plus zero or more accidentals ("F#",
"Bb", "F##", "Dbb"). Every spelling maps to exactly one pitch class (0–11);
the reverse mapping depends on context and is never assumed unique.

Invalid note text never raises: parsing helpers return ``None`` and callers
treat it as "no result".

Exports:
    LETTERS                 the 7 natural letters in scale order
    LETTER_VALUES           letter → natural pitch class
    SHARP_NAMES/FLAT_NAMES  single-accidental spelling tables

    normalize_accidentals(text) → str
    parse_note(spelling) → (letter, offset) | None
    pitch_class(spelling) → int | None
    pitch_class_to_note(pc, prefer_flats) → str
    interval(a, b) → int | None
    spell_note(letter, pc) → str | None
    alter_same_letter(spelling, semitones) → str
    has_double_accidental(notes) → bool
    find_by_pitch_class(notes, pc) → str | None
"""

from __future__ import annotations

import re
from collections.abc import Iterable

# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------

LETTERS: tuple[str, ...] = ("C", "D", "E", "F", "G", "A", "B")

LETTER_VALUES: dict[str, int] = {
    "C": 0,
    "D": 2,
    "E": 4,
    "F": 5,
    "G": 7,
    "A": 9,
    "B": 11,
}

SHARP_NAMES: tuple[str, ...] = (
    "C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B",
)  # fmt: skip

FLAT_NAMES: tuple[str, ...] = (
    "C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B",
)  # fmt: skip

NATURAL_PITCH_CLASSES: frozenset[int] = frozenset(LETTER_VALUES.values())

# Unicode and mojibake accidental forms → ASCII. Mojibake variants appear when
# UTF-8 chord data has been decoded as Latin-1 somewhere upstream.
_ACCIDENTAL_SYMBOLS: tuple[tuple[str, str], ...] = (
    ("♯", "#"),
    ("♭", "b"),
    ("â™¯", "#"),
    ("â™­", "b"),
)

_NOTE_RE = re.compile(r"^([A-Ga-g])([#b]*)$")

_ACCIDENTAL_SUFFIX: dict[int, str] = {-2: "bb", -1: "b", 0: "", 1: "#", 2: "##"}


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def normalize_accidentals(text: str) -> str:
    """Trim and replace unicode accidental symbols with ASCII ``#``/``b``.

    Examples:
        >>> normalize_accidentals(" C♯ ")
        'C#'
        >>> normalize_accidentals("B♭")
        'Bb'
    """
    text = text.strip()
    for symbol, ascii_form in _ACCIDENTAL_SYMBOLS:
        text = text.replace(symbol, ascii_form)
    return text


def parse_note(spelling: str) -> tuple[str, int] | None:
    """Split a note spelling into (uppercase letter, signed accidental count).

    Args:
        spelling: Note text, e.g. "f##", "Bb", "C♯"

    Returns:
        ``("F", 2)``-style tuple, or None for empty or unrecognised text.
    """
    if not spelling:
        return None
    match = _NOTE_RE.match(normalize_accidentals(spelling))
    if match is None:
        return None
    accidentals = match.group(2)
    return match.group(1).upper(), accidentals.count("#") - accidentals.count("b")


def pitch_class(spelling: str) -> int | None:
    """Return the pitch class (0–11) of a note spelling.

    Args:
        spelling: Note text, e.g. "C", "F#", "Bb", "F##", "Cb"

    Returns:
        Pitch class integer, or None when the text is not a note.

    Examples:
        >>> pitch_class("F#")
        6
        >>> pitch_class("Cb")
        11
        >>> pitch_class("H") is None
        True
    """
    parsed = parse_note(spelling)
    if parsed is None:
        return None
    letter, offset = parsed
    return (LETTER_VALUES[letter] + offset) % 12


def pitch_class_to_note(pc: int, prefer_flats: bool = False) -> str:
    """Return the canonical single-accidental spelling of a pitch class.

    Natural pitch classes spell the same either way. Input is reduced
    modulo 12 first, so ``-1`` spells as "B".
    """
    idx = pc % 12
    return FLAT_NAMES[idx] if prefer_flats else SHARP_NAMES[idx]


def interval(a: str, b: str) -> int | None:
    """Semitones (0–11) from note *a* up to note *b*, or None if either is invalid."""
    pc_a = pitch_class(a)
    pc_b = pitch_class(b)
    if pc_a is None or pc_b is None:
        return None
    return (pc_b - pc_a) % 12


# ---------------------------------------------------------------------------
# Strict spelling helpers
# ---------------------------------------------------------------------------


def accidental_suffix(offset: int) -> str:
    """Accidental string for a signed offset: -2 → "bb", 1 → "#", 3 → "###"."""
    if offset in _ACCIDENTAL_SUFFIX:
        return _ACCIDENTAL_SUFFIX[offset]
    return "#" * offset if offset > 0 else "b" * -offset


def spell_note(letter: str, pc: int) -> str | None:
    """Spell pitch class *pc* on *letter*, using at most a double accidental.

    Examples:
        >>> spell_note("E", 5)
        'E#'
        >>> spell_note("F", 7)
        'F##'
        >>> spell_note("C", 6) is None
        True
    """
    base = LETTER_VALUES.get(letter.upper())
    if base is None:
        return None
    # Signed distance in [-6, 5] from the natural letter to the target
    offset = (pc - base + 6) % 12 - 6
    if abs(offset) > 2:
        return None
    return f"{letter.upper()}{accidental_suffix(offset)}"


def alter_same_letter(spelling: str, semitones: int) -> str:
    """Raise (or lower) a note by *semitones* without changing its letter.

    This is what keeps harmonic/melodic minor spelled strictly: the raised
    7th of G# minor is "F##", never "G".

    Unparseable input is returned unchanged.
    """
    parsed = parse_note(spelling)
    if parsed is None:
        return spelling
    letter, offset = parsed
    return f"{letter}{accidental_suffix(offset + semitones)}"


def has_double_accidental(notes: Iterable[str]) -> bool:
    """True if any spelling contains ``##`` or ``bb``."""
    return any("##" in n or "bb" in n for n in notes)


def find_by_pitch_class(notes: Iterable[str], target_pc: int) -> str | None:
    """Return the first note in *notes* whose pitch class is *target_pc*."""
    for note in notes:
        if pitch_class(note) == target_pc % 12:
            return note
    return None

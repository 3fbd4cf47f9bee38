"""
engine/music_theory/scales.py — Scales, keys, modes and diatonic triads.

Spelling rule: every 7-note scale is spelled by *letter-stepping* — degree
``i`` always uses the letter ``i`` steps above the root's letter, with
whatever accidental reproduces the required pitch class. That is why F#
major contains "E#" (not "F") and Gb major contains "Cb" (not "B").
Nearest-accidental spelling would repeat letters and is never used for
heptatonic scales.

YAML templates
--------------
Mode characteristics and common progressions live in
engine/music_theory/templates/*.yaml and are loaded lazily on first use
(module-level cache).

Exports:
    SCALE_FORMULAS          semitone offsets for every supported scale
    SCALE_DISPLAY_NAMES     display name per scale type
    KEY_SIGNATURES          signed sharp/flat count per major key
    CIRCLE_OF_FIFTHS        the 12 circle roots, clockwise from C
    RELATIVE_MINORS         circle major root → relative minor root
    MODE_NAMES              Ionian … Locrian
    MinorType, KeyView      enums

    spell_scale(root, formula) → tuple[str, ...]
    build_scale_notes(root, scale_type) → tuple[str, ...]
    major_scale(root) → tuple[str, ...]
    key_signature_display(key) → str
    relative_major(minor_root) → str | None
    build_major_pack / build_minor_pack / build_pack / build_mode_pack → KeyPack
    parent_major_for_mode(root, mode_index) → str | None
    mode_characteristics(mode) → dict[str, str]
    roman_to_chord(roman, key) → str
    available_progression_genres / get_progressions / realize_progression
    resolve_chord(root, quality) → KeyPack | TriadSpelling | None
"""

from __future__ import annotations

import functools
import logging
import re
from collections.abc import Callable, Sequence
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from engine.music_theory.notes import (
    LETTER_VALUES,
    LETTERS,
    accidental_suffix,
    alter_same_letter,
    parse_note,
    pitch_class_to_note,
    spell_note,
)
from engine.music_theory.qualities import TriadQuality, classify_quality
from engine.music_theory.types import KeyPack, TriadSpelling

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Scale formulas (semitone offsets from root)
# ---------------------------------------------------------------------------

SCALE_FORMULAS: dict[str, tuple[int, ...]] = {
    "major": (0, 2, 4, 5, 7, 9, 11),
    "natural minor": (0, 2, 3, 5, 7, 8, 10),
    "harmonic minor": (0, 2, 3, 5, 7, 8, 11),
    "melodic minor": (0, 2, 3, 5, 7, 9, 11),
    "dorian": (0, 2, 3, 5, 7, 9, 10),
    "phrygian": (0, 1, 3, 5, 7, 8, 10),
    "lydian": (0, 2, 4, 6, 7, 9, 11),
    "mixolydian": (0, 2, 4, 5, 7, 9, 10),
    "locrian": (0, 1, 3, 5, 6, 8, 10),
    "spanish phrygian": (0, 1, 4, 5, 7, 8, 10),
    "pentatonic major": (0, 2, 4, 7, 9),
    "pentatonic minor": (0, 3, 5, 7, 10),
    "blues": (0, 3, 5, 6, 7, 10),
    "whole tone": (0, 2, 4, 6, 8, 10),
    "diminished hw": (0, 1, 3, 4, 6, 7, 9, 10),
    "diminished wh": (0, 2, 3, 5, 6, 8, 9, 11),
}

SCALE_DISPLAY_NAMES: dict[str, str] = {
    "major": "Major",
    "natural minor": "Natural Minor",
    "harmonic minor": "Harmonic Minor",
    "melodic minor": "Melodic Minor",
    "dorian": "Dorian",
    "phrygian": "Phrygian",
    "lydian": "Lydian",
    "mixolydian": "Mixolydian",
    "locrian": "Locrian",
    "spanish phrygian": "Spanish Phrygian",
    "pentatonic major": "Major Pentatonic",
    "pentatonic minor": "Minor Pentatonic",
    "blues": "Blues",
    "whole tone": "Whole Tone",
    "diminished hw": "Diminished (H-W)",
    "diminished wh": "Diminished (W-H)",
}


def _check_formula(name: str, formula: tuple[int, ...]) -> None:
    if not formula or formula[0] != 0:
        raise ValueError(f"Scale formula {name!r} must start at 0")
    if any(b <= a for a, b in zip(formula, formula[1:], strict=False)):
        raise ValueError(f"Scale formula {name!r} must be strictly increasing")
    if formula[-1] > 11:
        raise ValueError(f"Scale formula {name!r} has offsets beyond 11")


for _name, _formula in SCALE_FORMULAS.items():
    _check_formula(_name, _formula)

# Roots that read more naturally with flats when a scale cannot letter-step
FLAT_SIDE_ROOTS: frozenset[str] = frozenset({"F", "Bb", "Eb", "Ab", "Db", "Gb", "Cb"})

# ---------------------------------------------------------------------------
# Keys
# ---------------------------------------------------------------------------

CIRCLE_OF_FIFTHS: tuple[str, ...] = (
    "C", "G", "D", "A", "E", "B", "F#", "C#", "Ab", "Eb", "Bb", "F",
)  # fmt: skip

# Positive = sharps, negative = flats
KEY_SIGNATURES: dict[str, int] = {
    "C": 0,
    "G": 1,
    "D": 2,
    "A": 3,
    "E": 4,
    "B": 5,
    "F#": 6,
    "C#": 7,
    "F": -1,
    "Bb": -2,
    "Eb": -3,
    "Ab": -4,
    "Db": -5,
    "Gb": -6,
    "Cb": -7,
}

RELATIVE_MINORS: dict[str, str] = {
    "C": "A",
    "G": "E",
    "D": "B",
    "A": "F#",
    "E": "C#",
    "B": "G#",
    "F#": "D#",
    "C#": "A#",
    "F": "D",
    "Bb": "G",
    "Eb": "C",
    "Ab": "F",
}


class MinorType(Enum):
    """The three minor scale variants."""

    NATURAL = "Natural"
    HARMONIC = "Harmonic"  # raised 7th
    MELODIC = "Melodic"  # raised 6th and 7th


class KeyView(Enum):
    """Which side of a circle-of-fifths key is being shown."""

    MAJOR = "major"
    RELATIVE_MINOR = "relative_minor"


# ---------------------------------------------------------------------------
# Diatonic triad tables
# ---------------------------------------------------------------------------

MAJOR_ROMANS: tuple[str, ...] = ("I", "ii", "iii", "IV", "V", "vi", "vii°")
MAJOR_QUALITIES: tuple[TriadQuality, ...] = (
    TriadQuality.MAJOR,
    TriadQuality.MINOR,
    TriadQuality.MINOR,
    TriadQuality.MAJOR,
    TriadQuality.MAJOR,
    TriadQuality.MINOR,
    TriadQuality.DIMINISHED,
)

_MA, _MI, _DI, _AU = (
    TriadQuality.MAJOR,
    TriadQuality.MINOR,
    TriadQuality.DIMINISHED,
    TriadQuality.AUGMENTED,
)

MINOR_ROMANS: dict[MinorType, tuple[str, ...]] = {
    MinorType.NATURAL: ("i", "ii°", "III", "iv", "v", "VI", "VII"),
    MinorType.HARMONIC: ("i", "ii°", "III+", "iv", "V", "VI", "vii°"),
    MinorType.MELODIC: ("i", "ii", "III+", "IV", "V", "vi°", "vii°"),
}

MINOR_QUALITIES: dict[MinorType, tuple[TriadQuality, ...]] = {
    MinorType.NATURAL: (_MI, _DI, _MA, _MI, _MI, _MA, _MA),
    MinorType.HARMONIC: (_MI, _DI, _AU, _MI, _MA, _MA, _DI),
    MinorType.MELODIC: (_MI, _MI, _AU, _MA, _MA, _DI, _DI),
}

MODE_NAMES: tuple[str, ...] = (
    "Ionian", "Dorian", "Phrygian", "Lydian", "Mixolydian", "Aeolian", "Locrian",
)  # fmt: skip

# Whole/half steps of the major scale; summing the first N gives the
# distance from a mode's root back down to its parent major.
_MAJOR_STEPS: tuple[int, ...] = (2, 2, 1, 2, 2, 2, 1)

_ROMAN_DEGREES: dict[str, int] = {
    "I": 0,
    "II": 1,
    "III": 2,
    "IV": 3,
    "V": 4,
    "VI": 5,
    "VII": 6,
}


# ---------------------------------------------------------------------------
# YAML loading (lazy, cached on first use)
# ---------------------------------------------------------------------------

_TEMPLATES_DIR: Path = Path(__file__).parent / "templates"


@functools.cache
def _load_template(name: str) -> dict[str, Any]:
    """Load and cache a YAML template by file stem.

    Raises:
        ValueError: If the template file is missing
    """
    template_path = _TEMPLATES_DIR / f"{name}.yaml"
    if not template_path.exists():
        raise ValueError(f"Template file not found: {template_path}")

    with template_path.open(encoding="utf-8") as fh:
        data = yaml.safe_load(fh)

    logger.debug("Loaded music theory template %s", template_path.name)
    return data  # type: ignore[no-any-return]


# ---------------------------------------------------------------------------
# Low-level helpers
# ---------------------------------------------------------------------------


def _parse_root(root: str) -> tuple[str, int] | None:
    """Canonical spelling and pitch class of *root* ("f#" → ("F#", 6)), None if invalid."""
    parsed = parse_note(root)
    if parsed is None:
        return None
    letter, offset = parsed
    return f"{letter}{accidental_suffix(offset)}", (LETTER_VALUES[letter] + offset) % 12


def _triad_name(root: str, quality: TriadQuality) -> str:
    return f"{root}{quality.symbol}"


def _diatonic_pack(
    key_label: str,
    scale: tuple[str, ...],
    romans: Sequence[str],
    qualities: Sequence[TriadQuality],
) -> KeyPack:
    """Stack thirds on every degree of a 7-note scale."""
    notes = tuple((scale[i], scale[(i + 2) % 7], scale[(i + 4) % 7]) for i in range(7))
    return KeyPack(
        key_label=key_label,
        root=scale[0],
        scale=scale,
        roman=tuple(romans),
        chord_names=tuple(_triad_name(scale[i], q) for i, q in enumerate(qualities)),
        notes=notes,
        qualities=tuple(q.value for q in qualities),
    )


# ---------------------------------------------------------------------------
# Scale spelling
# ---------------------------------------------------------------------------


def spell_scale(root: str, formula: Sequence[int]) -> tuple[str, ...]:
    """Spell a scale formula from *root*.

    7-note formulas are letter-stepped. Other sizes use the single-accidental
    table (flats for flat-side roots).

    Args:
        root:    Root spelling, e.g. "F#", "gb"
        formula: Semitone offsets from the root, starting at 0

    Returns:
        Tuple of note spellings, or an empty tuple for an invalid root.

    Examples:
        >>> spell_scale("F#", SCALE_FORMULAS["major"])
        ('F#', 'G#', 'A#', 'B', 'C#', 'D#', 'E#')
        >>> spell_scale("A", SCALE_FORMULAS["pentatonic minor"])
        ('A', 'C', 'D', 'E', 'G')
    """
    parsed = _parse_root(root)
    if parsed is None:
        return ()
    canonical, root_pc = parsed
    prefer_flats = canonical in FLAT_SIDE_ROOTS or "b" in canonical[1:]

    if len(formula) != 7:
        return tuple(pitch_class_to_note(root_pc + offset, prefer_flats) for offset in formula)

    root_letter = LETTERS.index(canonical[0])
    notes: list[str] = []
    for degree, offset in enumerate(formula):
        pc = (root_pc + offset) % 12
        letter = LETTERS[(root_letter + degree) % 7]
        if degree == 0:
            notes.append(canonical)
            continue
        # Beyond a double accidental (theoretical keys like G# locrian) there
        # is no sensible strict spelling left
        notes.append(spell_note(letter, pc) or pitch_class_to_note(pc, prefer_flats))
    return tuple(notes)


def build_scale_notes(root: str, scale_type: str) -> tuple[str, ...]:
    """Spell a named scale; unknown scale types give an empty tuple."""
    formula = SCALE_FORMULAS.get(scale_type)
    if formula is None:
        return ()
    return spell_scale(root, formula)


def major_scale(root: str) -> tuple[str, ...]:
    """Letter-stepped major scale of *root*."""
    return spell_scale(root, SCALE_FORMULAS["major"])


# ---------------------------------------------------------------------------
# Key signatures and relative keys
# ---------------------------------------------------------------------------


def key_signature_display(key: str) -> str:
    """Render a major key's signature: "—", "2♯", "3♭".

    Unknown keys render as "—".
    """
    sig = KEY_SIGNATURES.get(key)
    if not sig:
        return "—"
    if sig > 0:
        return f"{sig}♯"
    return f"{-sig}♭"


def relative_major(minor_root: str) -> str | None:
    """Circle-of-fifths major root whose relative minor is *minor_root*."""
    for major, minor in RELATIVE_MINORS.items():
        if minor == minor_root:
            return major
    return None


# ---------------------------------------------------------------------------
# Major / minor packs
# ---------------------------------------------------------------------------


def build_major_pack(root: str) -> KeyPack:
    """Scale and diatonic triads of a major key.

    Examples:
        >>> build_major_pack("C").chord_names
        ('C', 'Dm', 'Em', 'F', 'G', 'Am', 'B°')
    """
    scale = major_scale(root)
    if not scale:
        return KeyPack.empty()
    return _diatonic_pack(f"{scale[0]} Major", scale, MAJOR_ROMANS, MAJOR_QUALITIES)


def build_minor_pack(root: str, minor_type: MinorType = MinorType.NATURAL) -> KeyPack:
    """Scale and diatonic triads of a minor key.

    Harmonic minor re-spells the 7th one semitone higher on the same letter;
    melodic minor does the same for the 6th and 7th.

    Examples:
        >>> build_minor_pack("A", MinorType.HARMONIC).scale[6]
        'G#'
        >>> build_minor_pack("G#", MinorType.HARMONIC).scale[6]
        'F##'
    """
    natural = spell_scale(root, SCALE_FORMULAS["natural minor"])
    if not natural:
        return KeyPack.empty()

    scale = list(natural)
    if minor_type in (MinorType.HARMONIC, MinorType.MELODIC):
        scale[6] = alter_same_letter(scale[6], 1)
    if minor_type is MinorType.MELODIC:
        scale[5] = alter_same_letter(scale[5], 1)

    return _diatonic_pack(
        f"{scale[0]} {minor_type.value} Minor",
        tuple(scale),
        MINOR_ROMANS[minor_type],
        MINOR_QUALITIES[minor_type],
    )


def build_pack(
    selected_major_root: str,
    view: KeyView = KeyView.MAJOR,
    minor_type: MinorType = MinorType.NATURAL,
) -> KeyPack:
    """Pack for a circle-of-fifths selection.

    The selection is always a major root; the relative-minor view shows that
    key's relative minor (A minor for roots outside the circle).
    """
    if view is KeyView.MAJOR:
        return build_major_pack(selected_major_root)
    return build_minor_pack(RELATIVE_MINORS.get(selected_major_root, "A"), minor_type)


# ---------------------------------------------------------------------------
# Modes
# ---------------------------------------------------------------------------


def _mode_index(mode: int | str) -> int | None:
    if isinstance(mode, int):
        return mode if 0 <= mode < len(MODE_NAMES) else None
    wanted = mode.strip().capitalize()
    return MODE_NAMES.index(wanted) if wanted in MODE_NAMES else None


@functools.cache
def _mode_table() -> dict[str, dict[str, str]]:
    entries = _load_template("modes")["modes"]
    return {entry["name"]: {k: str(v) for k, v in entry.items() if k != "name"} for entry in entries}


def mode_characteristics(mode: int | str) -> dict[str, str]:
    """Descriptive metadata for a mode: mood, family, color, usage, character.

    Returns an empty dict for unknown modes.
    """
    idx = _mode_index(mode)
    if idx is None:
        return {}
    return dict(_mode_table()[MODE_NAMES[idx]])


def all_mode_characteristics() -> dict[str, dict[str, str]]:
    """Metadata for all 7 modes, keyed by mode name in mode order."""
    return {name: dict(_mode_table()[name]) for name in MODE_NAMES}


def parent_major_for_mode(root: str, mode_index: int) -> str | None:
    """Spell the parent major key of a mode.

    The parent's letter is *mode_index* letters below the root's, so D
    dorian → C, F# phrygian → D, Eb lydian → Bb.
    """
    parsed = _parse_root(root)
    if parsed is None or not (0 <= mode_index < len(MODE_NAMES)):
        return None
    canonical, root_pc = parsed
    parent_pc = (root_pc - sum(_MAJOR_STEPS[:mode_index])) % 12
    parent_letter = LETTERS[(LETTERS.index(canonical[0]) - mode_index) % 7]
    return spell_note(parent_letter, parent_pc) or pitch_class_to_note(parent_pc, True)


def build_mode_pack(root: str, mode: int | str) -> KeyPack:
    """Scale and diatonic triads of a diatonic mode.

    The parent major's letter-stepped scale, qualities and roman numerals are
    rotated by the mode index.

    Args:
        root: Mode root, e.g. "D"
        mode: Mode index 0–6 or name, e.g. 1 or "Dorian"

    Examples:
        >>> build_mode_pack("D", "Dorian").scale
        ('D', 'E', 'F', 'G', 'A', 'B', 'C')
    """
    idx = _mode_index(mode)
    if idx is None:
        return KeyPack.empty()
    parent = parent_major_for_mode(root, idx)
    if parent is None:
        return KeyPack.empty()

    parent_scale = major_scale(parent)
    rotate = [(i + idx) % 7 for i in range(7)]
    return _diatonic_pack(
        f"{parent_scale[idx]} {MODE_NAMES[idx]}",
        tuple(parent_scale[i] for i in rotate),
        [MAJOR_ROMANS[i] for i in rotate],
        [MAJOR_QUALITIES[i] for i in rotate],
    )


# ---------------------------------------------------------------------------
# Roman numerals and progressions
# ---------------------------------------------------------------------------


def roman_to_chord(roman: str, key: str) -> str:
    """Convert a roman numeral to a triad name in a major key.

    Uppercase = major, lowercase = minor, a trailing "°" = diminished and "+"
    = augmented. Unknown keys or numerals come back unchanged.

    Examples:
        >>> roman_to_chord("vii°", "C")
        'B°'
        >>> roman_to_chord("V", "G")
        'D'
        >>> roman_to_chord("ii", "G")
        'Am'
    """
    scale = major_scale(key)
    base = re.sub(r"[°+]", "", roman)
    if not scale or not base:
        return roman
    if base.upper() not in _ROMAN_DEGREES or base not in (base.upper(), base.lower()):
        return roman

    root = scale[_ROMAN_DEGREES[base.upper()]]
    if "°" in roman:
        return f"{root}°"
    if "+" in roman:
        return f"{root}+"
    if base.islower():
        return f"{root}m"
    return root


def available_progression_genres() -> list[str]:
    """Return the genres that have common progressions defined."""
    return sorted(_load_template("progressions")["genres"])


def get_progressions(genre: str) -> list[dict[str, Any]]:
    """Common progressions for a genre (name, roman, description, examples).

    Unknown genres give an empty list.
    """
    genres: dict[str, list[dict[str, Any]]] = _load_template("progressions")["genres"]
    return [dict(p) for p in genres.get(genre, [])]


def realize_progression(romans: Sequence[str], key: str) -> tuple[str, ...]:
    """Spell every numeral of a progression in *key*."""
    return tuple(roman_to_chord(r, key) for r in romans)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

_KEY_VIEWS: dict[str, Callable[[str], KeyPack]] = {
    "major": build_major_pack,
    "minor": lambda root: build_minor_pack(root, MinorType.NATURAL),
    "natural minor": lambda root: build_minor_pack(root, MinorType.NATURAL),
    "harmonic minor": lambda root: build_minor_pack(root, MinorType.HARMONIC),
    "melodic minor": lambda root: build_minor_pack(root, MinorType.MELODIC),
}


def spell_triad(root: str, quality: TriadQuality) -> TriadSpelling | None:
    """Spell a triad on stacked letters (root, root+2 letters, root+4 letters).

    Examples:
        >>> spell_triad("F#", TriadQuality.AUGMENTED).notes
        ('F#', 'A#', 'C##')
    """
    parsed = _parse_root(root)
    if parsed is None:
        return None
    canonical, root_pc = parsed
    letter_idx = LETTERS.index(canonical[0])

    def _on(steps: int, semitones: int) -> str:
        pc = (root_pc + semitones) % 12
        return spell_note(LETTERS[(letter_idx + steps) % 7], pc) or pitch_class_to_note(pc)

    return TriadSpelling(
        root=canonical,
        quality=quality.value,
        name=_triad_name(canonical, quality),
        notes=(canonical, _on(2, quality.third), _on(4, quality.fifth)),
    )


def resolve_chord(root: str, quality: str) -> KeyPack | TriadSpelling | None:
    """Resolve a root + quality to a key pack or a single triad.

    Qualities naming a key ("major", "minor", "natural minor", "harmonic
    minor", "melodic minor") or a mode ("dorian", ...) return the KeyPack.
    Anything else, "m" included, is classified as a triad quality and spelled.

    Returns:
        KeyPack, TriadSpelling, or None when *root* is not a note.
    """
    if _parse_root(root) is None:
        return None
    q = quality.strip().lower()
    if q in _KEY_VIEWS:
        return _KEY_VIEWS[q](root)
    if _mode_index(q) is not None:
        return build_mode_pack(root, q)
    return spell_triad(root, classify_quality(quality))

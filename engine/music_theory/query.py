"""
engine/music_theory/query.py — Free-text chord query normalisation.

Pure string → string functions; same input always produces the same output.

``normalize_user_chord_query()`` applies an ordered rule list. Order matters:
"c sharp" must collapse to "c#" before spaces are dropped, and "sharp" must
be rewritten before "major"/"minor" so "c sharp minor" ends as "c#m".
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from engine.music_theory.notes import has_double_accidental, normalize_accidentals

# (pattern, replacement), applied top to bottom after lowercasing
QUERY_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"[\-_.,]+"), " "),
    (re.compile(r"\s+"), " "),
    (re.compile(r"\b([a-g])\s+sharp\b"), r"\1#"),
    (re.compile(r"\b([a-g])\s+flat\b"), r"\1b"),
    (re.compile(r" "), ""),
    (re.compile(r"([a-g])sharp"), r"\1#"),
    (re.compile(r"([a-g])flat"), r"\1b"),
    (re.compile(r"major"), "maj"),
    (re.compile(r"minor"), "m"),
    (re.compile(r"diminished"), "dim"),
    (re.compile(r"augmented"), "+"),
)


def normalize_user_chord_query(text: str) -> str:
    """Normalise free-text chord input for search.

    Lowercases, converts unicode accidentals, strips whitespace and
    punctuation, and rewrites word forms. Strict spellings such as "e#" or
    "cb" are left alone.

    Examples:
        >>> normalize_user_chord_query("C - major")
        'cmaj'
        >>> normalize_user_chord_query("g flat")
        'gb'
        >>> normalize_user_chord_query("F♯ minor")
        'f#m'
    """
    s = normalize_accidentals(text.lower())
    for pattern, replacement in QUERY_RULES:
        s = pattern.sub(replacement, s)
    return s


def should_show_sounds_like(
    notes: Sequence[str],
    alt: Sequence[str] | None,
) -> bool:
    """Whether a chord needs a "sounds like" line under its strict spelling.

    True only when the strict spelling has a double accidental AND an
    enharmonic alternative is supplied AND that alternative differs.

    Examples:
        >>> should_show_sounds_like(["F##", "A#", "C#"], ["G", "A#", "C#"])
        True
        >>> should_show_sounds_like(["C", "E", "G"], ["C", "E", "G"])
        False
    """
    if not alt:
        return False
    if not has_double_accidental(notes):
        return False
    return list(notes) != list(alt)

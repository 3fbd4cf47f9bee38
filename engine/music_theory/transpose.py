"""
engine/music_theory/transpose.py — Chord symbol parsing and transposition.

transpose_progression() shifts every chord root of a whitespace-separated
progression by the distance between two keys. Chord notes are not computed
here: callers may pass a ``lookup`` callable (typically
``ChordIndex.find_by_name``) to attach dictionary spellings, which keeps
this module free of any dependency on the chord dictionary.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import Protocol

from engine.music_theory.notes import normalize_accidentals, pitch_class, pitch_class_to_note
from engine.music_theory.scales import FLAT_SIDE_ROOTS
from engine.music_theory.types import TransposedChord


class ChordLike(Protocol):
    """Minimal shape of a dictionary entry used to enrich transposed chords."""

    @property
    def notes(self) -> tuple[str, ...]: ...

    @property
    def notes_enharmonic_alt(self) -> tuple[str, ...] | None: ...


ChordLookup = Callable[[str], ChordLike | None]

# Partial typing of an accidental after the root letter, keeping whatever
# quality follows: "gsharpm7" → "G#m7", "bflmaj7" → "Bbmaj7". "Csus4" is a
# suspended chord, not "C#us4".
_SYMBOL_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"^([a-g])s(?!us)(harp|har|ha|h)?(.*)$"), "#"),
    (re.compile(r"^([a-g])f(lat|la|l)?(.*)$"), "b"),
    (re.compile(r"^([a-g])\s*sharp(.*)$"), "#"),
    (re.compile(r"^([a-g])\s*flat(.*)$"), "b"),
)

_WORD_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"sharp", re.IGNORECASE), "#"),
    (re.compile(r"flat", re.IGNORECASE), "b"),
    (re.compile(r"major", re.IGNORECASE), "maj"),
    (re.compile(r"minor", re.IGNORECASE), "m"),
    (re.compile(r"diminished", re.IGNORECASE), "dim"),
    (re.compile(r"augmented", re.IGNORECASE), "aug"),
)

_CHORD_RE = re.compile(r"^([a-gA-G](?:bb|##|b|#)?)(.*)$")


def _normalize_chord_token(token: str) -> str:
    s = normalize_accidentals(token)
    for pattern, accidental in _SYMBOL_RULES:
        match = pattern.match(s.lower())
        if match is not None:
            s = f"{match.group(1).upper()}{accidental}{match.groups()[-1] or ''}"
            break
    for pattern, replacement in _WORD_RULES:
        s = pattern.sub(replacement, s)
    return s


def parse_chord_symbol(token: str) -> tuple[str, str] | None:
    """Split a chord symbol into (root, quality).

    Partial accidental typing is understood, and the root is capitalised
    with its accidentals lowercased.

    Examples:
        >>> parse_chord_symbol("F#m7")
        ('F#', 'm7')
        >>> parse_chord_symbol("gsharpmaj7")
        ('G#', 'maj7')
        >>> parse_chord_symbol("|") is None
        True
    """
    normalized = _normalize_chord_token(token)
    if not normalized:
        return None
    match = _CHORD_RE.match(normalized)
    if match is None:
        return None
    root_raw, quality = match.group(1), match.group(2)
    return root_raw[0].upper() + root_raw[1:].lower(), quality


def transpose_progression(
    text: str,
    from_key: str,
    to_key: str,
    lookup: ChordLookup | None = None,
) -> tuple[TransposedChord, ...]:
    """Transpose a whitespace-separated chord progression between keys.

    Target roots use flats when *to_key* is a flat-side key (F, Bb, Eb, Ab,
    Db, Gb, Cb) and sharps otherwise. Tokens that are not chord symbols (bar
    lines, "N.C.") pass through unchanged with no notes.

    Args:
        text:     Progression text, e.g. "Am F C G"
        from_key: Key the progression is written in, e.g. "C"
        to_key:   Target key, e.g. "Eb"
        lookup:   Optional chord-name → dictionary entry resolver

    Returns:
        One TransposedChord per token, or an empty tuple when the text is
        empty or either key is not a note.

    Examples:
        >>> [c.name for c in transpose_progression("Am F C G", "C", "D")]
        ['Bm', 'G', 'D', 'A']
    """
    tokens = normalize_accidentals(text).split()
    from_pc = pitch_class(from_key)
    to_pc = pitch_class(to_key)
    if not tokens or from_pc is None or to_pc is None:
        return ()

    diff = (to_pc - from_pc) % 12
    prefer_flats = normalize_accidentals(to_key) in FLAT_SIDE_ROOTS

    results: list[TransposedChord] = []
    for token in tokens:
        parsed = parse_chord_symbol(token)
        root_pc = pitch_class(parsed[0]) if parsed is not None else None
        if parsed is None or root_pc is None:
            results.append(TransposedChord(token))
            continue

        name = pitch_class_to_note(root_pc + diff, prefer_flats) + parsed[1]
        entry = lookup(name) if lookup is not None else None
        if entry is None:
            results.append(TransposedChord(name))
        else:
            results.append(
                TransposedChord(
                    name,
                    notes=tuple(entry.notes),
                    notes_enharmonic_alt=(
                        tuple(entry.notes_enharmonic_alt)
                        if entry.notes_enharmonic_alt is not None
                        else None
                    ),
                )
            )
    return tuple(results)

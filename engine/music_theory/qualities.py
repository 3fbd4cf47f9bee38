"""
engine/music_theory/qualities.py — Triad quality classification.

Free-text chord qualities ("m", "maj7", "dim", "°", "aug", "+", ...) are
inspected in exactly one place, ``classify_quality()``. Everything
downstream works with the ``TriadQuality`` enum.
"""

from __future__ import annotations

from enum import Enum


class TriadQuality(Enum):
    """The four triad qualities, with their interval structure."""

    MAJOR = "Major"
    MINOR = "Minor"
    DIMINISHED = "Diminished"
    AUGMENTED = "Augmented"

    @property
    def third(self) -> int:
        """Semitones from root to third."""
        return 3 if self in (TriadQuality.MINOR, TriadQuality.DIMINISHED) else 4

    @property
    def fifth(self) -> int:
        """Semitones from root to fifth."""
        if self is TriadQuality.DIMINISHED:
            return 6
        if self is TriadQuality.AUGMENTED:
            return 8
        return 7

    @property
    def label(self) -> str:
        """Short label used in grip names: "", "m", "dim", "aug"."""
        return _LABELS[self]

    @property
    def symbol(self) -> str:
        """Chord-symbol suffix: "", "m", "°", "+"."""
        return _SYMBOLS[self]


_LABELS: dict[TriadQuality, str] = {
    TriadQuality.MAJOR: "",
    TriadQuality.MINOR: "m",
    TriadQuality.DIMINISHED: "dim",
    TriadQuality.AUGMENTED: "aug",
}

_SYMBOLS: dict[TriadQuality, str] = {
    TriadQuality.MAJOR: "",
    TriadQuality.MINOR: "m",
    TriadQuality.DIMINISHED: "°",
    TriadQuality.AUGMENTED: "+",
}


def _is_minor_text(q: str) -> bool:
    # "m" but NOT "maj", so "maj7" stays major
    if "minor" in q:
        return True
    return "m" in q and "maj" not in q


def classify_quality(text: str) -> TriadQuality:
    """Classify a free-text chord quality into one of four triad qualities.

    Rules, in priority order:
        - contains "dim" or "°"              → DIMINISHED
        - contains "aug" or "+"              → AUGMENTED
        - contains "minor", or an "m" with
          no "maj" anywhere                  → MINOR
        - anything else (incl. "", "maj7")   → MAJOR

    Examples:
        >>> classify_quality("maj7")
        <TriadQuality.MAJOR: 'Major'>
        >>> classify_quality("m7")
        <TriadQuality.MINOR: 'Minor'>
        >>> classify_quality("°")
        <TriadQuality.DIMINISHED: 'Diminished'>
    """
    q = text.strip().lower()
    if "dim" in q or "°" in q:
        return TriadQuality.DIMINISHED
    if "aug" in q or "+" in q:
        return TriadQuality.AUGMENTED
    if _is_minor_text(q):
        return TriadQuality.MINOR
    return TriadQuality.MAJOR

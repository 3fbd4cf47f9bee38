"""
engine/music_theory/ — Pure music theory engine.

Exports:
    Types:     KeyPack, TriadSpelling, TransposedChord, Tuning,
               GuitarChordShape, STANDARD_TUNING, TriadQuality
    Notes:     pitch_class, pitch_class_to_note, interval
    Scales:    spell_scale, build_scale_notes, major_scale,
               build_major_pack, build_minor_pack, build_pack,
               build_mode_pack, roman_to_chord, resolve_chord,
               key_signature_display, mode_characteristics
    Query:     normalize_user_chord_query, should_show_sounds_like
    Transpose: parse_chord_symbol, transpose_progression
    Voicing:   generate_voicings, classify_quality
"""

from engine.music_theory.notes import interval, pitch_class, pitch_class_to_note
from engine.music_theory.qualities import TriadQuality, classify_quality
from engine.music_theory.query import normalize_user_chord_query, should_show_sounds_like
from engine.music_theory.scales import (
    KeyView,
    MinorType,
    build_major_pack,
    build_minor_pack,
    build_mode_pack,
    build_pack,
    build_scale_notes,
    key_signature_display,
    major_scale,
    mode_characteristics,
    realize_progression,
    resolve_chord,
    roman_to_chord,
    spell_scale,
)
from engine.music_theory.transpose import parse_chord_symbol, transpose_progression
from engine.music_theory.types import (
    STANDARD_TUNING,
    GuitarChordShape,
    KeyPack,
    TransposedChord,
    TriadSpelling,
    Tuning,
)
from engine.music_theory.voicing import generate_voicings

__all__ = [
    # Types
    "KeyPack",
    "TriadSpelling",
    "TransposedChord",
    "Tuning",
    "GuitarChordShape",
    "STANDARD_TUNING",
    "TriadQuality",
    "KeyView",
    "MinorType",
    # Notes
    "pitch_class",
    "pitch_class_to_note",
    "interval",
    # Scales
    "spell_scale",
    "build_scale_notes",
    "major_scale",
    "build_major_pack",
    "build_minor_pack",
    "build_pack",
    "build_mode_pack",
    "key_signature_display",
    "mode_characteristics",
    "roman_to_chord",
    "realize_progression",
    "resolve_chord",
    # Query
    "normalize_user_chord_query",
    "should_show_sounds_like",
    # Transpose
    "parse_chord_symbol",
    "transpose_progression",
    # Voicing
    "classify_quality",
    "generate_voicings",
]

"""
Shared fixtures for the test suite.

Centralizes a small, hand-written chord dictionary so index, search and
transposition tests all run against the same records.
"""

import pytest

from engine.chord_index import ChordDefinition, ChordIndex, ChordSearch

# ---------------------------------------------------------------------------
# Dictionary records
# ---------------------------------------------------------------------------

CHORD_RECORDS: list[dict[str, object]] = [
    {
        "chord_id": "c_maj",
        "root": "C",
        "quality": "maj",
        "formula_semitones": [0, 4, 7],
        "display_name": "C",
        "notes": ["C", "E", "G"],
        "aliases": ["Cmaj", "C major"],
        "search_tokens": ["cmaj"],
        "category": "triad",
    },
    {
        "chord_id": "c_min",
        "root": "C",
        "quality": "min",
        "formula_semitones": [0, 3, 7],
        "display_name": "Cm",
        "notes": ["C", "Eb", "G"],
        "aliases": ["Cmin", "C minor"],
        "category": "triad",
    },
    {
        "chord_id": "c_7",
        "root": "C",
        "quality": "7",
        "formula_semitones": [0, 4, 7, 10],
        "display_name": "C7",
        "notes": ["C", "E", "G", "Bb"],
        "aliases": ["Cdom7"],
        "category": "seventh",
    },
    {
        "chord_id": "c_sus4",
        "root": "C",
        "quality": "sus4",
        "formula_semitones": [0, 5, 7],
        "display_name": "Csus4",
        "notes": ["C", "F", "G"],
        "search_tokens": ["suspended"],
        "category": "sus",
    },
    {
        "chord_id": "cs_maj",
        "root": "C#",
        "quality": "maj",
        "formula_semitones": [0, 4, 7],
        "display_name": "C#",
        "notes": ["C#", "E#", "G#"],
        "notes_enharmonic_alt": ["Db", "F", "Ab"],
        "category": "triad",
    },
    {
        "chord_id": "cs_min",
        "root": "C#",
        "quality": "min",
        "formula_semitones": [0, 3, 7],
        "display_name": "C#m",
        "notes": ["C#", "E", "G#"],
        "category": "triad",
    },
    {
        "chord_id": "ds_maj",
        "root": "D#",
        "quality": "maj",
        "formula_semitones": [0, 4, 7],
        "display_name": "D#",
        "notes": ["D#", "F##", "A#"],
        "notes_enharmonic_alt": ["Eb", "G", "Bb"],
        "category": "triad",
    },
    {
        "chord_id": "gs_maj",
        "root": "G#",
        "quality": "maj",
        "formula_semitones": [0, 4, 7],
        "display_name": "G#",
        "notes": ["G#", "B#", "D#"],
        "notes_enharmonic_alt": ["Ab", "C", "Eb"],
        "category": "triad",
    },
    {
        "chord_id": "gs_min",
        "root": "G#",
        "quality": "min",
        "formula_semitones": [0, 3, 7],
        "display_name": "G#m",
        "notes": ["G#", "B", "D#"],
        "category": "triad",
    },
    {
        "chord_id": "b_maj",
        "root": "B",
        "quality": "maj",
        "formula_semitones": [0, 4, 7],
        "display_name": "B",
        "notes": ["B", "D#", "F#"],
        "category": "triad",
    },
    {
        "chord_id": "b_dim",
        "root": "B",
        "quality": "dim",
        "formula_semitones": [0, 3, 6],
        "display_name": "Bdim",
        "notes": ["B", "D", "F"],
        "aliases": ["B°"],
        "category": "triad",
    },
]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def chord_payload() -> list[dict[str, object]]:
    """Raw JSON-shaped records, as read from the dictionary file."""
    return [dict(r) for r in CHORD_RECORDS]


@pytest.fixture
def chord_records() -> list[ChordDefinition]:
    """Validated records of the test dictionary."""
    return [ChordDefinition.model_validate(r) for r in CHORD_RECORDS]


@pytest.fixture
def chord_index(chord_records: list[ChordDefinition]) -> ChordIndex:
    """Index built from the test dictionary."""
    return ChordIndex.build(chord_records)


@pytest.fixture
def chord_search(chord_index: ChordIndex) -> ChordSearch:
    """Search facade with default limits."""
    return ChordSearch(chord_index)

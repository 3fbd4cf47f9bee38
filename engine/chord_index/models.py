"""
Pydantic models for chord dictionary records and search suggestions.

``ChordDefinition`` validates one record of the chord dictionary JSON. Field
aliases match the dictionary's keys; Python code uses the attribute names.
Records are frozen after validation and list fields are stored as tuples, so
definitions can be shared read-only across callers.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from engine.music_theory.notes import has_double_accidental
from engine.music_theory.query import should_show_sounds_like as _shows_sounds_like


class ChordDefinition(BaseModel):
    """One chord of the dictionary."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., alias="chord_id", min_length=1, description="Stable chord identifier.")
    root: str = Field(..., description="Root spelling, e.g. 'F#'.")
    quality: str = Field(..., description="Quality id, e.g. 'maj', 'm7', 'dim'.")
    semitones: tuple[int, ...] = Field(
        default=(), alias="formula_semitones", description="Semitone offsets from the root."
    )
    display_name: str = Field(default="", description="Canonical display name, e.g. 'F#m7'.")
    notes: tuple[str, ...] = Field(
        default=(), description="Strict spelling; may contain double accidentals."
    )
    notes_enharmonic_alt: tuple[str, ...] | None = Field(
        default=None, description="Optional 'sounds like' spelling."
    )
    aliases: tuple[str, ...] = Field(default=(), description="Alternative chord names.")
    search_tokens: tuple[str, ...] = Field(default=(), description="Extra search keywords.")
    category: str | None = Field(default=None, description="Filter category, e.g. 'triad'.")

    @field_validator("display_name", mode="before")
    @classmethod
    def display_name_may_be_null(cls, v: object) -> object:
        """Treat an explicit null display name as empty."""
        return "" if v is None else v

    @field_validator("semitones", "notes", "aliases", "search_tokens", mode="before")
    @classmethod
    def null_list_is_empty(cls, v: object) -> object:
        """Treat explicit nulls in list fields as empty."""
        return () if v is None else v

    @property
    def needs_sounds_like_line(self) -> bool:
        """True iff the strict spelling contains a double accidental."""
        return has_double_accidental(self.notes)

    @property
    def should_show_sounds_like(self) -> bool:
        """True when the 'sounds like' line adds information."""
        return _shows_sounds_like(self.notes, self.notes_enharmonic_alt)


class SearchSuggestion(BaseModel):
    """A typeahead suggestion: the text to insert and a hint to show beside it."""

    model_config = ConfigDict(frozen=True)

    text: str
    hint: str

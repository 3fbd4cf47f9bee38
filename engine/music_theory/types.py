"""
engine/music_theory/types.py — Frozen value objects for the music theory engine.

All types are immutable frozen dataclasses — safe to hash, cache, and use as
dict keys. No I/O, no side effects, no external dependencies beyond stdlib.

Types:
    KeyPack           — scale + 7 diatonic triads for a key or mode
    TriadSpelling     — a single triad spelled with strict letter names
    TransposedChord   — one chord of a transposed progression
    Tuning            — open-string pitches of a fretted instrument
    GuitarChordShape  — a fret grip (barre or 3-string triad)
"""

from __future__ import annotations

from dataclasses import dataclass

# ---------------------------------------------------------------------------
# KeyPack
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class KeyPack:
    """A key (or mode) with its scale and diatonic triads.

    All per-degree tuples are parallel: index 0 is the tonic.

    Attributes:
        key_label:   Human-readable label, e.g. "C Major", "A Harmonic Minor"
        root:        Tonic spelling, e.g. "F#"
        scale:       Scale spelling, e.g. ("F#", "G#", "A#", "B", "C#", "D#", "E#")
        roman:       Roman numeral per degree, e.g. ("I", "ii", ..., "vii°")
        chord_names: Triad name per degree, e.g. ("C", "Dm", ..., "B°")
        notes:       Triad spelling per degree as (root, third, fifth)
        qualities:   Quality label per degree, e.g. "Major", "Diminished"
    """

    key_label: str
    root: str
    scale: tuple[str, ...]
    roman: tuple[str, ...] = ()
    chord_names: tuple[str, ...] = ()
    notes: tuple[tuple[str, str, str], ...] = ()
    qualities: tuple[str, ...] = ()

    @classmethod
    def empty(cls) -> KeyPack:
        """The "nothing found" pack returned for unsupported keys and modes."""
        return cls(key_label="Unknown", root="", scale=())

    @property
    def is_empty(self) -> bool:
        return not self.scale

    def __post_init__(self) -> None:
        lengths = {len(self.roman), len(self.chord_names), len(self.notes), len(self.qualities)}
        if len(lengths) != 1:
            raise ValueError(
                "KeyPack roman, chord_names, notes and qualities must have equal length"
            )
        if self.chord_names and len(self.chord_names) != len(self.scale):
            raise ValueError(
                f"KeyPack has {len(self.chord_names)} chords for a "
                f"{len(self.scale)}-note scale"
            )


# ---------------------------------------------------------------------------
# TriadSpelling
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TriadSpelling:
    """A triad spelled on stacked thirds (root, third, fifth letters).

    Attributes:
        root:    Root spelling, e.g. "F#"
        quality: Quality label, e.g. "Augmented"
        name:    Chord symbol, e.g. "F#+"
        notes:   (root, third, fifth), e.g. ("F#", "A#", "C##")
    """

    root: str
    quality: str
    name: str
    notes: tuple[str, str, str]

    def __post_init__(self) -> None:
        if not self.root:
            raise ValueError("TriadSpelling.root must not be empty")
        if len(self.notes) != 3:
            raise ValueError(f"TriadSpelling.notes must have 3 notes, got {len(self.notes)}")


# ---------------------------------------------------------------------------
# TransposedChord
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TransposedChord:
    """One token of a transposed chord progression.

    Attributes:
        name:                 Transposed chord symbol (or the original token
                              when it could not be parsed)
        notes:                Strict spelling from the chord dictionary, empty
                              when no dictionary entry was found
        notes_enharmonic_alt: Optional "sounds like" spelling
    """

    name: str
    notes: tuple[str, ...] = ()
    notes_enharmonic_alt: tuple[str, ...] | None = None


# ---------------------------------------------------------------------------
# Tuning
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Tuning:
    """Open-string pitches of a 6-string fretted instrument, low to high.

    Attributes:
        name:          Tuning name, e.g. "standard"
        string_names:  Letter per string, e.g. ("E", "A", "D", "G", "B", "E")
        open_pc:       Pitch class (0–11) per open string
        open_pitch:    Absolute semitone number (MIDI) per open string; used
                       to enforce ascending voicings across strings
    """

    name: str
    string_names: tuple[str, ...]
    open_pc: tuple[int, ...]
    open_pitch: tuple[int, ...]

    @property
    def string_count(self) -> int:
        return len(self.open_pc)

    def pitch_class_at(self, string: int, fret: int) -> int:
        """Pitch class sounded by *string* stopped at *fret*."""
        return (self.open_pc[string] + fret) % 12

    def pitch_at(self, string: int, fret: int) -> int:
        """Absolute pitch sounded by *string* stopped at *fret*."""
        return self.open_pitch[string] + fret

    def __post_init__(self) -> None:
        if not (len(self.string_names) == len(self.open_pc) == len(self.open_pitch)):
            raise ValueError("Tuning string_names, open_pc and open_pitch must align")
        for pc in self.open_pc:
            if not (0 <= pc <= 11):
                raise ValueError(f"Tuning pitch class {pc} out of range [0, 11]")
        for pc, pitch in zip(self.open_pc, self.open_pitch, strict=True):
            if pitch % 12 != pc:
                raise ValueError(f"Tuning pitch {pitch} does not match pitch class {pc}")


#: Standard guitar tuning E2 A2 D3 G3 B3 E4
STANDARD_TUNING = Tuning(
    name="standard",
    string_names=("E", "A", "D", "G", "B", "E"),
    open_pc=(4, 9, 2, 7, 11, 4),
    open_pitch=(40, 45, 50, 55, 59, 64),
)


# ---------------------------------------------------------------------------
# GuitarChordShape
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GuitarChordShape:
    """A chord grip on the fretboard.

    ``frets`` is a partial mapping from string index (0 = low E) to fret
    number, stored as sorted ``(string, fret)`` pairs so the shape stays
    hashable. A string with no entry is muted; fret 0 is an open string.

    Attributes:
        label:           Grip label shown to the player, e.g. "E-shape barre (m)"
        frets:           Sorted ``(string, fret)`` pairs for played strings
        inversion:       0 = root position, 1 = 1st, 2 = 2nd; None if not applicable
        position_bucket: One of the configured buckets (0, 5, 7, 9, 12)
        is_triad:        True for 3-string triad grips
        string_set:      Descriptor such as "GBE" or "EADGBE"
    """

    label: str
    frets: tuple[tuple[int, int], ...]
    inversion: int | None = None
    position_bucket: int | None = None
    is_triad: bool = False
    string_set: str | None = None

    @classmethod
    def from_frets(
        cls,
        label: str,
        frets: dict[int, int],
        *,
        inversion: int | None = None,
        position_bucket: int | None = None,
        is_triad: bool = False,
        string_set: str | None = None,
    ) -> GuitarChordShape:
        """Build a shape from a ``{string: fret}`` dict of played strings."""
        return cls(
            label=label,
            frets=tuple(sorted(frets.items())),
            inversion=inversion,
            position_bucket=position_bucket,
            is_triad=is_triad,
            string_set=string_set,
        )

    @property
    def fret_map(self) -> dict[int, int]:
        """``{string: fret}`` for played strings."""
        return dict(self.frets)

    @property
    def played_strings(self) -> tuple[int, ...]:
        return tuple(s for s, _ in self.frets)

    @property
    def base_fret(self) -> int:
        """Lowest played fret (0 for open shapes or when nothing is played)."""
        return min((f for _, f in self.frets), default=0)

    @property
    def span(self) -> int:
        """Distance between the highest and lowest played fret."""
        played = [f for _, f in self.frets]
        return max(played) - min(played) if played else 0

    def fret_for(self, string: int) -> int | None:
        """Fret played on *string*, or None when the string is muted."""
        for s, f in self.frets:
            if s == string:
                return f
        return None

    def pitch_classes(self, tuning: Tuning = STANDARD_TUNING) -> tuple[int, ...]:
        """Pitch classes of the played strings, low string first."""
        return tuple(tuning.pitch_class_at(s, f) for s, f in self.frets)

    def __post_init__(self) -> None:
        if not self.label:
            raise ValueError("GuitarChordShape.label must not be empty")
        strings = [s for s, _ in self.frets]
        if strings != sorted(set(strings)):
            raise ValueError("GuitarChordShape.frets must have unique, sorted strings")
        for string, fret in self.frets:
            if not (0 <= string <= 5):
                raise ValueError(f"String index {string} out of range [0, 5]")
            if fret < 0:
                raise ValueError(f"Fret {fret} on string {string} must be >= 0")
        if self.inversion is not None and self.inversion not in (0, 1, 2):
            raise ValueError(f"GuitarChordShape.inversion must be 0, 1 or 2, got {self.inversion}")
        if self.is_triad and len(self.frets) != 3:
            raise ValueError(f"Triad shapes play exactly 3 strings, got {len(self.frets)}")

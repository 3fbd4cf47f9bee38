"""
engine/music_theory/voicing.py — Guitar voicing generator.

generate_voicings() turns a root + quality into playable fret grips on a
6-string guitar in standard tuning:

    1. Classify the quality into a TriadQuality and compute the triad's
       pitch classes (root, third, fifth)
    2. Barre grips: E-shape (root on string 0) and A-shape (root on
       string 1) from fixed fret templates — major and minor only
    3. Triad grips: for every position bucket × 3-string set × inversion,
       exhaustively search the fret window for the best 3-note grip
    4. Sort for display

Triad grip search (per string set, position and inversion):
    For every fret triple (f0, f1, f2) in the window, keep it when
        - the lowest string sounds the inversion's bass note
        - every string sounds a triad tone, and all three tones are present
        - pitches strictly ascend from low string to high string
        - outside the open position, the fret span is at most 4
    and score it with grip_score():

        score = 10 × span + mean(fret) + (0 if open else 0.5 × |min(fret) − position|)

    i.e. compactness first, then low average fret, then closeness to the
    requested position. The lowest score wins; on equal scores the first
    triple found wins (frets are scanned in ascending order, low string
    outermost), so results are fully deterministic.

A position/set/inversion combination with no valid grip is simply absent from
the output.
"""

from __future__ import annotations

from dataclasses import dataclass

from engine.config import DEFAULT_VOICING_CONFIG, VoicingConfig
from engine.music_theory.notes import pitch_class
from engine.music_theory.qualities import TriadQuality, classify_quality
from engine.music_theory.types import STANDARD_TUNING, GuitarChordShape, Tuning

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

POSITION_BUCKETS: tuple[int, ...] = DEFAULT_VOICING_CONFIG.position_buckets

INVERSION_LABELS: tuple[str, ...] = ("Root", "1st inv", "2nd inv")

# Barre templates: fret offsets from the root fret per string. None = muted.
_E_SHAPE: dict[TriadQuality, tuple[int | None, ...]] = {
    TriadQuality.MAJOR: (0, 2, 2, 1, 0, 0),
    TriadQuality.MINOR: (0, 2, 2, 0, 0, 0),
}
_A_SHAPE: dict[TriadQuality, tuple[int | None, ...]] = {
    TriadQuality.MAJOR: (None, 0, 2, 2, 2, 0),
    TriadQuality.MINOR: (None, 0, 2, 2, 1, 0),
}


@dataclass(frozen=True)
class StringSet:
    """Three adjacent strings used for a triad grip, low to high."""

    name: str
    strings: tuple[int, int, int]


TRIAD_STRING_SETS: tuple[StringSet, ...] = (
    StringSet(name="EAD", strings=(0, 1, 2)),
    StringSet(name="ADG", strings=(1, 2, 3)),
    StringSet(name="DGB", strings=(2, 3, 4)),
    StringSet(name="GBE", strings=(3, 4, 5)),
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def triad_pitch_classes(root_pc: int, quality: TriadQuality) -> tuple[int, int, int]:
    """Return (root, third, fifth) pitch classes.

    Examples:
        >>> triad_pitch_classes(11, TriadQuality.DIMINISHED)
        (11, 2, 5)
    """
    return (
        root_pc % 12,
        (root_pc + quality.third) % 12,
        (root_pc + quality.fifth) % 12,
    )


def bucket_for_base_fret(
    base_fret: int,
    *,
    config: VoicingConfig = DEFAULT_VOICING_CONFIG,
) -> int:
    """Map a grip's lowest fret to the nearest position bucket.

    Frets 0 and 1 belong to the open position; otherwise the nearest
    non-open bucket wins, ties going to the lower bucket.
    """
    buckets = config.position_buckets
    if base_fret <= 1 or len(buckets) == 1:
        return buckets[0]
    return min(buckets[1:], key=lambda p: abs(base_fret - p))


def lowest_fret_for_pitch_class(
    target_pc: int,
    string: int,
    *,
    tuning: Tuning = STANDARD_TUNING,
    max_fret: int = 12,
) -> int | None:
    """Lowest fret (0..max_fret) on *string* that sounds *target_pc*."""
    for fret in range(max_fret + 1):
        if tuning.pitch_class_at(string, fret) == target_pc:
            return fret
    return None


def _triad_label(set_name: str, position: int, inversion: int, quality: TriadQuality) -> str:
    quality_part = f" {quality.label}" if quality.label else ""
    position_part = "Open" if position == 0 else f"Pos {position}"
    return f"Triad{quality_part} • {set_name} • {INVERSION_LABELS[inversion]} • {position_part}"


# ---------------------------------------------------------------------------
# Barre grips
# ---------------------------------------------------------------------------


def barre_shapes(
    root_pc: int,
    quality: TriadQuality,
    *,
    tuning: Tuning = STANDARD_TUNING,
    config: VoicingConfig = DEFAULT_VOICING_CONFIG,
) -> list[GuitarChordShape]:
    """E-shape and A-shape barre grips for major and minor triads.

    There are no barre templates for diminished or augmented triads, so
    those return an empty list.
    """
    if quality not in _E_SHAPE:
        return []

    suffix = " (m)" if quality is TriadQuality.MINOR else ""
    shapes: list[GuitarChordShape] = []
    for shape_name, templates, root_string, string_set in (
        ("E-shape", _E_SHAPE, 0, "EADGBE"),
        ("A-shape", _A_SHAPE, 1, "ADGBE"),
    ):
        root_fret = lowest_fret_for_pitch_class(
            root_pc, root_string, tuning=tuning, max_fret=config.max_fret
        )
        if root_fret is None:
            continue
        frets = {
            string: root_fret + offset
            for string, offset in enumerate(templates[quality])
            if offset is not None
        }
        shapes.append(
            GuitarChordShape.from_frets(
                f"{shape_name} barre{suffix}",
                frets,
                inversion=0,
                position_bucket=bucket_for_base_fret(root_fret, config=config),
                is_triad=False,
                string_set=string_set,
            )
        )
    return shapes


# ---------------------------------------------------------------------------
# Triad grips
# ---------------------------------------------------------------------------


def grip_score(frets: tuple[int, int, int], position: int) -> float:
    """Ranking score of a triad grip; lower is better.

    ``10 * span + mean fret``, plus ``0.5 * |lowest fret - position|`` outside
    the open position.

    Examples:
        >>> round(grip_score((5, 5, 3), 0), 2)
        24.33
        >>> round(grip_score((9, 8, 8), 7), 2)
        18.83
    """
    low = min(frets)
    score = (max(frets) - low) * 10.0 + sum(frets) / 3.0
    if position != 0:
        score += abs(low - position) * 0.5
    return score


def search_triad_grip(
    strings: tuple[int, int, int],
    position: int,
    triad: tuple[int, int, int],
    bass_pc: int,
    *,
    tuning: Tuning = STANDARD_TUNING,
    config: VoicingConfig = DEFAULT_VOICING_CONFIG,
) -> tuple[int, int, int] | None:
    """Find the best-scoring fret triple for one string set and inversion.

    Args:
        strings:  Three string indices, low to high
        position: Position bucket; 0 searches frets 0..open_window
        triad:    (root, third, fifth) pitch classes
        bass_pc:  Pitch class required on the lowest string
        tuning:   Instrument tuning
        config:   Search window and span limits

    Returns:
        (f0, f1, f2) frets for the three strings, or None if no grip fits.
    """
    is_open = position == 0
    min_fret = 0 if is_open else position
    max_fret = config.open_window if is_open else min(config.max_fret, position + config.position_window)
    frets = range(min_fret, max_fret + 1)
    tones = frozenset(triad)
    s0, s1, s2 = strings

    best: tuple[int, int, int] | None = None
    best_score = float("inf")

    for f0 in frets:
        pc0 = tuning.pitch_class_at(s0, f0)
        if pc0 != bass_pc or pc0 not in tones:
            continue
        p0 = tuning.pitch_at(s0, f0)

        for f1 in frets:
            pc1 = tuning.pitch_class_at(s1, f1)
            p1 = tuning.pitch_at(s1, f1)
            if pc1 not in tones or p1 <= p0:
                continue

            for f2 in frets:
                pc2 = tuning.pitch_class_at(s2, f2)
                p2 = tuning.pitch_at(s2, f2)
                if pc2 not in tones or p2 <= p1:
                    continue
                if len({pc0, pc1, pc2}) != 3:
                    continue

                span = max(f0, f1, f2) - min(f0, f1, f2)
                if not is_open and span > config.max_span:
                    continue

                score = grip_score((f0, f1, f2), position)
                if score < best_score:
                    best_score = score
                    best = (f0, f1, f2)

    return best


def triad_shapes(
    root_pc: int,
    quality: TriadQuality,
    *,
    tuning: Tuning = STANDARD_TUNING,
    config: VoicingConfig = DEFAULT_VOICING_CONFIG,
) -> list[GuitarChordShape]:
    """All triad grips across positions, string sets and inversions."""
    triad = triad_pitch_classes(root_pc, quality)
    shapes: list[GuitarChordShape] = []

    for position in config.position_buckets:
        for string_set in TRIAD_STRING_SETS:
            for inversion, bass_pc in enumerate(triad):
                grip = search_triad_grip(
                    string_set.strings,
                    position,
                    triad,
                    bass_pc,
                    tuning=tuning,
                    config=config,
                )
                if grip is None:
                    continue
                shapes.append(
                    GuitarChordShape.from_frets(
                        _triad_label(string_set.name, position, inversion, quality),
                        dict(zip(string_set.strings, grip, strict=True)),
                        inversion=inversion,
                        position_bucket=position,
                        is_triad=True,
                        string_set=string_set.name,
                    )
                )
    return shapes


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def display_sort_key(shape: GuitarChordShape) -> tuple[int, int, int, str]:
    """Ordering for display: position, base fret, barre before triad, label."""
    bucket = shape.position_bucket if shape.position_bucket is not None else 999
    return (bucket, shape.base_fret, 1 if shape.is_triad else 0, shape.label)


def generate_voicings(
    root: str,
    quality: str,
    *,
    tuning: Tuning = STANDARD_TUNING,
    config: VoicingConfig = DEFAULT_VOICING_CONFIG,
) -> tuple[GuitarChordShape, ...]:
    """Generate barre and triad grips for a chord.

    Args:
        root:    Root spelling, e.g. "B", "F#", "Eb"
        quality: Free-text quality, e.g. "", "m", "maj7", "dim", "+"
        tuning:  Instrument tuning (standard by default)
        config:  Position buckets and search limits

    Returns:
        Grips ordered by position bucket, base fret, barre-before-triad, then
        label. Empty when *root* is not a note.

    Examples:
        >>> shapes = generate_voicings("A", "m")
        >>> shapes[0].label
        'A-shape barre (m)'
    """
    root_pc = pitch_class(root)
    if root_pc is None:
        return ()

    triad_quality = classify_quality(quality)
    shapes = barre_shapes(root_pc, triad_quality, tuning=tuning, config=config)
    shapes.extend(triad_shapes(root_pc, triad_quality, tuning=tuning, config=config))
    shapes.sort(key=display_sort_key)
    return tuple(shapes)

"""
Query normalisation and expansion for chord dictionary search.

Turns what a user has typed so far into the keys the index understands:

Design:
    - ``normalize_key()`` is the single normalisation used for every index key
      and every query, so lookups are key-stable.
    - ``PredictiveRule`` entries in ``PREDICTIVE_RULES`` map partial typing
      ("gs", "gsh", "gflat") to a chord symbol. Rules are tried in order and
      only the first match applies.
    - ``enharmonic_queries()`` swaps the root for its enharmonic spelling(s)
      and keeps the quality suffix unchanged.
    - ``expand_query()`` produces quality-synonym and common-suffix variants
      for the fuzzy stage of search.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass

from engine.music_theory.notes import normalize_accidentals

# ---------------------------------------------------------------------------
# Value objects
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PredictiveRule:
    """A (matcher, rewrite) pair for partial chord typing.

    Attributes:
        name: Rule identifier (e.g. ``"partial_sharp"``).
        pattern: Regex matched against the whole normalised query.
        rewrite: Builds the replacement from the match.
    """

    name: str
    pattern: re.Pattern[str]
    rewrite: Callable[[re.Match[str]], str]


# ---------------------------------------------------------------------------
# Rule registries (order is significant)
# ---------------------------------------------------------------------------

PREDICTIVE_RULES: tuple[PredictiveRule, ...] = (
    # "gs", "gsh", "gsha", "gshar", "gsharp" → "g#"
    PredictiveRule(
        name="partial_sharp",
        pattern=re.compile(r"^([a-g])s(h|ha|har|harp)?$"),
        rewrite=lambda m: f"{m.group(1)}#",
    ),
    # "gf", "gfl", "gfla", "gflat" → "gb"
    PredictiveRule(
        name="partial_flat",
        pattern=re.compile(r"^([a-g])f(l|la|lat)?$"),
        rewrite=lambda m: f"{m.group(1)}b",
    ),
    # "g sharp" with space
    PredictiveRule(
        name="spaced_sharp",
        pattern=re.compile(r"^([a-g])\s*sharp$"),
        rewrite=lambda m: f"{m.group(1)}#",
    ),
    # "g flat" with space
    PredictiveRule(
        name="spaced_flat",
        pattern=re.compile(r"^([a-g])\s*flat$"),
        rewrite=lambda m: f"{m.group(1)}b",
    ),
)

WORD_REPLACEMENTS: tuple[tuple[str, str], ...] = (
    ("sharp", "#"),
    ("flat", "b"),
    ("major", "maj"),
    ("minor", "min"),
    ("diminished", "dim"),
    ("augmented", "aug"),
)

# Bidirectional for the five black keys; the theoretical spellings map to
# their practical equivalents.
ENHARMONIC_ROOTS: dict[str, str] = {
    "cb": "b",
    "fb": "e",
    "b#": "c",
    "e#": "f",
    "c#": "db",
    "db": "c#",
    "d#": "eb",
    "eb": "d#",
    "f#": "gb",
    "gb": "f#",
    "g#": "ab",
    "ab": "g#",
    "a#": "bb",
    "bb": "a#",
}

QUALITY_EXPANSIONS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("maj", ("major", "M", "")),
    ("min", ("minor", "m", "-")),
    ("m", ("min", "minor", "-")),
    ("dim", ("diminished", "°", "o")),
    ("aug", ("augmented", "+", "#5")),
    ("7", ("dom7", "dominant7")),
    ("maj7", ("major7", "M7", "Δ7")),
    ("min7", ("minor7", "m7", "-7")),
)

# Suffixes tried when the query is a bare root letter
COMMON_SUFFIXES: tuple[str, ...] = ("maj", "min", "7", "m", "m7", "maj7", "#", "b")

QUALITY_PRIORITY: dict[str, int] = {
    "maj": 0,
    "min": 1,
    "7": 2,
    "m7": 3,
    "maj7": 4,
    "dim": 5,
    "aug": 6,
    "sus4": 7,
    "sus2": 8,
    "9": 9,
    "m9": 10,
    "maj9": 11,
}
UNRANKED_PRIORITY: int = 20

_ROOT_LETTER = re.compile(r"[a-g]")


# ---------------------------------------------------------------------------
# Core functions
# ---------------------------------------------------------------------------


def normalize_key(text: str) -> str:
    """Trim, lowercase, ASCII accidentals, strip all whitespace.

    Example:
        >>> normalize_key(" F♯ m7 ")
        'f#m7'
    """
    return re.sub(r"\s+", "", normalize_accidentals(text).lower())


def apply_predictive_patterns(query: str) -> str:
    """Rewrite partial typing into a chord symbol.

    The first matching ``PREDICTIVE_RULES`` entry is applied, then the word
    replacements ("sharp" → "#", "minor" → "min", ...).

    Examples:
        >>> apply_predictive_patterns("gsh")
        'g#'
        >>> apply_predictive_patterns("Bb minor")
        'bbmin'
    """
    result = normalize_key(query)
    for rule in PREDICTIVE_RULES:
        match = rule.pattern.match(result)
        if match is not None:
            result = rule.rewrite(match)
            break
    for word, replacement in WORD_REPLACEMENTS:
        result = result.replace(word, replacement)
    return result


def split_root(query: str) -> tuple[str, str]:
    """Split a normalised query into (root prefix, quality suffix).

    The root is two characters when the second one is "#" or "b", otherwise
    one character.
    """
    if len(query) >= 2 and query[1] in ("#", "b"):
        return query[:2], query[2:]
    return query[:1], query[1:]


def enharmonic_roots(root: str) -> list[str]:
    """Every root spelling sharing a pitch class with *root*, forward then reverse."""
    found: list[str] = []
    forward = ENHARMONIC_ROOTS.get(root)
    if forward is not None:
        found.append(forward)
    for spelling, target in ENHARMONIC_ROOTS.items():
        if target == root and spelling not in found:
            found.append(spelling)
    return found


def enharmonic_queries(query: str) -> list[str]:
    """Alternate spellings of a normalised query's root, suffix kept.

    Examples:
        >>> enharmonic_queries("c#m7")
        ['dbm7']
        >>> enharmonic_queries("b")
        ['cb']
    """
    if not query:
        return []
    root, quality = split_root(query)
    return [alt + quality for alt in enharmonic_roots(root)]


def expand_query(query: str) -> list[str]:
    """Fuzzy variants of a normalised query.

    - every quality synonym found in the query is swapped for each of its
      alternatives (first occurrence only)
    - a bare root letter gets the common chord suffixes
    - a two-letter "<root>s" / "<root>f" gets the sharp / flat root
      ("bf" is left alone: "b" + "f" is not a flat spelling)
    """
    expansions: list[str] = []

    for synonym, alternatives in QUALITY_EXPANSIONS:
        if synonym in query:
            expansions.extend(query.replace(synonym, alt, 1) for alt in alternatives)

    if len(query) == 1 and _ROOT_LETTER.match(query):
        expansions.extend(f"{query}{suffix}" for suffix in COMMON_SUFFIXES)

    if len(query) == 2 and _ROOT_LETTER.match(query[0]):
        root, second = query[0], query[1]
        if second == "s":
            expansions.append(f"{root}#")
        elif second == "f" and root != "b":
            expansions.append(f"{root}b")

    return expansions


def quality_priority(quality: str) -> int:
    """Ranking weight of a chord quality id; common qualities sort first."""
    return QUALITY_PRIORITY.get(quality, UNRANKED_PRIORITY)

"""
Chord dictionary loading.

Reads the enriched chord dataset (a JSON list of chord records), validates
each record with pydantic and builds the search index. The first candidate
file that loads wins; the rest are fallbacks for older asset layouts.

Every failure surfaces as ``DictionaryLoadError``: a missing dictionary is
fatal at startup and must not degrade silently into empty search results.
"""

import json
import logging
import os
from collections.abc import Sequence
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from engine.chord_index import ChordDefinition, ChordIndex

logger = logging.getLogger(__name__)

DICTIONARY_PATH_ENV = "CHORD_DICTIONARY_PATH"

DEFAULT_CANDIDATES: tuple[str, ...] = (
    "assets/data/chords_dataset_enriched_from_split.patched.json",
    "assets/data/chords_dataset_enriched_from_split.json",
    "assets/chords_dataset_enriched_from_split.patched.json",
    "assets/chords_dataset_enriched_from_split.json",
)

_RECORDS_ADAPTER: TypeAdapter[list[ChordDefinition]] = TypeAdapter(list[ChordDefinition])


class DictionaryLoadError(Exception):
    """Raised when no chord dictionary could be loaded.

    Args:
        source: Path (or description) of the last source tried.
        reason: The last underlying failure, as text.
    """

    def __init__(self, source: str, reason: str) -> None:
        """Initialize with the failing source and the underlying reason."""
        self.source = source
        self.reason = reason
        super().__init__(f"Failed to load chord dictionary from {source}. Last error: {reason}")


def parse_chord_records(payload: object, *, source: str = "<memory>") -> list[ChordDefinition]:
    """
    Validate decoded dictionary JSON into chord records.

    Args:
        payload: Result of ``json.loads`` on the dictionary file.
        source: Where the payload came from, for error messages.

    Returns:
        Records in file order.

    Raises:
        DictionaryLoadError: If the top level is not a list, or any record
            fails validation.
    """
    if not isinstance(payload, list):
        raise DictionaryLoadError(
            source, f"dataset JSON must be a list at the top level, got {type(payload).__name__}"
        )
    try:
        return _RECORDS_ADAPTER.validate_python(payload)
    except ValidationError as exc:
        raise DictionaryLoadError(source, str(exc)) from exc


def _candidate_paths(candidates: Sequence[str | Path] | None) -> list[Path]:
    if candidates is not None:
        return [Path(c) for c in candidates]
    override = os.environ.get(DICTIONARY_PATH_ENV)
    if override:
        return [Path(override)]
    return [Path(c) for c in DEFAULT_CANDIDATES]


def load_chord_dictionary(
    candidates: Sequence[str | Path] | None = None,
) -> list[ChordDefinition]:
    """
    Load chord records from the first readable candidate file.

    Args:
        candidates: Files to try in order. Defaults to the
            ``CHORD_DICTIONARY_PATH`` environment variable when set,
            otherwise ``DEFAULT_CANDIDATES`` relative to the working
            directory.

    Returns:
        Validated chord records.

    Raises:
        DictionaryLoadError: If no candidate could be read and decoded, or
            the file that was read is not a valid dictionary.
    """
    paths = _candidate_paths(candidates)
    if not paths:
        raise DictionaryLoadError("<no candidates>", "no dictionary paths were given")

    last_source = ""
    last_error: Exception | None = None
    for path in paths:
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.warning("Chord dictionary candidate %s unusable: %s", path, exc)
            last_source, last_error = str(path), exc
            continue

        records = parse_chord_records(payload, source=str(path))
        logger.info("Loaded %d chord records from %s", len(records), path)
        return records

    raise DictionaryLoadError(last_source, str(last_error)) from last_error


def load_chord_index(candidates: Sequence[str | Path] | None = None) -> ChordIndex:
    """Load the chord dictionary and build its search index."""
    return ChordIndex.build(load_chord_dictionary(candidates))

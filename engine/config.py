"""
Configuration dataclasses for the voicing generator and chord search.

These immutable config objects decouple tuning knobs from function signatures,
making it easy to define standard configurations and reuse them across callers.
"""

from dataclasses import dataclass

# Highest fret considered by any search. Anything above the 12th fret repeats
# the open-position pitch classes an octave higher.
MAX_SUPPORTED_FRET: int = 24


@dataclass(frozen=True)
class VoicingConfig:
    """
    Configuration for guitar voicing generation.

    Attributes:
        position_buckets: Canonical starting frets used to group voicings.
            The first bucket must be 0 (open position).
        max_span: Maximum fret span (max - min) for a triad grip outside the
            open position. Defaults to 4, one hand's reach.
        open_window: Highest fret searched for open-position triads.
        position_window: Frets searched above a non-open bucket's start.
        max_fret: Hard ceiling for every fret search.

    Example:
        >>> config = VoicingConfig(position_buckets=(0, 5, 7), max_span=3)
        >>> shapes = generate_voicings("A", "m", config=config)
    """

    position_buckets: tuple[int, ...] = (0, 5, 7, 9, 12)
    max_span: int = 4
    open_window: int = 5
    position_window: int = 5
    max_fret: int = 12

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if not self.position_buckets:
            raise ValueError("position_buckets must not be empty")
        if self.position_buckets[0] != 0:
            raise ValueError(
                f"position_buckets must start with 0 (open position), got {self.position_buckets}"
            )
        if list(self.position_buckets) != sorted(set(self.position_buckets)):
            raise ValueError(
                f"position_buckets must be strictly increasing, got {self.position_buckets}"
            )
        if self.max_span < 0:
            raise ValueError(f"max_span must be non-negative, got {self.max_span}")
        if self.open_window < 0 or self.position_window < 0:
            raise ValueError("search windows must be non-negative")
        if not (0 < self.max_fret <= MAX_SUPPORTED_FRET):
            raise ValueError(
                f"max_fret must be in [1, {MAX_SUPPORTED_FRET}], got {self.max_fret}"
            )
        if self.position_buckets[-1] > self.max_fret:
            raise ValueError(
                f"position bucket {self.position_buckets[-1]} exceeds max_fret ({self.max_fret})"
            )


@dataclass(frozen=True)
class SearchConfig:
    """
    Configuration for chord dictionary search.

    Attributes:
        default_limit: Result cap used when ``search()`` is called without
            an explicit limit.
        suggestion_limit: Result cap for typeahead suggestions.
    """

    default_limit: int = 50
    suggestion_limit: int = 8

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.default_limit <= 0:
            raise ValueError(f"default_limit must be positive, got {self.default_limit}")
        if self.suggestion_limit <= 0:
            raise ValueError(
                f"suggestion_limit must be positive, got {self.suggestion_limit}"
            )


# Pre-defined configurations

DEFAULT_VOICING_CONFIG = VoicingConfig()
"""Standard guitar positions: open, 5th, 7th, 9th and 12th fret."""

DEFAULT_SEARCH_CONFIG = SearchConfig()
"""50 results for search, 8 for typeahead suggestions."""

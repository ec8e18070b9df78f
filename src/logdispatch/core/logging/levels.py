# src/logdispatch/core/logging/levels.py
"""
Level table: the fixed, bidirectional mapping between severity names and ranks.

Rank 1 is the most severe. The table is a read-only constant, so every helper
here is pure and safe to call from any thread.
"""

from types import MappingProxyType
from typing import Iterable, Mapping

from logdispatch.exceptions import InvalidLevelError, LoggerConfigurationError

LOG_LEVELS: Mapping[str, int] = MappingProxyType({
    "emergency": 1,
    "alert": 2,
    "critical": 3,
    "error": 4,
    "warning": 5,
    "notice": 6,
    "info": 7,
    "debug": 8,
})

_NAMES_BY_RANK: Mapping[int, str] = MappingProxyType({rank: name for name, rank in LOG_LEVELS.items()})


def rank_of(name: str) -> int | None:
    """Return the rank for a severity name, or None when the name is unknown."""
    return LOG_LEVELS.get(name)


def name_of(rank: int) -> str | None:
    """Return the severity name for a rank, or None when no severity has that rank."""
    return _NAMES_BY_RANK.get(rank)


def _as_rank(value) -> int | None:
    # bool is an int subclass; True must not mean "alert"
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, (float, str)):
        try:
            number = float(value)
        except ValueError:
            return None
        # "4", "4.0" and 4.0 all mean rank 4; 4.5 is no rank at all
        if number.is_integer():
            return int(number)
    return None


def normalize_level(level: str | int) -> str:
    """
    Return the canonical severity name for a caller-supplied level.

    Numeric ranks (ints, integral floats, or strings holding one of those) are mapped through the table first.
    Anything that does not land on one of the eight names raises InvalidLevelError.
    """
    rank = _as_rank(level)
    name = name_of(rank) if rank is not None else level

    if not isinstance(name, str) or name not in LOG_LEVELS:
        raise InvalidLevelError.for_invalid_level(level)
    return name


def expand_threshold(threshold: int | str | Iterable[int | str]) -> frozenset[str]:
    """
    Convert a threshold setting into the set of loggable severity names.

    - a single rank N means "N and everything more severe" (ranks 1..N); 0 logs nothing
    - an explicit collection lists ranks and/or names one by one
    """
    rank = _as_rank(threshold)
    if rank is not None:
        return frozenset(name for name, r in LOG_LEVELS.items() if r <= rank)

    if isinstance(threshold, str):
        raise LoggerConfigurationError.for_invalid_threshold(threshold)

    loggable = set()
    for entry in threshold:
        try:
            loggable.add(normalize_level(entry))
        except InvalidLevelError as exc:
            raise LoggerConfigurationError.for_invalid_threshold(entry) from exc
    return frozenset(loggable)


__all__ = ["LOG_LEVELS", "rank_of", "name_of", "normalize_level", "expand_threshold"]

from typing import Any


def to_lowercase(value: str | None) -> str | None:
    """
    Converts a string to lowercase if it's not None.
    """
    if value is None:
        return None
    return value.lower()


def parse_threshold(value: Any) -> Any:
    """
    Split a comma separated threshold string into a list of entries.

    "error, critical" -> ["error", "critical"]; anything else is returned unchanged
    and left to field validation (a plain rank like "4" stays a scalar).
    """
    if isinstance(value, str) and "," in value:
        return [part.strip().lower() for part in value.split(",") if part.strip()]
    return value

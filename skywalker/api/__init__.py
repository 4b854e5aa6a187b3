"""Field decoding helpers shared by the API modules."""
from __future__ import annotations

from ..errors import ResponseFormatError


def is_int(value) -> bool:
    """JSON integer check; bool is an int subclass in Python but not in JSON."""
    return isinstance(value, int) and not isinstance(value, bool)


def require_int(obj: dict, key: str) -> int:
    value = obj.get(key)
    if not is_int(value):
        raise ResponseFormatError(f"Field {key!r} must be an integer, got {value!r}")
    return value


def require_number(obj: dict, key: str) -> float:
    value = obj.get(key)
    if not (is_int(value) or isinstance(value, float)):
        raise ResponseFormatError(f"Field {key!r} must be a number, got {value!r}")
    return float(value)


def require_object(value) -> dict:
    if not isinstance(value, dict):
        raise ResponseFormatError(f"Expected JSON object but got {type(value).__name__}")
    return value

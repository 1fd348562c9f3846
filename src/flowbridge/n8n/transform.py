"""Declarative payload reshaping for event-triggered executions."""

from collections.abc import Mapping
from typing import Any

_MISSING = object()


def resolve_path(data: Any, path: str) -> Any:
    """Walk a dotted path into nested mappings/lists.

    Returns the module sentinel when any segment is absent. A present None
    is a real value and is returned as such.
    """
    current = data
    for segment in path.split("."):
        if isinstance(current, Mapping):
            if segment not in current:
                return _MISSING
            current = current[segment]
        elif isinstance(current, list) and segment.isdigit():
            index = int(segment)
            if index >= len(current):
                return _MISSING
            current = current[index]
        else:
            return _MISSING
    return current


def apply_transform(data: Mapping[str, Any], transform: Mapping[str, str]) -> dict[str, Any]:
    """Build a new payload from target-field -> source-path pairs.

    Target fields whose path does not resolve are left out of the result.

    Example:
        >>> apply_transform({"user": {"email": "a@b.c"}}, {"to": "user.email", "x": "nope"})
        {'to': 'a@b.c'}
    """
    result: dict[str, Any] = {}
    for target_key, source_path in transform.items():
        value = resolve_path(data, source_path)
        if value is not _MISSING:
            result[target_key] = value
    return result

"""Soft accessors for untyped workload documents.

A workload document is a nested ``dict``/``list`` tree whose schema the
pipeline does not own. The helpers here never raise on a missing or
wrongly-typed branch: they report "absent" instead, so every pass can be
best-effort.
"""

from typing import Any, Dict, List, Optional, Tuple

_MISSING = object()


def get_value(data: Any, *path: str) -> Tuple[Any, bool]:
    """Walk ``path`` through nested mappings.

    Returns:
        Tuple of (value, found). ``found`` is False when any intermediate
        node is absent or not a mapping.
    """
    current = data
    for key in path:
        if not isinstance(current, dict):
            return None, False
        current = current.get(key, _MISSING)
        if current is _MISSING:
            return None, False
    return current, True


def get_value_n(data: Any, *path: str) -> Any:
    """Like get_value() but returns only the value (None when absent)."""
    value, _ = get_value(data, *path)
    return value


def put_value(data: Dict[str, Any], value: Any, *path: str) -> None:
    """Set ``value`` at ``path``, creating (or replacing non-mapping) parents."""
    current = data
    for key in path[:-1]:
        child = current.get(key)
        if not isinstance(child, dict):
            child = {}
            current[key] = child
        current = child
    current[path[-1]] = value


def remove_value(data: Dict[str, Any], *path: str) -> Any:
    """Remove the leaf at ``path`` if present and return it (None otherwise)."""
    parent, found = get_value(data, *path[:-1])
    if not found or not isinstance(parent, dict):
        return None
    return parent.pop(path[-1], None)


def get_slice(data: Any, *path: str) -> List[Dict[str, Any]]:
    """Return the mapping elements of the list at ``path``.

    Non-mapping elements are skipped; an absent or non-list value yields [].
    """
    value, found = get_value(data, *path)
    if not found or not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def to_map(value: Any) -> Optional[Dict[str, Any]]:
    """Return ``value`` if it is a mapping, else None."""
    if isinstance(value, dict):
        return value
    return None


def to_str(value: Any) -> str:
    """Render a scalar as the API layer would: None becomes ""."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def to_number(value: Any) -> int:
    """Convert an int, integral float or numeric string to int.

    Raises:
        ValueError: If the value has no integer interpretation, including
            booleans and non-finite floats (inf, nan, "1e999")
    """
    if isinstance(value, bool):
        raise ValueError(f"not a number: {value!r}")
    if isinstance(value, int):
        return value
    try:
        if isinstance(value, float):
            return int(value)
        text = to_str(value).strip()
        try:
            return int(text)
        except ValueError:
            return int(float(text))
    except OverflowError:
        raise ValueError(f"not a finite number: {value!r}") from None


def is_empty(value: Any) -> bool:
    """True for None, "" and empty containers."""
    if value is None:
        return True
    if isinstance(value, (str, dict, list, tuple)):
        return len(value) == 0
    return False

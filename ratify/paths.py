"""Deep-path attribute lookup: ``deep_get({"a": {"b": 1}}, "a.b") == 1``."""
from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

_MISSING = object()


def _step(obj: Any, key: str) -> Any:
    if obj is None:
        return _MISSING
    if isinstance(obj, Mapping):
        return obj.get(key, _MISSING)
    if isinstance(obj, Sequence) and not isinstance(obj, (str, bytes, bytearray)):
        try:
            return obj[int(key)]
        except (ValueError, IndexError):
            return _MISSING
    return getattr(obj, key, _MISSING)


def deep_get(obj: Any, path: str, default: Any = None) -> Any:
    """Return the value at dotted ``path`` inside ``obj``, or ``default``.

    Segments walk mapping keys, then sequence indexes (``"items.0"``), then
    object attributes, so plain dicts, lists and model instances all work.
    A missing segment anywhere along the path yields ``default``.
    """
    current = obj
    for key in path.split("."):
        current = _step(current, key)
        if current is _MISSING:
            return default
    return current

"""Mapping helpers — rename, filter and compact dictionaries.

Typical use is shaping a payload before it leaves the application: keep only
the fields a consumer expects, rename them to the consumer's vocabulary and
drop empty values.

Example::

    from essentials.core.maps import compact, renake

    payload = renake(user, ["name", ("age", "years")])
    payload = compact(payload)
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any

KeySpec = Any  # key or (from, to) pair
Transform = Callable[[tuple[Any, Any]], Any]


def _identity(item: tuple[Any, Any]) -> Any:
    return item[1]


def renake(
    mapping: Mapping[Any, Any],
    keys: Sequence[KeySpec],
    transform: Transform | None = None,
) -> dict[Any, Any]:
    """Rename and/or filter keys, preserving only the ones listed.

    Each entry of ``keys`` is either a key (kept as is) or a ``(from, to)``
    pair (renamed). A listed key that is missing or ``None`` maps to ``None``
    and ``transform`` is not called for it. Otherwise the stored value is
    ``transform((target_key, value))``.

    Examples:
        >>> user = {"name": "Alice", "age": 30, "email": "alice@example.com"}
        >>> renake(user, ["name", ("age", "years")])
        {'name': 'Alice', 'years': 30}
        >>> renake({"price": 100, "discount": 10}, ["price", ("discount", "off")],
        ...        lambda item: item[1] * 2)
        {'price': 200, 'off': 20}
    """
    if not isinstance(mapping, Mapping):
        raise TypeError(f"renake() expects a mapping, got {type(mapping).__name__}")
    if not isinstance(keys, (list, tuple)):
        raise TypeError(f"renake() expects a list of keys, got {type(keys).__name__}")

    transform = transform or _identity
    renamed: dict[Any, Any] = {}
    for spec in keys:
        if isinstance(spec, tuple):
            source, target = spec
        else:
            source = target = spec

        value = mapping.get(source)
        renamed[target] = None if value is None else transform((target, value))
    return renamed


def _is_blank(value: Any) -> bool:
    return isinstance(value, (str, list, dict)) and len(value) == 0


def _require_mapping(mapping: Any, fn: str) -> None:
    if not isinstance(mapping, Mapping):
        raise TypeError(f"{fn}() expects a mapping, got {type(mapping).__name__}")


def compact_nil(mapping: Mapping[Any, Any]) -> dict[Any, Any]:
    """Remove entries whose value is ``None``.

    >>> compact_nil({"a": 1, "b": None, "c": "text"})
    {'a': 1, 'c': 'text'}
    """
    _require_mapping(mapping, "compact_nil")
    return {key: value for key, value in mapping.items() if value is not None}


def compact_blank(mapping: Mapping[Any, Any]) -> dict[Any, Any]:
    """Remove entries whose value is blank: ``""``, ``[]`` or ``{}``.

    >>> compact_blank({"a": "", "b": [], "c": {}, "d": 42})
    {'d': 42}
    """
    _require_mapping(mapping, "compact_blank")
    return {key: value for key, value in mapping.items() if not _is_blank(value)}


def compact(mapping: Mapping[Any, Any]) -> dict[Any, Any]:
    """Remove entries whose value is ``None`` or blank.

    >>> compact({"a": None, "b": "", "c": [], "d": {}, "e": "keep"})
    {'e': 'keep'}
    """
    _require_mapping(mapping, "compact")
    return {
        key: value
        for key, value in mapping.items()
        if value is not None and not _is_blank(value)
    }


__all__ = ["renake", "compact_nil", "compact_blank", "compact"]

"""Single-level property omission."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable, Dict, Iterable, List

Omitter = Callable[[Any], Any]


def _string_names(names: Iterable[Any] | None) -> List[str]:
    unique: Dict[str, None] = {}
    for name in names or ():
        if isinstance(name, str):
            unique.setdefault(name, None)
    return list(unique)


def omit_properties(value: Any, names: Iterable[Any]) -> Any:
    """Return a shallow copy of a mapping without the named top-level keys.

    Anything other than a mapping is returned untouched.
    """

    if not isinstance(value, Mapping):
        return value

    # Only top-level keys change so a shallow copy is enough.
    output = dict(value)
    for name in names:
        if isinstance(name, str):
            output.pop(name, None)
    return output


def _identity(value: Any) -> Any:
    return value


def create_omitter(names: Iterable[Any] | None) -> Omitter:
    property_names = _string_names(names)
    if not property_names:
        return _identity

    def _omit(value: Any) -> Any:
        return omit_properties(value, property_names)

    return _omit


def create_omit_properties_serializer(
    top_level_property_name: Any,
    omit_property_names: Iterable[Any] | None,
) -> Dict[str, Omitter]:
    """Build a serializer table entry omitting keys beneath one top-level property.

    Returns an empty table when there is nothing to omit.
    """

    property_names = _string_names(omit_property_names)
    if (
        not isinstance(top_level_property_name, str)
        or not top_level_property_name
        or not property_names
    ):
        return {}

    return {top_level_property_name: create_omitter(property_names)}


__all__ = [
    "create_omit_properties_serializer",
    "create_omitter",
    "omit_properties",
]

"""Exception serializers."""

from __future__ import annotations

import traceback
from typing import Any, Dict, Optional

_MAX_CAUSE_CHAIN = 16


def _cause_of(exc: BaseException) -> Optional[BaseException]:
    if exc.__cause__ is not None:
        return exc.__cause__
    if exc.__context__ is not None and not exc.__suppress_context__:
        return exc.__context__
    return None


def _stack_of(exc: BaseException) -> str:
    if exc.__traceback__ is None:
        return "".join(traceback.format_exception_only(type(exc), exc)).rstrip("\n")
    lines = traceback.format_exception(type(exc), exc, exc.__traceback__, chain=False)
    return "".join(lines).rstrip("\n")


def _own_properties(exc: BaseException) -> Dict[str, Any]:
    return {
        key: value
        for key, value in vars(exc).items()
        if not key.startswith("_")
    }


def _base_shape(exc: BaseException) -> Dict[str, Any]:
    shape: Dict[str, Any] = {
        "type": type(exc).__name__,
        "message": str(exc),
        "stack": _stack_of(exc),
    }
    for key, value in _own_properties(exc).items():
        shape.setdefault(key, value)
    return shape


def serialize_error(value: Any) -> Any:
    """Serialize an exception into a plain mapping.

    Chained causes are appended to ``stack`` as ``caused by:`` sections.
    Values that are not exceptions are returned unchanged.
    """

    if not isinstance(value, BaseException):
        return value

    shape = _base_shape(value)
    stacks = [shape["stack"]]
    seen = {id(value)}
    cause = _cause_of(value)
    while cause is not None and id(cause) not in seen and len(seen) < _MAX_CAUSE_CHAIN:
        seen.add(id(cause))
        stacks.append(f"caused by: {_stack_of(cause)}")
        cause = _cause_of(cause)

    shape["stack"] = "\n".join(stacks)
    return shape


def serialize_error_with_cause(value: Any) -> Any:
    """Serialize an exception, nesting its cause chain under ``cause``."""

    if not isinstance(value, BaseException):
        return value

    root = _base_shape(value)
    current = root
    seen = {id(value)}
    cause = _cause_of(value)
    while cause is not None and id(cause) not in seen and len(seen) < _MAX_CAUSE_CHAIN:
        seen.add(id(cause))
        nested = _base_shape(cause)
        current["cause"] = nested
        current = nested
        cause = _cause_of(cause)

    return root


__all__ = ["serialize_error", "serialize_error_with_cause"]

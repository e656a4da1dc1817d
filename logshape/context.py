"""Context fields merged into every record logged within a scope."""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import Any, Callable, Dict, Iterator, Mapping, Optional

_CONTEXT: ContextVar[Mapping[str, Any]] = ContextVar("logshape_context", default={})


Context = Mapping[str, Any]


def push_context(**context: Any) -> Token:
    current = dict(_CONTEXT.get())
    current.update(context)
    return _CONTEXT.set(current)


def pop_context(token: Token) -> None:
    _CONTEXT.reset(token)


def get_context() -> Dict[str, Any]:
    return dict(_CONTEXT.get())


def set_context(context: Mapping[str, Any]) -> Token:
    """Replace the current context."""

    return _CONTEXT.set(dict(context))


def clear_context() -> None:
    _CONTEXT.set({})


@contextmanager
def logger_context(**context: Any) -> Iterator[None]:
    """Context manager for temporary context fields."""

    token = push_context(**context)
    try:
        yield
    finally:
        pop_context(token)


def run_with_context(
    context: Context,
    func: Callable[..., Any],
    *args: Any,
    **kwargs: Any,
) -> Any:
    """Execute ``func`` with the provided logging context bound."""

    token = push_context(**context)
    try:
        return func(*args, **kwargs)
    finally:
        pop_context(token)


RequestMixin = Callable[[Any, Any], Mapping[str, Any]]


def _request_id_of(context: Any) -> Any:
    if isinstance(context, Mapping):
        return context.get("awsRequestId", context.get("aws_request_id"))
    return getattr(context, "aws_request_id", getattr(context, "awsRequestId", None))


def create_lambda_context_capture(
    request_mixin: Optional[RequestMixin] = None,
) -> Callable[[Any, Any], Token]:
    """Create a function capturing Lambda request context for later logging calls.

    The returned callable takes the handler's ``(event, context)`` and replaces
    the logging context with ``awsRequestId`` plus the output of
    ``request_mixin``.
    """

    def _capture(event: Any, context: Any) -> Token:
        captured: Dict[str, Any] = {"awsRequestId": _request_id_of(context)}
        if request_mixin is not None:
            captured.update(request_mixin(event, context))
        return set_context(captured)

    return _capture


__all__ = [
    "clear_context",
    "create_lambda_context_capture",
    "get_context",
    "logger_context",
    "pop_context",
    "push_context",
    "run_with_context",
    "set_context",
]

"""Flask integration helpers for logshape."""

from __future__ import annotations

import time
import uuid
from typing import Any, Iterable, Optional

from flask import Flask, Response, g, request

from .context import pop_context, push_context
from .logger import Logger, get_logger

REQUEST_ID_HEADER = "x-request-id"


def register_flask_context(
    app: Flask,
    logger: Optional[Logger] = None,
    *,
    request_id_header: str = REQUEST_ID_HEADER,
    exclude_routes: Iterable[str] = (),
) -> None:
    """Attach request lifecycle hooks for structured logging.

    Every record logged while a request is handled carries the request ID.
    A ``request`` record is logged once the response is ready, and failed
    requests are logged at error level on teardown.
    """

    http_logger = logger or get_logger("http")
    excluded = tuple(exclude_routes)

    def _should_log_route(path: str) -> bool:
        return not any(path.startswith(prefix) for prefix in excluded)

    @app.before_request
    def _logging_before_request() -> None:  # type: ignore[override]
        if not _should_log_route(request.path):
            return

        g._logging_start = time.perf_counter()
        rid = (request.headers.get(request_id_header) or "").strip()
        if not rid:
            rid = uuid.uuid4().hex
        g.request_id = rid

        g._logging_token = push_context(**{request_id_header: rid})

    @app.after_request
    def _logging_after_request(response: Response) -> Response:  # type: ignore[override]
        if not _should_log_route(request.path):
            return response

        http_logger.info(
            "request",
            req=request,
            res=response,
            route=request.url_rule.rule if request.url_rule else request.path,
            latency=_elapsed_ms(g.get("_logging_start")),
        )

        rid = g.get("request_id")
        if rid:
            response.headers.setdefault(request_id_header, rid)
        return response

    @app.teardown_request
    def _logging_teardown(_exc: Any) -> None:  # type: ignore[override]
        if _exc is not None and _should_log_route(request.path):
            http_logger.error(
                _exc,
                "request failed",
                req=request,
                latency=_elapsed_ms(g.pop("_logging_start", None)),
            )

        token = g.pop("_logging_token", None)
        if token is not None:
            pop_context(token)


def _elapsed_ms(start: float | None) -> float:
    if start is None:
        return 0.0
    return round((time.perf_counter() - start) * 1000.0, 3)


__all__ = ["REQUEST_ID_HEADER", "register_flask_context"]

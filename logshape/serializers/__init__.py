"""Default serializer table for HTTP requests, responses, headers and errors."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable, Dict, Iterable, Optional, Tuple

from .errors import serialize_error, serialize_error_with_cause
from .omit import (
    create_omit_properties_serializer,
    create_omitter,
    omit_properties,
)

Serializer = Callable[[Any], Any]

DEFAULT_OMIT_HEADER_NAMES: Tuple[str, ...] = (
    "x-envoy-attempt-count",
    "x-envoy-decorator-operation",
    "x-envoy-expected-rq-timeout-ms",
    "x-envoy-external-address",
    "x-envoy-internal",
    "x-envoy-peer-metadata",
    "x-envoy-peer-metadata-id",
    "x-envoy-upstream-service-time",
)

_SCALARS = (str, bytes, int, float, bool)


def _is_object(value: Any) -> bool:
    return value is not None and not isinstance(value, _SCALARS)


def _read(source: Any, *names: str) -> Any:
    """Return the first non-empty attribute or key among ``names``."""

    for name in names:
        if isinstance(source, Mapping):
            value = source.get(name)
        else:
            value = getattr(source, name, None)
        if value is not None:
            return value
    return None


def _as_dict(headers: Any) -> Any:
    """Copy a header container such as werkzeug's ``Headers`` into a dict.

    Names are lowercased so omission and redaction paths match regardless of
    how the framework capitalizes them. Plain mappings are left as given.
    """

    if headers is None or isinstance(headers, Mapping):
        return headers
    items = getattr(headers, "items", None)
    if callable(items):
        return {str(name).lower(): value for name, value in items()}
    return headers


def _compact(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in fields.items() if value is not None}


def serialize_request(request: Any) -> Any:
    """Project a request-like object onto method, url, headers and peer address."""

    if not _is_object(request):
        return request

    socket = _read(request, "socket", "connection")
    if socket is not None:
        remote_address = _read(socket, "remoteAddress", "remote_address")
        remote_port = _read(socket, "remotePort", "remote_port")
    else:
        remote_address = _read(request, "remote_addr")
        remote_port = None

    return _compact(
        {
            "method": _read(request, "method"),
            "url": _read(request, "url"),
            "headers": _as_dict(_read(request, "headers")),
            "remoteAddress": remote_address,
            "remotePort": remote_port,
        }
    )


def _status(response: Any) -> Optional[int]:
    status = _read(response, "statusCode", "status_code")
    if status is None:
        candidate = _read(response, "status")
        status = candidate if isinstance(candidate, int) else None
    return status


def serialize_response(response: Any) -> Any:
    """Project a response-like object onto status code and headers."""

    if not _is_object(response):
        return response

    return _compact(
        {
            "statusCode": _status(response),
            "headers": _as_dict(_read(response, "_header", "header", "headers")),
        }
    )


def create_serializers(
    omit_header_names: Optional[Iterable[str]] = DEFAULT_OMIT_HEADER_NAMES,
    serializers: Optional[Mapping[str, Serializer]] = None,
) -> Dict[str, Serializer]:
    """Build the serializer table; user serializers take precedence."""

    names = DEFAULT_OMIT_HEADER_NAMES if omit_header_names is None else omit_header_names
    omit_headers = create_omitter(names)

    def _headers_of(serialized: Any) -> Any:
        if isinstance(serialized, Mapping) and "headers" in serialized:
            return {**serialized, "headers": omit_headers(serialized["headers"])}
        return serialized

    table: Dict[str, Serializer] = {
        "err": serialize_error,
        "err_with_cause": serialize_error_with_cause,
        "req": lambda value: _headers_of(serialize_request(value)),
        "res": lambda value: _headers_of(serialize_response(value)),
        "headers": lambda value: omit_headers(_as_dict(value)),
    }
    table.update(serializers or {})
    return table


__all__ = [
    "DEFAULT_OMIT_HEADER_NAMES",
    "create_omit_properties_serializer",
    "create_omitter",
    "create_serializers",
    "omit_properties",
    "serialize_error",
    "serialize_error_with_cause",
    "serialize_request",
    "serialize_response",
]

"""Standardized JSON response helpers."""

from __future__ import annotations

from typing import Any, Mapping

from flask import Response, jsonify

from .errors import AppError
from .logging import current_request_id


def ok(data: Any, *, status: int = 200) -> Response:
    """Return a success envelope."""

    payload = {"success": True, "data": data}
    response = jsonify(payload)
    response.status_code = status
    return response


def created(data: Any) -> Response:
    """Return a success envelope for a newly created resource."""

    return ok(data, status=201)


def fail(error: AppError | Mapping[str, Any], *, status: int | None = None) -> Response:
    """Return a standardized failure envelope.

    The request id is echoed in the error body so a failure reported by a
    client can be matched to the server log line.
    """

    if isinstance(error, AppError):
        body = dict(error.to_dict())
        status = status or error.status_code
    else:
        body = dict(error)
        status = status or 400
    request_id = current_request_id()
    if request_id:
        body.setdefault("request_id", request_id)
    response = jsonify({"success": False, "error": body})
    response.status_code = status
    return response


__all__ = ["ok", "created", "fail"]

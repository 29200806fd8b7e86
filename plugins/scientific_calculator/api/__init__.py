"""API routes for the Scientific Calculator plugin."""

from __future__ import annotations

from typing import Any, Literal

from flask import Blueprint, Response, current_app, request
from pydantic import Field

from common.errors import LimitAppError, NotFoundAppError, ValidationAppError
from common.logging import get_logger
from common.responses import created, fail, ok
from common.validation import SchemaModel, ValidationError, parse_model

from ..core import (
    CalculatorSession,
    ExpressionError,
    SessionLimitError,
    SessionNotFoundError,
    SessionStore,
    StoreSettings,
    UnknownKeyError,
    evaluate_expression,
    get_registry,
    get_resolution_table,
    get_store,
    list_keys,
)

logger = get_logger()

MAX_KEYS_PER_REQUEST = 512


class EvaluatePayload(SchemaModel):
    expression: str
    angle_unit: Literal["radian", "degree"] = "radian"
    last_result: str | float | int | None = None


class SessionPayload(SchemaModel):
    angle_unit: Literal["radian", "degree"] = "degree"


class KeysPayload(SchemaModel):
    keys: list[str] = Field(min_length=1, max_length=MAX_KEYS_PER_REQUEST)


api_bp = Blueprint("scientific_calculator_api", __name__, url_prefix="/api/scientific_calculator")


def _plugin_settings() -> dict[str, Any]:
    return current_app.config.get("PLUGIN_SETTINGS", {}).get("scientific_calculator", {}) or {}


def _store() -> SessionStore:
    store = get_store()
    store.configure(StoreSettings.from_settings(_plugin_settings()))
    return store


def _invalid_request(exc: ValidationError) -> Response:
    return fail(
        ValidationAppError(
            message=str(exc),
            code="sci_calc.invalid_request",
            details=getattr(exc, "details", None),
        )
    )


def _session_missing() -> Response:
    return fail(
        NotFoundAppError(
            message="Calculator session expired or not found",
            code="sci_calc.session_not_found",
        )
    )


def _snapshot(session_id: str, session: CalculatorSession) -> dict[str, object]:
    return {"session_id": session_id, **session.snapshot()}


@api_bp.post("/evaluate")
def evaluate() -> Response:
    raw_payload = request.get_json(silent=True) or {}
    try:
        payload = parse_model(EvaluatePayload, raw_payload)
    except ValidationError as exc:
        return _invalid_request(exc)
    last_result = None if payload.last_result is None else str(payload.last_result)
    settings = StoreSettings.from_settings(_plugin_settings())
    try:
        result = evaluate_expression(
            payload.expression,
            angle_unit=payload.angle_unit,
            last_result=last_result,
            max_length=settings.max_expression_length,
        )
    except ExpressionError as exc:
        return fail(ValidationAppError(message=str(exc), code="sci_calc.invalid_expression"))
    return ok(result)


@api_bp.get("/functions")
def functions() -> Response:
    registry = get_registry()
    bindings = [
        {"key": key, "inverse": inverse, "hyperbolic": hyperbolic, "inserts": text}
        for (key, inverse, hyperbolic), text in get_resolution_table().items()
    ]
    return ok(
        {
            "functions": [entry.to_dict() for entry in registry.values()],
            "bindings": bindings,
            "keys": list_keys(),
        }
    )


@api_bp.post("/sessions")
def create_session() -> Response:
    raw_payload = request.get_json(silent=True) or {}
    try:
        payload = parse_model(SessionPayload, raw_payload)
    except ValidationError as exc:
        return _invalid_request(exc)
    try:
        session_id, session = _store().create(angle_unit=payload.angle_unit)
    except SessionLimitError as exc:
        logger.warning("calculator session limit reached")
        return fail(LimitAppError(message=str(exc), code="sci_calc.session_limit"))
    return created(_snapshot(session_id, session))


@api_bp.get("/sessions/<session_id>")
def get_session(session_id: str) -> Response:
    try:
        with _store().acquire(session_id) as session:
            snapshot = _snapshot(session_id, session)
    except SessionNotFoundError:
        return _session_missing()
    return ok(snapshot)


@api_bp.delete("/sessions/<session_id>")
def delete_session(session_id: str) -> Response:
    try:
        _store().delete(session_id)
    except SessionNotFoundError:
        return _session_missing()
    return ok({"session_id": session_id, "deleted": True})


@api_bp.post("/sessions/<session_id>/keys")
def press_keys(session_id: str) -> Response:
    raw_payload = request.get_json(silent=True) or {}
    try:
        payload = parse_model(KeysPayload, raw_payload)
    except ValidationError as exc:
        return _invalid_request(exc)
    try:
        with _store().acquire(session_id) as session:
            session.press_all(payload.keys)
            snapshot = _snapshot(session_id, session)
    except SessionNotFoundError:
        return _session_missing()
    except UnknownKeyError as exc:
        return fail(ValidationAppError(message=str(exc), code="sci_calc.invalid_key"))
    return ok(snapshot)


@api_bp.get("/sessions/<session_id>/history")
def history(session_id: str) -> Response:
    try:
        with _store().acquire(session_id) as session:
            entries = session.history.to_list()
    except SessionNotFoundError:
        return _session_missing()
    return ok({"session_id": session_id, "history": entries})


@api_bp.delete("/sessions/<session_id>/history")
def clear_history(session_id: str) -> Response:
    try:
        with _store().acquire(session_id) as session:
            session.clear_history()
            snapshot = _snapshot(session_id, session)
    except SessionNotFoundError:
        return _session_missing()
    return ok(snapshot)


@api_bp.post("/sessions/<session_id>/history/<int:index>/replay")
def replay_history(session_id: str, index: int) -> Response:
    try:
        with _store().acquire(session_id) as session:
            session.replay(index)
            snapshot = _snapshot(session_id, session)
    except SessionNotFoundError:
        return _session_missing()
    except IndexError as exc:
        return fail(NotFoundAppError(message=str(exc), code="sci_calc.history_not_found"))
    return ok(snapshot)


blueprints = [api_bp]


__all__ = [
    "blueprints",
    "evaluate",
    "functions",
    "create_session",
    "get_session",
    "delete_session",
    "press_keys",
    "history",
    "clear_history",
    "replay_history",
]

"""Exports for scientific calculator core."""

from .buffer import ERROR_MARKER, InputBuffer
from .engine import Evaluation, compute, evaluate_expression
from .errors import (
    EvaluationError,
    ExpressionError,
    ExpressionSyntaxError,
    NormalizationError,
    UnknownKeyError,
)
from .evaluator import canonicalize, evaluate_normalized, evaluate_tree
from .formatting import format_result, plain_number
from .history import HISTORY_LIMIT, HistoryEntry, HistoryTape
from .modes import ModeState, validate_angle_unit
from .normalizer import normalize_expression
from .parser import parse_expression, tokenize
from .registry import Registry, RegistryEntry, get_registry, get_resolution_table
from .session import CalculatorSession, canonical_key, list_keys
from .store import (
    SessionLimitError,
    SessionNotFoundError,
    SessionStore,
    StoreSettings,
    get_store,
    reset_session_store,
)

__all__ = [
    "ERROR_MARKER",
    "HISTORY_LIMIT",
    "CalculatorSession",
    "Evaluation",
    "EvaluationError",
    "ExpressionError",
    "ExpressionSyntaxError",
    "HistoryEntry",
    "HistoryTape",
    "InputBuffer",
    "ModeState",
    "NormalizationError",
    "Registry",
    "RegistryEntry",
    "SessionLimitError",
    "SessionNotFoundError",
    "SessionStore",
    "StoreSettings",
    "UnknownKeyError",
    "canonical_key",
    "canonicalize",
    "compute",
    "evaluate_expression",
    "evaluate_normalized",
    "evaluate_tree",
    "format_result",
    "get_registry",
    "get_resolution_table",
    "get_store",
    "list_keys",
    "normalize_expression",
    "parse_expression",
    "plain_number",
    "reset_session_store",
    "tokenize",
    "validate_angle_unit",
]

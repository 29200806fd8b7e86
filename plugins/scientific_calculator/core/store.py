"""In-memory registry of open calculator sessions."""

from __future__ import annotations

import threading
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Iterator, Mapping

from common.logging import get_logger

from .normalizer import MAX_EXPRESSION_LENGTH
from .session import CalculatorSession

logger = get_logger()

DEFAULT_MAX_SESSIONS = 256
DEFAULT_TTL_MINUTES = 30


class SessionNotFoundError(LookupError):
    """Raised when a session id is unknown or expired."""


class SessionLimitError(RuntimeError):
    """Raised when the store already holds the maximum number of sessions."""


@dataclass(slots=True)
class SessionRecord:
    session: CalculatorSession
    last_accessed: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def touch(self) -> None:
        self.last_accessed = datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class StoreSettings:
    max_sessions: int = DEFAULT_MAX_SESSIONS
    ttl: timedelta = timedelta(minutes=DEFAULT_TTL_MINUTES)
    max_expression_length: int = MAX_EXPRESSION_LENGTH

    @classmethod
    def from_settings(cls, settings: Mapping[str, Any] | None) -> "StoreSettings":
        """Build settings from the plugin section of ``config.yml``.

        Missing or malformed values fall back to the defaults.
        """

        settings = settings or {}
        max_sessions = _positive_int(settings.get("max_sessions"), DEFAULT_MAX_SESSIONS)
        ttl_minutes = _positive_int(settings.get("session_ttl_minutes"), DEFAULT_TTL_MINUTES)
        max_length = _positive_int(settings.get("max_expression_length"), MAX_EXPRESSION_LENGTH)
        return cls(
            max_sessions=max_sessions,
            ttl=timedelta(minutes=ttl_minutes),
            max_expression_length=max_length,
        )


def _positive_int(raw: Any, default: int) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return max(value, 1)


class SessionStore:
    """Thread-safe session registry with TTL purging.

    The store lock guards the mapping; each session carries its own lock so
    that its events are applied by one caller at a time.
    """

    def __init__(self, settings: StoreSettings | None = None) -> None:
        self.settings = settings or StoreSettings()
        self._items: dict[str, SessionRecord] = {}
        self._lock = threading.Lock()

    def configure(self, settings: StoreSettings) -> None:
        with self._lock:
            self.settings = settings

    def _purge_locked(self) -> None:
        now = datetime.now(timezone.utc)
        expired = [
            session_id
            for session_id, record in self._items.items()
            if now - record.last_accessed > self.settings.ttl
        ]
        for session_id in expired:
            self._items.pop(session_id, None)
        if expired:
            logger.info("expired %d calculator session(s)", len(expired))

    def create(self, *, angle_unit: str = "degree") -> tuple[str, CalculatorSession]:
        session = CalculatorSession(
            angle_unit=angle_unit,
            max_expression_length=self.settings.max_expression_length,
        )
        session_id = uuid.uuid4().hex
        with self._lock:
            self._purge_locked()
            if len(self._items) >= self.settings.max_sessions:
                raise SessionLimitError("Too many active calculator sessions")
            self._items[session_id] = SessionRecord(session=session)
        logger.info("created calculator session %s", session_id)
        return session_id, session

    def _get_record(self, session_id: str) -> SessionRecord:
        with self._lock:
            self._purge_locked()
            try:
                record = self._items[session_id]
            except KeyError as exc:
                raise SessionNotFoundError("Session expired or not found") from exc
            record.touch()
            return record

    @contextmanager
    def acquire(self, session_id: str) -> Iterator[CalculatorSession]:
        """Yield the session with its lock held."""

        record = self._get_record(session_id)
        with record.lock:
            yield record.session

    def delete(self, session_id: str) -> None:
        with self._lock:
            record = self._items.pop(session_id, None)
        if record is None:
            raise SessionNotFoundError("Session expired or not found")
        logger.info("closed calculator session %s", session_id)

    def clear(self) -> None:
        with self._lock:
            self._items.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


_SESSION_STORE = SessionStore()


def get_store() -> SessionStore:
    return _SESSION_STORE


def reset_session_store() -> None:
    _SESSION_STORE.clear()
    _SESSION_STORE.configure(StoreSettings())


__all__ = [
    "SessionLimitError",
    "SessionNotFoundError",
    "SessionRecord",
    "SessionStore",
    "StoreSettings",
    "get_store",
    "reset_session_store",
]

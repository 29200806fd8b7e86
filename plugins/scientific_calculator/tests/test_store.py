from datetime import datetime, timedelta, timezone

import pytest

from plugins.scientific_calculator.core import (
    SessionLimitError,
    SessionNotFoundError,
    SessionStore,
    StoreSettings,
)


def test_create_acquire_delete():
    store = SessionStore()
    session_id, session = store.create(angle_unit="radian")
    assert len(store) == 1
    with store.acquire(session_id) as acquired:
        assert acquired is session
        acquired.press_all(["1", "+", "1", "="])
    with store.acquire(session_id) as acquired:
        assert acquired.buffer.text == "2"
        assert acquired.modes.angle_unit == "radian"
    store.delete(session_id)
    with pytest.raises(SessionNotFoundError):
        with store.acquire(session_id):
            pass
    with pytest.raises(SessionNotFoundError):
        store.delete(session_id)


def test_session_limit():
    store = SessionStore(StoreSettings(max_sessions=2))
    store.create()
    store.create()
    with pytest.raises(SessionLimitError):
        store.create()


def test_idle_sessions_expire():
    store = SessionStore(StoreSettings(ttl=timedelta(minutes=5)))
    stale_id, _ = store.create()
    fresh_id, _ = store.create()
    store._items[stale_id].last_accessed = datetime.now(timezone.utc) - timedelta(minutes=6)
    with pytest.raises(SessionNotFoundError):
        with store.acquire(stale_id):
            pass
    with store.acquire(fresh_id):
        pass
    assert len(store) == 1


def test_expired_sessions_free_capacity():
    store = SessionStore(StoreSettings(max_sessions=1, ttl=timedelta(minutes=1)))
    old_id, _ = store.create()
    store._items[old_id].last_accessed = datetime.now(timezone.utc) - timedelta(minutes=2)
    new_id, _ = store.create()
    assert new_id != old_id
    assert len(store) == 1


def test_sessions_are_independent():
    store = SessionStore()
    first_id, first = store.create()
    second_id, second = store.create()
    first.press_all(["9", "="])
    assert second.buffer.text == "0"
    assert second.last_result is None
    assert first_id != second_id


def test_settings_from_config():
    settings = StoreSettings.from_settings(
        {"max_sessions": "8", "session_ttl_minutes": 0, "max_expression_length": "abc"}
    )
    assert settings.max_sessions == 8
    assert settings.ttl == timedelta(minutes=1)
    assert settings.max_expression_length == StoreSettings().max_expression_length
    assert StoreSettings.from_settings(None) == StoreSettings()


def test_store_applies_expression_length_limit():
    store = SessionStore(StoreSettings(max_expression_length=4))
    session_id, session = store.create()
    session.press_all(["1", "+", "2", "+", "3", "="])
    assert session.buffer.failed is True

"""Durable key-value storage for the persisted pieces of app state.

Each piece (balance, slips, matches, profile toggles) lives under its own key
and is written as a whole JSON document; there is no cross-key transaction.
Decoding is forgiving: a missing or corrupt entry reads back as the caller's
default and is logged, never raised.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol, TypeVar

from pydantic import TypeAdapter, ValidationError
from sqlalchemy.orm import Session, sessionmaker

from sportpredix.db.database import session_scope
from sportpredix.db.models import AppState, Base

logger = logging.getLogger(__name__)

T = TypeVar("T")

BALANCE_KEY = "balance"
USER_NAME_KEY = "userName"
SLIPS_KEY = "savedSlips"
MATCHES_KEY = "savedMatches"
NOTIFICATIONS_KEY = "notificationsEnabled"
PRIVACY_KEY = "privacyEnabled"
REAL_MATCHES_KEY = "useRealMatches"


class StateStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class InMemoryStateStore:
    """Process-local store, used for ephemeral sessions and tests."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._data)


class SqlStateStore:
    """Stores each key as one row of the ``app_state`` table."""

    def __init__(self, session_factory: sessionmaker[Session], create_tables: bool = True) -> None:
        self._session_factory = session_factory
        if create_tables:
            bind = session_factory.kw.get("bind")
            if bind is not None:
                Base.metadata.create_all(bind)

    def get(self, key: str) -> str | None:
        with session_scope(self._session_factory) as session:
            row = session.get(AppState, key)
            return row.value if row else None

    def set(self, key: str, value: str) -> None:
        with session_scope(self._session_factory) as session:
            row = session.get(AppState, key) or AppState(key=key)
            row.value = value
            session.add(row)

    def delete(self, key: str) -> None:
        with session_scope(self._session_factory) as session:
            row = session.get(AppState, key)
            if row is not None:
                session.delete(row)


def read_state(
    store: StateStore,
    key: str,
    adapter: TypeAdapter[T],
    default_factory: Callable[[], T],
) -> T:
    """Decode ``key`` with ``adapter``; fall back to the default on absence or corruption."""

    raw = store.get(key)
    if raw is None:
        return default_factory()
    try:
        return adapter.validate_json(raw)
    except (ValidationError, ValueError) as exc:
        logger.warning("Discarding unreadable state for %s: %s", key, exc)
        return default_factory()


def write_state(store: StateStore, key: str, adapter: TypeAdapter[T], value: T) -> None:
    store.set(key, adapter.dump_json(value, by_alias=True).decode("utf-8"))

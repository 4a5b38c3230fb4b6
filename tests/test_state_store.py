"""Key-value state store tests against an in-memory SQLite database."""

from __future__ import annotations

import pytest
from pydantic import TypeAdapter
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from sportpredix.betting.ledger import BettingLedger
from sportpredix.data.schemas import Match, OddsSet, OutcomeTag
from sportpredix.db.state_store import BALANCE_KEY, InMemoryStateStore, SqlStateStore, read_state, write_state


@pytest.fixture()
def sql_store() -> SqlStateStore:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    factory = sessionmaker(bind=engine, class_=Session, expire_on_commit=False)
    return SqlStateStore(factory)


def test_sql_store_set_get_overwrite_delete(sql_store: SqlStateStore) -> None:
    assert sql_store.get("balance") is None
    sql_store.set("balance", "1000.0")
    sql_store.set("balance", "950.0")
    assert sql_store.get("balance") == "950.0"
    sql_store.delete("balance")
    sql_store.delete("balance")
    assert sql_store.get("balance") is None


def test_ledger_survives_on_sql_store(sql_store: SqlStateStore) -> None:
    ledger = BettingLedger(sql_store, default_balance=1000.0, deposit_amount=100.0)
    match = Match(home="Milan", away="Inter", kickoff="20:45", odds=OddsSet.from_three_way(1.80, 3.40, 3.20))
    ledger.add_pick(match, OutcomeTag.HOME)
    slip = ledger.confirm(100).slip
    reloaded = BettingLedger(sql_store, default_balance=1000.0, deposit_amount=100.0)
    assert reloaded.balance == pytest.approx(900.0)
    assert reloaded.slips == (slip,)


def test_read_state_defaults() -> None:
    adapter = TypeAdapter(float)
    store = InMemoryStateStore({BALANCE_KEY: "not-a-number"})
    assert read_state(store, BALANCE_KEY, adapter, lambda: 1000.0) == 1000.0
    assert read_state(store, "missing", adapter, lambda: 5.0) == 5.0


def test_stored_zero_is_not_replaced_by_default() -> None:
    adapter = TypeAdapter(float)
    store = InMemoryStateStore()
    write_state(store, BALANCE_KEY, adapter, 0.0)
    assert read_state(store, BALANCE_KEY, adapter, lambda: 1000.0) == 0.0

"""Betting ledger tests: balance arithmetic, confirmation and persistence."""

from __future__ import annotations

import json
import threading
from datetime import datetime, timezone

import pytest

from sportpredix.betting.ledger import SLIPS, BettingLedger
from sportpredix.betting.types import Rejection, SlipState
from sportpredix.data.schemas import Match, OddsSet, OutcomeTag
from sportpredix.db.state_store import BALANCE_KEY, MATCHES_KEY, SLIPS_KEY, InMemoryStateStore

PLACED_AT = datetime(2026, 10, 19, 18, 0, tzinfo=timezone.utc)


def _match(home: str, away: str) -> Match:
    return Match(home=home, away=away, kickoff="18:30", odds=OddsSet.from_three_way(1.80, 3.40, 3.20))


def _ledger(state: InMemoryStateStore | None = None, balance: float = 1000.0) -> BettingLedger:
    return BettingLedger(
        state or InMemoryStateStore(),
        default_balance=balance,
        deposit_amount=100.0,
        clock=lambda: PLACED_AT,
    )


def test_confirm_two_leg_accumulator() -> None:
    ledger = _ledger()
    ledger.add_pick(_match("Milan", "Inter"), OutcomeTag.HOME, 1.80)
    ledger.add_pick(_match("Roma", "Lazio"), OutcomeTag.AWAY, 3.20)
    result = ledger.confirm(50)
    assert result.ok
    slip = result.slip
    assert slip.total_odd == pytest.approx(5.76)
    assert slip.potential_win == pytest.approx(288.0)
    assert slip.potential_win == slip.stake * slip.total_odd
    assert slip.placed_at == PLACED_AT
    assert ledger.balance == pytest.approx(950.0)
    assert ledger.slips == (slip,)
    assert ledger.current_picks == ()
    assert ledger.slip_state is SlipState.EMPTY
    assert slip.state is SlipState.CONFIRMED
    assert slip.implied_probability == pytest.approx(1 / 5.76)
    assert slip.expected_value == pytest.approx(0.0)


def test_confirm_over_balance_is_rejected() -> None:
    ledger = _ledger(balance=40)
    ledger.add_pick(_match("Milan", "Inter"), OutcomeTag.HOME, 1.80)
    result = ledger.confirm(50)
    assert not result
    assert result.reason is Rejection.INSUFFICIENT_BALANCE
    assert ledger.balance == 40
    assert ledger.slips == ()
    assert len(ledger.current_picks) == 1


@pytest.mark.parametrize("stake", [0, -10, float("nan")])
def test_confirm_non_positive_stake_changes_nothing(stake: float) -> None:
    state = InMemoryStateStore()
    ledger = _ledger(state)
    ledger.add_pick(_match("Milan", "Inter"), OutcomeTag.HOME, 1.80)
    picks = ledger.current_picks
    result = ledger.confirm(stake)
    assert result.reason is Rejection.NON_POSITIVE_STAKE
    assert ledger.balance == 1000
    assert ledger.slips == ()
    assert ledger.current_picks == picks
    assert state.keys() == []


def test_confirm_empty_slip_is_rejected() -> None:
    ledger = _ledger()
    assert ledger.total_odd() == 1.0
    assert ledger.confirm(10).reason is Rejection.EMPTY_SLIP
    assert ledger.balance == 1000


def test_stake_equal_to_balance_is_allowed() -> None:
    ledger = _ledger(balance=40)
    ledger.add_pick(_match("Milan", "Inter"), OutcomeTag.DRAW, 3.40)
    assert ledger.confirm(40).ok
    assert ledger.balance == 0


def test_slips_are_most_recent_first() -> None:
    ledger = _ledger()
    ledger.add_pick(_match("Milan", "Inter"), OutcomeTag.HOME, 1.80)
    first = ledger.confirm(10).slip
    ledger.add_pick(_match("Roma", "Lazio"), OutcomeTag.AWAY, 3.20)
    second = ledger.confirm(20).slip
    assert [slip.id for slip in ledger.slips] == [second.id, first.id]
    assert ledger.get_slip(first.id) == first
    assert ledger.balance == pytest.approx(970.0)


def test_reset_account_keeps_match_cache() -> None:
    state = InMemoryStateStore({MATCHES_KEY: "{}"})
    ledger = _ledger(state)
    ledger.add_pick(_match("Milan", "Inter"), OutcomeTag.HOME, 1.80)
    ledger.add_pick(_match("Roma", "Lazio"), OutcomeTag.AWAY, 3.20)
    ledger.confirm(50)
    ledger.add_pick(_match("PSG", "Lyon"), OutcomeTag.HOME, 1.50)
    ledger.reset_account()
    assert ledger.balance == 1000
    assert ledger.slips == ()
    assert ledger.current_picks == ()
    assert state.get(MATCHES_KEY) == "{}"
    assert json.loads(state.get(SLIPS_KEY)) == []


def test_deposit_and_withdraw() -> None:
    ledger = _ledger()
    assert ledger.deposit_funds().ok
    assert ledger.balance == 1100
    assert ledger.deposit_funds(250.5).ok
    assert ledger.balance == pytest.approx(1350.5)
    assert ledger.deposit_funds(0).reason is Rejection.INVALID_AMOUNT
    assert ledger.withdraw(2000).reason is Rejection.INSUFFICIENT_BALANCE
    assert ledger.withdraw(350.5).ok
    assert ledger.balance == pytest.approx(1000.0)


def test_state_persists_across_instances() -> None:
    state = InMemoryStateStore()
    ledger = _ledger(state)
    ledger.add_pick(_match("Milan", "Inter"), OutcomeTag.HOME, 1.80)
    ledger.confirm(25)
    reloaded = _ledger(state)
    assert reloaded.balance == pytest.approx(975.0)
    assert reloaded.slips == ledger.slips
    assert reloaded.current_picks == ()

    record = json.loads(state.get(SLIPS_KEY))[0]
    assert {"id", "picks", "stake", "totalOdd", "potentialWin", "date"} <= set(record)
    assert record["picks"][0]["outcome"] == "1"
    assert json.loads(state.get(BALANCE_KEY)) == pytest.approx(975.0)


def test_corrupt_state_falls_back_to_defaults() -> None:
    state = InMemoryStateStore({BALANCE_KEY: "oops", SLIPS_KEY: '[{"id": 1}]'})
    ledger = _ledger(state)
    assert ledger.balance == 1000
    assert ledger.slips == ()


@pytest.mark.parametrize("stored", ["NaN", "Infinity", "-5.0"])
def test_unusable_stored_balance_falls_back(stored: str) -> None:
    ledger = _ledger(InMemoryStateStore({BALANCE_KEY: stored}))
    assert ledger.balance == 1000
    ledger.add_pick(_match("Milan", "Inter"), OutcomeTag.HOME, 1.80)
    assert ledger.confirm(5000).reason is Rejection.INSUFFICIENT_BALANCE
    assert ledger.confirm(50).ok
    assert ledger.balance == pytest.approx(950.0)


def test_slip_list_round_trip() -> None:
    ledger = _ledger()
    for home, away in (("Milan", "Inter"), ("Roma", "Lazio")):
        ledger.add_pick(_match(home, away), OutcomeTag.UNDER_35, 1.40)
        ledger.add_pick(_match("PSG", home), OutcomeTag.HOME_AWAY, 1.30)
        ledger.confirm(10)
    slips = list(ledger.slips)
    assert SLIPS.validate_json(SLIPS.dump_json(slips, by_alias=True)) == slips


def test_stats_counts_pending_slips() -> None:
    ledger = _ledger()
    ledger.add_pick(_match("Milan", "Inter"), OutcomeTag.HOME, 2.0)
    ledger.confirm(10)
    stats = ledger.stats()
    assert stats.total_slips == 1
    assert stats.pending == 1
    assert stats.total_potential_win == pytest.approx(20.0)
    assert stats.format_summary().endswith("Record: 0-0 (1 pending)")


def test_concurrent_withdrawals_never_overdraw() -> None:
    ledger = _ledger(balance=100)
    outcomes: list[bool] = []

    def worker() -> None:
        outcomes.append(ledger.withdraw(30).ok)

    threads = [threading.Thread(target=worker) for _ in range(10)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert outcomes.count(True) == 3
    assert ledger.balance == pytest.approx(10.0)

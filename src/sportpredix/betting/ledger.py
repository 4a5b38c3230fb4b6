"""Balance and confirmed-slip accounting."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Annotated, List
from uuid import UUID

from pydantic import Field, TypeAdapter

from sportpredix.betting.odds import is_valid_amount, potential_win
from sportpredix.betting.slip import SlipBuilder
from sportpredix.betting.types import LedgerResult, Pick, Rejection, Slip, SlipState, utcnow
from sportpredix.config import get_settings
from sportpredix.data.schemas import Match, OutcomeTag
from sportpredix.db.state_store import BALANCE_KEY, SLIPS_KEY, StateStore, read_state, write_state

logger = logging.getLogger(__name__)

# A stored balance is never negative or non-finite; anything else reads back as the default.
BALANCE = TypeAdapter(Annotated[float, Field(ge=0, allow_inf_nan=False)])
SLIPS = TypeAdapter(List[Slip])


@dataclass
class LedgerStats:
    """Aggregate figures over confirmed slips."""

    total_slips: int = 0
    total_staked: float = 0.0
    total_potential_win: float = 0.0
    won: int = 0
    lost: int = 0
    pending: int = 0

    def format_summary(self) -> str:
        return (
            f"Slips: {self.total_slips} | "
            f"Staked: {self.total_staked:,.2f} | "
            f"Record: {self.won}-{self.lost} ({self.pending} pending)"
        )


class BettingLedger:
    """Owns the balance, the confirmed slips and the in-progress picks.

    Balance and slips are persisted under independent keys after every
    mutation. Picks live only in memory. All mutations run under one
    re-entrant lock so concurrent callers cannot break the debit invariant.
    """

    def __init__(
        self,
        state: StateStore,
        default_balance: float | None = None,
        deposit_amount: float | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._state = state
        self.default_balance = (
            default_balance if default_balance is not None else get_settings().default_balance
        )
        self.deposit_amount = (
            deposit_amount if deposit_amount is not None else get_settings().deposit_amount
        )
        self._clock = clock
        self.lock = threading.RLock()
        self._balance: float = read_state(state, BALANCE_KEY, BALANCE, lambda: self.default_balance)
        self._slips: list[Slip] = read_state(state, SLIPS_KEY, SLIPS, list)
        self._builder = SlipBuilder()

    # --- reads -----------------------------------------------------------

    @property
    def balance(self) -> float:
        return self._balance

    @property
    def slips(self) -> tuple[Slip, ...]:
        """Confirmed slips, most recent first."""

        with self.lock:
            return tuple(self._slips)

    @property
    def current_picks(self) -> tuple[Pick, ...]:
        return self._builder.picks

    @property
    def slip_state(self) -> SlipState:
        return self._builder.state

    def total_odd(self) -> float:
        return self._builder.total_odd()

    def preview_win(self, stake: float) -> float:
        return potential_win(stake, self._builder.total_odd())

    def get_slip(self, slip_id: UUID) -> Slip | None:
        with self.lock:
            return next((slip for slip in self._slips if slip.id == slip_id), None)

    def stats(self) -> LedgerStats:
        with self.lock:
            slips = list(self._slips)
        return LedgerStats(
            total_slips=len(slips),
            total_staked=sum(slip.stake for slip in slips),
            total_potential_win=sum(slip.potential_win for slip in slips),
            won=sum(1 for slip in slips if slip.is_won is True),
            lost=sum(1 for slip in slips if slip.is_won is False),
            pending=sum(1 for slip in slips if slip.is_won is None),
        )

    # --- picks -----------------------------------------------------------

    def add_pick(self, match: Match, outcome: OutcomeTag, odd: float | None = None) -> LedgerResult:
        with self.lock:
            return self._builder.add_pick(match, outcome, odd)

    def remove_pick(self, pick_id: UUID) -> LedgerResult:
        with self.lock:
            return self._builder.remove_pick(pick_id)

    def clear_picks(self) -> None:
        with self.lock:
            self._builder.clear()

    # --- money -----------------------------------------------------------

    def confirm(self, stake: float) -> LedgerResult:
        """Turn the current picks into a confirmed slip and debit ``stake``."""

        with self.lock:
            if not is_valid_amount(stake):
                return LedgerResult.rejected(Rejection.NON_POSITIVE_STAKE)
            if stake > self._balance:
                return LedgerResult.rejected(Rejection.INSUFFICIENT_BALANCE)
            if not len(self._builder):
                return LedgerResult.rejected(Rejection.EMPTY_SLIP)

            total_odd = self._builder.total_odd()
            slip = Slip(
                picks=self._builder.picks,
                stake=stake,
                total_odd=total_odd,
                potential_win=potential_win(stake, total_odd),
                placed_at=self._clock(),
            )
            self._balance -= stake
            self._slips.insert(0, slip)
            self._builder.clear()
            self._persist_balance()
            self._persist_slips()
        logger.info(
            "Confirmed slip %s: %d picks @ %.2f, stake %.2f", slip.id, len(slip.picks), total_odd, stake
        )
        return LedgerResult.accepted(slip=slip)

    def deposit_funds(self, amount: float | None = None) -> LedgerResult:
        """Credit the balance; there is no upper bound and no audit trail."""

        amount = self.deposit_amount if amount is None else amount
        with self.lock:
            if not is_valid_amount(amount):
                return LedgerResult.rejected(Rejection.INVALID_AMOUNT)
            self._balance += amount
            self._persist_balance()
        return LedgerResult.accepted()

    def withdraw(self, amount: float) -> LedgerResult:
        with self.lock:
            if not is_valid_amount(amount):
                return LedgerResult.rejected(Rejection.INVALID_AMOUNT)
            if amount > self._balance:
                return LedgerResult.rejected(Rejection.INSUFFICIENT_BALANCE)
            self._balance -= amount
            self._persist_balance()
        return LedgerResult.accepted()

    def reset_account(self) -> None:
        """Restore the default balance and drop slips and picks; the match cache is untouched."""

        with self.lock:
            self._balance = self.default_balance
            self._slips.clear()
            self._builder.clear()
            self._persist_balance()
            self._persist_slips()
        logger.info("Account reset to %.2f", self.default_balance)

    # --- persistence -----------------------------------------------------

    def _persist_balance(self) -> None:
        write_state(self._state, BALANCE_KEY, BALANCE, self._balance)

    def _persist_slips(self) -> None:
        write_state(self._state, SLIPS_KEY, SLIPS, self._slips)

"""Scratch-card mini-game accounting."""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from dataclasses import dataclass

from sportpredix.betting.ledger import BettingLedger
from sportpredix.betting.types import Rejection

logger = logging.getLogger(__name__)

PRIZES: tuple[int, ...] = (
    50, 100, 0, 250, 50, 100, 0, 500, 1000, 50,
    0, 250, 100, 0, 500, 50, 1000, 250, 100, 50,
)


@dataclass(frozen=True)
class ScratchResult:
    ok: bool
    prize: int = 0
    ticket_price: float = 0.0
    balance: float = 0.0
    reason: Rejection | None = None

    @property
    def net(self) -> float:
        return self.prize - self.ticket_price if self.ok else 0.0


class ScratchCard:
    """Buys a ticket from the ledger and credits whatever prize it reveals."""

    def __init__(
        self,
        ticket_price: float = 50.0,
        prizes: Sequence[int] = PRIZES,
        rng: random.Random | None = None,
    ) -> None:
        if not prizes:
            raise ValueError("Prize table must not be empty.")
        self.ticket_price = ticket_price
        self.prizes = tuple(prizes)
        self.rng = rng or random.Random()

    def can_play(self, ledger: BettingLedger) -> bool:
        return ledger.balance >= self.ticket_price

    def play(self, ledger: BettingLedger) -> ScratchResult:
        with ledger.lock:
            purchase = ledger.withdraw(self.ticket_price)
            if not purchase:
                return ScratchResult(ok=False, balance=ledger.balance, reason=purchase.reason)
            prize = self.rng.choice(self.prizes)
            if prize > 0:
                ledger.deposit_funds(float(prize))
            balance = ledger.balance
        logger.info("Scratch card drew %d (ticket %.2f)", prize, self.ticket_price)
        return ScratchResult(ok=True, prize=prize, ticket_price=self.ticket_price, balance=balance)

"""Pick, slip and ledger result types."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from uuid import UUID, uuid4

from pydantic import Field

from sportpredix.betting import odds
from sportpredix.data.schemas import DomainModel, Match, Odd, OutcomeTag


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SlipState(str, Enum):
    EMPTY = "empty"
    BUILDING = "building"
    CONFIRMED = "confirmed"
    SETTLED = "settled"


class Rejection(str, Enum):
    NON_POSITIVE_STAKE = "non_positive_stake"
    INSUFFICIENT_BALANCE = "insufficient_balance"
    EMPTY_SLIP = "empty_slip"
    DUPLICATE_MATCH = "duplicate_match"
    PICK_NOT_FOUND = "pick_not_found"
    INVALID_AMOUNT = "invalid_amount"
    INVALID_ODD = "invalid_odd"


class Pick(DomainModel):
    """One outcome on one match, with the odd taken at selection time."""

    id: UUID = Field(default_factory=uuid4)
    match: Match
    outcome: OutcomeTag
    odd: Odd


class Slip(DomainModel):
    """A confirmed accumulator; payout figures are frozen at confirmation."""

    id: UUID = Field(default_factory=uuid4)
    picks: tuple[Pick, ...]
    stake: float = Field(gt=0)
    total_odd: float = Field(ge=1.0)
    potential_win: float = Field(gt=0)
    placed_at: datetime = Field(default_factory=utcnow, alias="date")
    is_won: bool | None = None

    @property
    def implied_probability(self) -> float:
        return odds.implied_probability(self.total_odd)

    @property
    def expected_value(self) -> float:
        return odds.expected_value(self.potential_win, self.total_odd, self.stake)

    @property
    def state(self) -> SlipState:
        return SlipState.CONFIRMED if self.is_won is None else SlipState.SETTLED


@dataclass(frozen=True)
class LedgerResult:
    """Outcome of a ledger operation: accepted, or rejected with a reason and no state change."""

    ok: bool
    reason: Rejection | None = None
    slip: Slip | None = None
    pick: Pick | None = None

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def accepted(cls, slip: Slip | None = None, pick: Pick | None = None) -> LedgerResult:
        return cls(ok=True, slip=slip, pick=pick)

    @classmethod
    def rejected(cls, reason: Rejection) -> LedgerResult:
        return cls(ok=False, reason=reason)

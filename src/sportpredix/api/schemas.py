"""Pydantic schemas for the SportPredix API."""

from __future__ import annotations

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from sportpredix.betting.ledger import LedgerStats
from sportpredix.betting.types import Pick, Slip, SlipState
from sportpredix.data.schemas import OutcomeTag


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AddPickRequest(ApiModel):
    day: date
    match_id: UUID
    outcome: OutcomeTag


class ConfirmRequest(ApiModel):
    stake: float


class DepositRequest(ApiModel):
    amount: float | None = None


class ProfileUpdate(ApiModel):
    user_name: str | None = Field(default=None, max_length=64)
    notifications_enabled: bool | None = None
    privacy_enabled: bool | None = None
    use_real_matches: bool | None = None


class SlipPreview(ApiModel):
    state: SlipState
    picks: list[Pick]
    total_odd: float
    pick_count: int


class SlipResponse(ApiModel):
    id: UUID
    picks: list[Pick]
    stake: float
    total_odd: float
    potential_win: float
    placed_at: datetime = Field(alias="date")
    is_won: bool | None = None
    implied_probability: float
    expected_value: float

    @classmethod
    def from_slip(cls, slip: Slip) -> SlipResponse:
        return cls(
            id=slip.id,
            picks=list(slip.picks),
            stake=slip.stake,
            total_odd=slip.total_odd,
            potential_win=slip.potential_win,
            placed_at=slip.placed_at,
            is_won=slip.is_won,
            implied_probability=slip.implied_probability,
            expected_value=slip.expected_value,
        )


class StatsResponse(ApiModel):
    total_slips: int
    total_staked: float
    total_potential_win: float
    won: int
    lost: int
    pending: int

    @classmethod
    def from_stats(cls, stats: LedgerStats) -> StatsResponse:
        return cls(
            total_slips=stats.total_slips,
            total_staked=stats.total_staked,
            total_potential_win=stats.total_potential_win,
            won=stats.won,
            lost=stats.lost,
            pending=stats.pending,
        )


class AccountResponse(ApiModel):
    balance: float
    user_name: str
    notifications_enabled: bool
    privacy_enabled: bool
    use_real_matches: bool
    stats: StatsResponse


class ScratchCardResponse(ApiModel):
    prize: int
    ticket_price: float
    net: float
    balance: float

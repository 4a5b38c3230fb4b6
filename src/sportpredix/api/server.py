"""FastAPI backend for SportPredix."""

from __future__ import annotations

from datetime import date
from typing import Annotated, Any
from uuid import UUID

from fastapi import Depends, FastAPI, HTTPException, Query, Response, status
from fastapi.middleware.cors import CORSMiddleware

from sportpredix import __version__
from sportpredix.api.schemas import (
    AccountResponse,
    AddPickRequest,
    ConfirmRequest,
    DepositRequest,
    ProfileUpdate,
    ScratchCardResponse,
    SlipPreview,
    SlipResponse,
    StatsResponse,
)
from sportpredix.betting.types import LedgerResult, Pick, Rejection
from sportpredix.data.odds_client import OddsFetchError
from sportpredix.data.schemas import Match
from sportpredix.services import BettingApp, get_app

app = FastAPI(
    title="SportPredix API",
    version=__version__,
    description="Virtual-balance bet slips over generated football matches. No real money.",
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_REJECTION_STATUS: dict[Rejection, int] = {
    Rejection.DUPLICATE_MATCH: status.HTTP_409_CONFLICT,
    Rejection.INSUFFICIENT_BALANCE: status.HTTP_409_CONFLICT,
    Rejection.EMPTY_SLIP: status.HTTP_409_CONFLICT,
    Rejection.PICK_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    Rejection.NON_POSITIVE_STAKE: status.HTTP_422_UNPROCESSABLE_ENTITY,
    Rejection.INVALID_AMOUNT: status.HTTP_422_UNPROCESSABLE_ENTITY,
    Rejection.INVALID_ODD: status.HTTP_422_UNPROCESSABLE_ENTITY,
}


def get_betting_app() -> BettingApp:
    return get_app()


AppDep = Annotated[BettingApp, Depends(get_betting_app)]
DayQuery = Annotated[date | None, Query()]


def _raise_if_rejected(result: LedgerResult) -> None:
    if result.ok:
        return
    reason = result.reason or Rejection.INVALID_AMOUNT
    raise HTTPException(status_code=_REJECTION_STATUS[reason], detail=reason.value)


def _load_day(betting: BettingApp, day: date) -> list[Match]:
    try:
        return betting.matches.get(day)
    except OddsFetchError as exc:
        raise HTTPException(status_code=502, detail=f"Failed to load matches: {exc}") from exc


def _slip_preview(betting: BettingApp) -> SlipPreview:
    ledger = betting.ledger
    picks = list(ledger.current_picks)
    return SlipPreview(
        state=ledger.slip_state,
        picks=picks,
        total_odd=ledger.total_odd(),
        pick_count=len(picks),
    )


def _account(betting: BettingApp) -> AccountResponse:
    profile = betting.profile.snapshot()
    return AccountResponse(
        balance=betting.ledger.balance,
        user_name=profile.user_name,
        notifications_enabled=profile.notifications_enabled,
        privacy_enabled=profile.privacy_enabled,
        use_real_matches=profile.use_real_matches,
        stats=StatsResponse.from_stats(betting.ledger.stats()),
    )


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/version")
def version() -> dict[str, Any]:
    return {"name": "sportpredix", "version": __version__}


@app.get("/matches", response_model=list[Match])
def list_matches(betting: AppDep, day: DayQuery = None) -> list[Match]:
    return _load_day(betting, day or date.today())


@app.get("/matches/{day}/{match_id}", response_model=Match)
def get_match(day: date, match_id: UUID, betting: AppDep) -> Match:
    _load_day(betting, day)
    match = betting.matches.find_match(day, match_id)
    if match is None:
        raise HTTPException(status_code=404, detail="Match not found.")
    return match


@app.get("/slip", response_model=SlipPreview)
def current_slip(betting: AppDep) -> SlipPreview:
    return _slip_preview(betting)


@app.post("/slip/picks", response_model=Pick, status_code=status.HTTP_201_CREATED)
def add_pick(payload: AddPickRequest, betting: AppDep) -> Pick:
    _load_day(betting, payload.day)
    match = betting.matches.find_match(payload.day, payload.match_id)
    if match is None:
        raise HTTPException(status_code=404, detail="Match not found.")
    result = betting.ledger.add_pick(match, payload.outcome)
    _raise_if_rejected(result)
    return result.pick


@app.delete("/slip/picks/{pick_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_pick(pick_id: UUID, betting: AppDep) -> Response:
    _raise_if_rejected(betting.ledger.remove_pick(pick_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@app.delete("/slip/picks", status_code=status.HTTP_204_NO_CONTENT)
def clear_picks(betting: AppDep) -> Response:
    betting.ledger.clear_picks()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@app.post("/slip/confirm", response_model=SlipResponse, status_code=status.HTTP_201_CREATED)
def confirm_slip(payload: ConfirmRequest, betting: AppDep) -> SlipResponse:
    result = betting.ledger.confirm(payload.stake)
    _raise_if_rejected(result)
    return SlipResponse.from_slip(result.slip)


@app.get("/slips", response_model=list[SlipResponse])
def list_slips(betting: AppDep) -> list[SlipResponse]:
    return [SlipResponse.from_slip(slip) for slip in betting.ledger.slips]


@app.get("/slips/{slip_id}", response_model=SlipResponse)
def get_slip(slip_id: UUID, betting: AppDep) -> SlipResponse:
    slip = betting.ledger.get_slip(slip_id)
    if slip is None:
        raise HTTPException(status_code=404, detail="Slip not found.")
    return SlipResponse.from_slip(slip)


@app.get("/account", response_model=AccountResponse)
def account(betting: AppDep) -> AccountResponse:
    return _account(betting)


@app.post("/account/deposit", response_model=AccountResponse)
def deposit(payload: DepositRequest, betting: AppDep) -> AccountResponse:
    _raise_if_rejected(betting.ledger.deposit_funds(payload.amount))
    return _account(betting)


@app.post("/account/reset", response_model=AccountResponse)
def reset_account(betting: AppDep) -> AccountResponse:
    betting.ledger.reset_account()
    return _account(betting)


@app.put("/account/profile", response_model=AccountResponse)
def update_profile(payload: ProfileUpdate, betting: AppDep) -> AccountResponse:
    profile = betting.profile
    if payload.user_name is not None:
        profile.user_name = payload.user_name
    if payload.notifications_enabled is not None:
        profile.notifications_enabled = payload.notifications_enabled
    if payload.privacy_enabled is not None:
        profile.privacy_enabled = payload.privacy_enabled
    if payload.use_real_matches is not None:
        betting.set_real_matches(payload.use_real_matches)
    return _account(betting)


@app.post("/games/scratch-card", response_model=ScratchCardResponse)
def play_scratch_card(betting: AppDep) -> ScratchCardResponse:
    result = betting.scratch_card.play(betting.ledger)
    if not result.ok:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=(result.reason or Rejection.INSUFFICIENT_BALANCE).value,
        )
    return ScratchCardResponse(
        prize=result.prize,
        ticket_price=result.ticket_price,
        net=result.net,
        balance=result.balance,
    )

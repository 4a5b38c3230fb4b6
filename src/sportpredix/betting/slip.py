"""In-progress bet slip: the transient list of picks before confirmation."""

from __future__ import annotations

from uuid import UUID

from sportpredix.betting.odds import combine_odds, is_valid_odd
from sportpredix.betting.types import LedgerResult, Pick, Rejection, SlipState
from sportpredix.data.schemas import Match, OutcomeTag


class SlipBuilder:
    """Holds at most one pick per match, in insertion order."""

    def __init__(self) -> None:
        self._picks: list[Pick] = []

    def __len__(self) -> int:
        return len(self._picks)

    @property
    def picks(self) -> tuple[Pick, ...]:
        return tuple(self._picks)

    @property
    def state(self) -> SlipState:
        return SlipState.BUILDING if self._picks else SlipState.EMPTY

    def has_match(self, match_id: UUID) -> bool:
        return any(pick.match.id == match_id for pick in self._picks)

    def add_pick(self, match: Match, outcome: OutcomeTag, odd: float | None = None) -> LedgerResult:
        if self.has_match(match.id):
            return LedgerResult.rejected(Rejection.DUPLICATE_MATCH)
        if odd is not None and not is_valid_odd(odd):
            return LedgerResult.rejected(Rejection.INVALID_ODD)
        pick = Pick(match=match, outcome=outcome, odd=match.odds.price(outcome) if odd is None else odd)
        self._picks.append(pick)
        return LedgerResult.accepted(pick=pick)

    def remove_pick(self, pick_id: UUID) -> LedgerResult:
        for index, pick in enumerate(self._picks):
            if pick.id == pick_id:
                del self._picks[index]
                return LedgerResult.accepted(pick=pick)
        return LedgerResult.rejected(Rejection.PICK_NOT_FOUND)

    def clear(self) -> None:
        self._picks.clear()

    def total_odd(self) -> float:
        """Product of the pick odds; ``1.0`` on an empty slip means "no bet", not a real price."""

        return combine_odds(pick.odd for pick in self._picks)

"""Pydantic schemas for matches, odds and the odds-feed payloads."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Annotated
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

# Odd is decimal (European) odds; every price must pay out more than the stake.
Odd = Annotated[float, Field(gt=1.0)]


class Market(str, Enum):
    THREE_WAY = "1X2"
    DOUBLE_CHANCE = "double_chance"
    OVER_UNDER = "over_under"


class OutcomeTag(str, Enum):
    """Selectable outcome of a match; values are the persisted wire tags."""

    HOME = "1"
    DRAW = "X"
    AWAY = "2"
    HOME_DRAW = "1X"
    HOME_AWAY = "12"
    DRAW_AWAY = "X2"
    OVER_05 = "O 0.5"
    UNDER_05 = "U 0.5"
    OVER_15 = "O 1.5"
    UNDER_15 = "U 1.5"
    OVER_25 = "O 2.5"
    UNDER_25 = "U 2.5"
    OVER_35 = "O 3.5"
    UNDER_35 = "U 3.5"
    OVER_45 = "O 4.5"
    UNDER_45 = "U 4.5"

    @property
    def market(self) -> Market:
        if self in (OutcomeTag.HOME, OutcomeTag.DRAW, OutcomeTag.AWAY):
            return Market.THREE_WAY
        if self in (OutcomeTag.HOME_DRAW, OutcomeTag.HOME_AWAY, OutcomeTag.DRAW_AWAY):
            return Market.DOUBLE_CHANCE
        return Market.OVER_UNDER


class DomainModel(BaseModel):
    """Immutable model persisted with camelCase keys."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


# Fixed goal-line prices; the generator only randomizes the three-way book.
GOAL_LINE_ODDS: dict[OutcomeTag, float] = {
    OutcomeTag.OVER_05: 1.12,
    OutcomeTag.UNDER_05: 6.50,
    OutcomeTag.OVER_15: 1.45,
    OutcomeTag.UNDER_15: 2.65,
    OutcomeTag.OVER_25: 1.95,
    OutcomeTag.UNDER_25: 1.85,
    OutcomeTag.OVER_35: 2.80,
    OutcomeTag.UNDER_35: 1.40,
    OutcomeTag.OVER_45: 4.50,
    OutcomeTag.UNDER_45: 1.18,
}

MIN_DOUBLE_CHANCE_ODD = 1.01


def double_chance_odd(first: float, second: float) -> float:
    """Price covering two outcomes of the same three-way book."""

    combined = 1.0 / ((1.0 / first) + (1.0 / second))
    return max(round(combined, 2), MIN_DOUBLE_CHANCE_ODD)


class OddsSet(DomainModel):
    """Three-way odds plus the double-chance and over/under extension."""

    home: Odd
    draw: Odd
    away: Odd
    home_draw: Odd
    home_away: Odd
    draw_away: Odd
    over_05: Odd = GOAL_LINE_ODDS[OutcomeTag.OVER_05]
    under_05: Odd = GOAL_LINE_ODDS[OutcomeTag.UNDER_05]
    over_15: Odd = GOAL_LINE_ODDS[OutcomeTag.OVER_15]
    under_15: Odd = GOAL_LINE_ODDS[OutcomeTag.UNDER_15]
    over_25: Odd = GOAL_LINE_ODDS[OutcomeTag.OVER_25]
    under_25: Odd = GOAL_LINE_ODDS[OutcomeTag.UNDER_25]
    over_35: Odd = GOAL_LINE_ODDS[OutcomeTag.OVER_35]
    under_35: Odd = GOAL_LINE_ODDS[OutcomeTag.UNDER_35]
    over_45: Odd = GOAL_LINE_ODDS[OutcomeTag.OVER_45]
    under_45: Odd = GOAL_LINE_ODDS[OutcomeTag.UNDER_45]

    @classmethod
    def from_three_way(cls, home: float, draw: float, away: float) -> OddsSet:
        return cls(
            home=home,
            draw=draw,
            away=away,
            home_draw=double_chance_odd(home, draw),
            home_away=double_chance_odd(home, away),
            draw_away=double_chance_odd(draw, away),
        )

    def price(self, outcome: OutcomeTag) -> float:
        """Return the odd offered for ``outcome``."""

        return getattr(self, _PRICE_FIELDS[outcome])


_PRICE_FIELDS: dict[OutcomeTag, str] = {
    OutcomeTag.HOME: "home",
    OutcomeTag.DRAW: "draw",
    OutcomeTag.AWAY: "away",
    OutcomeTag.HOME_DRAW: "home_draw",
    OutcomeTag.HOME_AWAY: "home_away",
    OutcomeTag.DRAW_AWAY: "draw_away",
    OutcomeTag.OVER_05: "over_05",
    OutcomeTag.UNDER_05: "under_05",
    OutcomeTag.OVER_15: "over_15",
    OutcomeTag.UNDER_15: "under_15",
    OutcomeTag.OVER_25: "over_25",
    OutcomeTag.UNDER_25: "under_25",
    OutcomeTag.OVER_35: "over_35",
    OutcomeTag.UNDER_35: "under_35",
    OutcomeTag.OVER_45: "over_45",
    OutcomeTag.UNDER_45: "under_45",
}


class Match(DomainModel):
    """A fixture with its kickoff time and offered odds."""

    id: UUID = Field(default_factory=uuid4)
    home: str
    away: str
    kickoff: str = Field(pattern=r"^\d{2}:\d{2}$")
    odds: OddsSet
    competition: str | None = None

    @model_validator(mode="after")
    def check_distinct_teams(self) -> Match:
        if self.home == self.away:
            raise ValueError("home and away teams must differ")
        return self


# --- the-odds-api v4 payloads -------------------------------------------------


class FeedOutcome(BaseModel):
    name: str
    price: float


class FeedMarket(BaseModel):
    key: str
    outcomes: list[FeedOutcome] = Field(default_factory=list)


class FeedBookmaker(BaseModel):
    key: str | None = None
    title: str
    markets: list[FeedMarket] = Field(default_factory=list)


class FeedEvent(BaseModel):
    id: str
    sport_key: str
    sport_title: str | None = None
    commence_time: datetime
    home_team: str
    away_team: str
    bookmakers: list[FeedBookmaker] = Field(default_factory=list)

    def h2h_prices(self) -> tuple[float, float, float] | None:
        """Return (home, draw, away) from the first bookmaker quoting a full h2h book."""

        for bookmaker in self.bookmakers:
            for market in bookmaker.markets:
                if market.key != "h2h":
                    continue
                prices = {outcome.name: outcome.price for outcome in market.outcomes}
                home = prices.get(self.home_team)
                away = prices.get(self.away_team)
                draw = prices.get("Draw")
                if home and draw and away and min(home, draw, away) > 1.0:
                    return home, draw, away
        return None

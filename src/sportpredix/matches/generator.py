"""Match generation for a calendar day."""

from __future__ import annotations

import logging
import random
from collections.abc import Mapping, Sequence
from datetime import date
from typing import Protocol

from sportpredix.data.odds_client import OddsApiClient, OddsFetchError
from sportpredix.data.schemas import Match, OddsSet

logger = logging.getLogger(__name__)

LEAGUES: dict[str, tuple[str, ...]] = {
    "Premier League": ("Arsenal", "Chelsea", "Liverpool", "Man City", "Man United", "Tottenham"),
    "Serie A": ("Milan", "Inter", "Juventus", "Napoli", "Roma", "Lazio"),
    "La Liga": ("Barcelona", "Real Madrid", "Atletico", "Sevilla", "Valencia", "Villarreal"),
    "Bundesliga": ("Bayern", "Dortmund", "Leipzig", "Leverkusen", "Frankfurt", "Wolfsburg"),
    "Ligue 1": ("PSG", "Marseille", "Lyon", "Monaco", "Lille", "Nice"),
}
ROSTER: tuple[str, ...] = tuple(team for teams in LEAGUES.values() for team in teams)
FRIENDLY = "International Friendly"

KICKOFF_HOURS = (12, 22)
KICKOFF_MINUTES = ("00", "15", "30", "45")

# Ranges favour the home side; they model a favourite bias, not a fair book.
HOME_ODD_RANGE = (1.20, 2.50)
DRAW_ODD_RANGE = (2.80, 4.50)
AWAY_ODD_RANGE = (2.50, 7.00)


class MatchGenerator(Protocol):
    def generate(self, day: date) -> list[Match]: ...


def _league_of(team: str, leagues: Mapping[str, Sequence[str]]) -> str | None:
    for league, teams in leagues.items():
        if team in teams:
            return league
    return None


class RandomMatchGenerator:
    """Draws a fresh random schedule on every call."""

    def __init__(
        self,
        rng: random.Random | None = None,
        matches_per_day: int = 12,
        leagues: Mapping[str, Sequence[str]] = LEAGUES,
    ) -> None:
        self.rng = rng or random.Random()
        self.matches_per_day = matches_per_day
        self.leagues = leagues
        self.roster = [team for teams in leagues.values() for team in teams]
        if len(set(self.roster)) < 2:
            raise ValueError("Roster needs at least two distinct teams.")

    def _pick_teams(self) -> tuple[str, str]:
        home = self.rng.choice(self.roster)
        away = self.rng.choice(self.roster)
        while away == home:
            away = self.rng.choice(self.roster)
        return home, away

    def _kickoff(self) -> str:
        hour = self.rng.randint(*KICKOFF_HOURS)
        return f"{hour:02d}:{self.rng.choice(KICKOFF_MINUTES)}"

    def _odd(self, bounds: tuple[float, float]) -> float:
        return round(self.rng.uniform(*bounds), 2)

    def _competition(self, home: str, away: str) -> str:
        league = _league_of(home, self.leagues)
        if league and league == _league_of(away, self.leagues):
            return league
        return FRIENDLY

    def generate(self, day: date) -> list[Match]:
        matches: list[Match] = []
        for _ in range(self.matches_per_day):
            home, away = self._pick_teams()
            kickoff = self._kickoff()
            odds = OddsSet.from_three_way(
                home=self._odd(HOME_ODD_RANGE),
                draw=self._odd(DRAW_ODD_RANGE),
                away=self._odd(AWAY_ODD_RANGE),
            )
            matches.append(
                Match(
                    home=home,
                    away=away,
                    kickoff=kickoff,
                    odds=odds,
                    competition=self._competition(home, away),
                )
            )
        logger.debug("Generated %d matches for %s", len(matches), day.isoformat())
        return matches


class LiveFeedGenerator:
    """Builds a day's schedule from the odds feed, optionally falling back to another generator."""

    def __init__(
        self,
        client: OddsApiClient,
        sport_key: str,
        fallback: MatchGenerator | None = None,
    ) -> None:
        self.client = client
        self.sport_key = sport_key
        self.fallback = fallback

    def generate(self, day: date) -> list[Match]:
        try:
            matches = self.client.get_matches(self.sport_key, target_date=day)
        except OddsFetchError as exc:
            if self.fallback is None:
                raise
            logger.warning("Odds feed unavailable for %s, using fallback: %s", day.isoformat(), exc)
            return self.fallback.generate(day)
        if matches:
            return matches
        # An empty day must not reach the cache, where it would stay empty for good.
        if self.fallback is None:
            raise OddsFetchError(f"Odds feed returned no matches for {day.isoformat()}")
        logger.info("Odds feed returned no matches for %s, using fallback", day.isoformat())
        return self.fallback.generate(day)

    def close(self) -> None:
        self.client.close()

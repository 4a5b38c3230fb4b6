"""Match generator tests."""

from __future__ import annotations

import random
from datetime import date

import pytest

from sportpredix.data.odds_client import OddsFetchError
from sportpredix.data.schemas import Match, OddsSet
from sportpredix.matches import generator as gen

DAY = date(2026, 10, 19)


def test_random_generator_respects_ranges() -> None:
    matches = gen.RandomMatchGenerator(rng=random.Random(42)).generate(DAY)
    assert len(matches) == 12
    for match in matches:
        assert match.home != match.away
        assert match.home in gen.ROSTER and match.away in gen.ROSTER
        hour, minute = match.kickoff.split(":")
        assert 12 <= int(hour) <= 22
        assert minute in gen.KICKOFF_MINUTES
        assert gen.HOME_ODD_RANGE[0] <= match.odds.home <= gen.HOME_ODD_RANGE[1]
        assert gen.DRAW_ODD_RANGE[0] <= match.odds.draw <= gen.DRAW_ODD_RANGE[1]
        assert gen.AWAY_ODD_RANGE[0] <= match.odds.away <= gen.AWAY_ODD_RANGE[1]
        assert match.competition


def test_random_generator_draws_fresh_schedule_each_call() -> None:
    generator = gen.RandomMatchGenerator(rng=random.Random(1))
    first = generator.generate(DAY)
    second = generator.generate(DAY)
    assert [m.id for m in first] != [m.id for m in second]


def test_same_league_pair_keeps_league_name() -> None:
    leagues = {"Serie A": ("Milan", "Inter")}
    matches = gen.RandomMatchGenerator(rng=random.Random(3), matches_per_day=4, leagues=leagues).generate(DAY)
    assert {m.competition for m in matches} == {"Serie A"}
    assert all({m.home, m.away} == {"Milan", "Inter"} for m in matches)


def test_roster_needs_two_teams() -> None:
    with pytest.raises(ValueError):
        gen.RandomMatchGenerator(leagues={"Solo": ("Milan",)})


def _feed_match() -> Match:
    return Match(home="Roma", away="Lazio", kickoff="20:45", odds=OddsSet.from_three_way(2.1, 3.3, 3.4))


class StubClient:
    def __init__(self, matches: list[Match] | None = None, error: Exception | None = None) -> None:
        self.matches = matches or []
        self.error = error
        self.calls: list[tuple[str, date | None]] = []
        self.closed = False

    def get_matches(self, sport_key: str, target_date: date | None = None) -> list[Match]:
        self.calls.append((sport_key, target_date))
        if self.error:
            raise self.error
        return self.matches

    def close(self) -> None:
        self.closed = True


def test_live_feed_returns_feed_matches() -> None:
    client = StubClient(matches=[_feed_match()])
    live = gen.LiveFeedGenerator(client, "soccer_italy_serie_a", fallback=gen.RandomMatchGenerator())
    matches = live.generate(DAY)
    assert [m.home for m in matches] == ["Roma"]
    assert client.calls == [("soccer_italy_serie_a", DAY)]


def test_live_feed_falls_back_on_error_and_empty_feed() -> None:
    fallback = gen.RandomMatchGenerator(rng=random.Random(5), matches_per_day=3)
    failing = gen.LiveFeedGenerator(StubClient(error=OddsFetchError("down")), "x", fallback=fallback)
    assert len(failing.generate(DAY)) == 3
    empty = gen.LiveFeedGenerator(StubClient(), "x", fallback=fallback)
    assert len(empty.generate(DAY)) == 3


def test_live_feed_without_fallback_surfaces_failure() -> None:
    live = gen.LiveFeedGenerator(StubClient(error=OddsFetchError("down")), "x")
    with pytest.raises(OddsFetchError):
        live.generate(DAY)


def test_empty_feed_without_fallback_is_a_failure() -> None:
    live = gen.LiveFeedGenerator(StubClient(), "x")
    with pytest.raises(OddsFetchError):
        live.generate(DAY)


def test_live_feed_close_closes_client() -> None:
    client = StubClient()
    gen.LiveFeedGenerator(client, "x").close()
    assert client.closed

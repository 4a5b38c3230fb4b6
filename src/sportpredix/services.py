"""Wiring of the betting core: one object graph per persisted account."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from functools import lru_cache

from sportpredix.account.profile import Profile
from sportpredix.betting.ledger import BettingLedger
from sportpredix.config import Settings, get_settings
from sportpredix.data.odds_client import OddsApiClient
from sportpredix.db.database import SessionLocal
from sportpredix.db.state_store import SqlStateStore, StateStore
from sportpredix.games.scratch_card import ScratchCard
from sportpredix.matches.generator import LiveFeedGenerator, MatchGenerator, RandomMatchGenerator
from sportpredix.matches.store import MatchStore

logger = logging.getLogger(__name__)


@dataclass
class BettingApp:
    state: StateStore
    settings: Settings
    profile: Profile
    matches: MatchStore
    ledger: BettingLedger
    scratch_card: ScratchCard
    random_generator: RandomMatchGenerator

    def refresh_generator(self) -> MatchGenerator:
        """Point the match store at the generator the profile asks for.

        Days already cached keep their matches; only new days are affected.
        """

        generator = select_generator(self.profile, self.settings, self.random_generator)
        previous = self.matches.swap_generator(generator)
        if isinstance(previous, LiveFeedGenerator):
            previous.close()
        return generator

    def set_real_matches(self, enabled: bool) -> None:
        self.profile.use_real_matches = enabled
        self.refresh_generator()


def select_generator(
    profile: Profile,
    settings: Settings,
    fallback: RandomMatchGenerator,
) -> MatchGenerator:
    if not profile.use_real_matches:
        return fallback
    if not settings.odds_api_key:
        logger.warning("Real matches requested but ODDS_API_KEY is not configured; using generated matches")
        return fallback
    client = OddsApiClient(api_key=settings.odds_api_key, timezone=settings.odds_timezone)
    return LiveFeedGenerator(client, settings.odds_sport_key, fallback=fallback)


def build_app(
    state: StateStore,
    settings: Settings | None = None,
    rng: random.Random | None = None,
    warm_today: bool = True,
) -> BettingApp:
    settings = settings or get_settings()
    rng = rng or random.Random()
    profile = Profile(state)
    random_generator = RandomMatchGenerator(rng=rng, matches_per_day=settings.matches_per_day)
    matches = MatchStore(state, select_generator(profile, settings, random_generator))
    if warm_today:
        matches.ensure_today()
    return BettingApp(
        state=state,
        settings=settings,
        profile=profile,
        matches=matches,
        ledger=BettingLedger(
            state,
            default_balance=settings.default_balance,
            deposit_amount=settings.deposit_amount,
        ),
        scratch_card=ScratchCard(ticket_price=settings.scratch_ticket_price, rng=rng),
        random_generator=random_generator,
    )


@lru_cache(maxsize=1)
def get_app() -> BettingApp:
    """Return the process-wide app backed by the configured database."""

    return build_app(SqlStateStore(SessionLocal))

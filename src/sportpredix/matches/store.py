"""Date-keyed cache of generated matches."""

from __future__ import annotations

import logging
import threading
from datetime import date
from typing import Dict, List
from uuid import UUID

from pydantic import TypeAdapter

from sportpredix.data.schemas import Match
from sportpredix.db.state_store import MATCHES_KEY, StateStore, read_state, write_state
from sportpredix.matches.generator import MatchGenerator

logger = logging.getLogger(__name__)

MatchCache = Dict[str, List[Match]]
MATCH_CACHE = TypeAdapter(MatchCache)


def date_key(day: date) -> str:
    """Cache key for a calendar day (``yyyy-MM-dd``)."""

    return day.isoformat()


class MatchStore:
    """Generates a day's matches once and serves the same list afterwards.

    The whole mapping is rewritten under ``savedMatches`` after every
    insertion. Nothing is evicted, so the cache grows with every day browsed.
    """

    def __init__(self, state: StateStore, generator: MatchGenerator) -> None:
        self._state = state
        self.generator = generator
        self._lock = threading.RLock()
        self._cache: MatchCache = read_state(state, MATCHES_KEY, MATCH_CACHE, dict)

    def get(self, day: date) -> list[Match]:
        key = date_key(day)
        with self._lock:
            cached = self._cache.get(key)
            if cached is not None:
                return list(cached)
            matches = list(self.generator.generate(day))
            self._cache[key] = matches
            write_state(self._state, MATCHES_KEY, MATCH_CACHE, self._cache)
            logger.info("Stored %d matches for %s", len(matches), key)
            return list(matches)

    def swap_generator(self, generator: MatchGenerator) -> MatchGenerator:
        """Install ``generator`` for days not cached yet and return the one it replaces."""

        with self._lock:
            previous, self.generator = self.generator, generator
        return previous

    def ensure_today(self, today: date | None = None) -> list[Match]:
        return self.get(today or date.today())

    def find_match(self, day: date, match_id: UUID) -> Match | None:
        for match in self.get(day):
            if match.id == match_id:
                return match
        return None

    def cached_days(self) -> list[str]:
        with self._lock:
            return sorted(self._cache)

    def snapshot(self) -> MatchCache:
        with self._lock:
            return {key: list(matches) for key, matches in self._cache.items()}

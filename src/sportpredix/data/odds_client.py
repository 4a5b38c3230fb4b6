"""Thin client for The Odds API (v4)."""

from __future__ import annotations

import logging
from datetime import date, tzinfo
from typing import Any, Dict, List, Optional
from uuid import NAMESPACE_URL, uuid5
from zoneinfo import ZoneInfo

import httpx
from pydantic import TypeAdapter, ValidationError
from tenacity import RetryCallState, retry, retry_if_exception, stop_after_attempt, wait_fixed

from sportpredix.config import get_settings
from sportpredix.data.schemas import FeedEvent, Match, OddsSet

logger = logging.getLogger(__name__)

_EVENTS = TypeAdapter(List[FeedEvent])


class OddsFetchError(RuntimeError):
    """The odds feed could not be reached or returned an unreadable payload."""


def _retry_log(retry_state: RetryCallState) -> None:  # pragma: no cover - logging helper
    attempt = retry_state.attempt_number
    exception = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning("Odds API retry attempt %s due to %s", attempt, exception)


def _is_transient(exc: BaseException) -> bool:
    if isinstance(exc, httpx.TransportError):
        return True
    return isinstance(exc, httpx.HTTPStatusError) and exc.response.status_code >= 500


def event_to_match(event: FeedEvent, tz: tzinfo) -> Match | None:
    """Convert a feed event with a complete h2h book into a Match kicking off in ``tz``."""

    prices = event.h2h_prices()
    if prices is None or event.home_team == event.away_team:
        return None
    home, draw, away = prices
    return Match(
        id=uuid5(NAMESPACE_URL, f"the-odds-api:{event.id}"),
        home=event.home_team,
        away=event.away_team,
        kickoff=event.commence_time.astimezone(tz).strftime("%H:%M"),
        odds=OddsSet.from_three_way(home=home, draw=draw, away=away),
        competition=event.sport_title,
    )


class OddsApiClient:
    """Convenient wrapper for The Odds API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        timezone: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        settings = get_settings()
        self.api_key = api_key or settings.odds_api_key
        if not self.api_key:
            raise RuntimeError("ODDS_API_KEY is not configured.")
        self.base_url = (base_url or settings.odds_base_url).rstrip("/")
        self.regions = settings.odds_regions
        self.tz = ZoneInfo(timezone or settings.odds_timezone)
        self._client = httpx.Client(
            timeout=timeout or settings.odds_timeout_seconds,
            transport=transport,
        )

    def __enter__(self) -> "OddsApiClient":  # pragma: no cover - context sugar
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    def close(self) -> None:
        self._client.close()

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_fixed(1),
        retry=retry_if_exception(_is_transient),
        after=_retry_log,
        reraise=True,
    )
    def _request(self, method: str, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}{path}"
        query = {"apiKey": self.api_key, **(params or {})}
        response = self._client.request(method, url, params=query)
        response.raise_for_status()
        return response.json()

    def get_events(self, sport_key: str) -> list[FeedEvent]:
        """Return upcoming events with head-to-head odds for ``sport_key``."""

        try:
            payload = self._request(
                "GET",
                f"/sports/{sport_key}/odds",
                {"regions": self.regions, "markets": "h2h", "oddsFormat": "decimal"},
            )
            return _EVENTS.validate_python(payload)
        except (httpx.HTTPError, ValidationError, ValueError) as exc:
            raise OddsFetchError(f"Failed to fetch odds for {sport_key}: {exc}") from exc

    def get_matches(self, sport_key: str, target_date: Optional[date] = None) -> list[Match]:
        """Return matches for ``sport_key``, optionally restricted to one local kickoff date."""

        matches: list[Match] = []
        for event in self.get_events(sport_key):
            if target_date and event.commence_time.astimezone(self.tz).date() != target_date:
                continue
            match = event_to_match(event, self.tz)
            if match is None:
                logger.debug("Skipping event %s without a complete h2h book", event.id)
                continue
            matches.append(match)
        return matches

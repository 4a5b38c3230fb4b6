"""Persisted user preferences shown on the profile screen."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import TypeAdapter

from sportpredix.db.state_store import (
    NOTIFICATIONS_KEY,
    PRIVACY_KEY,
    REAL_MATCHES_KEY,
    USER_NAME_KEY,
    StateStore,
    read_state,
    write_state,
)

_TEXT = TypeAdapter(str)
_FLAG = TypeAdapter(bool)


@dataclass(frozen=True)
class ProfileSnapshot:
    user_name: str
    notifications_enabled: bool
    privacy_enabled: bool
    use_real_matches: bool


class Profile:
    """Each preference is its own persisted key; unreadable values fall back to defaults."""

    def __init__(self, state: StateStore) -> None:
        self._state = state

    @property
    def user_name(self) -> str:
        return read_state(self._state, USER_NAME_KEY, _TEXT, str)

    @user_name.setter
    def user_name(self, value: str) -> None:
        write_state(self._state, USER_NAME_KEY, _TEXT, value.strip())

    @property
    def notifications_enabled(self) -> bool:
        return read_state(self._state, NOTIFICATIONS_KEY, _FLAG, lambda: True)

    @notifications_enabled.setter
    def notifications_enabled(self, value: bool) -> None:
        write_state(self._state, NOTIFICATIONS_KEY, _FLAG, value)

    @property
    def privacy_enabled(self) -> bool:
        return read_state(self._state, PRIVACY_KEY, _FLAG, lambda: False)

    @privacy_enabled.setter
    def privacy_enabled(self, value: bool) -> None:
        write_state(self._state, PRIVACY_KEY, _FLAG, value)

    @property
    def use_real_matches(self) -> bool:
        return read_state(self._state, REAL_MATCHES_KEY, _FLAG, lambda: False)

    @use_real_matches.setter
    def use_real_matches(self, value: bool) -> None:
        write_state(self._state, REAL_MATCHES_KEY, _FLAG, value)

    def snapshot(self) -> ProfileSnapshot:
        return ProfileSnapshot(
            user_name=self.user_name,
            notifications_enabled=self.notifications_enabled,
            privacy_enabled=self.privacy_enabled,
            use_real_matches=self.use_real_matches,
        )

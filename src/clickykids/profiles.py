"""Profile registry - child profiles, the active profile and the parent PIN."""

from __future__ import annotations

import logging
import re
import uuid
from collections.abc import Awaitable, Callable
from datetime import date, datetime
from typing import Any, Optional

from .errors import InvalidPinError, ProfileNotFoundError
from .models import Difficulty, Profile, ProfileIndex
from .store import StateKey, StateStore

__all__ = [
    "ProfileRegistry",
    "Subscription",
    "calculate_age",
    "get_difficulty_settings",
    "suggest_difficulty",
]

logger = logging.getLogger(__name__)

PROFILE_INDEX_KEY = StateKey("profiles", "index")

ProfileListener = Callable[[Optional[str]], Awaitable[None]]

_PIN_RE = re.compile(r"^\d{4}$")

DIFFICULTY_SETTINGS: dict[str, dict[str, Any]] = {
    "beginner": {
        "target_size": "large",
        "movement_speed": "slow",
        "accuracy": "low",
        "repetitions": 3,
        "time_limit": False,
        "show_hints": True,
    },
    "intermediate": {
        "target_size": "medium",
        "movement_speed": "medium",
        "accuracy": "medium",
        "repetitions": 5,
        "time_limit": False,
        "show_hints": True,
    },
    "advanced": {
        "target_size": "small",
        "movement_speed": "fast",
        "accuracy": "high",
        "repetitions": 7,
        "time_limit": True,
        "show_hints": False,
    },
}


def calculate_age(dob: Optional[date], today: date) -> int:
    """Whole years between ``dob`` and ``today``; 0 when unknown."""
    if dob is None:
        return 0
    age = today.year - dob.year
    if (today.month, today.day) < (dob.month, dob.day):
        age -= 1
    return max(0, age)


def suggest_difficulty(age: int) -> Difficulty:
    if age <= 5:
        return "beginner"
    if age <= 7:
        return "intermediate"
    return "advanced"


def get_difficulty_settings(difficulty: str) -> dict[str, Any]:
    """Game tuning for ``difficulty``; unknown values get beginner settings."""
    return dict(DIFFICULTY_SETTINGS.get(difficulty, DIFFICULTY_SETTINGS["beginner"]))


class Subscription:
    """Handle returned by ``ProfileRegistry.subscribe``."""

    def __init__(self, registry: "ProfileRegistry", listener: ProfileListener):
        self._registry = registry
        self._listener = listener
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self._registry._listeners.remove(self._listener)
            self.active = False

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.unsubscribe()


class ProfileRegistry:
    """
    Owns the set of profiles and the active profile id.

    Listeners subscribed via ``subscribe`` are awaited, in subscription
    order, every time the active profile changes. ``select_profile`` only
    returns after all of them have switched over.
    """

    def __init__(
        self,
        store: StateStore,
        *,
        default_pin: str = "1234",
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._store = store
        self._default_pin = default_pin
        self._clock = clock
        self._index = ProfileIndex()
        self._listeners: list[ProfileListener] = []

    @property
    def profiles(self) -> list[Profile]:
        return list(self._index.profiles)

    @property
    def active_profile_id(self) -> Optional[str]:
        return self._index.active_profile_id

    @property
    def active_profile(self) -> Optional[Profile]:
        if self._index.active_profile_id is None:
            return None
        return self._find(self._index.active_profile_id)

    def active_age(self) -> int:
        profile = self.active_profile
        if profile is None:
            return 0
        return calculate_age(profile.dob, self._clock().date())

    def active_difficulty_settings(self) -> dict[str, Any]:
        profile = self.active_profile
        return get_difficulty_settings(profile.difficulty if profile else "beginner")

    def get_profile(self, profile_id: str) -> Profile:
        profile = self._find(profile_id)
        if profile is None:
            raise ProfileNotFoundError(profile_id)
        return profile

    async def load(self) -> None:
        """Read profiles and the active id from the store."""
        self._index = await self._store.load(PROFILE_INDEX_KEY, ProfileIndex)
        active = self._index.active_profile_id
        if active is not None and self._find(active) is None:
            logger.warning("Active profile missing, clearing", extra={"profile_id": active})
            self._index.active_profile_id = None
        logger.info(
            "Profiles loaded",
            extra={"count": len(self._index.profiles), "profile_id": self.active_profile_id},
        )

    def subscribe(self, listener: ProfileListener) -> Subscription:
        """Call ``listener(profile_id)`` whenever the active profile changes."""
        self._listeners.append(listener)
        return Subscription(self, listener)

    async def add_profile(
        self,
        name: str,
        dob: Optional[date] = None,
        *,
        language: str = "en",
        difficulty: Optional[Difficulty] = None,
        avatar: str = "👦",
    ) -> Profile:
        now = self._clock()
        profile = Profile(
            id=uuid.uuid4().hex,
            name=name,
            dob=dob,
            language=language,
            difficulty=difficulty or suggest_difficulty(calculate_age(dob, now.date())),
            avatar=avatar,
            created_at=now,
        )
        self._index.profiles.append(profile)
        logger.info("Profile added", extra={"profile_id": profile.id})
        await self._persist()
        return profile

    async def update_profile(self, profile_id: str, **changes: Any) -> Profile:
        """Apply ``changes`` to a profile. The id cannot be changed."""
        changes.pop("id", None)
        current = self.get_profile(profile_id)
        updated = Profile.model_validate({**current.model_dump(), **changes})
        self._index.profiles = [
            updated if p.id == profile_id else p for p in self._index.profiles
        ]
        await self._persist()
        return updated

    async def delete_profile(self, profile_id: str) -> None:
        """Remove a profile along with its persisted progress and rewards."""
        self._index.profiles = [p for p in self._index.profiles if p.id != profile_id]
        for kind in ("progress", "rewards"):
            await self._store.delete(StateKey(kind, profile_id))
        logger.info("Profile deleted", extra={"profile_id": profile_id})

        if self._index.active_profile_id == profile_id:
            await self.select_profile(None)
        else:
            await self._persist()

    async def select_profile(self, profile_id: Optional[str]) -> None:
        """
        Make ``profile_id`` active (or none) and notify every listener.

        Re-selecting the active profile is a no-op, so an open session survives.
        """
        if profile_id is not None:
            self.get_profile(profile_id)
        if profile_id == self._index.active_profile_id:
            return

        self._index.active_profile_id = profile_id
        await self._persist()
        logger.info("Active profile changed", extra={"profile_id": profile_id})
        for listener in list(self._listeners):
            await listener(profile_id)

    def verify_parent_pin(self, pin: str) -> bool:
        return pin == (self._index.parent_pin or self._default_pin)

    async def set_parent_pin(self, pin: str) -> None:
        if not _PIN_RE.match(pin):
            raise InvalidPinError("PIN must be exactly 4 digits")
        self._index.parent_pin = pin
        await self._persist()

    def _find(self, profile_id: str) -> Optional[Profile]:
        return next((p for p in self._index.profiles if p.id == profile_id), None)

    async def _persist(self) -> None:
        await self._store.save(PROFILE_INDEX_KEY, self._index)

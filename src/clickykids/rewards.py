"""Rewards evaluator - stars, badges, letters, Simon high score, daily challenge."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional, Union

from .models import BadgeStats, RewardsState
from .store import StateKey, StateStore

__all__ = ["BADGE_CATALOG", "BadgeDefinition", "RewardsEvaluator"]

logger = logging.getLogger(__name__)

REWARDS_KIND = "rewards"

StatsInput = Union[BadgeStats, Mapping[str, Any]]


@dataclass(frozen=True, slots=True)
class BadgeDefinition:
    """Static badge metadata and the condition that unlocks it."""

    id: str
    name: str
    description: str
    icon: str
    condition: Callable[[BadgeStats], bool]


BADGE_CATALOG: tuple[BadgeDefinition, ...] = (
    BadgeDefinition(
        "firstGame", "First Steps", "Complete your first game", "🌟",
        lambda stats: stats.total_games >= 1,
    ),
    BadgeDefinition(
        "fiveGames", "Getting Started", "Complete 5 games", "⭐",
        lambda stats: stats.total_games >= 5,
    ),
    BadgeDefinition(
        "tenGames", "Game Master", "Complete 10 games", "🏆",
        lambda stats: stats.total_games >= 10,
    ),
    BadgeDefinition(
        "twentyFiveGames", "Super Player", "Complete 25 games", "👑",
        lambda stats: stats.total_games >= 25,
    ),
    BadgeDefinition(
        "streakThree", "Consistent", "3 day streak", "🔥",
        lambda stats: stats.longest_streak >= 3,
    ),
    BadgeDefinition(
        "streakSeven", "Week Warrior", "7 day streak", "🌈",
        lambda stats: stats.longest_streak >= 7,
    ),
    BadgeDefinition(
        "memoryMaster", "Memory Master", "Win 5 Memory Match games", "🧠",
        lambda stats: stats.game_stats.get("memory", 0) >= 5,
    ),
    BadgeDefinition(
        "simonPro", "Simon Pro", "Reach level 5 in Simon Says", "🎯",
        lambda stats: stats.simon_high_score >= 5,
    ),
    BadgeDefinition(
        "abcExplorer", "ABC Explorer", "Learn all 26 letters", "📚",
        lambda stats: len(stats.letters_learned) >= 26,
    ),
    BadgeDefinition(
        "numberNinja", "Number Ninja", "Complete Number Line 10 times", "🔢",
        lambda stats: stats.game_stats.get("numberline", 0) >= 10,
    ),
    BadgeDefinition(
        "colorArtist", "Color Artist", "Color 5 pictures", "🎨",
        lambda stats: stats.game_stats.get("colorclick", 0) >= 5,
    ),
    BadgeDefinition(
        "musicMaestro", "Music Maestro", "Complete 3 songs", "🎹",
        lambda stats: stats.game_stats.get("music", 0) >= 3,
    ),
)


class RewardsEvaluator:
    """Manages the active profile's ``RewardsState`` and badge evaluation."""

    def __init__(
        self,
        store: StateStore,
        *,
        catalog: tuple[BadgeDefinition, ...] = BADGE_CATALOG,
        daily_challenge_stars: int = 10,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Initialize rewards evaluator.

        Args:
            store: State store used for persistence
            catalog: Ordered badge definitions
            daily_challenge_stars: Stars awarded once per day for the challenge
            clock: Returns the current local time
        """
        self._store = store
        self._catalog = catalog
        self._daily_challenge_stars = daily_challenge_stars
        self._clock = clock
        self._profile_id: Optional[str] = None
        self._state = RewardsState()

    @property
    def state(self) -> RewardsState:
        return self._state

    @property
    def all_badges(self) -> tuple[BadgeDefinition, ...]:
        return self._catalog

    @property
    def earned_badges(self) -> list[str]:
        return list(self._state.earned_badges)

    @property
    def new_badges(self) -> list[str]:
        return list(self._state.new_badges)

    @property
    def earned_count(self) -> int:
        return len(self._state.earned_badges)

    @property
    def total_count(self) -> int:
        return len(self._catalog)

    def is_earned(self, badge_id: str) -> bool:
        return badge_id in self._state.earned_badges

    async def load(self, profile_id: Optional[str]) -> None:
        """Switch to ``profile_id``'s persisted rewards."""
        self._profile_id = profile_id
        if profile_id is None:
            self._state = RewardsState()
            return
        self._state = await self._store.load(
            StateKey(REWARDS_KIND, profile_id), RewardsState
        )

    async def add_stars(self, amount: int) -> None:
        self._state.stars += max(0, int(amount))
        await self._persist()

    async def check_badges(self, stats: StatsInput) -> list[str]:
        """
        Award every not-yet-earned badge whose condition now holds.

        Args:
            stats: ``BadgeStats`` or a mapping with the same fields
                   (camelCase keys accepted)

        Returns:
            Ids of badges earned by this call, in catalog order. Badges that
            were already earned are never reported again.
        """
        if not isinstance(stats, BadgeStats):
            stats = BadgeStats.model_validate(dict(stats))

        earned = set(self._state.earned_badges)
        newly_earned = [
            badge.id
            for badge in self._catalog
            if badge.id not in earned and badge.condition(stats)
        ]
        if not newly_earned:
            return []

        self._state.earned_badges.extend(newly_earned)
        self._state.new_badges = list(newly_earned)
        for badge_id in newly_earned:
            logger.info(
                "Badge earned",
                extra={"profile_id": self._profile_id, "badge_id": badge_id},
            )
        await self._persist()
        return newly_earned

    async def clear_new_badges(self) -> None:
        """Forget the celebration list; earned badges are untouched."""
        if not self._state.new_badges:
            return
        self._state.new_badges = []
        await self._persist()

    async def track_letter_learned(self, letter: str) -> None:
        letter = letter.strip()[:1].upper()
        if not letter or letter in self._state.letters_learned:
            return
        self._state.letters_learned.append(letter)
        await self._persist()

    async def update_simon_score(self, score: int) -> None:
        if score <= self._state.simon_high_score:
            return
        self._state.simon_high_score = int(score)
        await self._persist()

    def is_daily_challenge_completed(self) -> bool:
        return self._state.daily_challenge_date == self._clock().date()

    async def complete_daily_challenge(self) -> bool:
        """Award the daily challenge stars. Returns False if already done today."""
        today = self._clock().date()
        if self._state.daily_challenge_date == today:
            return False
        self._state.daily_challenge_date = today
        self._state.stars += self._daily_challenge_stars
        logger.info(
            "Daily challenge completed",
            extra={"profile_id": self._profile_id, "stars": self._daily_challenge_stars},
        )
        await self._persist()
        return True

    def daily_challenge_index(self, challenge_count: int) -> int:
        """Pick today's challenge out of ``challenge_count`` kinds."""
        if challenge_count < 1:
            return 0
        return challenge_seed(self._clock().date()) % challenge_count

    async def reset_rewards(self) -> None:
        self._state = RewardsState()
        logger.info("Rewards reset", extra={"profile_id": self._profile_id})
        await self._persist()

    async def _persist(self) -> None:
        if self._profile_id is None:
            return
        await self._store.save(StateKey(REWARDS_KIND, self._profile_id), self._state)


def challenge_seed(day: date) -> int:
    """Stable per-day seed: character codes of e.g. ``"Mon Oct 19 2026"`` summed."""
    return sum(ord(c) for c in day.strftime("%a %b %d %Y"))

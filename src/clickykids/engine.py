"""Progress engine - wires the store, profile registry, tracker and rewards."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Optional

from .config import EngineSettings, PreferenceSettings
from .models import BadgeStats, Recommendation
from .profiles import ProfileRegistry, Subscription
from .progress import ProgressTracker
from .recommendations import generate_recommendations
from .reports import ProgressReport, build_report
from .rewards import RewardsEvaluator
from .store import StateStore, create_backend

__all__ = ["ProgressEngine"]

logger = logging.getLogger(__name__)


class ProgressEngine:
    """
    Single entry point for game screens and dashboards.

    Usage:
        async with ProgressEngine() as engine:
            profile = await engine.profiles.add_profile("Mia")
            await engine.profiles.select_profile(profile.id)
            await engine.progress.start_session("mouseMovement")
            ...
            await engine.progress.end_session()
            await engine.check_badges()
    """

    def __init__(
        self,
        settings: Optional[EngineSettings] = None,
        *,
        store: Optional[StateStore] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Initialize engine.

        Args:
            settings: Engine settings (loaded from the environment if omitted)
            store: Pre-built state store; otherwise one is created from settings
            clock: Returns the current local time
        """
        self.settings = settings or EngineSettings()
        self._owns_store = store is None
        self.store = store or StateStore(
            create_backend(self.settings), key_prefix=self.settings.store.key_prefix
        )
        self._clock = clock
        self._subscription: Optional[Subscription] = None

        self.profiles = ProfileRegistry(
            self.store,
            default_pin=self.settings.preferences.parent_pin,
            clock=clock,
        )
        self.progress = ProgressTracker(
            self.store, limits=self.settings.limits, clock=clock
        )
        self.rewards = RewardsEvaluator(
            self.store,
            daily_challenge_stars=self.settings.daily_challenge_stars,
            clock=clock,
        )

    @property
    def preferences(self) -> PreferenceSettings:
        return self.settings.preferences

    async def start(self) -> None:
        """Load profiles and the active profile's state."""
        await self.profiles.load()
        await self._switch_profile(self.profiles.active_profile_id)
        self._subscription = self.profiles.subscribe(self._switch_profile)
        logger.info("Engine started", extra={"backend": self.settings.store.backend})

    async def stop(self) -> None:
        """Credit any open session and release the store."""
        await self.progress.end_session()
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
        if self._owns_store:
            await self.store.aclose()
        logger.info("Engine stopped")

    async def __aenter__(self) -> "ProgressEngine":
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop()

    def badge_stats(self) -> BadgeStats:
        """Assemble the stats badge conditions are evaluated against."""
        snapshot = self.progress.snapshot
        rewards = self.rewards.state
        return BadgeStats(
            total_games=self.progress.get_total_exercises(),
            longest_streak=snapshot.streak.longest,
            game_stats=dict(snapshot.exercises_completed),
            letters_learned=list(rewards.letters_learned),
            simon_high_score=rewards.simon_high_score,
        )

    async def check_badges(self) -> list[str]:
        return await self.rewards.check_badges(self.badge_stats())

    def recommendations(self) -> list[Recommendation]:
        return generate_recommendations(
            self.progress.snapshot, self.settings.recommendations
        )

    def report(self) -> ProgressReport:
        return build_report(
            self.progress.snapshot,
            self.rewards.state,
            self._clock().date(),
            badges_total=self.rewards.total_count,
            settings=self.settings.recommendations,
        )

    async def _switch_profile(self, profile_id: Optional[str]) -> None:
        await self.progress.load(profile_id)
        await self.rewards.load(profile_id)

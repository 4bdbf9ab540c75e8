"""Progress tracker - time spent, completions, accuracy, streaks and sessions."""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .config import LimitSettings
from .models import ProgressSnapshot, SessionRecord
from .store import StateKey, StateStore
from .streaks import advance_streak

__all__ = ["ProgressTracker", "average_percent"]

logger = logging.getLogger(__name__)

PROGRESS_KIND = "progress"


@dataclass(slots=True)
class _PendingSession:
    """Session opened by start_session and not yet ended."""

    skill: str
    started_at: datetime


class ProgressTracker:
    """
    Owns the active profile's ``ProgressSnapshot``.

    Every mutation updates the in-memory snapshot first and then writes it
    back to the store. Write failures are logged by the store and do not
    reach the caller, so a game screen never crashes over persistence.

    Usage:
        tracker = ProgressTracker(store)
        await tracker.load("profile-1")
        await tracker.start_session("mouseMovement")
        ...
        await tracker.end_session()
    """

    def __init__(
        self,
        store: StateStore,
        *,
        limits: Optional[LimitSettings] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Initialize progress tracker.

        Args:
            store: State store used for persistence
            limits: Caps for the accuracy history and session log
            clock: Returns the current local time
        """
        self._store = store
        self._limits = limits or LimitSettings()
        self._clock = clock
        self._profile_id: Optional[str] = None
        self._snapshot = ProgressSnapshot()
        self._pending: Optional[_PendingSession] = None

    @property
    def profile_id(self) -> Optional[str]:
        return self._profile_id

    @property
    def snapshot(self) -> ProgressSnapshot:
        """Current snapshot. Callers must treat it as read-only."""
        return self._snapshot

    @property
    def pending_skill(self) -> Optional[str]:
        return self._pending.skill if self._pending else None

    async def load(self, profile_id: Optional[str]) -> None:
        """
        Switch to ``profile_id``'s persisted snapshot.

        A session still open for the previous profile is dropped without
        being credited to either profile.
        """
        if self._pending is not None:
            logger.debug(
                "Discarding open session on profile switch",
                extra={"profile_id": self._profile_id, "skill": self._pending.skill},
            )
            self._pending = None

        self._profile_id = profile_id
        if profile_id is None:
            self._snapshot = ProgressSnapshot()
            return

        self._snapshot = await self._store.load(
            StateKey(PROGRESS_KIND, profile_id), ProgressSnapshot
        )
        logger.info("Progress loaded", extra={"profile_id": profile_id})

    async def start_session(self, skill: str) -> None:
        """Open a timed session for ``skill`` and update the daily streak."""
        now = self._clock()
        if self._pending is not None:
            logger.debug(
                "Replacing unfinished session",
                extra={"profile_id": self._profile_id, "skill": self._pending.skill},
            )
        self._pending = _PendingSession(skill=skill, started_at=now)

        streak = advance_streak(self._snapshot.streak, now.date())
        if streak is not self._snapshot.streak:
            self._snapshot.streak = streak
            logger.debug(
                "Streak updated",
                extra={"profile_id": self._profile_id, "streak": streak.current},
            )
            await self._persist()

    async def end_session(self) -> None:
        """Close the open session and credit its duration. No-op if none is open."""
        pending = self._pending
        if pending is None:
            return
        self._pending = None

        now = self._clock()
        duration = max(0, _round_half_up((now - pending.started_at).total_seconds()))
        self._credit(pending.skill, duration)
        self._snapshot.sessions.append(
            SessionRecord(skill=pending.skill, duration_seconds=duration, timestamp=now)
        )
        overflow = len(self._snapshot.sessions) - self._limits.session_log
        if overflow > 0:
            del self._snapshot.sessions[:overflow]

        logger.debug(
            "Session ended",
            extra={
                "profile_id": self._profile_id,
                "skill": pending.skill,
                "duration_seconds": duration,
            },
        )
        await self._persist()

    async def add_time_spent(self, skill: str, seconds: float) -> None:
        """Credit ``seconds`` to ``skill`` outside the session pattern."""
        self._credit(skill, _whole_seconds(seconds))
        await self._persist()

    async def complete_exercise(self, exercise: str) -> None:
        counts = self._snapshot.exercises_completed
        counts[exercise] = counts.get(exercise, 0) + 1
        logger.debug(
            "Exercise completed",
            extra={"profile_id": self._profile_id, "exercise": exercise},
        )
        await self._persist()

    async def record_accuracy(self, category: str, percent: float) -> None:
        """Append an accuracy percentage, clamped to 0-100, to ``category``."""
        history = self._snapshot.accuracy.setdefault(category, [])
        history.append(_clamp_percent(percent))
        overflow = len(history) - self._limits.accuracy_history
        if overflow > 0:
            del history[:overflow]
        await self._persist()

    def get_average_accuracy(self, category: str) -> int:
        """Rounded mean of the stored history for ``category``; 0 when empty."""
        return average_percent(self._snapshot.accuracy.get(category))

    def get_total_time_spent(self) -> int:
        return sum(self._snapshot.time_spent.values())

    def get_total_exercises(self) -> int:
        return sum(self._snapshot.exercises_completed.values())

    async def reset_progress(self) -> None:
        """Replace the active profile's snapshot with the empty default."""
        self._pending = None
        self._snapshot = ProgressSnapshot()
        logger.info("Progress reset", extra={"profile_id": self._profile_id})
        await self._persist()

    def _credit(self, skill: str, seconds: int) -> None:
        time_spent = self._snapshot.time_spent
        time_spent[skill] = time_spent.get(skill, 0) + seconds

    async def _persist(self) -> None:
        if self._profile_id is None:
            return
        await self._store.save(StateKey(PROGRESS_KIND, self._profile_id), self._snapshot)


def _whole_seconds(seconds: float) -> int:
    if not math.isfinite(seconds) or seconds <= 0:
        return 0
    return _round_half_up(seconds)


def _clamp_percent(percent: float) -> float:
    if math.isnan(percent):
        return 0.0
    return min(100.0, max(0.0, float(percent)))


def _round_half_up(value: float) -> int:
    # Halves round up: 62.5 -> 63.
    return math.floor(value + 0.5)


def average_percent(values: Optional[list[float]]) -> int:
    """Rounded mean of ``values``; 0 for an empty or missing history."""
    if not values:
        return 0
    return _round_half_up(sum(values) / len(values))

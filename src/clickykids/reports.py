"""Dashboard summaries for the child progress page and the parent area."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Optional

from pydantic import BaseModel, Field

from .config import RecommendationSettings
from .models import (
    ACCURACY_CATEGORIES,
    ProgressSnapshot,
    Recommendation,
    RewardsState,
    SessionRecord,
)
from .progress import average_percent
from .recommendations import generate_recommendations
from .streaks import is_streak_alive

__all__ = ["DayActivity", "ProgressReport", "build_report", "format_duration", "recent_activity"]


class DayActivity(BaseModel):
    day: date
    weekday: str
    sessions: int

    @property
    def has_activity(self) -> bool:
        return self.sessions > 0


class ProgressReport(BaseModel):
    """Everything the dashboards display for one profile."""

    total_time_seconds: int
    total_time_display: str
    total_exercises: int
    current_streak: int
    longest_streak: int
    streak_alive: bool
    stars: int
    badges_earned: int
    badges_total: int
    average_accuracy: dict[str, int]
    exercises: dict[str, int]
    time_by_skill: dict[str, int]
    activity: list[DayActivity]
    recommendations: list[Recommendation] = Field(default_factory=list)


def format_duration(seconds: int) -> str:
    """``45s``, ``12m`` or ``1h 5m``."""
    if seconds < 60:
        return f"{seconds}s"
    if seconds < 3600:
        return f"{seconds // 60}m"
    return f"{seconds // 3600}h {(seconds % 3600) // 60}m"


def recent_activity(
    sessions: list[SessionRecord], today: date, days: int = 7
) -> list[DayActivity]:
    """Sessions per day for the last ``days`` days, oldest first."""
    counts: dict[date, int] = {}
    for record in sessions:
        day = record.timestamp.date()
        counts[day] = counts.get(day, 0) + 1

    activity = []
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        activity.append(
            DayActivity(day=day, weekday=day.strftime("%a"), sessions=counts.get(day, 0))
        )
    return activity


def build_report(
    snapshot: ProgressSnapshot,
    rewards: RewardsState,
    today: date,
    *,
    badges_total: int,
    settings: Optional[RecommendationSettings] = None,
) -> ProgressReport:
    total_time = sum(snapshot.time_spent.values())
    categories = list(ACCURACY_CATEGORIES) + [
        c for c in snapshot.accuracy if c not in ACCURACY_CATEGORIES
    ]
    return ProgressReport(
        total_time_seconds=total_time,
        total_time_display=format_duration(total_time),
        total_exercises=sum(snapshot.exercises_completed.values()),
        current_streak=snapshot.streak.current,
        longest_streak=snapshot.streak.longest,
        streak_alive=is_streak_alive(snapshot.streak, today),
        stars=rewards.stars,
        badges_earned=len(rewards.earned_badges),
        badges_total=badges_total,
        average_accuracy={c: average_percent(snapshot.accuracy.get(c)) for c in categories},
        exercises=dict(snapshot.exercises_completed),
        time_by_skill=dict(snapshot.time_spent),
        activity=recent_activity(snapshot.sessions, today),
        recommendations=generate_recommendations(snapshot, settings),
    )

"""State models for progress, rewards and profiles."""

from __future__ import annotations

import math
from datetime import date, datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

Difficulty = Literal["beginner", "intermediate", "advanced"]

# Built-in skill categories, seeded at zero for every new profile.
SKILL_CATEGORIES: tuple[str, ...] = (
    "mouseMovement",
    "mouseClicking",
    "mouseDragDrop",
    "keyboardBasic",
    "keyboardTyping",
)

DEFAULT_EXERCISES: tuple[str, ...] = (
    "mouseExplore",
    "bubblePop",
    "feedAnimals",
    "shapes",
    "puzzle",
    "butterfly",
    "anyKey",
    "findKey",
    "typing",
)

ACCURACY_CATEGORIES: tuple[str, ...] = ("clicking", "dragDrop", "keyboard")


class StreakState(BaseModel):
    """Consecutive-day practice streak."""

    current: int = Field(default=0, ge=0)
    longest: int = Field(default=0, ge=0)
    last_practice_date: Optional[date] = None

    @model_validator(mode="after")
    def _longest_covers_current(self) -> "StreakState":
        if self.longest < self.current:
            self.longest = self.current
        return self


class SessionRecord(BaseModel):
    """One finished, timed session."""

    skill: str
    duration_seconds: int = Field(ge=0)
    timestamp: datetime


class ProgressSnapshot(BaseModel):
    """Everything the progress tracker persists for one profile."""

    time_spent: dict[str, int] = Field(
        default_factory=lambda: dict.fromkeys(SKILL_CATEGORIES, 0)
    )
    exercises_completed: dict[str, int] = Field(
        default_factory=lambda: dict.fromkeys(DEFAULT_EXERCISES, 0)
    )
    accuracy: dict[str, list[float]] = Field(
        default_factory=lambda: {category: [] for category in ACCURACY_CATEGORIES}
    )
    streak: StreakState = Field(default_factory=StreakState)
    sessions: list[SessionRecord] = Field(default_factory=list)


class RewardsState(BaseModel):
    """Stars, badges and per-game records for one profile."""

    stars: int = Field(default=0, ge=0)
    earned_badges: list[str] = Field(default_factory=list)
    # Earned on the last check_badges call and not yet shown to the child.
    new_badges: list[str] = Field(default_factory=list)
    letters_learned: list[str] = Field(default_factory=list)
    simon_high_score: int = Field(default=0, ge=0)
    daily_challenge_date: Optional[date] = None


class BadgeStats(BaseModel):
    """Statistics snapshot that badge conditions are evaluated against.

    Accepts both the snake_case field names and the camelCase keys game
    screens send (``totalGames``, ``gameStats`` ...).
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    total_games: int = Field(default=0, alias="totalGames")
    longest_streak: int = Field(default=0, alias="longestStreak")
    game_stats: dict[str, int] = Field(default_factory=dict, alias="gameStats")
    letters_learned: list[str] = Field(default_factory=list, alias="lettersLearned")
    simon_high_score: int = Field(default=0, alias="simonHighScore")

    @field_validator("total_games", "longest_streak", "simon_high_score", mode="before")
    @classmethod
    def _coerce_count(cls, value: Any) -> int:
        return _as_count(value)

    @field_validator("game_stats", mode="before")
    @classmethod
    def _coerce_game_stats(cls, value: Any) -> dict[str, int]:
        if not isinstance(value, dict):
            return {}
        return {str(k): _as_count(v) for k, v in value.items()}

    @field_validator("letters_learned", mode="before")
    @classmethod
    def _coerce_letters(cls, value: Any) -> list[str]:
        if not isinstance(value, (list, tuple, set, frozenset)):
            return []
        return [str(letter) for letter in value if letter is not None]


def _as_count(value: Any) -> int:
    """Best-effort non-negative int; anything unusable counts as 0."""
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            return 0
    if not isinstance(value, (int, float)) or not math.isfinite(value):
        return 0
    return max(0, int(value))


class Recommendation(BaseModel):
    """A suggested next activity."""

    type: Literal["ready", "reminder"]
    message: str
    skill: str


class Profile(BaseModel):
    """A child's profile."""

    id: str
    name: str
    dob: Optional[date] = None
    language: str = "en"
    difficulty: Difficulty = "beginner"
    avatar: str = "👦"
    created_at: datetime = Field(default_factory=datetime.now)


class ProfileIndex(BaseModel):
    """Persisted profile registry contents."""

    profiles: list[Profile] = Field(default_factory=list)
    active_profile_id: Optional[str] = None
    parent_pin: Optional[str] = None

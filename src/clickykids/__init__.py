"""ClickyKids - progress, streak, badge and recommendation engine."""

from .__version__ import __version__
from .config import EngineSettings, load_settings
from .engine import ProgressEngine
from .errors import ClickyKidsError, InvalidPinError, ProfileNotFoundError, StoreError
from .models import (
    BadgeStats,
    Profile,
    ProgressSnapshot,
    Recommendation,
    RewardsState,
    SessionRecord,
    StreakState,
)
from .profiles import ProfileRegistry
from .progress import ProgressTracker
from .recommendations import generate_recommendations
from .rewards import BADGE_CATALOG, BadgeDefinition, RewardsEvaluator
from .store import MemoryBackend, StateKey, StateStore

__all__ = [
    "BADGE_CATALOG",
    "BadgeDefinition",
    "BadgeStats",
    "ClickyKidsError",
    "EngineSettings",
    "InvalidPinError",
    "MemoryBackend",
    "Profile",
    "ProfileNotFoundError",
    "ProfileRegistry",
    "ProgressEngine",
    "ProgressSnapshot",
    "ProgressTracker",
    "Recommendation",
    "RewardsEvaluator",
    "RewardsState",
    "SessionRecord",
    "StateKey",
    "StateStore",
    "StoreError",
    "StreakState",
    "generate_recommendations",
    "load_settings",
    "__version__",
]

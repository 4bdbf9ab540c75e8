"""What to try next, derived from a progress snapshot."""

from __future__ import annotations

from typing import Optional

from .config import RecommendationSettings
from .models import ProgressSnapshot, Recommendation
from .progress import average_percent

__all__ = ["generate_recommendations"]

CLICKING_EXERCISE = "bubblePop"
DRAG_DROP_EXERCISE = "puzzle"


def generate_recommendations(
    snapshot: ProgressSnapshot,
    settings: Optional[RecommendationSettings] = None,
) -> list[Recommendation]:
    """
    Evaluate every rule against ``snapshot``.

    All matching rules fire, in this order:
    1. enough mouse movement and clicking never done -> clicking
    2. clicking done often and accurately, drag and drop never done -> drag and drop
    3. plenty of practice overall but little keyboard time -> keyboard
    4. practiced before but no current streak -> come-back reminder
    """
    settings = settings or RecommendationSettings()
    time_spent = snapshot.time_spent
    completed = snapshot.exercises_completed
    total_time = sum(time_spent.values())
    recommendations: list[Recommendation] = []

    if (
        time_spent.get("mouseMovement", 0) > settings.clicking_ready_seconds
        and not completed.get(CLICKING_EXERCISE)
    ):
        recommendations.append(
            Recommendation(
                type="ready", message="Ready to try clicking games!", skill="clicking"
            )
        )

    if (
        completed.get(CLICKING_EXERCISE, 0) > settings.drag_drop_min_completions
        and average_percent(snapshot.accuracy.get("clicking")) > settings.drag_drop_min_accuracy
        and not completed.get(DRAG_DROP_EXERCISE)
    ):
        recommendations.append(
            Recommendation(type="ready", message="Ready for drag and drop!", skill="dragDrop")
        )

    if (
        total_time > settings.keyboard_ready_total_seconds
        and time_spent.get("keyboardBasic", 0) < settings.keyboard_basic_min_seconds
    ):
        recommendations.append(
            Recommendation(type="ready", message="Try keyboard learning!", skill="keyboard")
        )

    if snapshot.streak.current == 0 and total_time > 0:
        recommendations.append(
            Recommendation(type="reminder", message="Come back to practice!", skill="general")
        )

    return recommendations


from __future__ import annotations

from datetime import date

from clickykids import ProgressSnapshot, generate_recommendations
from clickykids.config import RecommendationSettings
from clickykids.models import StreakState

_ACTIVE = StreakState(current=1, longest=1, last_practice_date=date(2024, 1, 1))


def _skills(snapshot: ProgressSnapshot) -> list[str]:
    return [r.skill for r in generate_recommendations(snapshot)]


def test_new_profile_gets_nothing() -> None:
    assert generate_recommendations(ProgressSnapshot()) == []


def test_ready_for_clicking() -> None:
    snapshot = ProgressSnapshot(
        time_spent={"mouseMovement": 301}, exercises_completed={}, streak=_ACTIVE
    )

    recommendations = generate_recommendations(snapshot)

    assert [r.skill for r in recommendations] == ["clicking"]
    assert recommendations[0].type == "ready"
    assert recommendations[0].message == "Ready to try clicking games!"


def test_clicking_threshold_is_exclusive() -> None:
    snapshot = ProgressSnapshot(time_spent={"mouseMovement": 300}, streak=_ACTIVE)

    assert "clicking" not in _skills(snapshot)


def test_no_clicking_once_bubble_pop_done() -> None:
    snapshot = ProgressSnapshot(
        time_spent={"mouseMovement": 400},
        exercises_completed={"bubblePop": 1},
        streak=_ACTIVE,
    )

    assert _skills(snapshot) == []


def test_ready_for_drag_drop() -> None:
    snapshot = ProgressSnapshot(
        exercises_completed={"bubblePop": 6},
        accuracy={"clicking": [60.0, 80.0]},
        streak=_ACTIVE,
    )

    assert _skills(snapshot) == ["dragDrop"]


def test_drag_drop_needs_accuracy_above_60() -> None:
    snapshot = ProgressSnapshot(
        exercises_completed={"bubblePop": 6},
        accuracy={"clicking": [60.0, 60.4]},
        streak=_ACTIVE,
    )

    assert "dragDrop" not in _skills(snapshot)


def test_no_drag_drop_once_puzzle_done() -> None:
    snapshot = ProgressSnapshot(
        exercises_completed={"bubblePop": 6, "puzzle": 1},
        accuracy={"clicking": [90.0]},
        streak=_ACTIVE,
    )

    assert "dragDrop" not in _skills(snapshot)


def test_try_keyboard() -> None:
    snapshot = ProgressSnapshot(
        time_spent={"mouseClicking": 580, "keyboardBasic": 59}, streak=_ACTIVE
    )

    assert _skills(snapshot) == ["keyboard"]


def test_enough_keyboard_time_suppresses_keyboard() -> None:
    snapshot = ProgressSnapshot(
        time_spent={"mouseClicking": 600, "keyboardBasic": 60}, streak=_ACTIVE
    )

    assert _skills(snapshot) == []


def test_come_back_reminder() -> None:
    snapshot = ProgressSnapshot(time_spent={"catch": 10})

    recommendations = generate_recommendations(snapshot)

    assert [(r.type, r.skill) for r in recommendations] == [("reminder", "general")]


def test_all_rules_fire_in_order() -> None:
    snapshot = ProgressSnapshot(
        time_spent={"mouseMovement": 700},
        exercises_completed={"bubblePop": 0},
        accuracy={"clicking": []},
    )

    assert _skills(snapshot) == ["clicking", "keyboard", "general"]


def test_thresholds_are_configurable() -> None:
    snapshot = ProgressSnapshot(time_spent={"mouseMovement": 120}, streak=_ACTIVE)
    settings = RecommendationSettings(clicking_ready_seconds=100)

    assert [r.skill for r in generate_recommendations(snapshot, settings)] == ["clicking"]

from __future__ import annotations

from datetime import date

import pytest

from clickykids.models import StreakState
from clickykids.streaks import advance_streak, is_streak_alive


def test_first_practice_starts_streak() -> None:
    streak = advance_streak(StreakState(), date(2024, 1, 1))

    assert streak == StreakState(current=1, longest=1, last_practice_date=date(2024, 1, 1))


def test_same_day_is_unchanged() -> None:
    before = StreakState(current=3, longest=4, last_practice_date=date(2024, 1, 1))

    assert advance_streak(before, date(2024, 1, 1)) is before


def test_consecutive_day_increments() -> None:
    before = StreakState(current=2, longest=2, last_practice_date=date(2024, 1, 1))

    after = advance_streak(before, date(2024, 1, 2))

    assert after.current == 3
    assert after.longest == 3
    assert after.last_practice_date == date(2024, 1, 2)


def test_consecutive_day_keeps_higher_longest() -> None:
    before = StreakState(current=2, longest=9, last_practice_date=date(2024, 1, 1))

    after = advance_streak(before, date(2024, 1, 2))

    assert (after.current, after.longest) == (3, 9)


@pytest.mark.parametrize(
    "last",
    [date(2023, 12, 30), date(2024, 1, 3), date(2024, 2, 1)],
    ids=["gap", "future", "far-future"],
)
def test_gap_or_future_resets_to_one(last: date) -> None:
    before = StreakState(current=4, longest=6, last_practice_date=last)

    after = advance_streak(before, date(2024, 1, 1))

    assert (after.current, after.longest) == (1, 6)
    assert after.last_practice_date == date(2024, 1, 1)


def test_month_and_year_boundaries() -> None:
    before = StreakState(current=1, longest=1, last_practice_date=date(2023, 12, 31))

    assert advance_streak(before, date(2024, 1, 1)).current == 2


def test_longest_never_below_current_after_load() -> None:
    streak = StreakState.model_validate({"current": 5, "longest": 2})

    assert streak.longest == 5


@pytest.mark.parametrize(
    ("last", "current", "expected"),
    [
        (date(2024, 1, 10), 3, True),
        (date(2024, 1, 9), 3, True),
        (date(2024, 1, 8), 3, False),
        (None, 0, False),
    ],
)
def test_is_streak_alive(last: date | None, current: int, expected: bool) -> None:
    streak = StreakState(current=current, longest=current, last_practice_date=last)

    assert is_streak_alive(streak, date(2024, 1, 10)) is expected

"""Daily practice streak transitions."""

from __future__ import annotations

from datetime import date, timedelta

from .models import StreakState


def advance_streak(streak: StreakState, today: date) -> StreakState:
    """
    Return the streak after a practice on ``today``.

    - Already practiced today: unchanged.
    - Last practice was yesterday: the streak grows by one.
    - Anything else (first practice, a gap, or a last practice date in
      the future after a clock change): the streak restarts at one.

    ``longest`` never drops below ``current``.
    """
    last = streak.last_practice_date
    if last == today:
        return streak

    if last is not None and last == today - timedelta(days=1):
        current = streak.current + 1
    else:
        current = 1

    return StreakState(
        current=current,
        longest=max(streak.longest, current),
        last_practice_date=today,
    )


def is_streak_alive(streak: StreakState, today: date) -> bool:
    """True if practicing today would extend (or keep) the current streak."""
    last = streak.last_practice_date
    if last is None or streak.current == 0:
        return False
    return last in (today, today - timedelta(days=1))

"""Streak tracking package."""

from budget_engine.streak.tracker import StreakTracker
from budget_engine.streak.transitions import (
    DayOutcome,
    advance_streak,
    daily_budget_for,
    day_bounds,
    day_outcome,
    first_of_month,
    initial_streak,
    roll_monthly_marker,
)

__all__ = [
    "DayOutcome",
    "StreakTracker",
    "advance_streak",
    "daily_budget_for",
    "day_bounds",
    "day_outcome",
    "first_of_month",
    "initial_streak",
    "roll_monthly_marker",
]

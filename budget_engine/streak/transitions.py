"""
Streak state transitions.

Pure functions only: no storage, no clock. The tracker feeds them
"today", yesterday's spend and the daily budget, and persists the result.

Day-boundary rule, applied once per new calendar day:
- yesterday's spend <= daily budget: streak + 1, longest updated
- over budget AND at least one day went unchecked: streak reset to 0
- over budget but the previous check was yesterday: streak unchanged

The last case keeps the behavior users have seen so far; whether a
checked-but-failed day should also reset is an open product question.
Likewise, crossing into a new month only moves the month marker.
"""

from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum

from budget_engine.models.money import to_decimal
from budget_engine.models.streak import StreakState


class DayOutcome(str, Enum):
    """Which branch of the day-boundary rule applied."""
    EXTENDED = "extended"
    RESET = "reset"
    HELD = "held"


def first_of_month(day: date) -> date:
    return day.replace(day=1)


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """First and last instant of a calendar day, both inclusive."""
    return datetime.combine(day, time.min), datetime.combine(day, time.max)


def daily_budget_for(monthly_income: Decimal, divisor: int = 30) -> Decimal:
    """
    Fixed-divisor daily budget.

    Deliberately ignores the real month length: every month is `divisor` days.
    """
    return to_decimal(monthly_income) / Decimal(divisor)


def initial_streak(today: date) -> StreakState:
    """State for a user checked for the first time."""
    return StreakState(
        current_streak=0,
        longest_streak=0,
        last_checked_date=today,
        monthly_reset_date=first_of_month(today),
    )


def roll_monthly_marker(state: StreakState, today: date) -> StreakState:
    """Move the month marker forward; streak counters are untouched."""
    month_start = first_of_month(today)
    if month_start <= state.monthly_reset_date:
        return state
    return StreakState(
        current_streak=state.current_streak,
        longest_streak=state.longest_streak,
        last_checked_date=state.last_checked_date,
        monthly_reset_date=month_start,
    )


def day_outcome(
    state: StreakState,
    today: date,
    yesterday_spend: Decimal,
    daily_budget: Decimal,
) -> DayOutcome:
    """Pick the day-boundary branch for a check on a new day."""
    if yesterday_spend <= daily_budget:
        return DayOutcome.EXTENDED
    if state.last_checked_date < today - timedelta(days=1):
        return DayOutcome.RESET
    return DayOutcome.HELD


def advance_streak(
    state: StreakState,
    today: date,
    yesterday_spend: Decimal,
    daily_budget: Decimal,
) -> StreakState:
    """
    Apply the day-boundary rule.

    Returns the state unchanged when today has already been checked, so
    repeated calls on the same day never double-count.
    """
    if today <= state.last_checked_date:
        return state

    current = state.current_streak
    longest = state.longest_streak

    outcome = day_outcome(state, today, yesterday_spend, daily_budget)
    if outcome == DayOutcome.EXTENDED:
        current += 1
        longest = max(longest, current)
    elif outcome == DayOutcome.RESET:
        current = 0

    return StreakState(
        current_streak=current,
        longest_streak=longest,
        last_checked_date=today,
        monthly_reset_date=state.monthly_reset_date,
    )

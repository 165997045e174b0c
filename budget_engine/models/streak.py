"""
Streak state model.

The streak record is embedded in the user's budget declaration and is
only ever changed by the streak tracker, at most once per calendar day.
"""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class StreakState(BaseModel):
    """
    Consecutive-adherence counter for one user.

    CRITICAL: longest_streak >= current_streak at all times.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    current_streak: int = Field(
        default=0,
        ge=0,
        description="Consecutive days at or under the daily budget"
    )
    longest_streak: int = Field(
        default=0,
        ge=0,
        description="Best streak ever reached"
    )
    last_checked_date: date = Field(
        ...,
        description="Calendar day of the last applied check"
    )
    monthly_reset_date: date = Field(
        ...,
        description="First day of the month currently being tracked"
    )

    @model_validator(mode='after')
    def validate_counters(self) -> 'StreakState':
        """Validate counter and marker relationships."""
        if self.longest_streak < self.current_streak:
            raise ValueError("Longest streak cannot be below current streak")
        if self.monthly_reset_date.day != 1:
            raise ValueError("Monthly reset date must be the first of a month")
        return self

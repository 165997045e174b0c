"""
Transaction and Spending Models

Transactions are immutable once recorded: they can be deleted as a
whole record but never edited in place. Everything else in this module
is derived from transactions and a BudgetResult, and never persisted.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from budget_engine.models.money import Money


def to_local_naive(value: datetime) -> datetime:
    """Convert an aware datetime to naive local time; naive values pass through."""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


class SpendingStatus(str, Enum):
    """
    Position of spending relative to a category budget.

    Bands are exact: OVER from 100% inclusive, AT in [95%, 100%),
    UNDER below 95%.
    """
    UNDER = "under"
    AT = "at"
    OVER = "over"


class Transaction(BaseModel):
    """A single recorded expense."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        frozen=True,
    )

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique transaction ID"
    )
    user_id: str = Field(
        ...,
        min_length=1,
        description="Owner of this transaction"
    )
    category: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Category as recorded (matched case-insensitively)"
    )
    amount: Money = Field(
        ...,
        gt=0,
        description="Amount spent"
    )
    timestamp: datetime = Field(
        ...,
        alias="date",
        description="When the money was spent"
    )
    description: str = Field(
        default="",
        max_length=500,
    )
    merchant: Optional[str] = Field(
        default=None,
        max_length=200,
    )
    subcategory: Optional[str] = Field(
        default=None,
        max_length=100,
        description="Wants subcategory name, when the spend belongs to one"
    )
    created_at: datetime = Field(default_factory=datetime.now)

    @field_validator('timestamp')
    @classmethod
    def normalize_timestamp(cls, v: datetime) -> datetime:
        """Store naive local time so day bounds and range filters compare cleanly."""
        return to_local_naive(v)


class CategorySpending(BaseModel):
    """Spending against one budget category."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    category: str = Field(
        ...,
        description="Budget category display name"
    )
    spent: Money
    budget: Money
    remaining: Money
    percentage_used: Money
    status: SpendingStatus


class SpendingAnalysis(BaseModel):
    """Spending compared against a computed allocation."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_spent: Money
    total_budget: Money
    percentage_of_budget_used: Money
    categories: list[CategorySpending] = Field(default_factory=list)
    over_budget_categories: list[str] = Field(default_factory=list)

    @property
    def has_overspending(self) -> bool:
        return bool(self.over_budget_categories)


class TransactionSummary(BaseModel):
    """Totals over a list of transactions, keyed by the recorded category."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    count: int = Field(ge=0)
    total_spent: Money
    by_category: dict[str, Money] = Field(default_factory=dict)


class MonthSummary(BaseModel):
    """Month-to-date spending against the whole budget."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_spent: Money
    budget_remaining: Money
    percent_used: Money
    category_spending: dict[str, Money] = Field(default_factory=dict)

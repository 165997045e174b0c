"""
Budget Models

These models define the schemas for a budget declaration and the
allocation derived from it. They are designed to:
1. Keep money exact (Decimal, never float arithmetic)
2. Serialize to the camelCase JSON contracts used by the web layer
3. Normalize stored category shapes before any calculation sees them

DESIGN DECISION: BudgetDeclaration does NOT range-check percentages.
Out-of-range values must reach the allocator so it can report every
problem at once instead of failing on the first one.
"""

from collections.abc import Mapping
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
)
from pydantic.alias_generators import to_camel

from budget_engine.models.money import HUNDRED, Money, to_decimal
from budget_engine.models.streak import StreakState


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class BudgetCategory(str, Enum):
    """
    The six canonical budget buckets.

    DESIGN DECISION: Spending is always aggregated against these keys.
    Anything else is folded into WANTS so it is never dropped from totals.
    """
    RENT = "rent"
    FOOD = "food"
    BILLS = "bills"
    SAVINGS = "savings"
    INVESTMENTS = "investments"
    WANTS = "wants"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @classmethod
    def keys(cls) -> tuple[str, ...]:
        return tuple(member.value for member in cls)


_DISPLAY_NAMES = {
    BudgetCategory.RENT: "Rent/Mortgage",
    BudgetCategory.FOOD: "Food",
    BudgetCategory.BILLS: "Bills",
    BudgetCategory.SAVINGS: "Savings",
    BudgetCategory.INVESTMENTS: "Investments",
    BudgetCategory.WANTS: "Wants",
}


def category_display_name(key: str) -> str:
    """Display name for a category key ("rent" -> "Rent/Mortgage")."""
    try:
        return BudgetCategory(key).display_name
    except ValueError:
        return key.replace("_", " ").title()


# =============================================================================
# DECLARATION - what the user saves
# =============================================================================

class WantsSubcategory(BaseModel):
    """A named share of the wants category (percentage of wants, not of income)."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    name: str = Field(
        default="",
        description="Subcategory name (e.g., Dining Out)"
    )
    percentage: Money = Field(
        ...,
        description="Percentage of the wants amount"
    )


class BudgetDeclaration(BaseModel):
    """
    A user's percentage-based budget.

    One live declaration per user. Saving a new one replaces the old
    one but keeps its created_at and embedded streak.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_id: str = Field(
        ...,
        min_length=1,
        description="Owner of this budget"
    )
    monthly_income: Money = Field(
        ...,
        description="Monthly take-home income"
    )
    categories: dict[str, Money] = Field(
        default_factory=dict,
        description="Category key -> percentage of income, in display order"
    )
    wants_subcategories: list[WantsSubcategory] = Field(
        default_factory=list,
        description="Optional split of the wants category"
    )
    streak: Optional[StreakState] = None
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    @field_validator('categories', mode='before')
    @classmethod
    def normalize_category_shapes(cls, value: Any, info: ValidationInfo) -> Any:
        """
        Reduce every stored category value to its percentage.

        Older records hold a bare percentage; newer ones hold
        {"total": ..., "percentage": ...}. A record with only a total is
        converted back to a percentage of the monthly income.
        """
        if not isinstance(value, Mapping):
            return value

        income = info.data.get("monthly_income")
        normalized: dict[str, Any] = {}
        for key, share in value.items():
            if isinstance(share, Mapping):
                percentage = share.get("percentage")
                total = share.get("total")
                if percentage is None and total is not None and income:
                    percentage = to_decimal(total) * HUNDRED / to_decimal(income)
                share = percentage if percentage is not None else 0
            normalized[str(key).strip().lower()] = share
        return normalized


# =============================================================================
# RESULT - derived, never persisted
# =============================================================================

class SubcategoryAllocation(BaseModel):
    """Dollar amount for one wants subcategory."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str
    percentage: Money
    amount: Money


class CategoryAllocation(BaseModel):
    """Dollar amount for one top-level category."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str = Field(
        ...,
        description="Display name (e.g., Rent/Mortgage)"
    )
    percentage: Money
    amount: Money
    subcategories: Optional[list[SubcategoryAllocation]] = Field(
        default=None,
        description="Only present on the wants category"
    )


class BudgetResult(BaseModel):
    """
    Allocation computed from a declaration.

    CRITICAL: When is_valid is False the amounts are zeroed and
    categories is empty. Callers must read errors, not partial numbers.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    monthly_income: Money
    total_allocated: Money
    unallocated: Money
    categories: list[CategoryAllocation] = Field(default_factory=list)
    is_valid: bool
    errors: list[str] = Field(default_factory=list)

    def category(self, name: str) -> Optional[CategoryAllocation]:
        """Find a category by display name or key, case-insensitively."""
        wanted = name.strip().lower()
        for allocation in self.categories:
            lowered = allocation.name.lower()
            if lowered == wanted or lowered.split("/", 1)[0] == wanted:
                return allocation
        return None

"""
Budget Allocation

Turns a percentage-based declaration into dollar amounts.

Rounding rules:
- Each category: round_cents(income * pct / 100)
- Each wants subcategory: round_cents(wants_amount * pct / 100), where
  wants_amount is the ALREADY ROUNDED wants category amount
- total_allocated sums the rounded top-level amounts only

Because rounding compounds, subcategory amounts may differ from the
wants amount by a few cents, and unallocated may be a few cents
negative. Both are accepted and left visible to the caller.

Every function here is pure: same input, same BudgetResult.
"""

from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import Any, Optional, Union

from budget_engine.models.budget import (
    BudgetCategory,
    BudgetDeclaration,
    BudgetResult,
    CategoryAllocation,
    SubcategoryAllocation,
    WantsSubcategory,
    category_display_name,
)
from budget_engine.models.money import (
    HUNDRED,
    ZERO,
    Number,
    format_number,
    round_cents,
    to_decimal,
)
from budget_engine.validation import collect_budget_errors

SubcategoryInput = Union[WantsSubcategory, Mapping[str, Any], tuple[str, Number]]


def _coerce_subcategory(value: SubcategoryInput) -> WantsSubcategory:
    if isinstance(value, WantsSubcategory):
        return value
    if isinstance(value, Mapping):
        return WantsSubcategory.model_validate(value)
    name, percentage = value
    return WantsSubcategory(name=name, percentage=to_decimal(percentage))


def calculate_subcategories(
    parent_amount: Decimal,
    subcategories: Iterable[WantsSubcategory],
) -> list[SubcategoryAllocation]:
    """Split an already-rounded parent amount by subcategory percentages."""
    return [
        SubcategoryAllocation(
            name=sub.name,
            percentage=sub.percentage,
            amount=round_cents(parent_amount * sub.percentage / HUNDRED),
        )
        for sub in subcategories
    ]


def allocate(
    income: Number,
    category_percentages: Mapping[str, Number],
    wants_subcategories: Optional[Iterable[SubcategoryInput]] = None,
) -> BudgetResult:
    """
    Validate a budget and compute its allocation.

    Args:
        income: Monthly income
        category_percentages: Category key -> percentage of income.
            Iteration order becomes the order of result categories.
        wants_subcategories: Optional split of the wants category

    Returns:
        BudgetResult. On any validation error, is_valid is False,
        categories is empty and every total is zero.
    """
    monthly_income = to_decimal(income)
    percentages = {
        str(key).strip().lower(): to_decimal(value)
        for key, value in category_percentages.items()
    }
    subcategories = [_coerce_subcategory(sub) for sub in (wants_subcategories or [])]

    errors = collect_budget_errors(monthly_income, percentages, subcategories)
    if errors:
        return BudgetResult(
            monthly_income=monthly_income,
            total_allocated=ZERO,
            unallocated=ZERO,
            categories=[],
            is_valid=False,
            errors=errors,
        )

    allocations = []
    for key, percentage in percentages.items():
        amount = round_cents(monthly_income * percentage / HUNDRED)
        allocation = CategoryAllocation(
            name=category_display_name(key),
            percentage=percentage,
            amount=amount,
        )
        if key == BudgetCategory.WANTS.value and subcategories:
            allocation.subcategories = calculate_subcategories(amount, subcategories)
        allocations.append(allocation)

    total_allocated = round_cents(sum((a.amount for a in allocations), ZERO))

    return BudgetResult(
        monthly_income=monthly_income,
        total_allocated=total_allocated,
        unallocated=round_cents(monthly_income - total_allocated),
        categories=allocations,
        is_valid=True,
    )


def allocate_declaration(declaration: BudgetDeclaration) -> BudgetResult:
    """Allocate a stored or submitted declaration."""
    return allocate(
        declaration.monthly_income,
        declaration.categories,
        declaration.wants_subcategories,
    )


def format_budget_summary(result: BudgetResult) -> str:
    """
    Render an allocation as plain text.

    This is what we show in logs and plain-text notifications.
    """
    if not result.is_valid:
        return "Budget calculation failed:\n" + "\n".join(result.errors)

    lines = [
        f"Monthly Income: ${result.monthly_income:.2f}",
        f"Total Allocated: ${result.total_allocated:.2f}",
        f"Unallocated: ${result.unallocated:.2f}",
        "",
        "Categories:",
    ]
    for category in result.categories:
        lines.append(
            f"  {category.name}: {format_number(category.percentage)}% = ${category.amount:.2f}"
        )
        for sub in category.subcategories or []:
            lines.append(
                f"    - {sub.name}: {format_number(sub.percentage)}% = ${sub.amount:.2f}"
            )

    return "\n".join(lines) + "\n"

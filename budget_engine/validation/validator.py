"""
Budget Declaration Validation

DESIGN DECISION: Every rule runs; nothing short-circuits.
A user fixing a budget form should see all of its problems at once,
not one per submit.

Rules:
- Monthly income must be positive
- Each category percentage in [0, 100], and their total <= 100
- Each wants subcategory named, percentage in [0, 100], total <= 100

IMPORTANT: Validation NEVER raises and NEVER silently fixes input.
It reports violations as human-readable strings.
"""

from collections.abc import Mapping, Sequence
from decimal import Decimal

from pydantic import BaseModel, Field

from budget_engine.models.budget import WantsSubcategory
from budget_engine.models.money import HUNDRED, ZERO, format_number


class PercentageValidation(BaseModel):
    """Outcome of checking one group of percentages."""

    is_valid: bool
    total_percentage: Decimal
    errors: list[str] = Field(default_factory=list)


def validate_income(income: Decimal) -> list[str]:
    """Income must be strictly positive."""
    if income <= ZERO:
        return ["Monthly income must be greater than 0"]
    return []


def validate_category_percentages(
    categories: Mapping[str, Decimal],
) -> PercentageValidation:
    """
    Check top-level category percentages.

    The total may be under 100 (the rest is unallocated) but never over.
    """
    errors = []
    total = sum(categories.values(), ZERO)

    if total > HUNDRED:
        errors.append(f"Total percentage ({format_number(total)}%) exceeds 100%")

    if total < ZERO:
        errors.append("Total percentage cannot be negative")

    for key, value in categories.items():
        if value < ZERO:
            errors.append(f"{key} percentage cannot be negative")
        if value > HUNDRED:
            errors.append(f"{key} percentage cannot exceed 100%")

    return PercentageValidation(
        is_valid=not errors,
        total_percentage=total,
        errors=errors,
    )


def validate_wants_subcategories(
    subcategories: Sequence[WantsSubcategory],
) -> PercentageValidation:
    """Check the wants split; percentages are shares of the wants amount."""
    errors = []
    total = sum((sub.percentage for sub in subcategories), ZERO)

    if total > HUNDRED:
        errors.append(f"Wants subcategories total ({format_number(total)}%) exceeds 100%")

    for index, sub in enumerate(subcategories):
        if sub.percentage < ZERO:
            errors.append(f'Subcategory "{sub.name}" has negative percentage')
        if sub.percentage > HUNDRED:
            errors.append(f'Subcategory "{sub.name}" percentage exceeds 100%')
        if not sub.name or not sub.name.strip():
            errors.append(f"Subcategory at index {index} has no name")

    return PercentageValidation(
        is_valid=not errors,
        total_percentage=total,
        errors=errors,
    )


def collect_budget_errors(
    income: Decimal,
    categories: Mapping[str, Decimal],
    subcategories: Sequence[WantsSubcategory],
) -> list[str]:
    """Run every rule and return all violations in a stable order."""
    errors = validate_income(income)
    errors.extend(validate_category_percentages(categories).errors)
    if subcategories:
        errors.extend(validate_wants_subcategories(subcategories).errors)
    return errors

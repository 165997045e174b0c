"""Budget validation package."""

from budget_engine.validation.validator import (
    PercentageValidation,
    collect_budget_errors,
    validate_category_percentages,
    validate_income,
    validate_wants_subcategories,
)

__all__ = [
    "PercentageValidation",
    "collect_budget_errors",
    "validate_category_percentages",
    "validate_income",
    "validate_wants_subcategories",
]

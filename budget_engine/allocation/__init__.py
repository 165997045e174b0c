"""Budget allocation package."""

from budget_engine.allocation.allocator import (
    allocate,
    allocate_declaration,
    calculate_subcategories,
    format_budget_summary,
)

__all__ = [
    "allocate",
    "allocate_declaration",
    "calculate_subcategories",
    "format_budget_summary",
]

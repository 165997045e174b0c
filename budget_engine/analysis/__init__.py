"""Spending analysis package."""

from budget_engine.analysis.analyzer import (
    AT_BUDGET_THRESHOLD,
    OVER_BUDGET_THRESHOLD,
    aggregate_by_category,
    analyze,
    budget_key,
    classify_status,
    format_spending_analysis,
    progress_bar,
    spending_key,
    spending_summary,
    summarize_month,
    summarize_transactions,
)

__all__ = [
    "AT_BUDGET_THRESHOLD",
    "OVER_BUDGET_THRESHOLD",
    "aggregate_by_category",
    "analyze",
    "budget_key",
    "classify_status",
    "format_spending_analysis",
    "progress_bar",
    "spending_key",
    "spending_summary",
    "summarize_month",
    "summarize_transactions",
]

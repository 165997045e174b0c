"""
Spending Analysis

Compares recorded transactions against a computed allocation.

DESIGN DECISION: Unclassified spend is never dropped.
Transaction categories are matched case-insensitively against the six
canonical keys; anything else counts toward "wants". Budget category
display names ("Rent/Mortgage") are reduced to their key ("rent") by
lower-casing and cutting everything from the first "/".

Nothing here raises on empty input: no transactions or a zero budget
simply produce zeros and 0%.
"""

from collections.abc import Iterable, Sequence
from decimal import Decimal

from budget_engine.models.budget import BudgetCategory, BudgetResult
from budget_engine.models.money import HUNDRED, ZERO
from budget_engine.models.transaction import (
    CategorySpending,
    MonthSummary,
    SpendingAnalysis,
    SpendingStatus,
    Transaction,
    TransactionSummary,
)

AT_BUDGET_THRESHOLD = Decimal("95")
OVER_BUDGET_THRESHOLD = Decimal("100")

_STATUS_ICONS = {
    SpendingStatus.OVER: "🔴",
    SpendingStatus.AT: "🟡",
    SpendingStatus.UNDER: "🟢",
}


def spending_key(category: str) -> str:
    """Canonical key a transaction's spend is counted under."""
    key = category.strip().lower()
    if key in BudgetCategory.keys():
        return key
    return BudgetCategory.WANTS.value


def budget_key(name: str) -> str:
    """Canonical key for a budget category display name."""
    return name.strip().lower().split("/", 1)[0]


def percentage_of(part: Decimal, whole: Decimal) -> Decimal:
    """part as a percentage of whole; 0 when whole is not positive."""
    if whole > ZERO:
        return part * HUNDRED / whole
    return ZERO


def classify_status(percentage_used: Decimal) -> SpendingStatus:
    """Map a usage percentage to its status band."""
    if percentage_used >= OVER_BUDGET_THRESHOLD:
        return SpendingStatus.OVER
    if percentage_used >= AT_BUDGET_THRESHOLD:
        return SpendingStatus.AT
    return SpendingStatus.UNDER


def aggregate_by_category(transactions: Iterable[Transaction]) -> dict[str, Decimal]:
    """Sum transaction amounts per canonical key (all six keys always present)."""
    totals = {key: ZERO for key in BudgetCategory.keys()}
    for transaction in transactions:
        totals[spending_key(transaction.category)] += transaction.amount
    return totals


def analyze(
    transactions: Sequence[Transaction],
    budget_result: BudgetResult,
) -> SpendingAnalysis:
    """
    Compare spending against each allocated category.

    Args:
        transactions: Transactions in the period being analyzed
        budget_result: Allocation to compare against

    Returns:
        SpendingAnalysis with one entry per budget category, in the
        budget's own order.
    """
    spent_by_key = aggregate_by_category(transactions)
    total_spent = sum(spent_by_key.values(), ZERO)

    categories = []
    for allocation in budget_result.categories:
        spent = spent_by_key.get(budget_key(allocation.name), ZERO)
        budget = allocation.amount
        percentage_used = percentage_of(spent, budget)
        categories.append(CategorySpending(
            category=allocation.name,
            spent=spent,
            budget=budget,
            remaining=budget - spent,
            percentage_used=percentage_used,
            status=classify_status(percentage_used),
        ))

    return SpendingAnalysis(
        total_spent=total_spent,
        total_budget=budget_result.total_allocated,
        percentage_of_budget_used=percentage_of(total_spent, budget_result.total_allocated),
        categories=categories,
        over_budget_categories=[
            c.category for c in categories if c.status == SpendingStatus.OVER
        ],
    )


def summarize_transactions(transactions: Sequence[Transaction]) -> TransactionSummary:
    """
    Totals keyed by the recorded (lower-cased) category.

    Unlike analyze(), categories are NOT folded into wants here; this is
    the raw breakdown shown next to a transaction history.
    """
    by_category: dict[str, Decimal] = {}
    for transaction in transactions:
        key = transaction.category.strip().lower()
        by_category[key] = by_category.get(key, ZERO) + transaction.amount

    return TransactionSummary(
        count=len(transactions),
        total_spent=sum(by_category.values(), ZERO),
        by_category=by_category,
    )


def summarize_month(
    transactions: Sequence[Transaction],
    budget_result: BudgetResult,
) -> MonthSummary:
    """Month-to-date spending against the whole allocation."""
    summary = summarize_transactions(transactions)
    return MonthSummary(
        total_spent=summary.total_spent,
        budget_remaining=budget_result.total_allocated - summary.total_spent,
        percent_used=percentage_of(summary.total_spent, budget_result.total_allocated),
        category_spending=summary.by_category,
    )


def spending_summary(analysis: SpendingAnalysis) -> dict[str, dict[str, Decimal]]:
    """Compact {category: {spent, budget, remaining}} view of an analysis."""
    return {
        c.category: {
            "spent": c.spent,
            "budget": c.budget,
            "remaining": c.remaining,
        }
        for c in analysis.categories
    }


def progress_bar(percentage: Decimal, length: int = 20) -> str:
    """Fixed-width text bar, full at 100% and never longer."""
    filled = max(0, min(int(percentage * length / HUNDRED), length))
    return "[" + "█" * filled + "░" * (length - filled) + "]"


def format_spending_analysis(analysis: SpendingAnalysis) -> str:
    """
    Render an analysis as a plain-text report.

    This is what we put in notifications and hand to the advisory
    service as read-only context.
    """
    lines = [
        "📊 Spending Analysis",
        "━" * 34,
        "",
        f"💰 Overall: ${analysis.total_spent:.2f} / ${analysis.total_budget:.2f}",
        f"   ({analysis.percentage_of_budget_used:.1f}% of budget used)",
        "",
    ]

    for c in analysis.categories:
        label = "Remaining" if c.remaining >= ZERO else "Over"
        lines.append(f"{_STATUS_ICONS[c.status]} {c.category}")
        lines.append(f"   ${c.spent:.2f} / ${c.budget:.2f} {progress_bar(c.percentage_used)}")
        lines.append(f"   {label}: ${abs(c.remaining):.2f} ({c.percentage_used:.1f}%)")
        lines.append("")

    if analysis.over_budget_categories:
        lines.append(f"⚠️  Over Budget: {', '.join(analysis.over_budget_categories)}")

    return "\n".join(lines) + "\n"

"""
Data Models Package

This package contains all Pydantic models used by the budget engine.
All data flowing through the engine must conform to these schemas.
"""

from budget_engine.models.budget import (
    BudgetCategory,
    BudgetDeclaration,
    BudgetResult,
    CategoryAllocation,
    SubcategoryAllocation,
    WantsSubcategory,
    category_display_name,
)
from budget_engine.models.streak import StreakState
from budget_engine.models.transaction import (
    CategorySpending,
    MonthSummary,
    SpendingAnalysis,
    SpendingStatus,
    Transaction,
    TransactionSummary,
    to_local_naive,
)
from budget_engine.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Budget models
    "BudgetCategory",
    "BudgetDeclaration",
    "BudgetResult",
    "CategoryAllocation",
    "SubcategoryAllocation",
    "WantsSubcategory",
    "category_display_name",
    # Streak
    "StreakState",
    # Transactions and spending
    "CategorySpending",
    "MonthSummary",
    "SpendingAnalysis",
    "SpendingStatus",
    "Transaction",
    "TransactionSummary",
    "to_local_naive",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]

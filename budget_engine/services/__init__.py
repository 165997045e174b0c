"""
External collaborator services.

Only storage is wired into the engine; the advisory text service and
sample-transaction source consume engine output and live elsewhere.
"""

from budget_engine.services.storage import (
    AuditStorageInterface,
    BudgetStorageInterface,
    InMemoryAuditStorage,
    InMemoryBudgetStorage,
)

__all__ = [
    "AuditStorageInterface",
    "BudgetStorageInterface",
    "InMemoryAuditStorage",
    "InMemoryBudgetStorage",
]

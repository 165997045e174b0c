"""
Storage Services Package

Provides abstract interfaces and an in-memory implementation for data
storage. Production backends implement the same interfaces.
"""

from budget_engine.services.storage.interface import (
    AuditStorageInterface,
    BudgetNotFoundError,
    BudgetStorageInterface,
    DuplicateError,
    NotFoundError,
    StorageError,
    StreakConflictError,
    TransientStorageError,
)
from budget_engine.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryBudgetStorage,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "BudgetStorageInterface",
    # Exceptions
    "BudgetNotFoundError",
    "DuplicateError",
    "NotFoundError",
    "StorageError",
    "StreakConflictError",
    "TransientStorageError",
    # In-memory implementation
    "InMemoryAuditStorage",
    "InMemoryBudgetStorage",
]

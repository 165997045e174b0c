"""
Abstract Storage Interface

DESIGN DECISION: The engine never talks to a database directly.
This allows us to:
1. Swap the persistence backend without touching accounting logic
2. Use in-memory storage for testing
3. Keep the streak's conditional write a storage-level guarantee

The interface is intentionally small - only the operations the
engine needs for budgets, transactions and streaks.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Optional
from uuid import UUID

from budget_engine.models.audit import AuditEvent
from budget_engine.models.budget import BudgetDeclaration
from budget_engine.models.streak import StreakState
from budget_engine.models.transaction import Transaction


class BudgetStorageInterface(ABC):
    """
    Abstract interface for budget, transaction and streak storage.

    Any storage implementation (MongoDB, PostgreSQL, etc.)
    must implement these methods.
    """

    @abstractmethod
    async def get_budget_declaration(self, user_id: str) -> Optional[BudgetDeclaration]:
        """
        Retrieve a user's budget, including the embedded streak.

        Returns:
            The declaration if found, None otherwise
        """
        pass

    @abstractmethod
    async def save_budget_declaration(
        self,
        declaration: BudgetDeclaration,
    ) -> BudgetDeclaration:
        """
        Insert or replace the user's budget.

        An existing record keeps its created_at and its streak unless
        the incoming declaration carries a streak of its own.

        Returns:
            The declaration as stored

        Raises:
            StorageError: If save fails
        """
        pass

    @abstractmethod
    async def get_transactions(
        self,
        user_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[Transaction]:
        """
        List a user's transactions, newest first.

        Args:
            user_id: Owner of the transactions
            start: Only transactions at or after this instant
            end: Only transactions at or before this instant

        Aware bounds are compared in naive local time, like stored timestamps.

        Returns:
            List of matching transactions
        """
        pass

    @abstractmethod
    async def save_transaction(self, transaction: Transaction) -> Transaction:
        """
        Store a new transaction.

        Raises:
            DuplicateError: If a transaction with the same ID exists
        """
        pass

    @abstractmethod
    async def delete_transaction(self, transaction_id: UUID) -> bool:
        """
        Delete a transaction by ID.

        Returns:
            True if a transaction was deleted
        """
        pass

    @abstractmethod
    async def save_streak_state(
        self,
        user_id: str,
        state: StreakState,
        expected_last_checked_date: Optional[date],
    ) -> StreakState:
        """
        Replace the user's streak, conditionally.

        The write succeeds only if the stored streak's last_checked_date
        still equals expected_last_checked_date (None meaning "no streak
        stored yet"). The whole state is written at once or not at all.

        Raises:
            BudgetNotFoundError: If the user has no budget
            StreakConflictError: If another check updated the streak first
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """Append an audit event to the log."""
        pass

    @abstractmethod
    async def get_events_by_user(self, user_id: str) -> list[AuditEvent]:
        """All events for a user, in chronological order."""
        pass

    @abstractmethod
    async def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        """Most recent events, newest first."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class BudgetNotFoundError(NotFoundError):
    """The user has no budget declaration."""

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f"No budget found for user {user_id}")


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass


class StreakConflictError(StorageError):
    """The stored streak changed between read and conditional write."""
    pass


class TransientStorageError(StorageError):
    """A temporary backend failure; the operation may be retried."""
    pass

"""
In-Memory Storage Implementation

A complete, process-local implementation of the storage interfaces.
Used as the reference backend and as the test double.

TRADEOFFS:
- Nothing survives a restart
- Only safe within one event loop (no awaits inside a mutation, so
  each operation is atomic with respect to other coroutines)

Records are copied on the way in and out so callers can never mutate
stored state by holding on to a returned object.
"""

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from budget_engine.models.audit import AuditEvent
from budget_engine.models.budget import BudgetDeclaration
from budget_engine.models.streak import StreakState
from budget_engine.models.transaction import Transaction, to_local_naive
from budget_engine.services.storage.interface import (
    AuditStorageInterface,
    BudgetNotFoundError,
    BudgetStorageInterface,
    DuplicateError,
    StreakConflictError,
)


class InMemoryBudgetStorage(BudgetStorageInterface):
    """Budgets keyed by user; transactions keyed by ID."""

    def __init__(self):
        self._budgets: dict[str, BudgetDeclaration] = {}
        self._transactions: dict[UUID, Transaction] = {}

    async def get_budget_declaration(self, user_id: str) -> Optional[BudgetDeclaration]:
        declaration = self._budgets.get(user_id)
        if declaration is None:
            return None
        return declaration.model_copy(deep=True)

    async def save_budget_declaration(
        self,
        declaration: BudgetDeclaration,
    ) -> BudgetDeclaration:
        updates = {"updated_at": datetime.now()}

        existing = self._budgets.get(declaration.user_id)
        if existing is not None:
            updates["created_at"] = existing.created_at
            if declaration.streak is None:
                updates["streak"] = existing.streak

        stored = declaration.model_copy(update=updates, deep=True)
        self._budgets[declaration.user_id] = stored
        return stored.model_copy(deep=True)

    async def get_transactions(
        self,
        user_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[Transaction]:
        start = to_local_naive(start) if start else None
        end = to_local_naive(end) if end else None
        matches = [
            t for t in self._transactions.values()
            if t.user_id == user_id
            and (start is None or t.timestamp >= start)
            and (end is None or t.timestamp <= end)
        ]
        return sorted(matches, key=lambda t: t.timestamp, reverse=True)

    async def save_transaction(self, transaction: Transaction) -> Transaction:
        if transaction.id in self._transactions:
            raise DuplicateError(f"Transaction already exists: {transaction.id}")
        # Transactions are frozen, so sharing the instance is safe
        self._transactions[transaction.id] = transaction
        return transaction

    async def delete_transaction(self, transaction_id: UUID) -> bool:
        return self._transactions.pop(transaction_id, None) is not None

    async def save_streak_state(
        self,
        user_id: str,
        state: StreakState,
        expected_last_checked_date: Optional[date],
    ) -> StreakState:
        declaration = self._budgets.get(user_id)
        if declaration is None:
            raise BudgetNotFoundError(user_id)

        stored_date = declaration.streak.last_checked_date if declaration.streak else None
        if stored_date != expected_last_checked_date:
            raise StreakConflictError(
                f"Streak for {user_id} was last checked on {stored_date}, "
                f"expected {expected_last_checked_date}"
            )

        self._budgets[user_id] = declaration.model_copy(
            update={"streak": state.model_copy()}
        )
        return state.model_copy()


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only list of audit events."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    async def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    async def get_events_by_user(self, user_id: str) -> list[AuditEvent]:
        return [e for e in self._events if e.user_id == user_id]

    async def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        return list(reversed(self._events))[:limit]

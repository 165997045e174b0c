"""
Main Orchestrator for the Budget Engine

This module ties the pure calculators to storage and defines the
flows the web layer calls:
1. Budget (declaration → validate → save; load → allocate)
2. Transactions (add, delete, history, analysis, month summary)
3. Streak checks are delegated to StreakTracker

DESIGN DECISION: The orchestrator enforces the boundaries:
- An invalid declaration is never persisted
- A BudgetResult is always recomputed from the stored declaration
- Every state change is audited

Collaborators are injected; nothing here holds global state.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

import structlog

from budget_engine.allocation import allocate_declaration
from budget_engine.analysis import analyze, summarize_month, summarize_transactions
from budget_engine.audit import AuditLogger
from budget_engine.models.audit import AuditEvent, AuditEventBuilder
from budget_engine.models.budget import BudgetDeclaration, BudgetResult
from budget_engine.models.money import Number, to_decimal
from budget_engine.models.transaction import (
    MonthSummary,
    SpendingAnalysis,
    Transaction,
    TransactionSummary,
    to_local_naive,
)
from budget_engine.services.storage import (
    BudgetNotFoundError,
    BudgetStorageInterface,
    NotFoundError,
)
from budget_engine.streak.transitions import first_of_month

logger = structlog.get_logger(__name__)


class InvalidBudgetError(ValueError):
    """A declaration failed validation; carries every violated rule."""

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


async def load_budget_result(
    storage: BudgetStorageInterface,
    user_id: str,
) -> BudgetResult:
    """
    Recompute the allocation from the user's current declaration.

    Raises:
        BudgetNotFoundError: If the user has no budget
        InvalidBudgetError: If the stored declaration no longer validates
    """
    declaration = await storage.get_budget_declaration(user_id)
    if declaration is None:
        raise BudgetNotFoundError(user_id)

    result = allocate_declaration(declaration)
    if not result.is_valid:
        logger.error("stored_budget_invalid", user_id=user_id, errors=result.errors)
        raise InvalidBudgetError(result.errors)
    return result


class BudgetFlow:
    """
    Orchestrates budget declarations.

    Flow:
    1. Calculate → preview an allocation without saving
    2. Save → validate, then upsert (one budget per user)
    3. Load → fetch the declaration or its live allocation
    """

    def __init__(
        self,
        storage: BudgetStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._audit_logger = audit_logger

    def calculate(self, declaration: BudgetDeclaration) -> BudgetResult:
        """Preview the allocation for a declaration. Never raises on bad input."""
        return allocate_declaration(declaration)

    async def save_budget(
        self,
        declaration: BudgetDeclaration,
    ) -> tuple[BudgetDeclaration, BudgetResult]:
        """
        Validate and save the user's budget.

        Returns:
            (stored_declaration, allocation)

        Raises:
            InvalidBudgetError: With all validation errors; nothing is saved
        """
        result = allocate_declaration(declaration)

        if not result.is_valid:
            logger.info(
                "budget_rejected",
                user_id=declaration.user_id,
                error_count=len(result.errors),
            )
            await self._audit(AuditEventBuilder.budget_rejected(
                declaration.user_id, result.errors,
            ))
            raise InvalidBudgetError(result.errors)

        # Only StreakTracker writes the streak; the stored one survives the upsert
        stored = await self._storage.save_budget_declaration(
            declaration.model_copy(update={"streak": None})
        )

        logger.info(
            "budget_saved",
            user_id=stored.user_id,
            total_allocated=str(result.total_allocated),
        )
        await self._audit(AuditEventBuilder.budget_saved(
            stored.user_id,
            f"{result.monthly_income:.2f}",
            f"{result.total_allocated:.2f}",
        ))
        return stored, result

    async def get_budget(self, user_id: str) -> BudgetDeclaration:
        """
        Raises:
            BudgetNotFoundError: If the user has no budget
        """
        declaration = await self._storage.get_budget_declaration(user_id)
        if declaration is None:
            raise BudgetNotFoundError(user_id)
        return declaration

    async def get_budget_result(self, user_id: str) -> BudgetResult:
        return await load_budget_result(self._storage, user_id)

    async def _audit(self, event: AuditEvent) -> None:
        if self._audit_logger:
            await self._audit_logger.log(event)


class TransactionFlow:
    """
    Orchestrates transactions and spending reports.

    Reports always use the allocation recomputed from the stored
    declaration, so they track the latest saved budget.
    """

    DEFAULT_MERCHANT = "Manual Entry"

    def __init__(
        self,
        storage: BudgetStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._audit_logger = audit_logger

    async def add_transaction(
        self,
        user_id: str,
        category: str,
        amount: Number,
        description: Optional[str] = None,
        merchant: Optional[str] = None,
        when: Optional[datetime] = None,
        subcategory: Optional[str] = None,
    ) -> Transaction:
        """
        Record a manual transaction.

        The category is stored lower-cased. Description defaults to
        "<category> purchase" and merchant to "Manual Entry". A wants
        purchase may name its subcategory.

        Raises:
            BudgetNotFoundError: If the user has no budget yet
            pydantic.ValidationError: If amount is not positive
        """
        if await self._storage.get_budget_declaration(user_id) is None:
            raise BudgetNotFoundError(user_id)

        transaction = Transaction(
            user_id=user_id,
            category=category.strip().lower(),
            amount=to_decimal(amount),
            timestamp=when or datetime.now(),
            description=description or f"{category.strip()} purchase",
            merchant=merchant or self.DEFAULT_MERCHANT,
            subcategory=subcategory,
        )
        saved = await self._storage.save_transaction(transaction)

        logger.info(
            "transaction_added",
            user_id=user_id,
            transaction_id=str(saved.id),
            category=saved.category,
        )
        await self._audit(AuditEventBuilder.transaction_added(
            user_id, saved.id, saved.category, f"{saved.amount:.2f}",
        ))
        return saved

    async def delete_transaction(self, transaction_id: UUID) -> None:
        """
        Raises:
            NotFoundError: If no such transaction exists
        """
        deleted = await self._storage.delete_transaction(transaction_id)
        if not deleted:
            raise NotFoundError(f"Transaction not found: {transaction_id}")

        logger.info("transaction_deleted", transaction_id=str(transaction_id))
        await self._audit(AuditEventBuilder.transaction_deleted(transaction_id))

    async def history(
        self,
        user_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> tuple[list[Transaction], TransactionSummary]:
        """
        Transactions newest first, with a summary of the returned page.

        Returns:
            (transactions, summary)
        """
        transactions = await self._storage.get_transactions(user_id, start, end)
        if limit is not None:
            transactions = transactions[:max(limit, 0)]
        return transactions, summarize_transactions(transactions)

    async def analyze(
        self,
        user_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> SpendingAnalysis:
        """
        Compare spending in [start, end] against the live allocation.

        Raises:
            BudgetNotFoundError: If the user has no budget
        """
        budget_result = await load_budget_result(self._storage, user_id)
        transactions = await self._storage.get_transactions(user_id, start, end)
        return analyze(transactions, budget_result)

    async def month_summary(
        self,
        user_id: str,
        now: Optional[datetime] = None,
    ) -> MonthSummary:
        """
        Spending from the first of the current month up to now.

        Raises:
            BudgetNotFoundError: If the user has no budget
        """
        now = to_local_naive(now or datetime.now())
        budget_result = await load_budget_result(self._storage, user_id)
        month_start = datetime.combine(first_of_month(now.date()), datetime.min.time())
        transactions = await self._storage.get_transactions(user_id, month_start, now)
        return summarize_month(transactions, budget_result)

    async def _audit(self, event: AuditEvent) -> None:
        if self._audit_logger:
            await self._audit_logger.log(event)

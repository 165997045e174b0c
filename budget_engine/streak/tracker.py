"""
Streak Tracker

Drives the streak state machine against storage:
1. Load the budget and its embedded streak (missing budget is fatal)
2. Initialize the streak on first check
3. Advance the month marker
4. On the first check of a new day, apply yesterday's spend
5. Persist with ONE conditional write, only if something changed

CONCURRENCY: Two checks for the same user racing across a day boundary
must not both count the day. Within a process, a per-user asyncio.Lock
serializes checks. Across processes, the write is conditional on the
last_checked_date we read; a StreakConflictError means someone else got
there first, so we re-read and re-evaluate (usually to a no-op).
"""

import asyncio
import weakref
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional

import structlog
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from budget_engine.audit import AuditLogger
from budget_engine.config import StreakSettings, get_settings
from budget_engine.models.audit import AuditEvent, AuditEventBuilder
from budget_engine.models.money import ZERO
from budget_engine.models.streak import StreakState
from budget_engine.models.transaction import to_local_naive
from budget_engine.services.storage import (
    BudgetNotFoundError,
    BudgetStorageInterface,
    StreakConflictError,
    TransientStorageError,
)
from budget_engine.streak.transitions import (
    DayOutcome,
    advance_streak,
    daily_budget_for,
    day_bounds,
    day_outcome,
    initial_streak,
    roll_monthly_marker,
)

logger = structlog.get_logger(__name__)


class StreakTracker:
    """
    Checks and updates a user's budget-adherence streak.

    Holds no per-user data beyond the locks; all state lives in storage.
    """

    def __init__(
        self,
        storage: BudgetStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[StreakSettings] = None,
    ):
        self._storage = storage
        self._audit_logger = audit_logger
        self._settings = settings or get_settings().streak
        # Entries vanish once no check holds or awaits the lock
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    async def check(self, user_id: str, now: Optional[datetime] = None) -> StreakState:
        """
        Check the user's streak, applying at most one day transition.

        Args:
            user_id: User whose streak to check
            now: Current time; defaults to the local clock

        Returns:
            The streak after the check (unchanged on repeat same-day calls)

        Raises:
            BudgetNotFoundError: If the user has no budget
            StorageError: If storage keeps failing past the retry limit
        """
        now = to_local_naive(now or datetime.now())

        async with self._lock_for(user_id):
            try:
                async for attempt in self._retrying():
                    with attempt:
                        try:
                            state = await self._check_once(user_id, now)
                        except StreakConflictError:
                            await self._audit(AuditEventBuilder.streak_conflict(
                                user_id, attempt.retry_state.attempt_number,
                            ))
                            raise
            except TransientStorageError as e:
                logger.error("streak_check_failed", user_id=user_id, error=str(e))
                await self._audit(AuditEventBuilder.system_error(
                    type(e).__name__, str(e), user_id=user_id,
                ))
                raise

        return state

    def _lock_for(self, user_id: str) -> asyncio.Lock:
        lock = self._locks.get(user_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[user_id] = lock
        return lock

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            stop=stop_after_attempt(self._settings.retry_attempts),
            wait=wait_exponential(
                multiplier=self._settings.retry_min_wait,
                min=self._settings.retry_min_wait,
                max=self._settings.retry_max_wait,
            ),
            retry=retry_if_exception_type((StreakConflictError, TransientStorageError)),
            before_sleep=self._log_retry,
            reraise=True,
        )

    @staticmethod
    def _log_retry(retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            "streak_check_retry",
            attempt=retry_state.attempt_number,
            error=str(error),
            error_type=type(error).__name__,
        )

    async def _check_once(self, user_id: str, now: datetime) -> StreakState:
        declaration = await self._storage.get_budget_declaration(user_id)
        if declaration is None:
            raise BudgetNotFoundError(user_id)

        today = now.date()
        stored = declaration.streak
        state = roll_monthly_marker(stored or initial_streak(today), today)
        before_day = state

        outcome: Optional[DayOutcome] = None
        day_spend = ZERO
        daily_budget = ZERO
        if today > state.last_checked_date:
            start, end = day_bounds(today - timedelta(days=1))
            transactions = await self._storage.get_transactions(user_id, start, end)
            day_spend = sum((t.amount for t in transactions), ZERO)
            daily_budget = daily_budget_for(
                declaration.monthly_income,
                self._settings.daily_budget_divisor,
            )
            outcome = day_outcome(state, today, day_spend, daily_budget)
            state = advance_streak(state, today, day_spend, daily_budget)

        if state == stored:
            return state

        expected = stored.last_checked_date if stored else None
        saved = await self._storage.save_streak_state(user_id, state, expected)

        logger.info(
            "streak_updated",
            user_id=user_id,
            current_streak=saved.current_streak,
            longest_streak=saved.longest_streak,
            last_checked_date=saved.last_checked_date.isoformat(),
        )

        if stored is None:
            await self._audit(AuditEventBuilder.streak_initialized(user_id, today))
        elif before_day.monthly_reset_date != stored.monthly_reset_date:
            await self._audit(AuditEventBuilder.month_marker_advanced(
                user_id, stored.monthly_reset_date, before_day.monthly_reset_date,
            ))

        if outcome is not None:
            await self._audit(self._day_event(
                user_id, outcome, before_day, saved, day_spend, daily_budget,
            ))

        return saved

    @staticmethod
    def _day_event(
        user_id: str,
        outcome: DayOutcome,
        before: StreakState,
        after: StreakState,
        day_spend: Decimal,
        daily_budget: Decimal,
    ) -> AuditEvent:
        if outcome == DayOutcome.EXTENDED:
            return AuditEventBuilder.streak_extended(
                user_id, after.current_streak, after.longest_streak,
            )
        if outcome == DayOutcome.RESET:
            return AuditEventBuilder.streak_reset(
                user_id, before.current_streak, f"{day_spend:.2f}", f"{daily_budget:.2f}",
            )
        return AuditEventBuilder.streak_held(
            user_id, after.current_streak, f"{day_spend:.2f}", f"{daily_budget:.2f}",
        )

    async def _audit(self, event: AuditEvent) -> None:
        if self._audit_logger:
            await self._audit_logger.log(event)

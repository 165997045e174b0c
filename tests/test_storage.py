"""
Tests for in-memory storage, the audit logger and settings.
"""

import pytest
from datetime import date, datetime
from decimal import Decimal

from budget_engine.audit import AuditLogger
from budget_engine.config import AppSettings, StreakSettings
from budget_engine.models.audit import AuditEventBuilder
from budget_engine.models.streak import StreakState
from budget_engine.models.transaction import Transaction
from budget_engine.services.storage import (
    AuditStorageInterface,
    BudgetNotFoundError,
    DuplicateError,
    StreakConflictError,
)

USER = "user-1"


def transaction(amount: str, when: datetime, user_id: str = USER) -> Transaction:
    return Transaction(
        user_id=user_id,
        category="food",
        amount=Decimal(amount),
        timestamp=when,
    )


def state(last: date, current: int = 0) -> StreakState:
    return StreakState(
        current_streak=current,
        longest_streak=current,
        last_checked_date=last,
        monthly_reset_date=last.replace(day=1),
    )


class TestBudgetStorage:
    """Tests for InMemoryBudgetStorage."""

    @pytest.mark.asyncio
    async def test_missing_budget_is_none(self, storage):
        assert await storage.get_budget_declaration(USER) is None

    @pytest.mark.asyncio
    async def test_returned_records_are_copies(self, storage, make_budget):
        await storage.save_budget_declaration(make_budget())

        loaded = await storage.get_budget_declaration(USER)
        loaded.categories["rent"] = Decimal("99")

        reloaded = await storage.get_budget_declaration(USER)
        assert reloaded.categories["rent"] == Decimal("30")

    @pytest.mark.asyncio
    async def test_upsert_keeps_created_at_and_streak(self, storage, make_budget):
        streak = state(date(2024, 5, 3), current=2)
        first = await storage.save_budget_declaration(make_budget(streak=streak))

        second = await storage.save_budget_declaration(make_budget(
            income="9000",
            created_at=datetime(2030, 1, 1),
        ))

        assert second.created_at == first.created_at
        assert second.streak == streak
        assert second.monthly_income == Decimal("9000")

    @pytest.mark.asyncio
    async def test_transactions_newest_first_and_bounds_inclusive(self, storage):
        for day in (1, 2, 3, 4):
            await storage.save_transaction(transaction("1", datetime(2024, 5, day, 12)))
        await storage.save_transaction(transaction("1", datetime(2024, 5, 2, 12), "other"))

        found = await storage.get_transactions(
            USER,
            start=datetime(2024, 5, 2, 12),
            end=datetime(2024, 5, 3, 12),
        )

        assert [t.timestamp.day for t in found] == [3, 2]

    @pytest.mark.asyncio
    async def test_duplicate_transaction_rejected(self, storage):
        original = transaction("5", datetime(2024, 5, 1))
        await storage.save_transaction(original)

        with pytest.raises(DuplicateError):
            await storage.save_transaction(original)

    @pytest.mark.asyncio
    async def test_delete_transaction(self, storage):
        saved = await storage.save_transaction(transaction("5", datetime(2024, 5, 1)))

        assert await storage.delete_transaction(saved.id) is True
        assert await storage.delete_transaction(saved.id) is False


class TestStreakWrites:
    """Tests for the conditional streak write."""

    @pytest.mark.asyncio
    async def test_requires_budget(self, storage):
        with pytest.raises(BudgetNotFoundError):
            await storage.save_streak_state(USER, state(date(2024, 5, 3)), None)

    @pytest.mark.asyncio
    async def test_first_write_expects_no_streak(self, storage, make_budget):
        await storage.save_budget_declaration(make_budget())

        saved = await storage.save_streak_state(USER, state(date(2024, 5, 3)), None)

        assert saved.last_checked_date == date(2024, 5, 3)
        declaration = await storage.get_budget_declaration(USER)
        assert declaration.streak == saved

    @pytest.mark.asyncio
    async def test_stale_expectation_conflicts(self, storage, make_budget):
        await storage.save_budget_declaration(make_budget(streak=state(date(2024, 5, 3))))

        with pytest.raises(StreakConflictError):
            await storage.save_streak_state(USER, state(date(2024, 5, 4)), None)
        with pytest.raises(StreakConflictError):
            await storage.save_streak_state(USER, state(date(2024, 5, 4)), date(2024, 5, 2))

        declaration = await storage.get_budget_declaration(USER)
        assert declaration.streak.last_checked_date == date(2024, 5, 3)

    @pytest.mark.asyncio
    async def test_matching_expectation_writes(self, storage, make_budget):
        await storage.save_budget_declaration(make_budget(streak=state(date(2024, 5, 3))))

        await storage.save_streak_state(USER, state(date(2024, 5, 4), 1), date(2024, 5, 3))

        declaration = await storage.get_budget_declaration(USER)
        assert declaration.streak.current_streak == 1


class BrokenAuditStorage(AuditStorageInterface):
    async def append_event(self, event):
        raise ConnectionError("audit backend down")

    async def get_events_by_user(self, user_id):
        return []

    async def get_recent_events(self, limit=100):
        return []


class TestAuditLogger:
    """Tests for AuditLogger."""

    @pytest.mark.asyncio
    async def test_persists_events(self, audit_logger, audit_storage):
        event = AuditEventBuilder.streak_extended(USER, 1, 1)

        assert await audit_logger.log(event) is True
        assert await audit_storage.get_recent_events() == [event]

    @pytest.mark.asyncio
    async def test_without_storage_only_logs(self):
        assert await AuditLogger().log(AuditEventBuilder.streak_extended(USER, 1, 1)) is True

    @pytest.mark.asyncio
    async def test_storage_failure_does_not_raise(self):
        logger = AuditLogger(BrokenAuditStorage())
        event = AuditEventBuilder.system_error("Boom", "details", user_id=USER)

        assert await logger.log(event) is False

    @pytest.mark.asyncio
    async def test_recent_events_newest_first(self, audit_logger, audit_storage):
        for current in (1, 2, 3):
            await audit_logger.log(AuditEventBuilder.streak_extended(USER, current, current))

        recent = await audit_storage.get_recent_events(limit=2)

        assert [e.details["current_streak"] for e in recent] == [3, 2]


class TestSettings:
    """Tests for environment-driven settings."""

    def test_streak_defaults(self, monkeypatch):
        monkeypatch.delenv("STREAK_DAILY_BUDGET_DIVISOR", raising=False)
        settings = StreakSettings()
        assert settings.daily_budget_divisor == 30
        assert settings.retry_attempts == 3

    def test_streak_from_environment(self, monkeypatch):
        monkeypatch.setenv("STREAK_DAILY_BUDGET_DIVISOR", "28")
        assert StreakSettings().daily_budget_divisor == 28

    def test_divisor_out_of_range(self):
        with pytest.raises(ValueError):
            StreakSettings(daily_budget_divisor=0)

    def test_log_level_is_normalized(self):
        assert AppSettings(log_level="warning").log_level == "WARNING"

    def test_unknown_log_level_rejected(self):
        with pytest.raises(ValueError, match="Unsupported log level"):
            AppSettings(log_level="LOUD")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

"""
Tests for the Budget Engine models

Test strategy:
1. Unit tests for models, calculators and state transitions
2. Flow tests against in-memory storage
3. No real external services in tests
"""

import pytest
from datetime import date, datetime, timezone
from decimal import Decimal
from uuid import uuid4

from budget_engine.models.budget import (
    BudgetCategory,
    BudgetDeclaration,
    BudgetResult,
    CategoryAllocation,
    WantsSubcategory,
    category_display_name,
)
from budget_engine.models.streak import StreakState
from budget_engine.models.transaction import SpendingStatus, Transaction
from budget_engine.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)


class TestBudgetDeclaration:
    """Tests for the declaration model and its category normalization."""

    def test_bare_percentages(self):
        """Test the plain number shape."""
        declaration = BudgetDeclaration(
            user_id="u1",
            monthly_income=Decimal("4000"),
            categories={"rent": 30, "wants": 20},
        )
        assert declaration.categories == {"rent": Decimal("30"), "wants": Decimal("20")}

    def test_object_shape_is_reduced_to_percentage(self):
        """Test that {total, percentage} values become bare percentages."""
        declaration = BudgetDeclaration(
            user_id="u1",
            monthly_income=Decimal("4000"),
            categories={
                "rent": {"total": 1200, "percentage": 30},
                "food": 10,
            },
        )
        assert declaration.categories["rent"] == Decimal("30")
        assert declaration.categories["food"] == Decimal("10")

    def test_object_shape_with_only_total(self):
        """Test a total-only value is converted back to a percentage of income."""
        declaration = BudgetDeclaration(
            user_id="u1",
            monthly_income=Decimal("4000"),
            categories={"rent": {"total": 1000}},
        )
        assert declaration.categories["rent"] == Decimal("25")

    def test_category_keys_are_lowercased(self):
        """Test keys are normalized so lookups are case-insensitive."""
        declaration = BudgetDeclaration(
            user_id="u1",
            monthly_income=Decimal("100"),
            categories={" Rent ": 10},
        )
        assert list(declaration.categories) == ["rent"]

    def test_out_of_range_values_are_not_rejected(self):
        """Test that range problems are left for the allocator to report."""
        declaration = BudgetDeclaration(
            user_id="u1",
            monthly_income=Decimal("-5"),
            categories={"rent": 150},
            wants_subcategories=[WantsSubcategory(name="", percentage=Decimal("-1"))],
        )
        assert declaration.monthly_income == Decimal("-5")

    def test_reads_camel_case_contract(self):
        """Test parsing the JSON contract shape."""
        declaration = BudgetDeclaration.model_validate({
            "userId": "u1",
            "monthlyIncome": 5000,
            "categories": {"rent": 30},
            "wantsSubcategories": [{"name": "Dining", "percentage": 50}],
        })
        assert declaration.monthly_income == Decimal("5000")
        assert declaration.wants_subcategories[0].name == "Dining"


class TestBudgetResult:
    """Tests for BudgetResult serialization and lookup."""

    def test_serializes_money_as_numbers(self):
        """Test the JSON contract uses numbers and camelCase keys."""
        result = BudgetResult(
            monthly_income=Decimal("5000"),
            total_allocated=Decimal("1500.00"),
            unallocated=Decimal("3500.00"),
            categories=[
                CategoryAllocation(
                    name="Rent/Mortgage",
                    percentage=Decimal("30"),
                    amount=Decimal("1500.00"),
                ),
            ],
            is_valid=True,
        )
        data = result.model_dump(by_alias=True, mode="json")
        assert data["totalAllocated"] == 1500.0
        assert data["isValid"] is True
        assert data["categories"][0]["amount"] == 1500.0

    def test_category_lookup(self):
        """Test lookup by key or display name."""
        result = BudgetResult(
            monthly_income=Decimal("100"),
            total_allocated=Decimal("30"),
            unallocated=Decimal("70"),
            categories=[
                CategoryAllocation(name="Rent/Mortgage", percentage=30, amount=30),
            ],
            is_valid=True,
        )
        assert result.category("rent").name == "Rent/Mortgage"
        assert result.category("Rent/Mortgage") is not None
        assert result.category("food") is None


class TestStreakState:
    """Tests for the streak state invariants."""

    def test_longest_below_current_rejected(self):
        """Test longest_streak >= current_streak is enforced."""
        with pytest.raises(ValueError, match="Longest streak cannot be below current streak"):
            StreakState(
                current_streak=3,
                longest_streak=2,
                last_checked_date=date(2024, 5, 3),
                monthly_reset_date=date(2024, 5, 1),
            )

    def test_monthly_reset_must_be_first_of_month(self):
        """Test the month marker is always a first-of-month date."""
        with pytest.raises(ValueError, match="first of a month"):
            StreakState(
                last_checked_date=date(2024, 5, 3),
                monthly_reset_date=date(2024, 5, 2),
            )

    def test_negative_counters_rejected(self):
        """Test counters are non-negative."""
        with pytest.raises(ValueError):
            StreakState(
                current_streak=-1,
                last_checked_date=date(2024, 5, 3),
                monthly_reset_date=date(2024, 5, 1),
            )

    def test_contract_field_names(self):
        """Test the camelCase contract."""
        state = StreakState(
            current_streak=1,
            longest_streak=4,
            last_checked_date=date(2024, 5, 3),
            monthly_reset_date=date(2024, 5, 1),
        )
        data = state.model_dump(by_alias=True, mode="json")
        assert data == {
            "currentStreak": 1,
            "longestStreak": 4,
            "lastCheckedDate": "2024-05-03",
            "monthlyResetDate": "2024-05-01",
        }


class TestTransaction:
    """Tests for the transaction model."""

    def test_transaction_creation(self):
        """Test creation from the JSON contract shape."""
        transaction = Transaction.model_validate({
            "userId": "u1",
            "category": "Food",
            "amount": 12.5,
            "description": "Lunch",
            "date": "2024-05-03T12:30:00",
        })
        assert transaction.amount == Decimal("12.5")
        assert transaction.timestamp == datetime(2024, 5, 3, 12, 30)

    def test_rejects_non_positive_amount(self):
        """Test that amounts must be greater than zero."""
        with pytest.raises(ValueError):
            Transaction(
                user_id="u1",
                category="food",
                amount=Decimal("0"),
                timestamp=datetime(2024, 5, 3),
            )

    def test_transaction_is_immutable(self):
        """Test transactions cannot be edited in place."""
        transaction = Transaction(
            user_id="u1",
            category="food",
            amount=Decimal("10"),
            timestamp=datetime(2024, 5, 3),
        )
        with pytest.raises(ValueError):
            transaction.amount = Decimal("20")

    def test_utc_date_is_stored_as_local_time(self):
        """Test that a Z-suffixed contract date becomes naive local time."""
        transaction = Transaction.model_validate({
            "userId": "u1",
            "category": "food",
            "amount": 20,
            "date": "2025-03-09T12:00:00Z",
        })
        expected = datetime(2025, 3, 9, 12, tzinfo=timezone.utc).astimezone()
        assert transaction.timestamp.tzinfo is None
        assert transaction.timestamp == expected.replace(tzinfo=None)

    def test_subcategory_is_optional(self):
        transaction = Transaction.model_validate({
            "userId": "u1",
            "category": "wants",
            "amount": 8,
            "date": "2025-03-09T12:00:00",
            "subcategory": "Games",
        })
        assert transaction.subcategory == "Games"
        assert Transaction(
            user_id="u1",
            category="food",
            amount=Decimal("1"),
            timestamp=datetime(2025, 3, 9),
        ).subcategory is None

    def test_serializes_date_field(self):
        """Test the timestamp is exposed as "date" in the contract."""
        transaction = Transaction(
            id=uuid4(),
            user_id="u1",
            category="food",
            amount=Decimal("10"),
            timestamp=datetime(2024, 5, 3, 8, 0),
        )
        data = transaction.model_dump(by_alias=True, mode="json")
        assert data["date"] == "2024-05-03T08:00:00"
        assert data["amount"] == 10.0


class TestCategories:
    """Tests for the canonical category enum."""

    def test_all_categories_exist(self):
        """Test that the six canonical keys exist in order."""
        assert BudgetCategory.keys() == (
            "rent", "food", "bills", "savings", "investments", "wants",
        )

    def test_display_names(self):
        """Test display names, including non-canonical keys."""
        assert BudgetCategory.RENT.display_name == "Rent/Mortgage"
        assert category_display_name("wants") == "Wants"
        assert category_display_name("side_hustle") == "Side Hustle"

    def test_status_values(self):
        """Test status string values."""
        assert SpendingStatus.AT.value == "at"
        assert SpendingStatus("over") is SpendingStatus.OVER


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.BUDGET_SAVED,
            description="Budget saved",
        )
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEventBuilder.streak_extended("u1", 3, 5)
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "streak_extended"
        assert log_dict["details"] == {"current_streak": 3, "longest_streak": 5}

    def test_streak_reset_is_a_warning(self):
        """Test AuditEventBuilder.streak_reset severity."""
        event = AuditEventBuilder.streak_reset("u1", 4, "120.00", "100.00")
        assert event.event_type == AuditEventType.STREAK_RESET
        assert event.severity == AuditSeverity.WARNING
        assert event.user_id == "u1"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

"""Shared fixtures: in-memory storage, quiet retry settings, a saved budget."""

from datetime import datetime
from decimal import Decimal

import pytest

from budget_engine.audit import AuditLogger
from budget_engine.config import StreakSettings
from budget_engine.models.budget import BudgetDeclaration
from budget_engine.services.storage import InMemoryAuditStorage, InMemoryBudgetStorage

STANDARD_PERCENTAGES = {
    "rent": 30,
    "food": 15,
    "bills": 10,
    "savings": 20,
    "investments": 10,
    "wants": 15,
}


@pytest.fixture
def storage() -> InMemoryBudgetStorage:
    return InMemoryBudgetStorage()


@pytest.fixture
def audit_storage() -> InMemoryAuditStorage:
    return InMemoryAuditStorage()


@pytest.fixture
def audit_logger(audit_storage) -> AuditLogger:
    return AuditLogger(audit_storage)


@pytest.fixture
def streak_settings() -> StreakSettings:
    """No backoff so retry tests run instantly."""
    return StreakSettings(
        daily_budget_divisor=30,
        retry_attempts=3,
        retry_min_wait=0,
        retry_max_wait=0,
    )


def make_declaration(
    user_id: str = "user-1",
    income: str = "3000",
    **overrides,
) -> BudgetDeclaration:
    data = {
        "user_id": user_id,
        "monthly_income": Decimal(income),
        "categories": dict(STANDARD_PERCENTAGES),
        "created_at": datetime(2024, 1, 1, 9, 0),
        "updated_at": datetime(2024, 1, 1, 9, 0),
    }
    data.update(overrides)
    return BudgetDeclaration(**data)


@pytest.fixture
def make_budget():
    """Factory for declarations with the standard 30/15/10/20/10/15 split."""
    return make_declaration

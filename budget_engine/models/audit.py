"""
Audit Models for the Budget Engine

Budget saves and every streak transition are recorded as audit events.
This provides:
1. A history a user can inspect ("why did my streak reset?")
2. Debugging information when stored state looks wrong
3. Visibility into concurrent-update conflicts

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import date, datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Budget declaration
    BUDGET_SAVED = "budget_saved"
    BUDGET_REJECTED = "budget_rejected"

    # Transactions
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_DELETED = "transaction_deleted"

    # Streak transitions
    STREAK_INITIALIZED = "streak_initialized"
    STREAK_EXTENDED = "streak_extended"
    STREAK_RESET = "streak_reset"
    STREAK_HELD = "streak_held"
    MONTH_MARKER_ADVANCED = "month_marker_advanced"
    STREAK_CONFLICT = "streak_conflict"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant state change creates one of these.
    """

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.now,
        description="When the event occurred"
    )

    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    user_id: Optional[str] = Field(
        default=None,
        description="User the event relates to"
    )
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'budget', 'transaction', 'streak')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "user_id": self.user_id,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.budget_saved(user_id, income, allocated)
        event = AuditEventBuilder.streak_extended(user_id, 3, 5)
    """

    @staticmethod
    def budget_saved(
        user_id: str,
        monthly_income: str,
        total_allocated: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGET_SAVED,
            user_id=user_id,
            entity_type="budget",
            entity_id=user_id,
            description=f"Budget saved: ${total_allocated} of ${monthly_income} allocated",
            details={
                "monthly_income": monthly_income,
                "total_allocated": total_allocated,
            },
        )

    @staticmethod
    def budget_rejected(
        user_id: str,
        errors: list[str],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGET_REJECTED,
            severity=AuditSeverity.WARNING,
            user_id=user_id,
            entity_type="budget",
            entity_id=user_id,
            description=f"Budget rejected with {len(errors)} validation errors",
            details={"errors": errors},
        )

    @staticmethod
    def transaction_added(
        user_id: str,
        transaction_id: UUID,
        category: str,
        amount: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            user_id=user_id,
            entity_type="transaction",
            entity_id=str(transaction_id),
            description=f"Transaction added: {category} - ${amount}",
            details={
                "category": category,
                "amount": amount,
            },
        )

    @staticmethod
    def transaction_deleted(transaction_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_DELETED,
            entity_type="transaction",
            entity_id=str(transaction_id),
            description="Transaction deleted",
        )

    @staticmethod
    def streak_initialized(user_id: str, today: date) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STREAK_INITIALIZED,
            user_id=user_id,
            entity_type="streak",
            entity_id=user_id,
            description=f"Streak tracking started on {today.isoformat()}",
            details={"start_date": today.isoformat()},
        )

    @staticmethod
    def streak_extended(
        user_id: str,
        current_streak: int,
        longest_streak: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STREAK_EXTENDED,
            user_id=user_id,
            entity_type="streak",
            entity_id=user_id,
            description=f"Streak extended to {current_streak} days",
            details={
                "current_streak": current_streak,
                "longest_streak": longest_streak,
            },
        )

    @staticmethod
    def streak_reset(
        user_id: str,
        previous_streak: int,
        day_spend: str,
        daily_budget: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STREAK_RESET,
            severity=AuditSeverity.WARNING,
            user_id=user_id,
            entity_type="streak",
            entity_id=user_id,
            description=f"Streak of {previous_streak} days reset after a missed day",
            details={
                "previous_streak": previous_streak,
                "day_spend": day_spend,
                "daily_budget": daily_budget,
            },
        )

    @staticmethod
    def streak_held(
        user_id: str,
        current_streak: int,
        day_spend: str,
        daily_budget: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STREAK_HELD,
            user_id=user_id,
            entity_type="streak",
            entity_id=user_id,
            description=f"Over budget yesterday; streak held at {current_streak} days",
            details={
                "current_streak": current_streak,
                "day_spend": day_spend,
                "daily_budget": daily_budget,
            },
        )

    @staticmethod
    def month_marker_advanced(
        user_id: str,
        previous: date,
        current: date,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.MONTH_MARKER_ADVANCED,
            user_id=user_id,
            entity_type="streak",
            entity_id=user_id,
            description=f"Tracking month advanced to {current.strftime('%B %Y')}",
            details={
                "previous": previous.isoformat(),
                "current": current.isoformat(),
            },
        )

    @staticmethod
    def streak_conflict(user_id: str, attempt: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STREAK_CONFLICT,
            severity=AuditSeverity.WARNING,
            user_id=user_id,
            entity_type="streak",
            entity_id=user_id,
            description="Concurrent streak update detected; retrying",
            details={"attempt": attempt},
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        user_id: Optional[str] = None,
        details: Optional[dict] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            user_id=user_id,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
        )

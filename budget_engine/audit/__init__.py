"""Audit logging package."""

from budget_engine.audit.logger import AuditLogger, configure_logging

__all__ = ["AuditLogger", "configure_logging"]

"""
Budget Engine

The accounting core of a personal-budgeting application: turns a
percentage budget into dollar allocations, compares spending against
them, and tracks a daily "stayed under budget" streak.

DESIGN PRINCIPLES:
1. Money is Decimal, rounded only where the rules say so
2. Validation reports every problem, never just the first
3. No silent fallbacks: a missing budget is an error
4. Every state change is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"

"""
Decimal helpers shared by the models and the calculators.

DESIGN DECISION: Money and percentages are Decimal end to end.
Rounding to cents happens explicitly (round_cents) at the points the
accounting rules name, never implicitly through float conversion.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated, Union

from pydantic import PlainSerializer

CENT = Decimal("0.01")
ZERO = Decimal("0")
HUNDRED = Decimal("100")

Number = Union[Decimal, int, float, str]

# Serialized as JSON numbers to match the external data contracts
Money = Annotated[
    Decimal,
    PlainSerializer(float, return_type=float, when_used="json"),
]


def to_decimal(value: Number) -> Decimal:
    """Convert a number to Decimal without picking up float noise."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def round_cents(value: Decimal) -> Decimal:
    """Round half-up to two decimal places."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def format_number(value: Number) -> str:
    """Render a number without trailing zeros (110.00 -> "110", 12.50 -> "12.5")."""
    normalized = to_decimal(value).normalize()
    if normalized == 0:
        return "0"
    return f"{normalized:f}"

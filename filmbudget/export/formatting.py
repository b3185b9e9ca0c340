"""Mini README: Display formatting for monetary amounts.

Amounts are shown the way German production offices write them: dot as
thousands separator, comma before the two decimals and a trailing euro
sign. Rounding happens here only, the calculation engine never rounds.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

CURRENCY_SYMBOL = "€"


def format_amount(value: Optional[float]) -> str:
    """Format a number as ``1.234,50`` (missing values count as zero)."""

    quantised = Decimal(str(value or 0)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    if quantised == 0:
        quantised = abs(quantised)
    grouped = f"{quantised:,.2f}"
    return grouped.replace(",", "_").replace(".", ",").replace("_", ".")


def format_currency(value: Optional[float]) -> str:
    """Format a number as ``1.234,50 €``."""

    return f"{format_amount(value)} {CURRENCY_SYMBOL}"


def format_difference(value: Optional[float]) -> str:
    """Signed currency used in comparison tables (``+120,00 €`` / ``-35,00 €``)."""

    amount = value or 0
    prefix = "+" if amount >= 0 else ""
    return f"{prefix}{format_currency(amount)}"

"""Mini README: Output helpers for budgets.

Currency formatting for display surfaces and a CSV exporter that writes a
project's calculation, category summary and cost comparison to disk.
"""

from .budget_exporter import BudgetExporter
from .formatting import format_amount, format_currency, format_difference

__all__ = ["BudgetExporter", "format_amount", "format_currency", "format_difference"]

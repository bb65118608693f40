"""Income-source normalization and savings rate."""

from __future__ import annotations

from typing import Dict, Optional, Sequence

from ..models import Amount, IncomeSource
from .transactions import DateLike

# Fixed calendar approximations; a weekly 100 is 433.0 a month, not a
# day-count-exact figure.
FREQUENCY_MULTIPLIERS: Dict[str, float] = {
    'weekly': 4.33,
    'bi-weekly': 2.17,
    'monthly': 1.0,
}
FREQUENCY_DIVISORS: Dict[str, float] = {
    'quarterly': 3,
    'yearly': 12,
}


def monthly_equivalent_amount(amount: Amount, frequency: str) -> float:
    """Normalize a per-period amount to a monthly figure.

    Unknown frequencies are treated as monthly.

    Example:
        >>> monthly_equivalent_amount(100, 'weekly')
        433.0
        >>> monthly_equivalent_amount(1200, 'yearly')
        100.0
    """
    if frequency in FREQUENCY_DIVISORS:
        return amount / FREQUENCY_DIVISORS[frequency]
    return amount * FREQUENCY_MULTIPLIERS.get(frequency, 1.0)


def monthly_income_from_sources(
    income_sources: Sequence[IncomeSource],
    reference_month: Optional[DateLike] = None,
) -> float:
    """Monthly-equivalent income of every active source.

    ``reference_month`` is accepted for symmetry with the other monthly
    reports; the figure does not depend on it.
    """
    return sum(
        (monthly_equivalent_amount(source.amount, source.frequency)
         for source in income_sources if source.is_active),
        0.0,
    )


def savings_rate(total_income: float, total_spent: float) -> float:
    """Share of income left after spending, as a percentage (0 without income)."""
    return ((total_income - total_spent) / total_income * 100) if total_income > 0 else 0.0

"""Budget utilization.

Compares each budget limit with the same-category expense transactions of a
month and classifies the result.
"""

from __future__ import annotations

from collections import Counter
from typing import Any, Dict, List, Sequence

from ..models import Budget, Transaction
from ..settings import analytics_setting
from .transactions import DateLike, _month, _total, transactions_frame

OVER_THRESHOLD = analytics_setting('budgets', 'over_threshold', default=100)
WARNING_THRESHOLD = analytics_setting('budgets', 'warning_threshold', default=80)


def utilization_percent(spent: float, limit: float) -> float:
    """Spent as a percentage of ``limit``; 0 when the limit is not positive."""
    return (spent / limit * 100) if limit > 0 else 0.0


def budget_status(utilization: float) -> str:
    if utilization > OVER_THRESHOLD:
        return 'over'
    if utilization > WARNING_THRESHOLD:
        return 'warning'
    return 'good'


def budget_utilization(
    budgets: Sequence[Budget],
    transactions: Sequence[Transaction],
    reference_month: DateLike,
) -> Dict[str, Any]:
    """Per-budget and overall spending against limits for one month.

    Each budget is measured against every expense of its category in the
    month, so two budgets on the same category both see the full spend.

    Returns:
        Dictionary with ``categories`` (one entry per budget, in input order)
        and the totals ``total_budget``, ``total_spent``, ``remaining`` (may be
        negative) and ``utilization``.

    Example:
        >>> result = budget_utilization([groceries_budget], transactions, date(2024, 3, 1))
        >>> result['categories'][0]['status']
        'warning'
    """
    frame = transactions_frame(transactions)
    expenses = frame[(frame['period'] == _month(reference_month)) & (frame['type'] == 'expense')]

    items: List[Dict[str, Any]] = []
    for budget in budgets:
        spent = _total(expenses.loc[expenses['category'] == budget.category, 'amount'])
        utilization = utilization_percent(spent, budget.amount)
        items.append({
            'budget_id': budget.id,
            'category': budget.category,
            'budget': budget.amount,
            'spent': spent,
            'remaining': budget.amount - spent,
            'utilization': utilization,
            'variance': spent - budget.amount,
            'status': budget_status(utilization),
        })

    total_budget = sum(budget.amount for budget in budgets)
    total_spent = sum(item['spent'] for item in items)
    return {
        'categories': items,
        'total_budget': total_budget,
        'total_spent': total_spent,
        'remaining': total_budget - total_spent,
        'utilization': utilization_percent(total_spent, total_budget),
    }


def duplicate_budget_categories(budgets: Sequence[Budget]) -> List[str]:
    """Categories covered by more than one budget, in first-seen order."""
    counts = Counter(budget.category for budget in budgets)
    return [category for category, count in counts.items() if count > 1]

"""Composite reports built from the aggregation functions.

Each report bundles the figures one view needs: the dashboard summary, the
budget overview, the monthly progress report and the savings-goals overview.
"""

from __future__ import annotations

from typing import Any, Dict, Sequence

import pandas as pd

from ..models import Budget, IncomeSource, SavingsGoal, Transaction
from .budgets import budget_utilization, utilization_percent
from .goals import goals_progress
from .income import monthly_income_from_sources, savings_rate
from .transactions import (
    DateLike,
    monthly_income_expense_savings,
    total_balance,
)


def period_over_period_change(current: float, previous: float) -> float:
    """Percentage change from ``previous`` to ``current``.

    Defined as 0 when ``previous`` is 0, which also hides any real change
    from a zero baseline.

    Example:
        >>> period_over_period_change(150, 100)
        50.0
        >>> period_over_period_change(150, 0)
        0.0
    """
    if previous != 0:
        return (current - previous) / previous * 100
    return 0.0


def change_from_magnitude(current: float, previous: float) -> float:
    """Percentage change measured against ``abs(previous)``.

    Used for figures that can be negative, such as savings: going from -100
    to 50 reads as +150%, not -150%.  Zero when ``previous`` is 0.
    """
    if previous != 0:
        return (current - previous) / abs(previous) * 100
    return 0.0


def _previous_month(reference_date: DateLike) -> pd.Timestamp:
    return pd.Timestamp(reference_date) - pd.DateOffset(months=1)


def dashboard_summary(
    transactions: Sequence[Transaction],
    reference_date: DateLike,
) -> Dict[str, float]:
    """Headline figures for the dashboard.

    Changes are rounded to one decimal place.
    """
    current = monthly_income_expense_savings(transactions, reference_date)
    previous = monthly_income_expense_savings(transactions, _previous_month(reference_date))
    return {
        'total_balance': total_balance(transactions),
        'current_income': current['income'],
        'current_expenses': current['expenses'],
        'savings': current['savings'],
        'income_change': round(period_over_period_change(current['income'], previous['income']), 1),
        'expense_change': round(period_over_period_change(current['expenses'], previous['expenses']), 1),
    }


def budget_overview(
    budgets: Sequence[Budget],
    transactions: Sequence[Transaction],
    income_sources: Sequence[IncomeSource],
    reference_date: DateLike,
) -> Dict[str, Any]:
    """Budget utilization plus expected monthly income and savings rate."""
    overview = budget_utilization(budgets, transactions, reference_date)
    total_income = monthly_income_from_sources(income_sources, reference_date)
    overview['total_income'] = total_income
    overview['savings_rate'] = savings_rate(total_income, overview['total_spent'])
    return overview


def progress_report(
    transactions: Sequence[Transaction],
    budgets: Sequence[Budget],
    savings_goals: Sequence[SavingsGoal],
    reference_date: DateLike,
) -> Dict[str, Any]:
    """Month-over-month report with budget performance and goal progress.

    Savings change is measured against the absolute previous savings so a
    recovery from negative savings reads as an increase.  Goals use the
    days-based months-left figure.
    """
    current = monthly_income_expense_savings(transactions, reference_date)
    previous = monthly_income_expense_savings(transactions, _previous_month(reference_date))

    performance = budget_utilization(budgets, transactions, reference_date)
    return {
        'current': current,
        'previous': previous,
        'changes': {
            'income': period_over_period_change(current['income'], previous['income']),
            'expenses': period_over_period_change(current['expenses'], previous['expenses']),
            'savings': change_from_magnitude(current['savings'], previous['savings']),
        },
        'budget': {
            'total': performance['total_budget'],
            'utilization': utilization_percent(current['expenses'], performance['total_budget']),
            'categories': performance['categories'],
        },
        'goals': goals_progress(savings_goals, reference_date, months_mode='days'),
    }


def savings_goals_overview(
    savings_goals: Sequence[SavingsGoal],
    today: DateLike,
) -> Dict[str, Any]:
    """Every goal with calendar-based months left, plus combined progress."""
    total_saved = sum(goal.current_amount for goal in savings_goals)
    total_target = sum(goal.target_amount for goal in savings_goals)
    return {
        'goals': goals_progress(savings_goals, today, months_mode='calendar'),
        'total_saved': total_saved,
        'total_target': total_target,
        'overall_progress': (total_saved / total_target * 100) if total_target > 0 else 0.0,
    }

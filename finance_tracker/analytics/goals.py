"""Savings-goal progress and projections.

Two definitions of "months left" are in use and they are not
interchangeable:

* ``'days'`` - ``ceil(days_left / 30)``, never below zero.  Used by the
  progress report.
* ``'calendar'`` - whole calendar months between today and the target date,
  truncated toward zero and negative once the date has passed.  Used by the
  savings-goals overview.
"""

from __future__ import annotations

from typing import Any, Dict, List, Sequence, Union

import numpy as np
import pandas as pd
from dateutil.relativedelta import relativedelta

from ..models import SavingsGoal
from ..settings import analytics_setting
from .transactions import DateLike

DAYS_PER_MONTH = analytics_setting('goals', 'days_per_month', default=30)
URGENT_DAYS = analytics_setting('goals', 'urgent_days', default=30)

MONTHS_MODES = ('days', 'calendar')

Number = Union[int, float]


def days_between(later: DateLike, earlier: DateLike) -> Number:
    """Whole days from ``earlier`` to ``later``, truncated toward zero.

    Negative when ``later`` is before ``earlier``.  Missing dates give ``NaN``.
    """
    delta = pd.Timestamp(later) - pd.Timestamp(earlier)
    if pd.isna(delta):
        return float('nan')
    return int(delta / pd.Timedelta(days=1))


def months_left_by_days(days_left: Number) -> Number:
    """``ceil(days_left / 30)`` floored at zero."""
    months = np.maximum(0, np.ceil(days_left / DAYS_PER_MONTH))
    return float(months) if pd.isna(months) else int(months)


def months_left_calendar(target_date: DateLike, today: DateLike) -> Number:
    """Full calendar months from ``today`` until ``target_date``.

    Example:
        >>> months_left_calendar(date(2024, 6, 14), date(2024, 3, 15))
        2
        >>> months_left_calendar(date(2024, 1, 10), date(2024, 3, 15))
        -2
    """
    target, start = pd.Timestamp(target_date), pd.Timestamp(today)
    if pd.isna(target) or pd.isna(start):
        return float('nan')
    delta = relativedelta(target.to_pydatetime(), start.to_pydatetime())
    return delta.years * 12 + delta.months


def goal_status(progress: Number, days_left: Number) -> str:
    if progress >= 100:
        return 'completed'
    if days_left < 0:
        return 'overdue'
    if days_left < URGENT_DAYS:
        return 'urgent'
    return 'on-track'


def savings_goal_progress(
    goal: SavingsGoal,
    today: DateLike,
    months_mode: str = 'days',
) -> Dict[str, Any]:
    """Progress, time left and required monthly saving for one goal.

    Args:
        goal: The savings goal
        today: Reference date used as "now"
        months_mode: ``'days'`` or ``'calendar'``, see the module docstring

    Returns:
        Dictionary with ``goal``, ``progress`` (percent), ``days_left``,
        ``months_left``, ``remaining``, ``monthly_required`` and ``status``.

    Raises:
        ValueError: If ``months_mode`` is not a known mode
    """
    if months_mode not in MONTHS_MODES:
        raise ValueError(f"Unknown months mode: {months_mode!r}")

    target = goal.target_amount
    progress = (goal.current_amount / target * 100) if target > 0 else 0.0
    days_left = days_between(goal.target_date, today)
    if months_mode == 'days':
        months_left = months_left_by_days(days_left)
    else:
        months_left = months_left_calendar(goal.target_date, today)
    remaining = target - goal.current_amount
    monthly_required = remaining / months_left if months_left > 0 else remaining

    return {
        'goal': goal,
        'progress': progress,
        'days_left': days_left,
        'months_left': months_left,
        'remaining': remaining,
        'monthly_required': monthly_required,
        'status': goal_status(progress, days_left),
    }


def goals_progress(
    goals: Sequence[SavingsGoal],
    today: DateLike,
    months_mode: str = 'days',
) -> List[Dict[str, Any]]:
    """Progress of every goal, in input order; see :func:`savings_goal_progress`."""
    return [savings_goal_progress(goal, today, months_mode) for goal in goals]

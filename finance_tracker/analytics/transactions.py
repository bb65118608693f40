"""Transaction aggregation.

Monthly totals, trends and lists derived from a user's transactions.  Every
function is pure: it builds a fresh DataFrame from the records it is given
and recomputes from scratch.

Amounts are coerced to numbers; anything that is not numeric becomes ``NaN``
and, because sums are taken with ``skipna=False``, turns the total it falls
into ``NaN`` too.  Dates that cannot be parsed become ``NaT`` and never match
a month.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime
from typing import Dict, List, Optional, Sequence, Tuple, Union

import pandas as pd

from ..models import Category, Transaction
from ..settings import analytics_setting

DateLike = Union[date, datetime, pd.Timestamp]

DEFAULT_CATEGORY_COLOR = '#6B7280'
TREND_MONTHS = analytics_setting('dashboard', 'trend_months', default=6)
RECENT_LIMIT = analytics_setting('dashboard', 'recent_limit', default=5)


def transactions_frame(transactions: Sequence[Transaction]) -> pd.DataFrame:
    """Load transactions into a DataFrame indexed by list position."""
    frame = pd.DataFrame({
        'id': pd.Series([t.id for t in transactions], dtype=object),
        'type': pd.Series([t.type for t in transactions], dtype=object),
        'amount': pd.Series([t.amount for t in transactions], dtype=object),
        'category': pd.Series([t.category for t in transactions], dtype=object),
        'description': pd.Series([t.description for t in transactions], dtype=object),
        'date': pd.Series([t.date for t in transactions], dtype=object),
    })
    frame['amount'] = pd.to_numeric(frame['amount'], errors='coerce').astype(float)
    frame['date'] = pd.to_datetime(frame['date'], errors='coerce')
    frame['period'] = frame['date'].dt.to_period('M')
    return frame


def _month(reference: DateLike) -> pd.Period:
    return pd.Period(pd.Timestamp(reference), freq='M')


def _total(values: pd.Series) -> float:
    return float(values.sum(skipna=False))


def month_bounds(reference: DateLike) -> Tuple[date, date]:
    """First and last calendar day of the month containing ``reference``."""
    year, month = reference.year, reference.month
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def _monthly_totals(frame: pd.DataFrame, period: pd.Period) -> Dict[str, float]:
    in_month = frame[frame['period'] == period]
    income = _total(in_month.loc[in_month['type'] == 'income', 'amount'])
    expenses = _total(in_month.loc[in_month['type'] == 'expense', 'amount'])
    return {
        'income': income,
        'expenses': expenses,
        'savings': income - expenses,
    }


def monthly_income_expense_savings(
    transactions: Sequence[Transaction],
    reference_date: DateLike,
) -> Dict[str, float]:
    """Income, expenses and savings for the calendar month of ``reference_date``.

    Both month ends are inclusive.  A month without transactions yields
    zeros for every figure.

    Example:
        >>> monthly_income_expense_savings([], date(2024, 3, 15))
        {'income': 0.0, 'expenses': 0.0, 'savings': 0.0}
    """
    return _monthly_totals(transactions_frame(transactions), _month(reference_date))


def monthly_trend(
    transactions: Sequence[Transaction],
    month_count: int = TREND_MONTHS,
    reference_date: Optional[DateLike] = None,
) -> List[Dict[str, object]]:
    """Monthly totals for the ``month_count`` months ending at ``reference_date``.

    Returns:
        Chronologically ordered list with exactly ``month_count`` entries,
        each holding ``month`` (e.g. ``'Mar 2024'``), ``period``
        (``'2024-03'``), ``income``, ``expenses`` and ``savings``.
    """
    if month_count <= 0:
        return []
    if reference_date is None:
        reference_date = date.today()

    frame = transactions_frame(transactions)
    periods = pd.period_range(end=_month(reference_date), periods=month_count, freq='M')

    trend = []
    for period in periods:
        entry: Dict[str, object] = {
            'month': period.strftime('%b %Y'),
            'period': str(period),
        }
        entry.update(_monthly_totals(frame, period))
        trend.append(entry)
    return trend


def recent_transactions(
    transactions: Sequence[Transaction],
    limit: int = RECENT_LIMIT,
) -> List[Transaction]:
    """Newest transactions first.

    Transactions sharing a date keep their original relative order;
    transactions without a usable date go last.
    """
    if limit <= 0:
        return []
    frame = transactions_frame(transactions)
    ordered = frame.sort_values('date', ascending=False, kind='stable', na_position='last')
    return [transactions[position] for position in ordered.index[:limit]]


def total_balance(transactions: Sequence[Transaction]) -> float:
    """All-time income minus all-time expenses."""
    frame = transactions_frame(transactions)
    income = _total(frame.loc[frame['type'] == 'income', 'amount'])
    expenses = _total(frame.loc[frame['type'] == 'expense', 'amount'])
    return income - expenses


def expenses_by_category(
    transactions: Sequence[Transaction],
    reference_date: DateLike,
) -> Dict[str, float]:
    """Expense totals per category name for the month of ``reference_date``.

    Categories appear in the order they are first seen.
    """
    frame = transactions_frame(transactions)
    expenses = frame[(frame['period'] == _month(reference_date)) & (frame['type'] == 'expense')]
    totals: Dict[str, float] = {}
    for category, amount in zip(expenses['category'], expenses['amount']):
        totals[category] = totals.get(category, 0.0) + float(amount)
    return totals


def category_color(name: str, categories: Sequence[Category]) -> str:
    for category in categories:
        if category.name == name:
            return category.color
    return DEFAULT_CATEGORY_COLOR


def filter_transactions(
    transactions: Sequence[Transaction],
    search: str = '',
    type_filter: str = 'all',
    category: str = '',
) -> List[Transaction]:
    """Search and filter transactions, newest first.

    Args:
        transactions: Records to filter
        search: Case-insensitive text matched against description and category
        type_filter: ``'all'``, ``'income'`` or ``'expense'``
        category: Exact category name; empty matches every category
    """
    needle = search.lower()
    matches = [
        t for t in transactions
        if (needle in t.description.lower() or needle in t.category.lower())
        and (type_filter == 'all' or t.type == type_filter)
        and (not category or t.category == category)
    ]
    return recent_transactions(matches, limit=len(matches))

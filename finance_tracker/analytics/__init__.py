"""Financial aggregation engine.

Pure functions that turn transaction, budget, savings-goal and income-source
records into the figures shown across the tracker:

- Monthly totals, trends and transaction lists
- Budget utilization and status
- Monthly-equivalent income and savings rate
- Savings-goal progress and projections
- Composite reports for the dashboard, budgets, progress and goals views
"""

from .transactions import (
    transactions_frame,
    month_bounds,
    monthly_income_expense_savings,
    monthly_trend,
    recent_transactions,
    total_balance,
    expenses_by_category,
    category_color,
    filter_transactions,
)
from .budgets import (
    budget_utilization,
    budget_status,
    duplicate_budget_categories,
)
from .income import (
    FREQUENCY_MULTIPLIERS,
    FREQUENCY_DIVISORS,
    monthly_equivalent_amount,
    monthly_income_from_sources,
    savings_rate,
)
from .goals import (
    days_between,
    months_left_by_days,
    months_left_calendar,
    savings_goal_progress,
    goals_progress,
)
from .reports import (
    period_over_period_change,
    change_from_magnitude,
    dashboard_summary,
    budget_overview,
    progress_report,
    savings_goals_overview,
)

__all__ = [
    # Transactions
    'transactions_frame',
    'month_bounds',
    'monthly_income_expense_savings',
    'monthly_trend',
    'recent_transactions',
    'total_balance',
    'expenses_by_category',
    'category_color',
    'filter_transactions',
    # Budgets
    'budget_utilization',
    'budget_status',
    'duplicate_budget_categories',
    # Income
    'FREQUENCY_MULTIPLIERS',
    'FREQUENCY_DIVISORS',
    'monthly_equivalent_amount',
    'monthly_income_from_sources',
    'savings_rate',
    # Goals
    'days_between',
    'months_left_by_days',
    'months_left_calendar',
    'savings_goal_progress',
    'goals_progress',
    # Reports
    'period_over_period_change',
    'change_from_magnitude',
    'dashboard_summary',
    'budget_overview',
    'progress_report',
    'savings_goals_overview',
]

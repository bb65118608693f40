from __future__ import annotations

from datetime import date, datetime

import pytest

from finance_tracker.analytics import (
    budget_status,
    budget_utilization,
    duplicate_budget_categories,
    monthly_equivalent_amount,
    monthly_income_from_sources,
    savings_rate,
)
from finance_tracker.models import Budget, IncomeSource, Transaction

CREATED = datetime(2024, 1, 1, 12, 0)


def _budget(bid, category, amount):
    return Budget(
        id=bid, user_id='u1', category=category, amount=amount,
        period='monthly', type='variable', created_at=CREATED,
    )


def _expense(tid, category, amount, when):
    return Transaction(
        id=tid, user_id='u1', type='expense', amount=amount, category=category,
        description='', date=when, created_at=CREATED,
    )


def _source(sid, amount, frequency, is_active=True):
    return IncomeSource(
        id=sid, user_id='u1', name=f'source {sid}', amount=amount,
        frequency=frequency, type='salary', is_active=is_active, created_at=CREATED,
    )


def _transactions():
    return [
        _expense('1', 'Food & Dining', 450, date(2024, 3, 3)),
        _expense('2', 'Food & Dining', 60, date(2024, 3, 20)),
        _expense('3', 'Entertainment', 130, date(2024, 3, 8)),
        _expense('4', 'Housing', 1000, date(2024, 3, 1)),
        _expense('5', 'Food & Dining', 999, date(2024, 2, 28)),
        Transaction(
            id='6', user_id='u1', type='income', amount=500, category='Food & Dining',
            description='refund booked as income', date=date(2024, 3, 5), created_at=CREATED,
        ),
    ]


def test_budget_utilization_per_category() -> None:
    budgets = [
        _budget('b1', 'Food & Dining', 600),
        _budget('b2', 'Entertainment', 100),
        _budget('b3', 'Housing', 1500),
    ]
    result = budget_utilization(budgets, _transactions(), date(2024, 3, 31))

    food, fun, housing = result['categories']
    assert food['budget_id'] == 'b1'
    assert food['spent'] == 510
    assert food['utilization'] == pytest.approx(85.0)
    assert food['status'] == 'warning'
    assert food['remaining'] == 90

    assert fun['utilization'] == pytest.approx(130.0)
    assert fun['status'] == 'over'
    assert fun['variance'] == 30

    assert housing['status'] == 'good'

    assert result['total_budget'] == 2200
    assert result['total_spent'] == 1640
    assert result['remaining'] == 560
    assert result['utilization'] == pytest.approx(1640 / 2200 * 100)


def test_remaining_total_can_go_negative() -> None:
    result = budget_utilization([_budget('b1', 'Housing', 200)], _transactions(), date(2024, 3, 1))
    assert result['remaining'] == -800


def test_zero_budget_reports_zero_utilization() -> None:
    result = budget_utilization([_budget('b1', 'Housing', 0)], _transactions(), date(2024, 3, 1))
    item = result['categories'][0]
    assert item['spent'] == 1000
    assert item['utilization'] == 0
    assert item['status'] == 'good'
    assert result['utilization'] == 0


def test_status_thresholds_are_exclusive() -> None:
    assert budget_status(80) == 'good'
    assert budget_status(80.01) == 'warning'
    assert budget_status(100) == 'warning'
    assert budget_status(100.5) == 'over'


def test_no_budgets() -> None:
    result = budget_utilization([], _transactions(), date(2024, 3, 1))
    assert result['categories'] == []
    assert result['total_budget'] == 0
    assert result['utilization'] == 0


def test_duplicate_budgets_each_see_full_spend() -> None:
    budgets = [_budget('b1', 'Food & Dining', 600), _budget('b2', 'Food & Dining', 300)]
    result = budget_utilization(budgets, _transactions(), date(2024, 3, 1))
    assert [item['spent'] for item in result['categories']] == [510, 510]
    assert duplicate_budget_categories(budgets) == ['Food & Dining']
    assert duplicate_budget_categories(budgets[:1]) == []


def test_weekly_income_uses_fixed_multiplier() -> None:
    assert monthly_income_from_sources([_source('1', 100, 'weekly')]) == 433.0


@pytest.mark.parametrize(
    'frequency, expected',
    [
        ('weekly', 433.0),
        ('bi-weekly', 217.0),
        ('monthly', 100.0),
        ('quarterly', 100 / 3),
        ('yearly', 100 / 12),
        ('fortnightly', 100.0),
    ],
)
def test_monthly_equivalent_amount(frequency, expected) -> None:
    assert monthly_equivalent_amount(100, frequency) == pytest.approx(expected)


def test_inactive_sources_are_ignored() -> None:
    sources = [
        _source('1', 4000, 'monthly'),
        _source('2', 1200, 'yearly'),
        _source('3', 9999, 'monthly', is_active=False),
    ]
    assert monthly_income_from_sources(sources, date(2024, 3, 1)) == pytest.approx(4100)
    assert monthly_income_from_sources([]) == 0


def test_savings_rate() -> None:
    assert savings_rate(4000, 3000) == pytest.approx(25.0)
    assert savings_rate(1000, 1500) == pytest.approx(-50.0)
    assert savings_rate(0, 300) == 0
    assert savings_rate(-10, 300) == 0

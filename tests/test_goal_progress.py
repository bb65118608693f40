from __future__ import annotations

import math
from datetime import date, datetime

import pytest

from finance_tracker.analytics import (
    days_between,
    goals_progress,
    months_left_by_days,
    months_left_calendar,
    savings_goal_progress,
)
from finance_tracker.models import SavingsGoal


def _goal(target_amount=1000, current_amount=250, target_date=date(2024, 6, 14)):
    return SavingsGoal(
        id='g1',
        user_id='u1',
        name='Emergency fund',
        description='',
        target_amount=target_amount,
        current_amount=current_amount,
        target_date=target_date,
        priority='high',
        category='emergency',
        created_at=datetime(2024, 1, 1, 8, 0),
    )


TODAY = date(2024, 3, 15)


def test_days_between_truncates_partial_days() -> None:
    assert days_between(date(2024, 3, 20), date(2024, 3, 15)) == 5
    assert days_between(date(2024, 3, 10), date(2024, 3, 15)) == -5
    assert days_between(date(2024, 3, 16), datetime(2024, 3, 15, 18, 0)) == 0
    assert math.isnan(days_between(None, TODAY))


def test_months_left_by_days() -> None:
    assert months_left_by_days(91) == 4
    assert months_left_by_days(90) == 3
    assert months_left_by_days(1) == 1
    assert months_left_by_days(0) == 0
    assert months_left_by_days(-45) == 0


def test_months_left_calendar() -> None:
    assert months_left_calendar(date(2024, 6, 14), TODAY) == 2
    assert months_left_calendar(date(2024, 6, 15), TODAY) == 3
    assert months_left_calendar(date(2024, 1, 10), TODAY) == -2


def test_progress_with_days_based_months() -> None:
    result = savings_goal_progress(_goal(), TODAY)
    assert result['progress'] == pytest.approx(25.0)
    assert result['days_left'] == 91
    assert result['months_left'] == 4
    assert result['remaining'] == 750
    assert result['monthly_required'] == pytest.approx(187.5)
    assert result['status'] == 'on-track'


def test_progress_with_calendar_months() -> None:
    result = savings_goal_progress(_goal(), TODAY, months_mode='calendar')
    assert result['days_left'] == 91
    assert result['months_left'] == 2
    assert result['monthly_required'] == pytest.approx(375.0)


def test_unknown_months_mode() -> None:
    with pytest.raises(ValueError):
        savings_goal_progress(_goal(), TODAY, months_mode='weeks')


def test_completed_goal_even_when_past_due() -> None:
    result = savings_goal_progress(
        _goal(current_amount=1000, target_date=date(2023, 12, 31)), TODAY
    )
    assert result['progress'] == 100
    assert result['status'] == 'completed'
    assert result['remaining'] == 0


def test_overdue_goal_requires_full_remaining() -> None:
    result = savings_goal_progress(_goal(target_date=date(2024, 3, 1)), TODAY)
    assert result['days_left'] == -14
    assert result['months_left'] == 0
    assert result['monthly_required'] == 750
    assert result['status'] == 'overdue'


def test_urgent_goal() -> None:
    result = savings_goal_progress(_goal(target_date=date(2024, 4, 10)), TODAY)
    assert result['days_left'] == 26
    assert result['status'] == 'urgent'


def test_zero_target_reports_zero_progress() -> None:
    result = savings_goal_progress(_goal(target_amount=0, current_amount=0), TODAY)
    assert result['progress'] == 0
    assert result['status'] == 'on-track'


def test_goals_progress_keeps_input_order() -> None:
    goals = [_goal(target_date=date(2024, 6, 14)), _goal(current_amount=1000)]
    results = goals_progress(goals, TODAY, months_mode='calendar')
    assert [result['goal'] for result in results] == goals
    assert [result['status'] for result in results] == ['on-track', 'completed']
    assert goals_progress([], TODAY) == []

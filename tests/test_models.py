from __future__ import annotations

from dataclasses import FrozenInstanceError
from datetime import date, datetime

import pytest

from finance_tracker.models import (
    Budget,
    CategoryPatch,
    IncomeSource,
    IncomeSourcePatch,
    SavingsGoalPatch,
    apply_patch,
)


def _source():
    return IncomeSource(
        id='s1', user_id='u1', name='Job', amount=1000, frequency='monthly',
        type='salary', is_active=True, created_at=datetime(2024, 1, 1, 9, 0),
    )


def test_records_are_immutable() -> None:
    with pytest.raises(FrozenInstanceError):
        _source().amount = 5


def test_apply_patch_changes_only_given_fields() -> None:
    source = _source()
    patched = apply_patch(source, IncomeSourcePatch(amount=1500, frequency='bi-weekly'))
    assert patched.amount == 1500
    assert patched.frequency == 'bi-weekly'
    assert patched.name == 'Job'
    assert patched.created_at == source.created_at
    assert source.amount == 1000


def test_false_is_a_real_patch_value() -> None:
    assert apply_patch(_source(), IncomeSourcePatch(is_active=False)).is_active is False


def test_empty_patch_returns_same_record() -> None:
    source = _source()
    assert apply_patch(source, IncomeSourcePatch()) is source


def test_patch_type_must_match_record() -> None:
    with pytest.raises(TypeError):
        apply_patch(_source(), CategoryPatch(name='x'))
    budget = Budget(
        id='b1', user_id='u1', category='Food & Dining', amount=10, period='monthly',
        type='fixed', created_at=datetime(2024, 1, 1),
    )
    with pytest.raises(TypeError):
        apply_patch(budget, SavingsGoalPatch(target_date=date(2025, 1, 1)))

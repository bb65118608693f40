from __future__ import annotations

from datetime import date

import pytest

from finance_tracker.exceptions import NotAuthenticatedError
from finance_tracker.identity import IdentityService
from finance_tracker.models import (
    DEFAULT_CATEGORIES,
    BudgetPatch,
    CategoryPatch,
    IncomeSourcePatch,
    SavingsGoalPatch,
    TransactionPatch,
)
from finance_tracker.repository import FinanceRepository
from finance_tracker.storage import FinanceStorage, MemoryStore


def _signed_in():
    store = MemoryStore()
    identity = IdentityService(store)
    identity.register('ana@example.com', 'pw', 'Ana')
    storage = FinanceStorage(store)
    return FinanceRepository(storage, identity), storage, identity


def test_add_transaction_assigns_identity_fields() -> None:
    repo, storage, identity = _signed_in()
    txn = repo.add_transaction('expense', 12.5, 'Food & Dining', 'Lunch', date(2024, 3, 1))

    assert txn.user_id == identity.current_user.id
    assert txn.id
    assert txn.created_at is not None
    assert repo.transactions == [txn]
    assert storage.load(identity.current_user.id).transactions == [txn]


def test_update_transaction_merges_patch() -> None:
    repo, storage, identity = _signed_in()
    txn = repo.add_transaction('expense', 12.5, 'Food & Dining', 'Lunch', date(2024, 3, 1))

    updated = repo.update_transaction(txn.id, TransactionPatch(amount=15, description='Lunch + tip'))
    assert updated.amount == 15
    assert updated.description == 'Lunch + tip'
    assert updated.category == 'Food & Dining'
    assert updated.id == txn.id
    assert storage.load(identity.current_user.id).transactions == [updated]

    assert repo.update_transaction('missing', TransactionPatch(amount=1)) is None


def test_wrong_patch_type_rejected() -> None:
    repo, _, _ = _signed_in()
    txn = repo.add_transaction('income', 100, 'Salary', 'Pay', date(2024, 3, 1))
    with pytest.raises(TypeError):
        repo.update_transaction(txn.id, BudgetPatch(amount=5))


def test_delete_transaction() -> None:
    repo, _, _ = _signed_in()
    keep = repo.add_transaction('income', 100, 'Salary', 'Pay', date(2024, 3, 1))
    drop = repo.add_transaction('expense', 5, 'Shopping', 'Socks', date(2024, 3, 2))
    assert repo.delete_transaction(drop.id)
    assert not repo.delete_transaction(drop.id)
    assert repo.transactions == [keep]


def test_categories_start_from_defaults_and_delete_does_not_cascade() -> None:
    repo, _, _ = _signed_in()
    assert repo.categories == DEFAULT_CATEGORIES

    txn = repo.add_transaction('expense', 30, 'Housing', 'Plumber', date(2024, 3, 1))
    assert repo.delete_category('7')
    assert 'Housing' not in [category.name for category in repo.categories]
    assert repo.transactions == [txn]

    pets = repo.add_category('Pets', 'expense', '#000000', 'Dog')
    renamed = repo.update_category(pets.id, CategoryPatch(name='Pet care'))
    assert renamed.name == 'Pet care'
    assert renamed.icon == 'Dog'


def test_budgets_goals_and_income_sources() -> None:
    repo, storage, identity = _signed_in()
    budget = repo.add_budget('Food & Dining', 400)
    repo.add_budget('Food & Dining', 100, type='fixed')
    assert len(repo.budgets) == 2
    assert repo.update_budget(budget.id, BudgetPatch(amount=450)).amount == 450

    goal = repo.add_savings_goal('Trip', 2000, date(2025, 6, 1), current_amount=100)
    assert goal.priority == 'medium'
    assert repo.update_savings_goal(goal.id, SavingsGoalPatch(current_amount=300)).current_amount == 300

    source = repo.add_income_source('Job', 1000, frequency='weekly')
    toggled = repo.update_income_source(source.id, IncomeSourcePatch(is_active=False))
    assert toggled.is_active is False

    data = storage.load(identity.current_user.id)
    assert [b.amount for b in data.budgets] == [450, 100]
    assert data.savings_goals[0].current_amount == 300
    assert data.income_sources[0].is_active is False

    assert repo.delete_budget(budget.id)
    assert repo.delete_savings_goal(goal.id)
    assert repo.delete_income_source(source.id)
    assert storage.load(identity.current_user.id).income_sources == []


def test_alerts_marked_read() -> None:
    repo, storage, identity = _signed_in()
    alert = repo.add_budget_alert('budget_exceeded', 'Food over budget', category='Food & Dining', amount=50)
    assert repo.unread_alerts == [alert]
    assert repo.mark_alert_as_read(alert.id)
    assert repo.unread_alerts == []
    assert storage.load(identity.current_user.id).budget_alerts[0].is_read is True
    assert not repo.mark_alert_as_read('missing')


def test_reload_follows_the_signed_in_user() -> None:
    repo, _, identity = _signed_in()
    repo.add_transaction('income', 100, 'Salary', 'Pay', date(2024, 3, 1))

    identity.logout()
    repo.reload()
    assert repo.transactions == []

    identity.login('ana@example.com', 'pw')
    repo.reload()
    assert len(repo.transactions) == 1


def test_mutations_require_sign_in() -> None:
    repo, _, identity = _signed_in()
    txn = repo.add_transaction('income', 100, 'Salary', 'Pay', date(2024, 3, 1))
    identity.logout()
    with pytest.raises(NotAuthenticatedError):
        repo.add_transaction('income', 100, 'Salary', 'Pay', date(2024, 3, 1))
    with pytest.raises(NotAuthenticatedError):
        repo.delete_transaction(txn.id)
    with pytest.raises(NotAuthenticatedError):
        repo.add_budget_alert('bill_reminder', 'Rent due')


def test_switching_users_without_reload_keeps_records_apart() -> None:
    repo, storage, identity = _signed_in()
    repo.add_transaction('expense', 1200, 'Housing', 'Ana rent', date(2024, 3, 1))
    ana_id = identity.current_user.id

    identity.logout()
    identity.register('bob@example.com', 'pw', 'Bob')
    bob_id = identity.current_user.id
    assert repo.transactions == []
    assert repo.categories == DEFAULT_CATEGORIES

    repo.add_transaction('expense', 4, 'Food & Dining', 'Bob coffee', date(2024, 3, 2))
    bob_records = storage.load(bob_id).transactions
    assert [t.description for t in bob_records] == ['Bob coffee']
    assert all(t.user_id == bob_id for t in bob_records)
    assert [t.description for t in storage.load(ana_id).transactions] == ['Ana rent']

    identity.logout()
    identity.login('ana@example.com', 'pw')
    assert [t.description for t in repo.transactions] == ['Ana rent']


def test_reads_follow_logout_without_reload() -> None:
    repo, _, identity = _signed_in()
    repo.add_budget('Food & Dining', 400)
    identity.logout()
    assert repo.budgets == []
    assert repo.data.categories == DEFAULT_CATEGORIES

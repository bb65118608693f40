"""Finance repository: the signed-in user's records and every write to them.

The repository keeps the user's collections in memory and writes a whole
collection back through :class:`~finance_tracker.storage.FinanceStorage`
after each change.  The cached collections belong to one user id; when the
identity service reports a different signed-in user, reads and writes
reload first so one user's records never reach another user's keys.
"""

from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import date, datetime
from typing import Any, List, Optional, TypeVar

import structlog

from .identity import IdentityService
from .models import (
    Amount,
    Budget,
    BudgetAlert,
    BudgetPatch,
    Category,
    CategoryPatch,
    IncomeSource,
    IncomeSourcePatch,
    Patch,
    SavingsGoal,
    SavingsGoalPatch,
    Transaction,
    TransactionPatch,
    apply_patch,
)
from .storage import FinanceData, FinanceStorage

logger = structlog.get_logger()

T = TypeVar('T')


def _new_id() -> str:
    return str(uuid.uuid4())


class FinanceRepository:
    """CRUD over one user's transactions, categories, budgets, goals, income and alerts."""

    def __init__(self, storage: FinanceStorage, identity: IdentityService):
        self.storage = storage
        self.identity = identity
        self._data = FinanceData()
        self._loaded_for: Optional[str] = None
        self.reload()

    def reload(self) -> FinanceData:
        """Load the signed-in user's collections (defaults when signed out)."""
        user = self.identity.current_user
        self._data = self.storage.load(user.id) if user else FinanceData()
        self._loaded_for = user.id if user else None
        return self._data

    def _current(self) -> FinanceData:
        """Collections of whoever is signed in now, reloading after a user switch."""
        user = self.identity.current_user
        user_id = user.id if user else None
        if user_id != self._loaded_for:
            logger.info("Signed-in user changed, reloading", previous=self._loaded_for, user_id=user_id)
            self.reload()
        return self._data

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def data(self) -> FinanceData:
        return self._current()

    @property
    def transactions(self) -> List[Transaction]:
        return list(self._current().transactions)

    @property
    def categories(self) -> List[Category]:
        return list(self._current().categories)

    @property
    def budgets(self) -> List[Budget]:
        return list(self._current().budgets)

    @property
    def savings_goals(self) -> List[SavingsGoal]:
        return list(self._current().savings_goals)

    @property
    def income_sources(self) -> List[IncomeSource]:
        return list(self._current().income_sources)

    @property
    def budget_alerts(self) -> List[BudgetAlert]:
        return list(self._current().budget_alerts)

    @property
    def unread_alerts(self) -> List[BudgetAlert]:
        return [alert for alert in self._current().budget_alerts if not alert.is_read]

    # ------------------------------------------------------------------
    # Generic collection operations
    # ------------------------------------------------------------------

    def _user_id(self, action: str) -> str:
        user = self.identity.require_user(action)
        self._current()
        return user.id

    def _save(self, collection: str, records: List[Any], user_id: str) -> None:
        setattr(self._data, collection, records)
        self.storage.save(user_id, collection, records)

    def _add(self, collection: str, record: T, user_id: str) -> T:
        records = list(getattr(self._data, collection))
        records.append(record)
        self._save(collection, records, user_id)
        logger.info("Record added", collection=collection, record_id=record.id)
        return record

    def _update(self, collection: str, record_id: str, patch: Patch) -> Optional[Any]:
        user_id = self._user_id(f"Updating {collection}")
        updated = None
        records = []
        for record in getattr(self._data, collection):
            if record.id == record_id:
                record = apply_patch(record, patch)
                updated = record
            records.append(record)
        if updated is None:
            logger.info("Update skipped, record not found", collection=collection, record_id=record_id)
            return None
        self._save(collection, records, user_id)
        logger.info("Record updated", collection=collection, record_id=record_id)
        return updated

    def _delete(self, collection: str, record_id: str) -> bool:
        user_id = self._user_id(f"Deleting {collection}")
        current = getattr(self._data, collection)
        remaining = [record for record in current if record.id != record_id]
        if len(remaining) == len(current):
            return False
        self._save(collection, remaining, user_id)
        logger.info("Record deleted", collection=collection, record_id=record_id)
        return True

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    def add_transaction(
        self,
        type: str,
        amount: Amount,
        category: str,
        description: str,
        date: date,
    ) -> Transaction:
        user_id = self._user_id("Adding a transaction")
        record = Transaction(
            id=_new_id(),
            user_id=user_id,
            type=type,
            amount=amount,
            category=category,
            description=description,
            date=date,
            created_at=datetime.now(),
        )
        return self._add('transactions', record, user_id)

    def update_transaction(self, transaction_id: str, patch: TransactionPatch) -> Optional[Transaction]:
        return self._update('transactions', transaction_id, patch)

    def delete_transaction(self, transaction_id: str) -> bool:
        return self._delete('transactions', transaction_id)

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    def add_category(self, name: str, type: str, color: str, icon: str) -> Category:
        user_id = self._user_id("Adding a category")
        record = Category(id=_new_id(), name=name, type=type, color=color, icon=icon)
        return self._add('categories', record, user_id)

    def update_category(self, category_id: str, patch: CategoryPatch) -> Optional[Category]:
        return self._update('categories', category_id, patch)

    def delete_category(self, category_id: str) -> bool:
        # Transactions and budgets keep the old category name.
        return self._delete('categories', category_id)

    # ------------------------------------------------------------------
    # Budgets
    # ------------------------------------------------------------------

    def add_budget(self, category: str, amount: Amount, period: str = 'monthly', type: str = 'variable') -> Budget:
        user_id = self._user_id("Adding a budget")
        record = Budget(
            id=_new_id(),
            user_id=user_id,
            category=category,
            amount=amount,
            period=period,
            type=type,
            created_at=datetime.now(),
        )
        if any(budget.category == category for budget in self._data.budgets):
            logger.warning("Category already has a budget", category=category)
        return self._add('budgets', record, user_id)

    def update_budget(self, budget_id: str, patch: BudgetPatch) -> Optional[Budget]:
        return self._update('budgets', budget_id, patch)

    def delete_budget(self, budget_id: str) -> bool:
        return self._delete('budgets', budget_id)

    # ------------------------------------------------------------------
    # Savings goals
    # ------------------------------------------------------------------

    def add_savings_goal(
        self,
        name: str,
        target_amount: Amount,
        target_date: date,
        current_amount: Amount = 0,
        description: str = '',
        priority: str = 'medium',
        category: str = 'short-term',
    ) -> SavingsGoal:
        user_id = self._user_id("Adding a savings goal")
        record = SavingsGoal(
            id=_new_id(),
            user_id=user_id,
            name=name,
            description=description,
            target_amount=target_amount,
            current_amount=current_amount,
            target_date=target_date,
            priority=priority,
            category=category,
            created_at=datetime.now(),
        )
        return self._add('savings_goals', record, user_id)

    def update_savings_goal(self, goal_id: str, patch: SavingsGoalPatch) -> Optional[SavingsGoal]:
        return self._update('savings_goals', goal_id, patch)

    def delete_savings_goal(self, goal_id: str) -> bool:
        return self._delete('savings_goals', goal_id)

    # ------------------------------------------------------------------
    # Income sources
    # ------------------------------------------------------------------

    def add_income_source(
        self,
        name: str,
        amount: Amount,
        frequency: str = 'monthly',
        type: str = 'salary',
        is_active: bool = True,
    ) -> IncomeSource:
        user_id = self._user_id("Adding an income source")
        record = IncomeSource(
            id=_new_id(),
            user_id=user_id,
            name=name,
            amount=amount,
            frequency=frequency,
            type=type,
            is_active=is_active,
            created_at=datetime.now(),
        )
        return self._add('income_sources', record, user_id)

    def update_income_source(self, source_id: str, patch: IncomeSourcePatch) -> Optional[IncomeSource]:
        return self._update('income_sources', source_id, patch)

    def delete_income_source(self, source_id: str) -> bool:
        return self._delete('income_sources', source_id)

    # ------------------------------------------------------------------
    # Alerts
    # ------------------------------------------------------------------

    def add_budget_alert(
        self,
        type: str,
        message: str,
        category: Optional[str] = None,
        amount: Optional[Amount] = None,
    ) -> BudgetAlert:
        user_id = self._user_id("Adding an alert")
        record = BudgetAlert(
            id=_new_id(),
            user_id=user_id,
            type=type,
            message=message,
            is_read=False,
            created_at=datetime.now(),
            category=category,
            amount=amount,
        )
        return self._add('budget_alerts', record, user_id)

    def mark_alert_as_read(self, alert_id: str) -> bool:
        user_id = self._user_id("Marking an alert as read")
        found = False
        alerts = []
        for alert in self._data.budget_alerts:
            if alert.id == alert_id:
                alert = replace(alert, is_read=True)
                found = True
            alerts.append(alert)
        if found:
            self._save('budget_alerts', alerts, user_id)
        return found

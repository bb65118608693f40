#!/usr/bin/env python3
"""Print the dashboard figures for the signed-in user of a local store."""

from __future__ import annotations

import argparse
import sys
from datetime import date
from pathlib import Path
from typing import Optional

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from finance_tracker import analytics
from finance_tracker.currency import format_currency
from finance_tracker.identity import IdentityService
from finance_tracker.repository import FinanceRepository
from finance_tracker.storage import FinanceStorage, JsonFileStore


def main(store_dir: Optional[Path] = None, months: int = 6, limit: int = 5) -> None:
    store = JsonFileStore(store_dir)
    identity = IdentityService(store)
    user = identity.current_user
    if user is None:
        print("Nobody is signed in.")
        return

    repository = FinanceRepository(FinanceStorage(store), identity)
    today = date.today()
    money = lambda amount: format_currency(amount, user.currency)  # noqa: E731

    summary = analytics.dashboard_summary(repository.transactions, today)
    print(f"Dashboard for {user.name} ({today:%B %Y})")
    print(f"  Balance:  {money(summary['total_balance'])}")
    print(f"  Income:   {money(summary['current_income'])} ({summary['income_change']:+.1f}%)")
    print(f"  Expenses: {money(summary['current_expenses'])} ({summary['expense_change']:+.1f}%)")
    print(f"  Savings:  {money(summary['savings'])}")

    print("\nMonthly trend:")
    for entry in analytics.monthly_trend(repository.transactions, months, today):
        print(
            f"  {entry['month']}: income {money(entry['income'])}, "
            f"expenses {money(entry['expenses'])}, savings {money(entry['savings'])}"
        )

    overview = analytics.budget_overview(
        repository.budgets, repository.transactions, repository.income_sources, today
    )
    if overview['categories']:
        print("\nBudgets:")
        for item in overview['categories']:
            print(
                f"  {item['category']}: {money(item['spent'])} of {money(item['budget'])} "
                f"({item['utilization']:.0f}%, {item['status']})"
            )
        print(f"  Savings rate: {overview['savings_rate']:.1f}%")

    recent = analytics.recent_transactions(repository.transactions, limit)
    if recent:
        print("\nRecent transactions:")
        for transaction in recent:
            sign = '+' if transaction.type == 'income' else '-'
            print(f"  {transaction.date:%Y-%m-%d}  {sign}{money(transaction.amount)}  {transaction.description}")

    unread = repository.unread_alerts
    if unread:
        print(f"\n{len(unread)} unread alert(s).")


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='Show dashboard figures for the signed-in user.')
    parser.add_argument('--store-dir', type=Path, default=None, help='Directory of the JSON store')
    parser.add_argument('--months', type=int, default=6, help='How many months of trend to show')
    parser.add_argument('--limit', type=int, default=5, help='How many recent transactions to show')
    args = parser.parse_args()
    main(store_dir=args.store_dir, months=args.months, limit=args.limit)

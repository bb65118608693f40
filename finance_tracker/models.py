"""Record types for the finance tracker.

Every persisted entity is a frozen dataclass.  Records are never edited in
place: updates go through a typed patch (one per record type) and
:func:`apply_patch`, which copies the patch fields one by one onto a new
record.  Only the fields a patch class declares can be changed, so stray keys
cannot leak into stored records.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from datetime import date, datetime
from typing import ClassVar, Dict, List, Literal, Optional, Tuple, Type, TypeVar, Union

TransactionType = Literal['income', 'expense']
BudgetPeriod = Literal['monthly', 'yearly']
BudgetType = Literal['fixed', 'variable', 'debt']
GoalPriority = Literal['low', 'medium', 'high']
GoalCategory = Literal['emergency', 'short-term', 'medium-term', 'long-term']
IncomeFrequency = Literal['weekly', 'bi-weekly', 'monthly', 'quarterly', 'yearly']
IncomeType = Literal['salary', 'freelance', 'investment', 'business', 'other']
AlertType = Literal['budget_exceeded', 'goal_milestone', 'bill_reminder', 'savings_target']

# Amounts are plain numbers in the user's single home currency.
Amount = Union[int, float]


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class User:
    id: str
    email: str
    name: str
    currency: str = 'USD'
    created_at: Optional[datetime] = None

    DATE_FIELDS: ClassVar[Tuple[str, ...]] = ('created_at',)


@dataclass(frozen=True)
class Transaction:
    id: str
    user_id: str
    type: TransactionType
    amount: Amount
    category: str      # category *name*, not id
    description: str
    date: date         # date or datetime
    created_at: datetime

    DATE_FIELDS: ClassVar[Tuple[str, ...]] = ('date', 'created_at')


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    type: TransactionType
    color: str
    icon: str

    DATE_FIELDS: ClassVar[Tuple[str, ...]] = ()


@dataclass(frozen=True)
class Budget:
    id: str
    user_id: str
    category: str
    amount: Amount     # spending limit
    period: BudgetPeriod
    type: BudgetType
    created_at: datetime

    DATE_FIELDS: ClassVar[Tuple[str, ...]] = ('created_at',)


@dataclass(frozen=True)
class SavingsGoal:
    id: str
    user_id: str
    name: str
    description: str
    target_amount: Amount
    current_amount: Amount
    target_date: date
    priority: GoalPriority
    category: GoalCategory
    created_at: datetime

    DATE_FIELDS: ClassVar[Tuple[str, ...]] = ('target_date', 'created_at')


@dataclass(frozen=True)
class IncomeSource:
    id: str
    user_id: str
    name: str
    amount: Amount     # per `frequency` period
    frequency: IncomeFrequency
    type: IncomeType
    is_active: bool
    created_at: datetime

    DATE_FIELDS: ClassVar[Tuple[str, ...]] = ('created_at',)


@dataclass(frozen=True)
class BudgetAlert:
    id: str
    user_id: str
    type: AlertType
    message: str
    is_read: bool
    created_at: datetime
    category: Optional[str] = None
    amount: Optional[Amount] = None

    DATE_FIELDS: ClassVar[Tuple[str, ...]] = ('created_at',)


Record = Union[Transaction, Category, Budget, SavingsGoal, IncomeSource, BudgetAlert]
R = TypeVar('R', Transaction, Category, Budget, SavingsGoal, IncomeSource, BudgetAlert)


DEFAULT_CATEGORIES: List[Category] = [
    Category('1', 'Food & Dining', 'expense', '#F59E0B', 'UtensilsCrossed'),
    Category('2', 'Transportation', 'expense', '#3B82F6', 'Car'),
    Category('3', 'Utilities', 'expense', '#EF4444', 'Zap'),
    Category('4', 'Entertainment', 'expense', '#8B5CF6', 'Music'),
    Category('5', 'Healthcare', 'expense', '#EC4899', 'Heart'),
    Category('6', 'Shopping', 'expense', '#10B981', 'ShoppingBag'),
    Category('7', 'Housing', 'expense', '#6B7280', 'Home'),
    Category('8', 'Insurance', 'expense', '#14B8A6', 'Shield'),
    Category('9', 'Salary', 'income', '#059669', 'DollarSign'),
    Category('10', 'Freelance', 'income', '#7C3AED', 'Briefcase'),
    Category('11', 'Investments', 'income', '#DC2626', 'TrendingUp'),
]


# ---------------------------------------------------------------------------
# Patches
# ---------------------------------------------------------------------------
# A field left as ``None`` is not touched.  ``id``, ``user_id`` and
# ``created_at`` are never patchable.


@dataclass(frozen=True)
class TransactionPatch:
    type: Optional[TransactionType] = None
    amount: Optional[Amount] = None
    category: Optional[str] = None
    description: Optional[str] = None
    date: Optional[date] = None


@dataclass(frozen=True)
class CategoryPatch:
    name: Optional[str] = None
    type: Optional[TransactionType] = None
    color: Optional[str] = None
    icon: Optional[str] = None


@dataclass(frozen=True)
class BudgetPatch:
    category: Optional[str] = None
    amount: Optional[Amount] = None
    period: Optional[BudgetPeriod] = None
    type: Optional[BudgetType] = None


@dataclass(frozen=True)
class SavingsGoalPatch:
    name: Optional[str] = None
    description: Optional[str] = None
    target_amount: Optional[Amount] = None
    current_amount: Optional[Amount] = None
    target_date: Optional[date] = None
    priority: Optional[GoalPriority] = None
    category: Optional[GoalCategory] = None


@dataclass(frozen=True)
class IncomeSourcePatch:
    name: Optional[str] = None
    amount: Optional[Amount] = None
    frequency: Optional[IncomeFrequency] = None
    type: Optional[IncomeType] = None
    is_active: Optional[bool] = None


Patch = Union[TransactionPatch, CategoryPatch, BudgetPatch, SavingsGoalPatch, IncomeSourcePatch]

PATCH_TYPES: Dict[type, Type[Patch]] = {
    Transaction: TransactionPatch,
    Category: CategoryPatch,
    Budget: BudgetPatch,
    SavingsGoal: SavingsGoalPatch,
    IncomeSource: IncomeSourcePatch,
}


def apply_patch(record: R, patch: Patch) -> R:
    """Return a copy of ``record`` with every non-``None`` patch field applied.

    Raises:
        TypeError: If ``patch`` is not the patch type registered for the record.
    """
    expected = PATCH_TYPES.get(type(record))
    if expected is None or not isinstance(patch, expected):
        raise TypeError(
            f"{type(patch).__name__} cannot be applied to {type(record).__name__}"
        )

    changes = {}
    for field in fields(patch):
        value = getattr(patch, field.name)
        if value is not None:
            changes[field.name] = value
    if not changes:
        return record
    return replace(record, **changes)

"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple

INCOME = "income"
EXPENSE = "expense"

INCOME_CATEGORIES = frozenset({
    "salary",
    "thirteenth_salary",
    "vacation_pay",
    "freelance",
    "other_income",
})

EXPENSE_CATEGORIES = frozenset({
    "fixed_bills",
    "investments",
    "debts",
    "education",
    "transport",
    "groceries",
    "delivery",
    "other_expense",
})

CATEGORIES_BY_TYPE = {
    INCOME: INCOME_CATEGORIES,
    EXPENSE: EXPENSE_CATEGORIES,
}


def to_decimal(value) -> Decimal:
    """Coerce int/float/str amounts to Decimal without binary float artifacts"""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


@dataclass(frozen=True)
class Transaction:
    """A single cash movement; the sign is carried by type, never by value"""

    id: str
    type: str  # "income" or "expense"
    category: str
    date: date
    description: str
    value: Decimal
    created_at: datetime


@dataclass(frozen=True)
class Debt:
    """An obligation being paid down; paid_value caches the sum of its payments"""

    id: str
    name: str
    total_value: Decimal
    monthly_installment: Decimal
    paid_value: Decimal
    start_date: date
    created_at: datetime


@dataclass(frozen=True)
class DebtPayment:
    """Amount paid toward exactly one debt"""

    id: str
    debt_id: str
    value: Decimal
    date: date
    created_at: datetime


@dataclass(frozen=True)
class Projection:
    """Month-end balance estimate"""

    baseline_income: Decimal
    extra_income: Decimal
    total_income: Decimal  # baseline_income + extra_income
    total_expenses: Decimal
    projected_monthly_expenses: Decimal
    projected_balance: Decimal
    daily_average_expense: Decimal
    days_until_negative: Optional[int]
    is_positive: bool


class LedgerOutcome(str, Enum):
    """What a ledger mutation actually did"""

    APPLIED = "applied"
    DEBT_NOT_FOUND = "debt_not_found"
    PAYMENT_NOT_FOUND = "payment_not_found"


@dataclass(frozen=True)
class LedgerUpdate:
    """New debt/payment snapshot produced by a ledger mutation"""

    debts: Tuple[Debt, ...]
    payments: Tuple[DebtPayment, ...]
    outcome: LedgerOutcome


@dataclass(frozen=True)
class DebtStats:
    """Portfolio-wide debt statistics"""

    total_debt: Decimal
    total_paid: Decimal
    total_remaining: Decimal
    overall_progress: Decimal
    count: int


@dataclass(frozen=True)
class DebtProgress:
    """Payoff progress of a single debt"""

    paid_value: Decimal
    remaining_value: Decimal
    progress: Decimal
    estimated_months_remaining: int


@dataclass(frozen=True)
class CategoryAggregate:
    category: str
    total: Decimal
    count: int
    percentage: Decimal


@dataclass(frozen=True)
class FinancialTotals:
    """Period totals with the balance carried over from before the period"""

    income: Decimal
    expenses: Decimal
    previous_balance: Decimal
    period_balance: Decimal
    balance: Decimal


@dataclass(frozen=True)
class MonthlyTotals:
    month: int  # 1-12
    income: Decimal
    expenses: Decimal
    is_current_month: bool


@dataclass(frozen=True)
class InvestmentMetadata:
    """Investment information decoded from a transaction description"""

    type: str
    is_withdrawal: bool
    user_description: str
    has_structured_tag: bool


@dataclass(frozen=True)
class InvestmentTotals:
    total_deposits: Decimal
    total_withdrawals: Decimal
    net_invested: Decimal


@dataclass(frozen=True)
class GoalProgress:
    progress: Decimal
    remaining: Decimal

"""Month-end balance projection - linear extrapolation of the current spending rate"""

import math
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Optional

from financex.domain.models import EXPENSE, INCOME, Projection, Transaction, to_decimal
from financex.utils.date_utils import as_date, days_in_month, same_month

ZERO = Decimal("0")


def compute_month_projection(
    monthly_income,
    transactions: Iterable[Transaction],
    today: date | datetime | None = None,
) -> Projection:
    """
    Project the balance at the end of the current month.

    The current month is the one containing `today` (default: date.today()).
    Only transactions dated in that month are considered; spending so far is
    averaged over the elapsed days (today included) and extrapolated to the
    whole month.

    Args:
        monthly_income: Baseline income expected for the month (may be zero)
        transactions: Transactions of any period, in any order
        today: Reference date; inject it for deterministic results

    Returns:
        Projection with baseline, extra and total income reported separately.
        days_until_negative is only set when the projection is negative:
        it counts the days until the money left today runs out at the current
        average (0 if it has already run out).

    Example:
        income 5000, day 10 of a 30-day month, 2000 spent so far
        → 200/day, 6000 projected, balance -1000, negative in 15 days
    """
    reference = as_date(today or date.today())
    day_of_month = reference.day
    month_length = days_in_month(reference.year, reference.month)
    baseline_income = to_decimal(monthly_income)

    current_month = [t for t in transactions if same_month(t.date, reference)]

    total_expenses = sum((t.value for t in current_month if t.type == EXPENSE), ZERO)
    extra_income = sum((t.value for t in current_month if t.type == INCOME), ZERO)

    if day_of_month > 0:
        daily_average_expense = total_expenses / day_of_month
        # Multiply before dividing to keep exact results exact
        projected_monthly_expenses = total_expenses * month_length / day_of_month
    else:
        daily_average_expense = ZERO
        projected_monthly_expenses = ZERO

    total_income = baseline_income + extra_income
    projected_balance = total_income - projected_monthly_expenses

    days_until_negative: Optional[int] = None
    if daily_average_expense > 0 and projected_balance < 0:
        # Uses actual spend to date, not the projection
        remaining_budget = total_income - total_expenses
        if remaining_budget > 0:
            days_until_negative = math.ceil(remaining_budget * day_of_month / total_expenses)
        else:
            days_until_negative = 0  # Already negative

    return Projection(
        baseline_income=baseline_income,
        extra_income=extra_income,
        total_income=total_income,
        total_expenses=total_expenses,
        projected_monthly_expenses=projected_monthly_expenses,
        projected_balance=projected_balance,
        daily_average_expense=daily_average_expense,
        days_until_negative=days_until_negative,
        is_positive=projected_balance >= 0,
    )


def compute_simple_projection(monthly_income, single_expense_value) -> Projection:
    """Balance left after one expense; no extrapolation over the month"""
    baseline_income = to_decimal(monthly_income)
    expense = to_decimal(single_expense_value)
    projected_balance = baseline_income - expense

    return Projection(
        baseline_income=baseline_income,
        extra_income=ZERO,
        total_income=baseline_income,
        total_expenses=expense,
        projected_monthly_expenses=expense,
        projected_balance=projected_balance,
        daily_average_expense=ZERO,
        days_until_negative=None,
        is_positive=projected_balance >= 0,
    )

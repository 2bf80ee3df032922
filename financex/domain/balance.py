"""Balance totals for dashboards - carried-over balance, period totals, monthly chart data"""

from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, List, Optional

from financex.domain.models import INCOME, FinancialTotals, MonthlyTotals, Transaction
from financex.utils.date_utils import as_date

ZERO = Decimal("0")


def _signed(transaction: Transaction) -> Decimal:
    return transaction.value if transaction.type == INCOME else -transaction.value


def previous_balance(transactions: Iterable[Transaction], before: date) -> Decimal:
    """Net balance of everything dated strictly before `before`"""
    return sum((_signed(t) for t in transactions if t.date < before), ZERO)


def calculate_totals(
    period_transactions: Iterable[Transaction],
    all_transactions: Iterable[Transaction],
    start: Optional[date] = None,
) -> FinancialTotals:
    """
    Totals for a period, folding in what was carried over from before it.

    A positive carried-over balance counts as income, a negative one as an
    expense. Without a start date nothing is carried over.
    """
    carried = previous_balance(all_transactions, start) if start else ZERO

    period_income = ZERO
    period_expenses = ZERO
    for t in period_transactions:
        if t.type == INCOME:
            period_income += t.value
        else:
            period_expenses += t.value

    income = period_income + max(carried, ZERO)
    expenses = period_expenses + max(-carried, ZERO)

    return FinancialTotals(
        income=income,
        expenses=expenses,
        previous_balance=carried,
        period_balance=period_income - period_expenses,
        balance=income - expenses,
    )


def monthly_data(
    transactions: Iterable[Transaction],
    year: int,
    today: date | datetime | None = None,
) -> List[MonthlyTotals]:
    """
    Income and expenses per month of `year`.

    The balance carried from earlier years lands in January only.
    """
    reference = as_date(today or date.today())
    transactions = list(transactions)

    income = [ZERO] * 12
    expenses = [ZERO] * 12
    for t in transactions:
        if t.date.year != year:
            continue
        if t.type == INCOME:
            income[t.date.month - 1] += t.value
        else:
            expenses[t.date.month - 1] += t.value

    carried = previous_balance(transactions, date(year, 1, 1))
    if carried > 0:
        income[0] += carried
    elif carried < 0:
        expenses[0] += -carried

    return [
        MonthlyTotals(
            month=index + 1,
            income=income[index],
            expenses=expenses[index],
            is_current_month=reference.year == year and reference.month == index + 1,
        )
        for index in range(12)
    ]

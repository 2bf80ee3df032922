"""Debt ledger - keeps paid_value consistent with payments and summarizes progress"""

import math
from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, List, Sequence, Tuple

from financex.domain.models import (
    Debt,
    DebtPayment,
    DebtProgress,
    DebtStats,
    LedgerOutcome,
    LedgerUpdate,
)
from financex.utils.date_utils import add_months, as_date

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def _adjust_paid_value(debts: Sequence[Debt], debt_id: str, delta: Decimal) -> Tuple[Tuple[Debt, ...], bool]:
    """Shift one debt's paid_value by delta (floored at zero); report whether it was found"""
    found = False
    updated = []
    for debt in debts:
        if debt.id == debt_id:
            found = True
            debt = replace(debt, paid_value=max(ZERO, debt.paid_value + delta))
        updated.append(debt)
    return tuple(updated), found


def apply_payment(
    debts: Sequence[Debt],
    payments: Sequence[DebtPayment],
    new_payment: DebtPayment,
) -> LedgerUpdate:
    """
    Record a payment and add its value to the referenced debt.

    Overpayment is not clamped: paid_value may exceed total_value.
    A payment for an unknown debt is still recorded, debts are returned
    unchanged, and the outcome is DEBT_NOT_FOUND so callers can refuse it.
    """
    updated_debts, found = _adjust_paid_value(debts, new_payment.debt_id, new_payment.value)
    return LedgerUpdate(
        debts=updated_debts,
        payments=tuple(payments) + (new_payment,),
        outcome=LedgerOutcome.APPLIED if found else LedgerOutcome.DEBT_NOT_FOUND,
    )


def retract_payment(
    debts: Sequence[Debt],
    payments: Sequence[DebtPayment],
    payment_id: str,
) -> LedgerUpdate:
    """
    Remove a payment and subtract its value from the referenced debt.

    paid_value never goes below zero. An unknown payment_id leaves both
    collections unchanged (PAYMENT_NOT_FOUND).
    """
    removed = next((p for p in payments if p.id == payment_id), None)
    if removed is None:
        return LedgerUpdate(
            debts=tuple(debts),
            payments=tuple(payments),
            outcome=LedgerOutcome.PAYMENT_NOT_FOUND,
        )

    updated_debts, found = _adjust_paid_value(debts, removed.debt_id, -removed.value)
    return LedgerUpdate(
        debts=updated_debts,
        payments=tuple(p for p in payments if p.id != payment_id),
        outcome=LedgerOutcome.APPLIED if found else LedgerOutcome.DEBT_NOT_FOUND,
    )


def compute_debt_stats(debts: Iterable[Debt]) -> DebtStats:
    """Totals across all debts; total_remaining goes negative when overpaid"""
    debts = list(debts)
    total_debt = sum((d.total_value for d in debts), ZERO)
    total_paid = sum((d.paid_value for d in debts), ZERO)

    overall_progress = total_paid / total_debt * HUNDRED if total_debt > 0 else ZERO

    return DebtStats(
        total_debt=total_debt,
        total_paid=total_paid,
        total_remaining=total_debt - total_paid,
        overall_progress=overall_progress,
        count=len(debts),
    )


def list_payments_for_debt(payments: Iterable[DebtPayment], debt_id: str) -> List[DebtPayment]:
    """Payments of one debt, most recent first"""
    return sorted(
        (p for p in payments if p.debt_id == debt_id),
        key=lambda p: p.created_at,
        reverse=True,
    )


def compute_debt_progress(debt: Debt) -> DebtProgress:
    """
    Payoff progress of a single debt.

    Unlike compute_debt_stats, the per-debt view is clamped:
    remaining never below zero, progress never above 100.
    """
    remaining = max(ZERO, debt.total_value - debt.paid_value)
    progress = min(debt.paid_value / debt.total_value * HUNDRED, HUNDRED) if debt.total_value > 0 else ZERO
    months = math.ceil(remaining / debt.monthly_installment) if debt.monthly_installment > 0 else 0

    return DebtProgress(
        paid_value=debt.paid_value,
        remaining_value=remaining,
        progress=progress,
        estimated_months_remaining=months,
    )


def expected_end_month(debt: Debt, today: date | datetime | None = None) -> Tuple[int, int]:
    """
    (year, month) in which the debt should be paid off at its installment rate.

    Counted forward from the current month. Falls back to the start month
    when nothing remains or no installment is set.
    """
    start = (debt.start_date.year, debt.start_date.month)
    if debt.monthly_installment <= 0:
        return start

    months = compute_debt_progress(debt).estimated_months_remaining
    if months == 0:
        return start

    reference = as_date(today or date.today())
    return add_months(reference.year, reference.month, months)


def sort_debts_by_progress(debts: Iterable[Debt]) -> List[Tuple[Debt, DebtProgress]]:
    """Debts paired with their progress, least paid first"""
    with_progress = [(debt, compute_debt_progress(debt)) for debt in debts]
    return sorted(with_progress, key=lambda item: item[1].progress)


def nearly_paid_debts(debts: Iterable[Debt], threshold: float = 80) -> List[Debt]:
    """Debts at or above threshold percent but not yet fully paid"""
    limit = Decimal(str(threshold))
    return [d for d in debts if limit <= compute_debt_progress(d).progress < HUNDRED]


def paid_debts(debts: Iterable[Debt]) -> List[Debt]:
    return [d for d in debts if compute_debt_progress(d).progress >= HUNDRED]

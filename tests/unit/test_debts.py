"""Unit tests for the debt ledger"""

import pytest
from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from financex.domain.models import Debt, DebtPayment, LedgerOutcome
from financex.domain.debts import (
    apply_payment,
    retract_payment,
    compute_debt_stats,
    list_payments_for_debt,
    compute_debt_progress,
    expected_end_month,
    sort_debts_by_progress,
    nearly_paid_debts,
    paid_debts,
)


def payment(payment_id: str, debt_id: str, value: str, created_at: datetime) -> DebtPayment:
    return DebtPayment(
        id=payment_id,
        debt_id=debt_id,
        value=Decimal(value),
        date=created_at.date(),
        created_at=created_at,
    )


def test_apply_payment_increases_paid_value(sample_debt):
    """Test payment is recorded and added to the debt"""
    new_payment = payment("pay_1", sample_debt.id, "300", datetime(2024, 2, 1))

    update = apply_payment([sample_debt], [], new_payment)

    assert update.outcome is LedgerOutcome.APPLIED
    assert update.debts[0].paid_value == Decimal("600")
    assert update.payments == (new_payment,)


def test_apply_payment_leaves_inputs_untouched(sample_debt, sample_payment):
    """Test a new snapshot is returned instead of mutating the old one"""
    debts = [sample_debt]
    payments = [sample_payment]

    apply_payment(debts, payments, payment("pay_1", sample_debt.id, "50", datetime(2024, 2, 1)))

    assert debts == [sample_debt]
    assert payments == [sample_payment]
    assert sample_debt.paid_value == Decimal("300")


def test_apply_payment_allows_overpayment(sample_debt):
    """Test paid_value may exceed total_value"""
    update = apply_payment([sample_debt], [], payment("pay_big", sample_debt.id, "1000", datetime(2024, 2, 1)))

    assert update.debts[0].paid_value == Decimal("1300")
    assert compute_debt_stats(update.debts).total_remaining == Decimal("-100")


def test_apply_payment_unknown_debt(sample_debt):
    """Test payment for a missing debt is kept but reported"""
    orphan = payment("pay_x", "missing", "100", datetime(2024, 2, 1))

    update = apply_payment([sample_debt], [], orphan)

    assert update.outcome is LedgerOutcome.DEBT_NOT_FOUND
    assert update.debts == (sample_debt,)
    assert update.payments == (orphan,)


def test_retract_payment_decreases_paid_value(sample_debt, sample_payment):
    """Test retraction subtracts the payment value"""
    update = retract_payment([sample_debt], [sample_payment], sample_payment.id)

    assert update.outcome is LedgerOutcome.APPLIED
    assert update.debts[0].paid_value == Decimal("200")
    assert update.payments == ()


def test_retract_payment_floors_at_zero(sample_debt):
    """Test paid_value never goes negative"""
    debt = replace(sample_debt, paid_value=Decimal("50"))
    big = payment("pay_big", debt.id, "120", datetime(2024, 2, 1))

    update = retract_payment([debt], [big], big.id)

    assert update.debts[0].paid_value == 0


def test_retract_unknown_payment_is_noop(sample_debt, sample_payment):
    """Test unknown payment id changes nothing"""
    update = retract_payment([sample_debt], [sample_payment], "nope")

    assert update.outcome is LedgerOutcome.PAYMENT_NOT_FOUND
    assert update.debts == (sample_debt,)
    assert update.payments == (sample_payment,)


def test_retract_payment_of_missing_debt(sample_payment):
    """Test a dangling payment is dropped and reported"""
    update = retract_payment([], [sample_payment], sample_payment.id)

    assert update.outcome is LedgerOutcome.DEBT_NOT_FOUND
    assert update.payments == ()


@pytest.mark.parametrize("value", ["0.01", "100", "299.99", "5000"])
def test_apply_then_retract_restores_paid_value(sample_debt, value):
    """Test applying and retracting the same payment is a round trip"""
    new_payment = payment("pay_rt", sample_debt.id, value, datetime(2024, 2, 1))

    applied = apply_payment([sample_debt], [], new_payment)
    retracted = retract_payment(applied.debts, applied.payments, new_payment.id)

    assert retracted.debts[0].paid_value == sample_debt.paid_value
    assert retracted.payments == ()


def test_ledger_walkthrough(sample_debt, sample_payment):
    """Test 1200 debt: 300 paid, +300, -100 → 500 paid, 700 remaining"""
    update = apply_payment([sample_debt], [sample_payment], payment("pay_2", sample_debt.id, "300", datetime(2024, 2, 1)))
    assert update.debts[0].paid_value == Decimal("600")

    update = retract_payment(update.debts, update.payments, sample_payment.id)
    assert update.debts[0].paid_value == Decimal("500")

    stats = compute_debt_stats(update.debts)
    assert stats.total_debt == Decimal("1200")
    assert stats.total_paid == Decimal("500")
    assert stats.total_remaining == Decimal("700")
    assert float(stats.overall_progress) == pytest.approx(41.67, abs=0.01)
    assert stats.count == 1


def test_debt_stats_empty():
    """Test no debts means zero progress instead of a division error"""
    stats = compute_debt_stats([])

    assert stats.total_debt == 0
    assert stats.overall_progress == 0
    assert stats.count == 0


def test_debt_stats_progress_bounded(sample_debt):
    """Test progress stays within 0-100 when nothing is overpaid"""
    debts = [
        sample_debt,
        replace(sample_debt, id="d2", total_value=Decimal("500"), paid_value=Decimal("500")),
        replace(sample_debt, id="d3", total_value=Decimal("800"), paid_value=Decimal("0")),
    ]

    stats = compute_debt_stats(debts)

    assert 0 <= stats.overall_progress <= 100
    assert stats.total_remaining == Decimal("1700")


def test_list_payments_for_debt_newest_first(sample_debt):
    """Test filtering by debt and ordering by creation time"""
    payments = [
        payment("a", sample_debt.id, "10", datetime(2024, 1, 1)),
        payment("b", "other", "10", datetime(2024, 3, 1)),
        payment("c", sample_debt.id, "10", datetime(2024, 2, 1)),
    ]

    result = list_payments_for_debt(payments, sample_debt.id)

    assert [p.id for p in result] == ["c", "a"]
    assert [p.id for p in payments] == ["a", "b", "c"]


def test_debt_progress(sample_debt):
    """Test per-debt progress and remaining months"""
    progress = compute_debt_progress(sample_debt)

    assert progress.remaining_value == Decimal("900")
    assert progress.progress == Decimal("25")
    assert progress.estimated_months_remaining == 9


def test_debt_progress_clamped_when_overpaid(sample_debt):
    """Test per-debt view caps progress at 100 and remaining at 0"""
    progress = compute_debt_progress(replace(sample_debt, paid_value=Decimal("1500")))

    assert progress.progress == 100
    assert progress.remaining_value == 0
    assert progress.estimated_months_remaining == 0


def test_expected_end_month(sample_debt):
    """Test 9 months remaining counted from the current month"""
    assert expected_end_month(sample_debt, today=date(2024, 6, 10)) == (2025, 3)


def test_expected_end_month_paid_off(sample_debt):
    """Test a paid-off debt ends in its start month"""
    debt = replace(sample_debt, paid_value=Decimal("1200"))

    assert expected_end_month(debt, today=date(2024, 6, 10)) == (2024, 1)


def test_progress_buckets(sample_debt):
    """Test sorting and nearly-paid / paid classification"""
    nearly = replace(sample_debt, id="nearly", paid_value=Decimal("1000"))
    done = replace(sample_debt, id="done", paid_value=Decimal("1200"))
    debts = [done, sample_debt, nearly]

    assert [d.id for d, _ in sort_debts_by_progress(debts)] == ["debt_car", "nearly", "done"]
    assert [d.id for d in nearly_paid_debts(debts)] == ["nearly"]
    assert [d.id for d in paid_debts(debts)] == ["done"]
    assert [d.id for d in nearly_paid_debts(debts, threshold=20)] == ["debt_car", "nearly"]

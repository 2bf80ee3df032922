"""/v1/debts and /v1/payments - debt ledger endpoints"""

import logging
import uuid
from datetime import date, datetime, timezone
from typing import Optional, Sequence

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from financex.api.v1.schemas import (
    DebtCreate,
    DebtListResponse,
    DebtResponse,
    DebtStatsResponse,
    LedgerChangeResponse,
    PaymentCreate,
    PaymentListResponse,
    PaymentResponse,
)
from financex.api.dependencies import get_debt_ledger_repository, get_request_id
from financex.config import settings
from financex.infrastructure.database.session import get_db
from financex.infrastructure.database.repositories import DebtLedgerRepository
from financex.domain.models import Debt, DebtPayment, LedgerOutcome
from financex.domain.exceptions import DebtNotFoundError, PaymentNotFoundError
from financex.domain.debts import (
    apply_payment,
    compute_debt_progress,
    compute_debt_stats,
    expected_end_month,
    list_payments_for_debt,
    nearly_paid_debts,
    paid_debts,
    retract_payment,
)
from financex.infrastructure.observability.metrics import record_ledger_change
from financex.infrastructure.observability.logging import log_ledger_change

router = APIRouter()


def to_debt_response(debt: Debt, today: Optional[date] = None) -> DebtResponse:
    progress = compute_debt_progress(debt)
    end_year, end_month = expected_end_month(debt, today)
    return DebtResponse(
        id=debt.id,
        name=debt.name,
        total_value=float(debt.total_value),
        monthly_installment=float(debt.monthly_installment),
        paid_value=float(debt.paid_value),
        remaining_value=float(progress.remaining_value),
        progress=float(progress.progress),
        estimated_months_remaining=progress.estimated_months_remaining,
        expected_end_month=f"{end_year:04d}-{end_month:02d}",
        start_date=debt.start_date,
        created_at=debt.created_at,
    )


def to_payment_response(payment: DebtPayment) -> PaymentResponse:
    return PaymentResponse(
        id=payment.id,
        debt_id=payment.debt_id,
        value=float(payment.value),
        date=payment.date,
        created_at=payment.created_at,
    )


def _paid_value(debts: Sequence[Debt], debt_id: str) -> float:
    return float(next(d.paid_value for d in debts if d.id == debt_id))


@router.get("/debts", response_model=DebtListResponse)
def list_debts(
    user_id: str = Query(..., description="User identifier"),
    repo: DebtLedgerRepository = Depends(get_debt_ledger_repository),
):
    """List debts with payoff progress, flagging nearly paid and paid ones"""
    debts, _ = repo.load(user_id)
    return DebtListResponse(
        user_id=user_id,
        debts=[to_debt_response(d) for d in debts],
        nearly_paid=[d.id for d in nearly_paid_debts(debts, settings.nearly_paid_threshold)],
        paid=[d.id for d in paid_debts(debts)],
    )


@router.post("/debts", response_model=DebtResponse, status_code=201)
def create_debt(
    body: DebtCreate,
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
    repo: DebtLedgerRepository = Depends(get_debt_ledger_repository),
):
    debts, payments = repo.load(user_id)
    debt = Debt(
        id=str(uuid.uuid4()),
        name=body.name,
        total_value=body.total_value,
        monthly_installment=body.monthly_installment,
        paid_value=body.paid_value,
        start_date=body.start_date,
        created_at=datetime.now(timezone.utc),
    )
    repo.save(user_id, debts + [debt], payments)
    db.commit()
    return to_debt_response(debt)


@router.get("/debts/stats", response_model=DebtStatsResponse)
def get_debt_stats(
    user_id: str = Query(..., description="User identifier"),
    repo: DebtLedgerRepository = Depends(get_debt_ledger_repository),
):
    debts, _ = repo.load(user_id)
    stats = compute_debt_stats(debts)
    return DebtStatsResponse(
        user_id=user_id,
        total_debt=float(stats.total_debt),
        total_paid=float(stats.total_paid),
        total_remaining=float(stats.total_remaining),
        overall_progress=float(stats.overall_progress),
        count=stats.count,
    )


@router.delete("/debts/{debt_id}", status_code=204)
def delete_debt(
    debt_id: str,
    request: Request,
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
    repo: DebtLedgerRepository = Depends(get_debt_ledger_repository),
):
    """Delete a debt together with its payments"""
    try:
        repo.delete_debt(user_id, debt_id)
        db.commit()
    except DebtNotFoundError as e:
        db.rollback()
        logging.warning(f"Debt not found: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=404, detail="Debt not found")


@router.get("/debts/{debt_id}/payments", response_model=PaymentListResponse)
def list_debt_payments(
    debt_id: str,
    user_id: str = Query(..., description="User identifier"),
    repo: DebtLedgerRepository = Depends(get_debt_ledger_repository),
):
    """Payments of one debt, most recent first"""
    debts, payments = repo.load(user_id)
    if not any(d.id == debt_id for d in debts):
        raise HTTPException(status_code=404, detail="Debt not found")

    return PaymentListResponse(
        debt_id=debt_id,
        payments=[to_payment_response(p) for p in list_payments_for_debt(payments, debt_id)],
    )


@router.post("/debts/{debt_id}/payments", response_model=LedgerChangeResponse, status_code=201)
def create_payment(
    debt_id: str,
    body: PaymentCreate,
    request: Request,
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
    repo: DebtLedgerRepository = Depends(get_debt_ledger_repository),
):
    """
    Apply a payment to a debt.

    Flow:
    1. Load the ledger snapshot
    2. Apply the payment (paid_value grows, overpayment allowed)
    3. Refuse payments for unknown debts; otherwise persist the new snapshot
    """
    request_id = get_request_id(request)
    payment = DebtPayment(
        id=str(uuid.uuid4()),
        debt_id=debt_id,
        value=body.value,
        date=body.date,
        created_at=datetime.now(timezone.utc),
    )

    try:
        debts, payments = repo.load(user_id)
        update = apply_payment(debts, payments, payment)

        record_ledger_change("apply", update.outcome.value)
        log_ledger_change(request_id, user_id, "apply", update.outcome.value, debt_id, payment.id)

        if update.outcome is LedgerOutcome.DEBT_NOT_FOUND:
            raise DebtNotFoundError(f"Debt {debt_id} not found")

        repo.save(user_id, update.debts, update.payments)
        db.commit()

        return LedgerChangeResponse(
            payment=to_payment_response(payment),
            debt_paid_value=_paid_value(update.debts, debt_id),
            outcome=update.outcome.value,
        )

    except DebtNotFoundError as e:
        db.rollback()
        logging.warning(f"Payment refused: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail="Debt not found")

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")


@router.delete("/payments/{payment_id}", response_model=LedgerChangeResponse)
def delete_payment(
    payment_id: str,
    request: Request,
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
    repo: DebtLedgerRepository = Depends(get_debt_ledger_repository),
):
    """Retract a payment; the debt's paid_value shrinks by its value, never below zero"""
    request_id = get_request_id(request)

    try:
        debts, payments = repo.load(user_id)
        removed = next((p for p in payments if p.id == payment_id), None)
        update = retract_payment(debts, payments, payment_id)

        record_ledger_change("retract", update.outcome.value)
        log_ledger_change(
            request_id,
            user_id,
            "retract",
            update.outcome.value,
            removed.debt_id if removed else None,
            payment_id,
        )

        if update.outcome is LedgerOutcome.PAYMENT_NOT_FOUND:
            raise PaymentNotFoundError(f"Payment {payment_id} not found")
        if update.outcome is LedgerOutcome.DEBT_NOT_FOUND:
            raise DebtNotFoundError(f"Debt {removed.debt_id} not found")

        repo.save(user_id, update.debts, update.payments)
        db.commit()

        return LedgerChangeResponse(
            payment=to_payment_response(removed),
            debt_paid_value=_paid_value(update.debts, removed.debt_id),
            outcome=update.outcome.value,
        )

    except PaymentNotFoundError as e:
        db.rollback()
        logging.warning(f"Retraction refused: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail="Payment not found")

    except DebtNotFoundError as e:
        db.rollback()
        logging.warning(f"Retraction refused: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail="Debt not found")

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

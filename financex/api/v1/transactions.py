"""/v1/transactions - record, list and summarize income and expenses"""

import logging
import uuid
from datetime import date, datetime, timezone
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from financex.api.v1.schemas import (
    CategoryAggregateSchema,
    MonthlyTotalsResponse,
    MonthlyTotalsSchema,
    TransactionCreate,
    TransactionResponse,
    TransactionSummaryResponse,
)
from financex.api.dependencies import get_request_id, get_transaction_repository
from financex.infrastructure.database.session import get_db
from financex.infrastructure.database.repositories import TransactionRepository
from financex.domain.models import EXPENSE, INCOME, Transaction
from financex.domain.exceptions import TransactionNotFoundError
from financex.domain.transactions import (
    aggregate_by_category,
    filter_by_category,
    filter_by_date_range,
    filter_by_type,
)
from financex.domain.balance import calculate_totals, monthly_data

router = APIRouter()


def to_response(transaction: Transaction) -> TransactionResponse:
    return TransactionResponse(
        id=transaction.id,
        type=transaction.type,
        category=transaction.category,
        date=transaction.date,
        description=transaction.description,
        value=float(transaction.value),
        created_at=transaction.created_at,
    )


@router.get("/transactions", response_model=List[TransactionResponse])
def list_transactions(
    user_id: str = Query(..., description="User identifier"),
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
    type: Optional[Literal["income", "expense"]] = Query(None),
    category: Optional[str] = Query(None),
    repo: TransactionRepository = Depends(get_transaction_repository),
):
    """List transactions, newest first, with optional date/type/category filters"""
    transactions = repo.load(user_id, start=start, end=end)
    if type:
        transactions = filter_by_type(transactions, type)
    if category:
        transactions = filter_by_category(transactions, category)
    return [to_response(t) for t in transactions]


@router.post("/transactions", response_model=TransactionResponse, status_code=201)
def create_transaction(
    body: TransactionCreate,
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
    repo: TransactionRepository = Depends(get_transaction_repository),
):
    transaction = Transaction(
        id=str(uuid.uuid4()),
        type=body.type,
        category=body.category,
        date=body.date,
        description=body.description,
        value=body.value,
        created_at=datetime.now(timezone.utc),
    )
    repo.add(user_id, transaction)
    db.commit()
    return to_response(transaction)


@router.delete("/transactions/{transaction_id}", status_code=204)
def delete_transaction(
    transaction_id: str,
    request: Request,
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
    repo: TransactionRepository = Depends(get_transaction_repository),
):
    try:
        repo.delete(user_id, transaction_id)
        db.commit()
    except TransactionNotFoundError as e:
        db.rollback()
        logging.warning(f"Transaction not found: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=404, detail="Transaction not found")


@router.get("/transactions/summary", response_model=TransactionSummaryResponse)
def summarize_transactions(
    user_id: str = Query(..., description="User identifier"),
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
    repo: TransactionRepository = Depends(get_transaction_repository),
):
    """
    Dashboard totals for a period.

    The balance accumulated before `start` is carried into the totals.
    """
    all_transactions = repo.load(user_id)
    period = filter_by_date_range(all_transactions, start, end)
    totals = calculate_totals(period, all_transactions, start)

    def aggregates(kind: str) -> List[CategoryAggregateSchema]:
        return [
            CategoryAggregateSchema(
                category=a.category,
                total=float(a.total),
                count=a.count,
                percentage=float(a.percentage),
            )
            for a in aggregate_by_category(period, kind)
        ]

    return TransactionSummaryResponse(
        user_id=user_id,
        income=float(totals.income),
        expenses=float(totals.expenses),
        previous_balance=float(totals.previous_balance),
        period_balance=float(totals.period_balance),
        balance=float(totals.balance),
        expenses_by_category=aggregates(EXPENSE),
        income_by_category=aggregates(INCOME),
    )


@router.get("/transactions/monthly", response_model=MonthlyTotalsResponse)
def monthly_totals(
    user_id: str = Query(..., description="User identifier"),
    year: int = Query(..., ge=1900, le=9999),
    repo: TransactionRepository = Depends(get_transaction_repository),
):
    """Income and expenses per month of a year, for charting"""
    months = monthly_data(repo.load(user_id), year)
    return MonthlyTotalsResponse(
        user_id=user_id,
        year=year,
        months=[
            MonthlyTotalsSchema(
                month=m.month,
                income=float(m.income),
                expenses=float(m.expenses),
                is_current_month=m.is_current_month,
            )
            for m in months
        ],
    )

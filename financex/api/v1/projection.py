"""/v1/projection - month-end balance projection"""

import time
from datetime import date
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from financex.api.v1.schemas import ProjectionResponse, SimpleProjectionRequest
from financex.api.dependencies import get_request_id, get_transaction_repository
from financex.infrastructure.database.repositories import TransactionRepository
from financex.domain.models import Projection
from financex.domain.projections import compute_month_projection, compute_simple_projection
from financex.infrastructure.observability.metrics import record_projection
from financex.infrastructure.observability.logging import log_projection
from financex.utils.date_utils import days_in_month

router = APIRouter()


def to_response(projection: Projection) -> ProjectionResponse:
    return ProjectionResponse(
        baseline_income=float(projection.baseline_income),
        extra_income=float(projection.extra_income),
        total_income=float(projection.total_income),
        total_expenses=float(projection.total_expenses),
        projected_monthly_expenses=float(projection.projected_monthly_expenses),
        projected_balance=float(projection.projected_balance),
        daily_average_expense=float(projection.daily_average_expense),
        days_until_negative=projection.days_until_negative,
        is_positive=projection.is_positive,
    )


@router.get("/projection", response_model=ProjectionResponse)
def get_month_projection(
    request: Request,
    user_id: str = Query(..., description="User identifier"),
    monthly_income: Decimal = Query(..., description="Baseline income expected this month; may be zero or negative"),
    as_of: Optional[date] = Query(None, description="Reference date (default: today)"),
    repo: TransactionRepository = Depends(get_transaction_repository),
):
    """
    Project the end-of-month balance from spending so far.

    Flow:
    1. Load the user's transactions for the reference month
    2. Extrapolate this month's average daily spend to the whole month
    3. Record metrics and log the outcome
    """
    start_time = time.time()
    reference = as_of or date.today()

    month_end = reference.replace(day=days_in_month(reference.year, reference.month))
    transactions = repo.load(user_id, start=reference.replace(day=1), end=month_end)
    projection = compute_month_projection(monthly_income, transactions, today=reference)

    duration_ms = (time.time() - start_time) * 1000
    record_projection(projection.is_positive)
    log_projection(
        get_request_id(request),
        user_id,
        projection.is_positive,
        projection.days_until_negative,
        len(transactions),
        duration_ms,
    )

    return to_response(projection)


@router.post("/projection/simple", response_model=ProjectionResponse)
def simple_projection(body: SimpleProjectionRequest):
    """What is left of the month's income after spending `expense_value` now"""
    return to_response(compute_simple_projection(body.monthly_income, body.expense_value))

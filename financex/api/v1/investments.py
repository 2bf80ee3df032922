"""GET /v1/investments/summary - invested totals and goal progress"""

from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, Query

from financex.api.v1.schemas import InvestmentSummaryResponse, InvestmentTypeSummary
from financex.api.dependencies import get_transaction_repository
from financex.infrastructure.database.repositories import TransactionRepository
from financex.domain.investments import (
    INVESTMENT_TYPES,
    aggregate_by_investment_type,
    goal_progress,
    investment_totals,
)

router = APIRouter()


@router.get("/investments/summary", response_model=InvestmentSummaryResponse)
def get_investment_summary(
    user_id: str = Query(..., description="User identifier"),
    target: Optional[Decimal] = Query(None, gt=0, description="Investment goal to measure progress against"),
    repo: TransactionRepository = Depends(get_transaction_repository),
):
    """
    Summarize deposits and withdrawals across all investment types.

    Returns:
        Totals, per-type net amounts (largest first, empty types omitted)
        and, when a target is given, progress toward it
    """
    transactions = repo.load(user_id)
    totals = investment_totals(transactions)

    by_type = [
        InvestmentTypeSummary(type=kind, name=INVESTMENT_TYPES[kind], value=float(value))
        for kind, value in sorted(
            aggregate_by_investment_type(transactions).items(),
            key=lambda item: item[1],
            reverse=True,
        )
        if value > 0
    ]

    response = InvestmentSummaryResponse(
        user_id=user_id,
        total_deposits=float(totals.total_deposits),
        total_withdrawals=float(totals.total_withdrawals),
        net_invested=float(totals.net_invested),
        by_type=by_type,
    )
    if target is not None:
        goal = goal_progress(totals.net_invested, target)
        response.goal_progress = float(goal.progress)
        response.goal_remaining = float(goal.remaining)
    return response

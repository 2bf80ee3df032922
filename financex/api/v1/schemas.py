"""Pydantic schemas for API request/response validation"""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, model_validator

from financex.domain.models import CATEGORIES_BY_TYPE


class TransactionCreate(BaseModel):
    """Request body for POST /v1/transactions"""

    type: Literal["income", "expense"]
    category: str = Field(..., min_length=1)
    date: date
    description: str = Field(..., min_length=1, max_length=200)
    value: Decimal = Field(..., gt=0, decimal_places=2, description="Amount; the sign comes from type")

    @model_validator(mode="after")
    def category_matches_type(self) -> "TransactionCreate":
        if self.category not in CATEGORIES_BY_TYPE[self.type]:
            raise ValueError(f"category '{self.category}' is not valid for {self.type}")
        return self


class TransactionResponse(BaseModel):
    id: str
    type: str
    category: str
    date: date
    description: str
    value: float
    created_at: datetime


class CategoryAggregateSchema(BaseModel):
    category: str
    total: float
    count: int
    percentage: float


class TransactionSummaryResponse(BaseModel):
    """Response for GET /v1/transactions/summary"""

    user_id: str
    income: float
    expenses: float
    previous_balance: float
    period_balance: float
    balance: float
    expenses_by_category: List[CategoryAggregateSchema]
    income_by_category: List[CategoryAggregateSchema]


class SimpleProjectionRequest(BaseModel):
    """Request body for POST /v1/projection/simple"""

    monthly_income: Decimal = Field(..., decimal_places=2)
    expense_value: Decimal = Field(..., gt=0, decimal_places=2)


class ProjectionResponse(BaseModel):
    """Month-end projection"""

    baseline_income: float
    extra_income: float
    total_income: float
    total_expenses: float
    projected_monthly_expenses: float
    projected_balance: float
    daily_average_expense: float
    days_until_negative: Optional[int] = None
    is_positive: bool


class DebtCreate(BaseModel):
    """Request body for POST /v1/debts"""

    name: str = Field(..., min_length=1, max_length=100)
    total_value: Decimal = Field(..., gt=0, decimal_places=2)
    monthly_installment: Decimal = Field(..., gt=0, decimal_places=2)
    paid_value: Decimal = Field(default=Decimal("0"), ge=0, decimal_places=2)
    start_date: date

    @model_validator(mode="after")
    def amounts_within_total(self) -> "DebtCreate":
        if self.monthly_installment > self.total_value:
            raise ValueError("monthly_installment cannot exceed total_value")
        if self.paid_value > self.total_value:
            raise ValueError("paid_value cannot exceed total_value")
        return self


class DebtResponse(BaseModel):
    id: str
    name: str
    total_value: float
    monthly_installment: float
    paid_value: float
    remaining_value: float
    progress: float
    estimated_months_remaining: int
    expected_end_month: str  # YYYY-MM
    start_date: date
    created_at: datetime


class DebtListResponse(BaseModel):
    """Response for GET /v1/debts"""

    user_id: str
    debts: List[DebtResponse]
    nearly_paid: List[str]
    paid: List[str]


class DebtStatsResponse(BaseModel):
    """Response for GET /v1/debts/stats"""

    user_id: str
    total_debt: float
    total_paid: float
    total_remaining: float
    overall_progress: float
    count: int


class PaymentCreate(BaseModel):
    """Request body for POST /v1/debts/{debt_id}/payments"""

    value: Decimal = Field(..., gt=0, decimal_places=2)
    date: date


class PaymentResponse(BaseModel):
    id: str
    debt_id: str
    value: float
    date: date
    created_at: datetime


class LedgerChangeResponse(BaseModel):
    """Result of applying or retracting a payment"""

    payment: PaymentResponse
    debt_paid_value: float
    outcome: str


class PaymentListResponse(BaseModel):
    debt_id: str
    payments: List[PaymentResponse]


class InvestmentTypeSummary(BaseModel):
    type: str
    name: str
    value: float


class InvestmentSummaryResponse(BaseModel):
    """Response for GET /v1/investments/summary"""

    user_id: str
    total_deposits: float
    total_withdrawals: float
    net_invested: float
    by_type: List[InvestmentTypeSummary]
    goal_progress: Optional[float] = None
    goal_remaining: Optional[float] = None


class MonthlyTotalsSchema(BaseModel):
    month: int
    income: float
    expenses: float
    is_current_month: bool


class MonthlyTotalsResponse(BaseModel):
    """Response for GET /v1/transactions/monthly"""

    user_id: str
    year: int
    months: List[MonthlyTotalsSchema]

"""Dependency injection for FastAPI endpoints"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from financex.infrastructure.database.session import get_db
from financex.infrastructure.database.repositories import TransactionRepository, DebtLedgerRepository


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_transaction_repository(db: Session = Depends(get_db)) -> TransactionRepository:
    return TransactionRepository(db)


def get_debt_ledger_repository(db: Session = Depends(get_db)) -> DebtLedgerRepository:
    return DebtLedgerRepository(db)

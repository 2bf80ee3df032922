"""Data access layer - maps ORM rows to domain snapshots and back"""

from datetime import date
from typing import List, Optional, Sequence, Tuple
from sqlalchemy.orm import Session
from financex.infrastructure.database.models import TransactionRecord, DebtRecord, DebtPaymentRecord
from financex.domain.models import Transaction, Debt, DebtPayment
from financex.domain.exceptions import TransactionNotFoundError, DebtNotFoundError


def _to_transaction(record: TransactionRecord) -> Transaction:
    return Transaction(
        id=record.id,
        type=record.type,
        category=record.category,
        date=record.date,
        description=record.description,
        value=record.value,
        created_at=record.created_at,
    )


def _to_debt(record: DebtRecord) -> Debt:
    return Debt(
        id=record.id,
        name=record.name,
        total_value=record.total_value,
        monthly_installment=record.monthly_installment,
        paid_value=record.paid_value,
        start_date=record.start_date,
        created_at=record.created_at,
    )


def _to_payment(record: DebtPaymentRecord) -> DebtPayment:
    return DebtPayment(
        id=record.id,
        debt_id=record.debt_id,
        value=record.value,
        date=record.date,
        created_at=record.created_at,
    )


class TransactionRepository:
    """Repository for a user's transactions"""

    def __init__(self, db: Session):
        self.db = db

    def load(self, user_id: str, start: Optional[date] = None, end: Optional[date] = None) -> List[Transaction]:
        """Fetch transactions, newest date first, optionally within [start, end]"""
        query = self.db.query(TransactionRecord).filter(TransactionRecord.user_id == user_id)
        if start is not None:
            query = query.filter(TransactionRecord.date >= start)
        if end is not None:
            query = query.filter(TransactionRecord.date <= end)
        records = query.order_by(TransactionRecord.date.desc(), TransactionRecord.created_at.desc()).all()
        return [_to_transaction(r) for r in records]

    def add(self, user_id: str, transaction: Transaction) -> Transaction:
        """Persist a new transaction"""
        self.db.add(
            TransactionRecord(
                id=transaction.id,
                user_id=user_id,
                type=transaction.type,
                category=transaction.category,
                date=transaction.date,
                description=transaction.description,
                value=transaction.value,
                created_at=transaction.created_at,
            )
        )
        self.db.flush()
        return transaction

    def delete(self, user_id: str, transaction_id: str) -> None:
        record = (
            self.db.query(TransactionRecord)
            .filter(TransactionRecord.id == transaction_id, TransactionRecord.user_id == user_id)
            .first()
        )
        if not record:
            raise TransactionNotFoundError(f"Transaction {transaction_id} not found")
        self.db.delete(record)
        self.db.flush()


class DebtLedgerRepository:
    """Repository for a user's debts and their payments"""

    def __init__(self, db: Session):
        self.db = db

    def _debt_records(self, user_id: str) -> List[DebtRecord]:
        return (
            self.db.query(DebtRecord)
            .filter(DebtRecord.user_id == user_id)
            .order_by(DebtRecord.created_at)
            .all()
        )

    def _payment_records(self, user_id: str) -> List[DebtPaymentRecord]:
        return (
            self.db.query(DebtPaymentRecord)
            .join(DebtRecord)
            .filter(DebtRecord.user_id == user_id)
            .all()
        )

    def load(self, user_id: str) -> Tuple[List[Debt], List[DebtPayment]]:
        """Fetch the user's debt ledger snapshot"""
        debts = [_to_debt(r) for r in self._debt_records(user_id)]
        payments = [_to_payment(r) for r in self._payment_records(user_id)]
        return debts, payments

    def save(self, user_id: str, debts: Sequence[Debt], payments: Sequence[DebtPayment]) -> None:
        """
        Make the stored ledger match the given snapshot.

        Debts are upserted, payments are inserted or deleted (they are
        immutable), and anything absent from the snapshot is removed.
        """
        debt_records = {r.id: r for r in self._debt_records(user_id)}
        payment_records = {r.id: r for r in self._payment_records(user_id)}

        for debt in debts:
            record = debt_records.get(debt.id)
            if record is None:
                record = DebtRecord(id=debt.id, user_id=user_id, created_at=debt.created_at)
                self.db.add(record)
            record.name = debt.name
            record.total_value = debt.total_value
            record.monthly_installment = debt.monthly_installment
            record.paid_value = debt.paid_value
            record.start_date = debt.start_date

        kept_payments = {p.id for p in payments}
        for payment_id, record in payment_records.items():
            if payment_id not in kept_payments:
                self.db.delete(record)

        for payment in payments:
            if payment.id not in payment_records:
                self.db.add(
                    DebtPaymentRecord(
                        id=payment.id,
                        debt_id=payment.debt_id,
                        value=payment.value,
                        date=payment.date,
                        created_at=payment.created_at,
                    )
                )

        kept_debts = {d.id for d in debts}
        for debt_id, record in debt_records.items():
            if debt_id not in kept_debts:
                self.db.delete(record)  # Payments go with it

        self.db.flush()

    def delete_debt(self, user_id: str, debt_id: str) -> None:
        record = (
            self.db.query(DebtRecord)
            .filter(DebtRecord.id == debt_id, DebtRecord.user_id == user_id)
            .first()
        )
        if not record:
            raise DebtNotFoundError(f"Debt {debt_id} not found")
        self.db.delete(record)
        self.db.flush()

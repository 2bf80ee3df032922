"""SQLAlchemy ORM models for transactions and the debt ledger"""

import uuid
from sqlalchemy import Column, String, Numeric, DateTime, Date, ForeignKey, Text
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


def new_id() -> str:
    return str(uuid.uuid4())


class TransactionRecord(Base):
    """Income or expense entry"""

    __tablename__ = "finance_transaction"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(Text, nullable=False, index=True)
    type = Column(String(16), nullable=False)
    category = Column(String(32), nullable=False)
    date = Column(Date, nullable=False, index=True)
    description = Column(String(200), nullable=False)
    value = Column(Numeric(14, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class DebtRecord(Base):
    """Debt being paid down; paid_value caches the sum of its payments"""

    __tablename__ = "finance_debt"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(Text, nullable=False, index=True)
    name = Column(String(100), nullable=False)
    total_value = Column(Numeric(14, 2), nullable=False)
    monthly_installment = Column(Numeric(14, 2), nullable=False)
    paid_value = Column(Numeric(14, 2), nullable=False, default=0)
    start_date = Column(Date, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    payments = relationship("DebtPaymentRecord", back_populates="debt", cascade="all, delete-orphan")


class DebtPaymentRecord(Base):
    """Payment applied to a debt"""

    __tablename__ = "finance_debt_payment"

    id = Column(String(36), primary_key=True, default=new_id)
    debt_id = Column(String(36), ForeignKey("finance_debt.id", ondelete="CASCADE"), nullable=False, index=True)
    value = Column(Numeric(14, 2), nullable=False)
    date = Column(Date, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    debt = relationship("DebtRecord", back_populates="payments")

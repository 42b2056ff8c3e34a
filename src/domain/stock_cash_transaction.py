"""Stock Cash Transaction Domain Entity

Immutable append-only audit trail of every cash movement on a stock bucket.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import ForeignKey, String
from src.domain.base import BaseModel, BigIntegerId, id_column, money_column


class CashTransactionType(str, Enum):
    """Direction of a bucket cash movement"""
    CREDIT = "credit"   # Cash received (purchase, loan repayment, refund, deposit)
    DEBIT = "debit"     # Cash disbursed (payment, purchase reversal)


class CashReferenceType(str, Enum):
    PURCHASE_INPUT = "purchase_input"
    LOAN = "loan"
    PAYMENT = "payment"
    DEPOSIT = "deposit"


class StockCashTransaction(BaseModel, table=True):
    """
    Stock Cash Transaction - one credit or debit on a bucket

    Domain Rules:
    - Transactions are immutable (append-only)
    - amount is always positive; transaction_type gives the direction
    - balance_before/balance_after snapshot the bucket around the movement
    - Sum of credits minus sum of debits equals the bucket's cash
    """

    __tablename__ = "stock_cash_transactions"
    __table_args__ = (
        Index("ix_stock_cash_transactions_reference", "reference_type", "reference_id"),
    )

    id: int = Field(sa_column=id_column())

    bucket_id: int = Field(
        sa_column=Column(BigIntegerId, ForeignKey("stock_buckets.id", ondelete="CASCADE"), nullable=False, index=True),
        description="Foreign key to StockBucket"
    )

    transaction_type: CashTransactionType = Field(description="credit or debit")

    amount: Decimal = Field(sa_column=money_column(), description="Amount moved (> 0)")

    balance_before: Decimal = Field(sa_column=money_column())

    balance_after: Decimal = Field(sa_column=money_column())

    reference_type: Optional[str] = Field(
        default=None,
        sa_column=Column(String(50), nullable=True),
        description="Type of record that caused the movement"
    )

    reference_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
    )

    created_at: datetime = Field(default_factory=datetime.utcnow)

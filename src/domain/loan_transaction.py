"""Loan Transaction Domain Entity

Append-only record of a repayment applied to a loan.
"""

from datetime import datetime
from decimal import Decimal
from sqlmodel import Field, Column
from sqlalchemy import ForeignKey
from src.domain.base import BaseModel, BigIntegerId, id_column, money_column


class LoanTransaction(BaseModel, table=True):
    """
    Loan Transaction - repayment allocation against a loan

    Domain Rules:
    - Immutable once written
    - Sum of amount_paid over a loan never exceeds its principal
    - amount_remaining_to_pay snapshots the loan right after the repayment
    """

    __tablename__ = "loan_transactions"

    id: int = Field(sa_column=id_column())

    loan_id: int = Field(
        sa_column=Column(BigIntegerId, ForeignKey("loans.id", ondelete="CASCADE"), nullable=False, index=True),
    )

    amount_paid: Decimal = Field(sa_column=money_column(), description="Principal repaid")

    interest_paid: Decimal = Field(default=Decimal("0.00"), sa_column=money_column())

    amount_remaining_to_pay: Decimal = Field(sa_column=money_column())

    created_at: datetime = Field(default_factory=datetime.utcnow)

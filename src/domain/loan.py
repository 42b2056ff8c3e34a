"""Loan Domain Entity

Credit extended to a member for the unpaid part of a purchase.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import CheckConstraint, ForeignKey
from src.domain.base import BaseModel, BigIntegerId, id_column, money_column, quantity_column
from src.domain.money import percent_of


class LoanStatus(str, Enum):
    PENDING = "pending"
    REPAID = "repaid"


class Loan(BaseModel, table=True):
    """
    Loan - Outstanding balance of a purchase

    Domain Rules:
    - Exists iff the originating purchase has amount_remaining > 0
    - amount_owed mirrors the purchase's amount_remaining while pending
    - Interest applies to amount_owed only while a balance remains
    - Becomes repaid only through repayment, which zeroes amount_owed
    """

    __tablename__ = "loans"
    __table_args__ = (
        CheckConstraint("amount_owed >= 0", name="amount_owed_non_negative"),
    )

    id: int = Field(sa_column=id_column())

    purchase_input_id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntegerId, ForeignKey("purchase_inputs.id"), nullable=True, index=True),
        description="Originating purchase"
    )

    user_id: str = Field(index=True)

    product_id: str = Field(index=True)

    season_id: str = Field(index=True)

    quantity: Decimal = Field(sa_column=quantity_column())

    principal: Decimal = Field(sa_column=money_column(), description="Amount lent")

    amount_owed: Decimal = Field(sa_column=money_column(), description="Principal still owed")

    interest: Decimal = Field(
        default=Decimal("0.00"),
        sa_column=money_column(),
        description="Interest percent"
    )

    status: LoanStatus = Field(default=LoanStatus.PENDING)

    created_at: datetime = Field(default_factory=datetime.utcnow)

    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def interest_amount(self) -> Decimal:
        """Interest accrued on the balance still owed"""
        if self.status == LoanStatus.REPAID or not self.amount_owed:
            return Decimal("0.00")
        return percent_of(self.amount_owed, self.interest or Decimal("0"))

    @property
    def total_due(self) -> Decimal:
        return self.amount_owed + self.interest_amount

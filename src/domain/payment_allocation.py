"""Payment Allocation Domain Entity

Portion of a production's deductions applied to one fee or loan of the member.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from sqlmodel import Field, Column
from sqlalchemy import CheckConstraint, ForeignKey
from src.domain.base import BaseModel, BigIntegerId, id_column, money_column


class ObligationType(str, Enum):
    FEE = "fee"
    LOAN = "loan"


class PaymentAllocation(BaseModel, table=True):
    """
    Payment Allocation - deduction applied to an obligation

    Domain Rules:
    - Written when a payment withholds a deduction, removed when the payment is
    - Allocations of one obligation never exceed its original amount
    - amount_remaining snapshots the obligation right after the allocation
    """

    __tablename__ = "payment_allocations"
    __table_args__ = (
        CheckConstraint("amount > 0", name="allocation_amount_positive"),
    )

    id: int = Field(sa_column=id_column())

    payment_id: int = Field(
        sa_column=Column(BigIntegerId, ForeignKey("payments.id", ondelete="CASCADE"), nullable=False, index=True),
    )

    obligation_type: ObligationType = Field(index=True)

    obligation_id: int = Field(index=True, description="Fee or loan id")

    amount: Decimal = Field(sa_column=money_column())

    amount_remaining: Decimal = Field(sa_column=money_column(), description="Left on the obligation afterwards")

    created_at: datetime = Field(default_factory=datetime.utcnow)

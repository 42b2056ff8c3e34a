"""Payment Transaction Domain Entity

Append-only allocation record for a payment: what was applied and what was
left to pay at that moment.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from sqlmodel import Field, Column
from sqlalchemy import ForeignKey
from src.domain.base import BaseModel, BigIntegerId, id_column, money_column


class PaymentTransactionType(str, Enum):
    SETTLE = "settle"   # New cash disbursed
    ADJUST = "adjust"   # Signed correction from a payment update


class PaymentTransaction(BaseModel, table=True):
    __tablename__ = "payment_transactions"

    id: int = Field(sa_column=id_column())

    payment_id: int = Field(
        sa_column=Column(BigIntegerId, ForeignKey("payments.id", ondelete="CASCADE"), nullable=False, index=True),
    )

    transaction_type: PaymentTransactionType = Field(default=PaymentTransactionType.SETTLE)

    amount_paid: Decimal = Field(sa_column=money_column(), description="Signed amount applied")

    amount_remaining_to_pay: Decimal = Field(sa_column=money_column())

    created_at: datetime = Field(default_factory=datetime.utcnow)

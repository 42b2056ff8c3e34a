"""Payment Domain Entity

Cash disbursed to a member against the value of a production.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from sqlmodel import Field, Column
from sqlalchemy import ForeignKey
from src.domain.base import BaseModel, BigIntegerId, id_column, money_column


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PARTIAL = "partial"
    PAID = "paid"


class Payment(BaseModel, table=True):
    """
    Payment - Settlement of a production

    Domain Rules:
    - One payment per production; later settlements top it up
    - amount_due = gross_amount - total_deductions, snapshot at settlement
    - amount_remaining_to_pay = amount_due - amount_paid
    - Every change debits or credits the production's stock bucket by the
      signed difference only
    """

    __tablename__ = "payments"

    id: int = Field(sa_column=id_column())

    production_id: int = Field(
        sa_column=Column(BigIntegerId, ForeignKey("productions.id"), nullable=False, unique=True),
    )

    user_id: str = Field(index=True)

    season_id: str = Field(index=True)

    product_id: str = Field(index=True)

    gross_amount: Decimal = Field(sa_column=money_column(), description="Production value")

    total_deductions: Decimal = Field(sa_column=money_column(), description="Fees + loans + previous remaining")

    amount_due: Decimal = Field(sa_column=money_column(), description="Net payable when settled")

    amount_paid: Decimal = Field(sa_column=money_column())

    amount_remaining_to_pay: Decimal = Field(sa_column=money_column())

    status: PaymentStatus = Field(default=PaymentStatus.PENDING)

    created_at: datetime = Field(default_factory=datetime.utcnow)

    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": 1,
                "production_id": 7,
                "user_id": "member_42",
                "season_id": "2024A",
                "product_id": "maize",
                "gross_amount": "1000.00",
                "total_deductions": "250.00",
                "amount_due": "750.00",
                "amount_paid": "750.00",
                "amount_remaining_to_pay": "0.00",
                "status": "paid",
            }
        }

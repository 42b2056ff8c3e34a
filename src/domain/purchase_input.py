"""Purchase Input Domain Entity

A member's acquisition of a product (seed, fertilizer, ...) from the
cooperative. Any unpaid balance becomes a Loan.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from sqlmodel import Field
from sqlalchemy import CheckConstraint
from src.domain.base import BaseModel, id_column, money_column, quantity_column


class PurchaseStatus(str, Enum):
    """Purchase settlement status"""
    PAID = "paid"   # Fully paid in cash
    LOAN = "loan"   # Balance carried as a loan


class PurchaseInput(BaseModel, table=True):
    """
    Purchase Input - Product bought by a member

    Domain Rules:
    - total_price = quantity * unit_price
    - amount_remaining = total_price - amount_paid, never negative
    - status is loan iff amount_remaining > 0
    - Only amount_paid/status change after creation through loan repayment;
      explicit updates recompute every total from scratch
    """

    __tablename__ = "purchase_inputs"
    __table_args__ = (
        CheckConstraint("amount_paid >= 0", name="amount_paid_non_negative"),
        CheckConstraint("amount_remaining >= 0", name="amount_remaining_non_negative"),
    )

    id: int = Field(sa_column=id_column())

    user_id: str = Field(index=True)

    product_id: str = Field(index=True)

    season_id: str = Field(index=True)

    quantity: Decimal = Field(sa_column=quantity_column())

    unit_price: Decimal = Field(sa_column=money_column())

    total_price: Decimal = Field(sa_column=money_column(), description="quantity * unit_price")

    amount_paid: Decimal = Field(sa_column=money_column(), description="Cash received")

    amount_remaining: Decimal = Field(sa_column=money_column(), description="total_price - amount_paid")

    status: PurchaseStatus = Field(description="paid or loan")

    interest: Decimal = Field(
        default=Decimal("0.00"),
        sa_column=money_column(),
        description="Interest percent applied to the remaining balance"
    )

    created_at: datetime = Field(default_factory=datetime.utcnow)

    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": 1,
                "user_id": "member_42",
                "product_id": "fertilizer",
                "season_id": "2024A",
                "quantity": "10.000",
                "unit_price": "100.00",
                "total_price": "1000.00",
                "amount_paid": "600.00",
                "amount_remaining": "400.00",
                "status": "loan",
                "interest": "5.00",
            }
        }

"""Production Domain Entity

A harvest delivery by a member. Its value is what a payment settles against.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from sqlmodel import Field
from src.domain.base import BaseModel, id_column, money_column, quantity_column


class ProductionPaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"


class Production(BaseModel, table=True):
    """
    Production - Harvest delivered by a member for a product and season

    Domain Rules:
    - total_price = quantity * unit_price
    - payment_status becomes paid once a payment covers its amount due
    """

    __tablename__ = "productions"

    id: int = Field(sa_column=id_column())

    user_id: str = Field(index=True, description="Member who delivered the harvest")

    product_id: str = Field(index=True)

    season_id: str = Field(index=True)

    quantity: Decimal = Field(sa_column=quantity_column())

    unit_price: Decimal = Field(sa_column=money_column())

    total_price: Decimal = Field(
        sa_column=money_column(),
        description="Gross value of the delivery (quantity * unit_price)"
    )

    payment_status: ProductionPaymentStatus = Field(default=ProductionPaymentStatus.PENDING)

    created_at: datetime = Field(default_factory=datetime.utcnow)

    updated_at: datetime = Field(default_factory=datetime.utcnow)

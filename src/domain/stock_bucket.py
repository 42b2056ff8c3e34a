"""Stock Bucket Domain Entity

Cash and inventory balance for one (product, season) pair. The bucket is the
single point of truth for how much cash is available to disburse.
"""

from datetime import datetime
from decimal import Decimal
from typing import NamedTuple
from sqlmodel import Field
from sqlalchemy import CheckConstraint, UniqueConstraint
from src.domain.base import BaseModel, id_column, money_column, quantity_column


class BucketKey(NamedTuple):
    product_id: str
    season_id: str

    def __str__(self) -> str:
        return f"{self.product_id}/{self.season_id}"


class StockBucket(BaseModel, table=True):
    """
    Stock Bucket - Cash balance per (product, season)

    Domain Rules:
    - Exactly one bucket per (product_id, season_id)
    - Cash must be non-negative
    - Cash changes only through the stock ledger, which records a
      StockCashTransaction for every movement
    - Created lazily on first purchase, production or provisioning
    """

    __tablename__ = "stock_buckets"
    __table_args__ = (
        UniqueConstraint("product_id", "season_id", name="uq_stock_bucket_product_season"),
        CheckConstraint("cash >= 0", name="cash_non_negative"),
    )

    id: int = Field(
        sa_column=id_column(),
        description="Unique bucket identifier (auto-increment)"
    )

    product_id: str = Field(index=True, description="Product identifier")

    season_id: str = Field(index=True, description="Season identifier")

    cash: Decimal = Field(
        sa_column=money_column(),
        description="Cash available to disburse (must be >= 0)"
    )

    quantity: Decimal = Field(
        default=Decimal("0"),
        sa_column=quantity_column(),
        description="Quantity held in stock"
    )

    total_price: Decimal = Field(
        default=Decimal("0"),
        sa_column=money_column(),
        description="Inventory value"
    )

    created_at: datetime = Field(default_factory=datetime.utcnow)

    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def key(self) -> BucketKey:
        return BucketKey(self.product_id, self.season_id)

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": 1,
                "product_id": "maize",
                "season_id": "2024A",
                "cash": "1000.00",
                "quantity": "120.000",
                "total_price": "36000.00",
                "created_at": "2024-01-01T00:00:00Z",
                "updated_at": "2024-01-01T00:00:00Z"
            }
        }

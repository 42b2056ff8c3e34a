"""Fee Domain Entity

Recurring member obligation (membership, service fee, ...). Fees are
maintained by the back office; settlement only reads them.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field
from src.domain.base import BaseModel, id_column, money_column


class FeeStatus(str, Enum):
    UNPAID = "unpaid"
    PARTIAL = "partial"
    PAID = "paid"


class Fee(BaseModel, table=True):
    __tablename__ = "fees"

    id: int = Field(sa_column=id_column())

    user_id: str = Field(index=True)

    season_id: Optional[str] = Field(default=None, index=True, description="None for non-seasonal fees")

    fee_type: str = Field(description="Fee type name")

    amount_owed: Decimal = Field(sa_column=money_column())

    amount_paid: Decimal = Field(default=Decimal("0.00"), sa_column=money_column())

    status: FeeStatus = Field(default=FeeStatus.UNPAID)

    paid_at: Optional[datetime] = Field(default=None)

    created_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def remaining_amount(self) -> Decimal:
        return max(self.amount_owed - self.amount_paid, Decimal("0.00"))

"""Request schemas for Settlement API

Pydantic models for validating incoming HTTP requests.
"""

from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, field_validator


def _max_cents(v: Optional[Decimal]) -> Optional[Decimal]:
    if v is not None and v.as_tuple().exponent < -2:
        raise ValueError("Amounts may have at most 2 decimal places")
    return v


class RecordPurchaseRequestSchema(BaseModel):
    """
    Request schema for recording a purchase

    Used for POST /purchases endpoint.
    """

    user_id: str = Field(..., min_length=1, description="Member identifier")

    product_id: str = Field(..., min_length=1, description="Product identifier")

    season_id: str = Field(..., min_length=1, description="Season identifier")

    quantity: Decimal = Field(..., gt=0, description="Quantity bought (must be > 0)")

    unit_price: Decimal = Field(..., gt=0, description="Price per unit (must be > 0)")

    amount_paid: Decimal = Field(
        ...,
        ge=0,
        description="Cash paid now; anything short of the total becomes a loan"
    )

    interest: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="Interest percent on the loan (defaults to 0)"
    )

    @field_validator('unit_price', 'amount_paid')
    @classmethod
    def validate_precision(cls, v):
        """Ensure currency amounts are whole cents"""
        return _max_cents(v)

    class Config:
        json_schema_extra = {
            "example": {
                "user_id": "member_42",
                "product_id": "fertilizer",
                "season_id": "2024A",
                "quantity": "10",
                "unit_price": "100.00",
                "amount_paid": "600.00",
                "interest": "5"
            }
        }


class UpdatePurchaseRequestSchema(BaseModel):
    """
    Request schema for changing a purchase

    Used for PATCH /purchases/{purchase_id}. Omitted fields are unchanged.
    """

    quantity: Optional[Decimal] = Field(default=None, gt=0)

    unit_price: Optional[Decimal] = Field(default=None, gt=0)

    amount_paid: Optional[Decimal] = Field(default=None, ge=0)

    interest: Optional[Decimal] = Field(default=None, ge=0)

    @field_validator('unit_price', 'amount_paid')
    @classmethod
    def validate_precision(cls, v):
        return _max_cents(v)


class RecordProductionRequestSchema(BaseModel):
    """Used for POST /productions endpoint."""

    user_id: str = Field(..., min_length=1)

    product_id: str = Field(..., min_length=1)

    season_id: str = Field(..., min_length=1)

    quantity: Decimal = Field(..., gt=0, description="Quantity delivered (must be > 0)")

    unit_price: Decimal = Field(..., gt=0, description="Price per unit (must be > 0)")


class SettlePaymentRequestSchema(BaseModel):
    """
    Request schema for settling a payment

    Used for POST /payments endpoint.
    """

    production_id: int = Field(..., description="Production being paid for")

    amount_paid: Decimal = Field(..., gt=0, description="Cash to pay out (must be > 0)")

    @field_validator('amount_paid')
    @classmethod
    def validate_amount(cls, v):
        return _max_cents(v)

    class Config:
        json_schema_extra = {
            "example": {
                "production_id": 7,
                "amount_paid": "700.00"
            }
        }


class UpdatePaymentRequestSchema(BaseModel):
    """Used for PATCH /payments/{payment_id}. amount_paid is the new total."""

    amount_paid: Decimal = Field(..., gt=0)

    @field_validator('amount_paid')
    @classmethod
    def validate_amount(cls, v):
        return _max_cents(v)


class ProvisionStockRequestSchema(BaseModel):
    """Used for POST /stock endpoint."""

    product_id: str = Field(..., min_length=1)

    season_id: str = Field(..., min_length=1)

    cash: Decimal = Field(default=Decimal("0"), ge=0, description="Opening cash deposit")


class RecordFeeRequestSchema(BaseModel):
    """Used for POST /fees endpoint."""

    user_id: str = Field(..., min_length=1)

    season_id: Optional[str] = Field(default=None, description="Omit for a non-seasonal fee")

    fee_type: str = Field(..., min_length=1)

    amount_owed: Decimal = Field(..., gt=0)

    @field_validator('amount_owed')
    @classmethod
    def validate_amount(cls, v):
        return _max_cents(v)

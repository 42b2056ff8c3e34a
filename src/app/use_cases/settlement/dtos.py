"""Data Transfer Objects for Settlement Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field


class RecordPurchaseCommandDTO(BaseModel):
    """
    Command DTO for recording a purchase

    Used as input to RecordPurchase use case.
    """

    user_id: str = Field(..., min_length=1, description="Member identifier")

    product_id: str = Field(..., min_length=1, description="Product identifier")

    season_id: str = Field(..., min_length=1, description="Season identifier")

    quantity: Decimal = Field(..., gt=0, description="Quantity bought (must be > 0)")

    unit_price: Decimal = Field(..., gt=0, description="Price per unit (must be > 0)")

    amount_paid: Decimal = Field(..., ge=0, description="Cash paid now (must be >= 0)")

    interest: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="Interest percent on the unpaid balance (defaults to 0)"
    )

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


class UpdatePurchaseCommandDTO(BaseModel):
    """
    Command DTO for changing an existing purchase

    Omitted fields keep their current value.
    """

    purchase_id: int = Field(..., description="Purchase identifier")

    quantity: Optional[Decimal] = Field(default=None, gt=0)

    unit_price: Optional[Decimal] = Field(default=None, gt=0)

    amount_paid: Optional[Decimal] = Field(default=None, ge=0)

    interest: Optional[Decimal] = Field(default=None, ge=0)


class PurchaseInputResponseDTO(BaseModel):
    """Response DTO for purchase operations"""

    id: int
    user_id: str
    product_id: str
    season_id: str
    quantity: Decimal
    unit_price: Decimal
    total_price: Decimal
    amount_paid: Decimal
    amount_remaining: Decimal
    status: str = Field(..., description="paid or loan")
    interest: Decimal
    loan_id: Optional[int] = Field(default=None, description="Loan created for the remaining balance")
    created_at: datetime
    updated_at: datetime


class DeletePurchaseResponseDTO(BaseModel):
    purchase_id: int
    reversed_amount: Decimal = Field(..., description="Cash taken back out of the stock bucket")
    loan_removed: bool


class LoanResponseDTO(BaseModel):
    """Response DTO for loan operations"""

    id: int
    purchase_input_id: Optional[int] = None
    user_id: str
    product_id: str
    season_id: str
    quantity: Decimal
    principal: Decimal
    amount_owed: Decimal
    interest: Decimal = Field(..., description="Interest percent")
    interest_amount: Decimal = Field(..., description="Interest accrued on amount_owed")
    status: str = Field(..., description="pending or repaid")
    created_at: datetime
    updated_at: datetime

    class Config:
        json_schema_extra = {
            "example": {
                "id": 3,
                "purchase_input_id": 12,
                "user_id": "member_42",
                "product_id": "fertilizer",
                "season_id": "2024A",
                "quantity": "10.000",
                "principal": "400.00",
                "amount_owed": "400.00",
                "interest": "5.00",
                "interest_amount": "20.00",
                "status": "pending",
                "created_at": "2024-01-01T00:00:00Z",
                "updated_at": "2024-01-01T00:00:00Z"
            }
        }


class OutstandingLoansResponseDTO(BaseModel):
    user_id: str
    season_id: Optional[str] = None
    loans: List[LoanResponseDTO]
    total_owed: Decimal


class RecordFeeCommandDTO(BaseModel):
    """
    Command DTO for recording a member fee

    Used as input to RecordFee use case.
    """

    user_id: str = Field(..., min_length=1, description="Member identifier")

    season_id: Optional[str] = Field(default=None, description="Season; omitted for non-seasonal fees")

    fee_type: str = Field(..., min_length=1, description="Fee type name")

    amount_owed: Decimal = Field(..., gt=0, description="Amount charged (must be > 0)")


class FeeDTO(BaseModel):
    id: int
    user_id: str
    fee_type: str
    season_id: Optional[str] = None
    amount_owed: Decimal
    amount_paid: Decimal
    remaining_amount: Decimal
    status: str


class PaymentResponseDTO(BaseModel):
    """Response DTO for payment operations"""

    id: int
    production_id: int
    user_id: str
    season_id: str
    product_id: str
    gross_amount: Decimal
    total_deductions: Decimal
    amount_due: Decimal
    amount_paid: Decimal
    amount_remaining_to_pay: Decimal
    status: str = Field(..., description="pending, partial or paid")
    created_at: datetime
    updated_at: datetime


class ObligationSummaryQueryDTO(BaseModel):
    user_id: str = Field(..., min_length=1)

    season_id: str = Field(..., min_length=1)

    production_id: int

    gross_amount: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="Override of the production value; defaults to its total price"
    )


class ObligationSummaryResponseDTO(BaseModel):
    """
    Response DTO for the obligation summary

    amount_due = production_total - fees_due - loans_due - previous_remaining.
    It is not clamped: a negative value means the member owes more than the
    production covers.
    """

    user_id: str
    season_id: str
    production_id: int
    production_total: Decimal
    fees_due: Decimal
    loans_due: Decimal
    previous_remaining: Decimal
    total_deductions: Decimal
    amount_due: Decimal
    already_paid: Decimal = Field(..., description="Paid so far against this production")
    already_allocated: Decimal = Field(
        default=Decimal("0.00"),
        description="Deductions this production's payment already applied to fees and loans"
    )
    fees: List[FeeDTO]
    loans: List[LoanResponseDTO]
    previous_payments: List[PaymentResponseDTO]

    class Config:
        json_schema_extra = {
            "example": {
                "user_id": "member_42",
                "season_id": "2024A",
                "production_id": 7,
                "production_total": "1000.00",
                "fees_due": "50.00",
                "loans_due": "200.00",
                "previous_remaining": "0.00",
                "total_deductions": "250.00",
                "amount_due": "750.00",
                "already_paid": "0.00",
                "already_allocated": "0.00",
                "fees": [],
                "loans": [],
                "previous_payments": []
            }
        }


class SettlePaymentCommandDTO(BaseModel):
    production_id: int = Field(..., description="Production being settled")

    amount_paid: Decimal = Field(..., gt=0, description="Cash to disburse (must be > 0)")


class UpdatePaymentCommandDTO(BaseModel):
    payment_id: int

    amount_paid: Decimal = Field(..., gt=0, description="New total amount paid (must be > 0)")


class DeletePaymentResponseDTO(BaseModel):
    payment_id: int
    refunded_amount: Decimal = Field(..., description="Cash returned to the stock bucket")
    released_amount: Decimal = Field(
        default=Decimal("0.00"),
        description="Deductions given back to the member's fees and loans"
    )


class RecordProductionCommandDTO(BaseModel):
    user_id: str = Field(..., min_length=1)
    product_id: str = Field(..., min_length=1)
    season_id: str = Field(..., min_length=1)
    quantity: Decimal = Field(..., gt=0)
    unit_price: Decimal = Field(..., gt=0)


class ProductionResponseDTO(BaseModel):
    id: int
    user_id: str
    product_id: str
    season_id: str
    quantity: Decimal
    unit_price: Decimal
    total_price: Decimal
    payment_status: str
    created_at: datetime


class ProvisionStockCommandDTO(BaseModel):
    """
    Command DTO for provisioning a stock bucket

    A positive cash amount is recorded as a deposit.
    """

    product_id: str = Field(..., min_length=1)
    season_id: str = Field(..., min_length=1)
    cash: Decimal = Field(default=Decimal("0"), ge=0, description="Cash deposited into the bucket")


class StockBalanceResponseDTO(BaseModel):
    """Response DTO for stock bucket balance"""

    bucket_id: int
    product_id: str
    season_id: str
    cash: Decimal
    quantity: Decimal
    total_price: Decimal
    last_updated: datetime


class SettlementDiscrepancyDTO(BaseModel):
    """One broken invariant found by reconciliation"""

    entity_type: str = Field(..., description="stock_bucket, purchase_input, loan, payment or fee")
    entity_id: int
    description: str
    expected: Optional[Decimal] = None
    actual: Optional[Decimal] = None


class ReconciliationResultDTO(BaseModel):
    total_buckets_checked: int
    total_purchases_checked: int
    total_loans_checked: int
    total_payments_checked: int
    total_fees_checked: int = 0
    discrepancies_found: int
    discrepancies: List[SettlementDiscrepancyDTO]
    reconciliation_time: datetime
    execution_time_ms: int

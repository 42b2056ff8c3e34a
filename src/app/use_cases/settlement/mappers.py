"""Entity to DTO conversions shared by settlement use cases"""

from typing import Optional
from src.domain.fee import Fee
from src.domain.loan import Loan
from src.domain.payment import Payment
from src.domain.production import Production
from src.domain.purchase_input import PurchaseInput
from src.domain.stock_bucket import StockBucket
from .dtos import (
    FeeDTO,
    LoanResponseDTO,
    PaymentResponseDTO,
    ProductionResponseDTO,
    PurchaseInputResponseDTO,
    StockBalanceResponseDTO,
)


def _value(enum_or_str) -> str:
    return enum_or_str.value if hasattr(enum_or_str, "value") else enum_or_str


def purchase_to_dto(purchase: PurchaseInput, loan_id: Optional[int] = None) -> PurchaseInputResponseDTO:
    return PurchaseInputResponseDTO(
        id=purchase.id,
        user_id=purchase.user_id,
        product_id=purchase.product_id,
        season_id=purchase.season_id,
        quantity=purchase.quantity,
        unit_price=purchase.unit_price,
        total_price=purchase.total_price,
        amount_paid=purchase.amount_paid,
        amount_remaining=purchase.amount_remaining,
        status=_value(purchase.status),
        interest=purchase.interest,
        loan_id=loan_id,
        created_at=purchase.created_at,
        updated_at=purchase.updated_at,
    )


def loan_to_dto(loan: Loan) -> LoanResponseDTO:
    return LoanResponseDTO(
        id=loan.id,
        purchase_input_id=loan.purchase_input_id,
        user_id=loan.user_id,
        product_id=loan.product_id,
        season_id=loan.season_id,
        quantity=loan.quantity,
        principal=loan.principal,
        amount_owed=loan.amount_owed,
        interest=loan.interest,
        interest_amount=loan.interest_amount,
        status=_value(loan.status),
        created_at=loan.created_at,
        updated_at=loan.updated_at,
    )


def fee_to_dto(fee: Fee) -> FeeDTO:
    return FeeDTO(
        id=fee.id,
        user_id=fee.user_id,
        fee_type=fee.fee_type,
        season_id=fee.season_id,
        amount_owed=fee.amount_owed,
        amount_paid=fee.amount_paid,
        remaining_amount=fee.remaining_amount,
        status=_value(fee.status),
    )


def payment_to_dto(payment: Payment) -> PaymentResponseDTO:
    return PaymentResponseDTO(
        id=payment.id,
        production_id=payment.production_id,
        user_id=payment.user_id,
        season_id=payment.season_id,
        product_id=payment.product_id,
        gross_amount=payment.gross_amount,
        total_deductions=payment.total_deductions,
        amount_due=payment.amount_due,
        amount_paid=payment.amount_paid,
        amount_remaining_to_pay=payment.amount_remaining_to_pay,
        status=_value(payment.status),
        created_at=payment.created_at,
        updated_at=payment.updated_at,
    )


def production_to_dto(production: Production) -> ProductionResponseDTO:
    return ProductionResponseDTO(
        id=production.id,
        user_id=production.user_id,
        product_id=production.product_id,
        season_id=production.season_id,
        quantity=production.quantity,
        unit_price=production.unit_price,
        total_price=production.total_price,
        payment_status=_value(production.payment_status),
        created_at=production.created_at,
    )


def bucket_to_dto(bucket: StockBucket) -> StockBalanceResponseDTO:
    return StockBalanceResponseDTO(
        bucket_id=bucket.id,
        product_id=bucket.product_id,
        season_id=bucket.season_id,
        cash=bucket.cash,
        quantity=bucket.quantity,
        total_price=bucket.total_price,
        last_updated=bucket.updated_at,
    )

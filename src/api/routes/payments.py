"""Payment API Routes

FastAPI routes for obligation summaries and payment settlement.
"""

from decimal import Decimal
from typing import Optional
from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.schemas.settlement_request import SettlePaymentRequestSchema, UpdatePaymentRequestSchema
from src.app.use_cases.settlement.dtos import (
    DeletePaymentResponseDTO,
    ObligationSummaryQueryDTO,
    ObligationSummaryResponseDTO,
    PaymentResponseDTO,
    SettlePaymentCommandDTO,
    UpdatePaymentCommandDTO,
)
from src.app.use_cases.settlement.get_obligation_summary import GetObligationSummary
from src.app.use_cases.settlement.settle_payment import SettlePayment
from src.app.use_cases.settlement.update_payment import UpdatePayment
from src.app.use_cases.settlement.delete_payment import DeletePayment
from src.adapter.repositories.production_repository import SqlAlchemyProductionRepository
from src.adapter.repositories.payment_repository import SqlAlchemyPaymentRepository
from src.adapter.repositories.payment_transaction_repository import SqlAlchemyPaymentTransactionRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_session, build_aggregator, build_allocator, build_ledger
from src.api.error import ClientError

router = APIRouter(prefix="/payments", tags=["Payments"])


@router.get(
    "/summary",
    response_model=ObligationSummaryResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def get_obligation_summary(
    user_id: str,
    season_id: str,
    production_id: int,
    gross_amount: Optional[Decimal] = None,
    session: AsyncSession = Depends(get_session)
):
    """
    Net a production against the member's obligations.

    `amount_due = production_total - fees_due - loans_due - previous_remaining`.
    A negative `amount_due` means the member still owes the cooperative.

    **Query parameters:**
    - `user_id`, `season_id`, `production_id` (required)
    - `gross_amount` (optional): override of the production value

    **Returns:**
    - 200: Summary computed
    - 400: Production does not belong to the user and season
    - 404: Production not found
    """
    query = ObligationSummaryQueryDTO(
        user_id=user_id,
        season_id=season_id,
        production_id=production_id,
        gross_amount=gross_amount,
    )

    use_case = GetObligationSummary(SqlAlchemyProductionRepository(session), build_aggregator(session))
    result = await use_case.execute(query)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post(
    "",
    response_model=PaymentResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        402: {
            "description": "Stock cash cannot cover the payment",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "INSUFFICIENT_FUNDS",
                            "message": "Insufficient cash in stock. Required: 700.00, Available: 500.00"
                        }
                    }
                }
            }
        },
        400: {"description": "Amount exceeds what is due"},
        404: {"description": "Production or stock not found"},
    }
)
async def settle_payment(
    request: SettlePaymentRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """
    Pay a member for a production out of the product's stock cash.

    The obligation summary is recomputed at write time; the amount may not
    exceed what is still due. A second call for the same production tops up
    the existing payment.

    **Returns:**
    - 201: Payment settled
    - 400: Amount exceeds amount due
    - 402: Insufficient stock cash
    - 404: Production or stock not found
    """
    uow = SqlAlchemyUnitOfWork(session)

    command = SettlePaymentCommandDTO(
        production_id=request.production_id,
        amount_paid=request.amount_paid,
    )

    use_case = SettlePayment(
        uow,
        SqlAlchemyProductionRepository(session),
        SqlAlchemyPaymentRepository(session),
        SqlAlchemyPaymentTransactionRepository(session),
        build_aggregator(session),
        build_ledger(session),
        build_allocator(session),
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.patch(
    "/{payment_id}",
    response_model=PaymentResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def update_payment(
    payment_id: int,
    request: UpdatePaymentRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """Set a new total for a payment; only the difference moves through stock cash."""
    uow = SqlAlchemyUnitOfWork(session)

    command = UpdatePaymentCommandDTO(payment_id=payment_id, amount_paid=request.amount_paid)

    use_case = UpdatePayment(
        uow,
        SqlAlchemyProductionRepository(session),
        SqlAlchemyPaymentRepository(session),
        SqlAlchemyPaymentTransactionRepository(session),
        build_aggregator(session),
        build_ledger(session),
        build_allocator(session),
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.delete(
    "/{payment_id}",
    response_model=DeletePaymentResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def delete_payment(
    payment_id: int,
    session: AsyncSession = Depends(get_session)
):
    uow = SqlAlchemyUnitOfWork(session)

    use_case = DeletePayment(
        uow,
        SqlAlchemyProductionRepository(session),
        SqlAlchemyPaymentRepository(session),
        SqlAlchemyPaymentTransactionRepository(session),
        build_ledger(session),
        build_allocator(session),
    )
    result = await use_case.execute(payment_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value

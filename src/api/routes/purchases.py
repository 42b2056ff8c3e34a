"""Purchase API Routes

FastAPI routes for recording, changing and removing member purchases.
"""

from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.schemas.settlement_request import RecordPurchaseRequestSchema, UpdatePurchaseRequestSchema
from src.app.use_cases.settlement.dtos import (
    DeletePurchaseResponseDTO,
    PurchaseInputResponseDTO,
    RecordPurchaseCommandDTO,
    UpdatePurchaseCommandDTO,
)
from src.app.use_cases.settlement.record_purchase import RecordPurchase
from src.app.use_cases.settlement.update_purchase import UpdatePurchase
from src.app.use_cases.settlement.delete_purchase import DeletePurchase
from src.adapter.repositories.purchase_input_repository import SqlAlchemyPurchaseInputRepository
from src.adapter.repositories.loan_repository import SqlAlchemyLoanRepository
from src.adapter.repositories.loan_transaction_repository import SqlAlchemyLoanTransactionRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_session, build_ledger
from src.api.error import ClientError

router = APIRouter(prefix="/purchases", tags=["Purchases"])


@router.post(
    "",
    response_model=PurchaseInputResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {
            "description": "Validation error",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "VALIDATION_ERROR",
                            "message": "Amount paid (1200.00) exceeds total price (1000.00)"
                        }
                    }
                }
            }
        }
    }
)
async def record_purchase(
    request: RecordPurchaseRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """
    Record a member purchase.

    The cash paid is credited to the stock of the product for the season.
    Whatever is left unpaid becomes a pending loan.

    **Request body:**
    - `user_id`, `product_id`, `season_id` (required)
    - `quantity`, `unit_price` (required, > 0)
    - `amount_paid` (required, 0 <= amount_paid <= quantity * unit_price)
    - `interest` (optional): interest percent applied to the loan

    **Returns:**
    - 201: Purchase recorded (`loan_id` set when a loan was created)
    - 400: Invalid request parameters
    """
    uow = SqlAlchemyUnitOfWork(session)
    purchase_repo = SqlAlchemyPurchaseInputRepository(session)
    loan_repo = SqlAlchemyLoanRepository(session)

    command = RecordPurchaseCommandDTO(**request.model_dump())

    use_case = RecordPurchase(uow, purchase_repo, loan_repo, build_ledger(session))
    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.patch(
    "/{purchase_id}",
    response_model=PurchaseInputResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={
        402: {"description": "Stock cash cannot cover a reduced amount_paid"},
        404: {"description": "Purchase not found"},
        409: {"description": "Loan already received a repayment"},
    }
)
async def update_purchase(
    purchase_id: int,
    request: UpdatePurchaseRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """
    Change a purchase. Only the differences move through the stock cash
    and the loan.
    """
    uow = SqlAlchemyUnitOfWork(session)

    command = UpdatePurchaseCommandDTO(purchase_id=purchase_id, **request.model_dump())

    use_case = UpdatePurchase(
        uow,
        SqlAlchemyPurchaseInputRepository(session),
        SqlAlchemyLoanRepository(session),
        SqlAlchemyLoanTransactionRepository(session),
        build_ledger(session),
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.delete(
    "/{purchase_id}",
    response_model=DeletePurchaseResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def delete_purchase(
    purchase_id: int,
    session: AsyncSession = Depends(get_session)
):
    """Delete a purchase, reversing its cash credit and removing its loan."""
    uow = SqlAlchemyUnitOfWork(session)

    use_case = DeletePurchase(
        uow,
        SqlAlchemyPurchaseInputRepository(session),
        SqlAlchemyLoanRepository(session),
        SqlAlchemyLoanTransactionRepository(session),
        build_ledger(session),
    )
    result = await use_case.execute(purchase_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value

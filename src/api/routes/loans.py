"""Loan API Routes"""

from typing import Optional
from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.use_cases.settlement.dtos import LoanResponseDTO, OutstandingLoansResponseDTO
from src.app.use_cases.settlement.get_outstanding_loans import GetOutstandingLoans
from src.app.use_cases.settlement.repay_loan import RepayLoan
from src.adapter.repositories.loan_repository import SqlAlchemyLoanRepository
from src.adapter.repositories.loan_transaction_repository import SqlAlchemyLoanTransactionRepository
from src.adapter.repositories.purchase_input_repository import SqlAlchemyPurchaseInputRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_session, build_ledger
from src.api.error import ClientError

router = APIRouter(prefix="/loans", tags=["Loans"])


@router.get(
    "/outstanding",
    response_model=OutstandingLoansResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def get_outstanding_loans(
    user_id: str,
    season_id: Optional[str] = None,
    session: AsyncSession = Depends(get_session)
):
    """
    List a member's pending loans.

    **Query parameters:**
    - `user_id` (required)
    - `season_id` (optional): restrict to one season
    """
    use_case = GetOutstandingLoans(SqlAlchemyLoanRepository(session))
    result = await use_case.execute(user_id, season_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post(
    "/{loan_id}/repay",
    response_model=LoanResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={
        404: {"description": "Loan not found"},
        409: {
            "description": "Loan already repaid",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "CONFLICT",
                            "message": "Loan 3 is already repaid"
                        }
                    }
                }
            }
        }
    }
)
async def repay_loan(
    loan_id: int,
    session: AsyncSession = Depends(get_session)
):
    """
    Repay a loan in full.

    The member pays what is owed plus interest; that cash goes back to the
    stock of the loan's product for its season and the originating purchase
    becomes paid.

    **Returns:**
    - 200: Loan repaid
    - 404: Loan not found
    - 409: Loan already repaid
    """
    uow = SqlAlchemyUnitOfWork(session)

    use_case = RepayLoan(
        uow,
        SqlAlchemyLoanRepository(session),
        SqlAlchemyLoanTransactionRepository(session),
        SqlAlchemyPurchaseInputRepository(session),
        build_ledger(session),
    )
    result = await use_case.execute(loan_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value

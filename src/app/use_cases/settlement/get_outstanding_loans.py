"""GetOutstandingLoans Use Case

Read-only view of a member's pending loans.
"""

import logging
from typing import Optional
from libs.result import Result, Return, Error
from src.app.repositories.loan_repository import LoanRepository
from src.domain.money import sum_money
from .dtos import OutstandingLoansResponseDTO
from .mappers import loan_to_dto

logger = logging.getLogger(__name__)


class GetOutstandingLoans:
    """
    Use Case: List pending loans of a member

    Business Rules:
    1. Only loans with status pending are returned
    2. Optional season filter
    3. total_owed is the sum of amount_owed (interest excluded)
    """

    def __init__(self, loan_repo: LoanRepository):
        self.loan_repo = loan_repo

    async def execute(self, user_id: str, season_id: Optional[str] = None) -> Result[OutstandingLoansResponseDTO]:
        try:
            loans = await self.loan_repo.get_pending_by_user(user_id, season_id)

            return Return.ok(
                OutstandingLoansResponseDTO(
                    user_id=user_id,
                    season_id=season_id,
                    loans=[loan_to_dto(loan) for loan in loans],
                    total_owed=sum_money(loan.amount_owed for loan in loans),
                )
            )

        except Exception as e:
            logger.error(f"Failed to list loans for user {user_id}: {e}")
            return Return.err(
                Error(
                    code="GET_LOANS_FAILED",
                    message="Failed to retrieve outstanding loans",
                    reason=str(e),
                )
            )

"""RecordFee Use Case

Charges a fee to a member. Fees are deducted from the member's next
settled production.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.fee_repository import FeeRepository
from src.domain.errors import SettlementError, ValidationError
from src.domain.fee import Fee, FeeStatus
from src.domain.money import ZERO, exact_money
from .dtos import RecordFeeCommandDTO, FeeDTO
from .mappers import fee_to_dto

logger = logging.getLogger(__name__)


class RecordFee:
    """
    Use Case: Record a fee

    Business Rules:
    1. amount_owed must be > 0
    2. A fee without a season is deducted in any season
    """

    def __init__(self, uow: UnitOfWork, fee_repo: FeeRepository):
        self.uow = uow
        self.fee_repo = fee_repo

    async def execute(self, command: RecordFeeCommandDTO) -> Result[FeeDTO]:
        try:
            amount_owed = exact_money(command.amount_owed, "amount_owed")
            if amount_owed <= ZERO:
                raise ValidationError("amount_owed must be greater than 0", reason=f"amount_owed={amount_owed}")

            fee = await self.fee_repo.create(
                Fee(
                    user_id=command.user_id,
                    season_id=command.season_id,
                    fee_type=command.fee_type,
                    amount_owed=amount_owed,
                    amount_paid=ZERO,
                    status=FeeStatus.UNPAID,
                )
            )
            await self.uow.commit()

            logger.info(f"Recorded {command.fee_type} fee {fee.id} of {amount_owed} for user {command.user_id}")
            return Return.ok(fee_to_dto(fee))

        except SettlementError as e:
            await self.uow.rollback()
            logger.warning(f"Fee for user {command.user_id} rejected: {e.message}")
            return Return.err(e.to_error())

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to record fee for user {command.user_id}: {e}")
            return Return.err(
                Error(
                    code="RECORD_FEE_FAILED",
                    message="Failed to record fee",
                    reason=str(e),
                )
            )

"""Fee API Routes"""

from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.schemas.settlement_request import RecordFeeRequestSchema
from src.app.use_cases.settlement.dtos import FeeDTO, RecordFeeCommandDTO
from src.app.use_cases.settlement.record_fee import RecordFee
from src.adapter.repositories.fee_repository import SqlAlchemyFeeRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_session
from src.api.error import ClientError

router = APIRouter(prefix="/fees", tags=["Fees"])


@router.post(
    "",
    response_model=FeeDTO,
    status_code=status.HTTP_201_CREATED,
)
async def record_fee(
    request: RecordFeeRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """
    Charge a fee to a member.

    The fee is withheld from the member's next settled production. Leave
    `season_id` out for a fee that applies in every season.
    """
    uow = SqlAlchemyUnitOfWork(session)

    command = RecordFeeCommandDTO(**request.model_dump())

    use_case = RecordFee(uow, SqlAlchemyFeeRepository(session))
    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value

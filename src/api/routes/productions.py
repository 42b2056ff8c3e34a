"""Production API Routes"""

from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.schemas.settlement_request import RecordProductionRequestSchema
from src.app.use_cases.settlement.dtos import ProductionResponseDTO, RecordProductionCommandDTO
from src.app.use_cases.settlement.record_production import RecordProduction
from src.adapter.repositories.production_repository import SqlAlchemyProductionRepository
from src.adapter.repositories.stock_bucket_repository import SqlAlchemyStockBucketRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_session, build_ledger
from src.api.error import ClientError

router = APIRouter(prefix="/productions", tags=["Productions"])


@router.post(
    "",
    response_model=ProductionResponseDTO,
    status_code=status.HTTP_201_CREATED,
)
async def record_production(
    request: RecordProductionRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """
    Record a member's production delivery.

    Adds quantity and value to the product's stock for the season. No cash
    moves until the production is settled through POST /payments.
    """
    uow = SqlAlchemyUnitOfWork(session)

    command = RecordProductionCommandDTO(**request.model_dump())

    use_case = RecordProduction(
        uow,
        SqlAlchemyProductionRepository(session),
        SqlAlchemyStockBucketRepository(session),
        build_ledger(session),
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value

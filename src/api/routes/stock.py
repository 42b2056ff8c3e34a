"""Stock API Routes

Provisioning and balance of product-season stock buckets.
"""

from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.schemas.settlement_request import ProvisionStockRequestSchema
from src.app.use_cases.settlement.dtos import ProvisionStockCommandDTO, StockBalanceResponseDTO
from src.app.use_cases.settlement.provision_stock import ProvisionStock
from src.app.use_cases.settlement.get_stock_balance import GetStockBalance
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_session, build_ledger
from src.api.error import ClientError

router = APIRouter(prefix="/stock", tags=["Stock"])


@router.post(
    "",
    response_model=StockBalanceResponseDTO,
    status_code=status.HTTP_201_CREATED,
)
async def provision_stock(
    request: ProvisionStockRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """
    Provision the stock bucket of a product for a season.

    An existing bucket is reused. A positive `cash` is deposited into it.
    """
    uow = SqlAlchemyUnitOfWork(session)

    command = ProvisionStockCommandDTO(**request.model_dump())

    use_case = ProvisionStock(uow, build_ledger(session))
    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get(
    "/{product_id}/{season_id}",
    response_model=StockBalanceResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={
        404: {
            "description": "Stock not found",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "NOT_FOUND",
                            "message": "Stock not found for product fertilizer in season 2024A"
                        }
                    }
                }
            }
        }
    }
)
async def get_stock_balance(
    product_id: str,
    season_id: str,
    session: AsyncSession = Depends(get_session)
):
    """
    Get current cash and inventory of a stock bucket.

    **Example response:**
    ```json
    {
      "bucket_id": 1,
      "product_id": "fertilizer",
      "season_id": "2024A",
      "cash": "1000.00",
      "quantity": "0.000",
      "total_price": "0.00",
      "last_updated": "2024-01-01T00:00:00Z"
    }
    ```
    """
    use_case = GetStockBalance(build_ledger(session))
    result = await use_case.execute(product_id, season_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value

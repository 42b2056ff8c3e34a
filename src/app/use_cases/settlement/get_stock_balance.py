"""GetStockBalance Use Case

Read-only operation to get the cash and inventory of a stock bucket.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.stock_ledger import StockLedger
from src.domain.errors import SettlementError
from src.domain.stock_bucket import BucketKey
from .dtos import StockBalanceResponseDTO
from .mappers import bucket_to_dto

logger = logging.getLogger(__name__)


class GetStockBalance:
    """
    Use Case: Get stock bucket balance

    Business Rules:
    1. Read-only, no unit of work needed
    2. Returns NOT_FOUND when the product has no bucket for the season
    """

    def __init__(self, ledger: StockLedger):
        self.ledger = ledger

    async def execute(self, product_id: str, season_id: str) -> Result[StockBalanceResponseDTO]:
        try:
            bucket = await self.ledger.get_bucket(BucketKey(product_id, season_id))
            return Return.ok(bucket_to_dto(bucket))

        except SettlementError as e:
            return Return.err(e.to_error())

        except Exception as e:
            logger.error(f"Failed to get stock balance for {product_id}/{season_id}: {e}")
            return Return.err(
                Error(
                    code="GET_STOCK_BALANCE_FAILED",
                    message="Failed to retrieve stock balance",
                    reason=str(e),
                )
            )

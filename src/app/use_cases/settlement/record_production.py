"""RecordProduction Use Case

Records a member's harvest delivery and adds it to the stock bucket's
inventory. Cash only moves when the production is settled.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.stock_ledger import StockLedger
from src.app.repositories.production_repository import ProductionRepository
from src.app.repositories.stock_bucket_repository import StockBucketRepository
from src.domain.errors import SettlementError, ValidationError
from src.domain.money import ZERO, exact_money, to_money, to_quantity
from src.domain.production import Production, ProductionPaymentStatus
from src.domain.stock_bucket import BucketKey
from .dtos import RecordProductionCommandDTO, ProductionResponseDTO
from .mappers import production_to_dto

logger = logging.getLogger(__name__)


class RecordProduction:
    """
    Use Case: Record a production

    Business Rules:
    1. total_price = quantity * unit_price
    2. The bucket is provisioned when missing
    3. Bucket quantity and total_price grow by the production; cash does not
    """

    def __init__(
        self,
        uow: UnitOfWork,
        production_repo: ProductionRepository,
        bucket_repo: StockBucketRepository,
        ledger: StockLedger,
    ):
        self.uow = uow
        self.production_repo = production_repo
        self.bucket_repo = bucket_repo
        self.ledger = ledger

    async def execute(self, command: RecordProductionCommandDTO) -> Result[ProductionResponseDTO]:
        try:
            quantity = to_quantity(command.quantity)
            unit_price = exact_money(command.unit_price, "unit_price")
            total_price = to_money(quantity * unit_price, "total_price")
            if total_price <= ZERO:
                raise ValidationError(
                    f"Total price of {quantity} x {unit_price} rounds to zero",
                    reason=f"quantity={quantity}, unit_price={unit_price}",
                )

            production = await self.production_repo.create(
                Production(
                    user_id=command.user_id,
                    product_id=command.product_id,
                    season_id=command.season_id,
                    quantity=quantity,
                    unit_price=unit_price,
                    total_price=total_price,
                    payment_status=ProductionPaymentStatus.PENDING,
                )
            )

            bucket = await self.ledger.get_or_create_bucket(BucketKey(command.product_id, command.season_id))
            await self.bucket_repo.add_inventory(bucket.id, quantity, total_price)

            await self.uow.commit()

            logger.info(
                f"Recorded production {production.id} for user {command.user_id}: "
                f"{quantity} x {unit_price} = {total_price}"
            )
            return Return.ok(production_to_dto(production))

        except SettlementError as e:
            await self.uow.rollback()
            logger.warning(f"Production rejected for user {command.user_id}: {e.message}")
            return Return.err(e.to_error())

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to record production for user {command.user_id}: {e}")
            return Return.err(
                Error(
                    code="RECORD_PRODUCTION_FAILED",
                    message="Failed to record production",
                    reason=str(e),
                )
            )

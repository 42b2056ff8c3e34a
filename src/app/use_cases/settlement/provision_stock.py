"""ProvisionStock Use Case

Creates the stock bucket for a product and season, optionally seeding it
with a cash deposit.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.stock_ledger import StockLedger
from src.domain.errors import SettlementError
from src.domain.money import ZERO, exact_money
from src.domain.stock_bucket import BucketKey
from src.domain.stock_cash_transaction import CashReferenceType
from .dtos import ProvisionStockCommandDTO, StockBalanceResponseDTO
from .mappers import bucket_to_dto

logger = logging.getLogger(__name__)


class ProvisionStock:
    """
    Use Case: Provision a stock bucket

    Business Rules:
    1. An existing bucket is reused, never duplicated
    2. A positive cash amount is credited as a deposit
    """

    def __init__(self, uow: UnitOfWork, ledger: StockLedger):
        self.uow = uow
        self.ledger = ledger

    async def execute(self, command: ProvisionStockCommandDTO) -> Result[StockBalanceResponseDTO]:
        key = BucketKey(command.product_id, command.season_id)
        try:
            cash = exact_money(command.cash, "cash")

            bucket = await self.ledger.get_or_create_bucket(key)
            if cash > ZERO:
                await self.ledger.credit(key, cash, CashReferenceType.DEPOSIT.value)
                bucket = await self.ledger.get_bucket(key, for_update=True)

            await self.uow.commit()

            logger.info(f"Provisioned stock {key} with deposit {cash}, cash={bucket.cash}")
            return Return.ok(bucket_to_dto(bucket))

        except SettlementError as e:
            await self.uow.rollback()
            logger.warning(f"Stock provisioning rejected for {key}: {e.message}")
            return Return.err(e.to_error())

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to provision stock {key}: {e}")
            return Return.err(
                Error(
                    code="PROVISION_STOCK_FAILED",
                    message="Failed to provision stock",
                    reason=str(e),
                )
            )

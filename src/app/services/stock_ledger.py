"""Stock Ledger Service

Single point of truth for the cash available in each (product, season)
bucket. Purchases and loan repayments credit it; payments debit it.
"""

import logging
from decimal import Decimal
from typing import Optional
from src.app.repositories.stock_bucket_repository import StockBucketRepository
from src.app.repositories.stock_cash_transaction_repository import StockCashTransactionRepository
from src.domain.errors import InsufficientFundsError, NotFoundError, ValidationError
from src.domain.money import ZERO, to_money
from src.domain.stock_bucket import StockBucket, BucketKey
from src.domain.stock_cash_transaction import StockCashTransaction, CashTransactionType

logger = logging.getLogger(__name__)


class StockLedger:
    """
    Credits and debits bucket cash, recording every movement

    Business Rules:
    1. Buckets are resolved strictly by (product_id, season_id)
    2. Amounts must be > 0
    3. A debit never drives cash below zero: the check and the decrement are
       one conditional UPDATE, and a miss raises InsufficientFundsError with
       the live balance
    4. Every movement appends a StockCashTransaction with balance snapshots
    5. Nothing is committed here; the calling use case owns the unit of work
    """

    def __init__(
        self,
        bucket_repo: StockBucketRepository,
        transaction_repo: StockCashTransactionRepository,
    ):
        self.bucket_repo = bucket_repo
        self.transaction_repo = transaction_repo

    async def get_bucket(self, key: BucketKey, for_update: bool = False) -> StockBucket:
        bucket = await self.bucket_repo.get_by_key(key, for_update=for_update)
        if not bucket:
            raise NotFoundError(
                f"Stock not found for product {key.product_id} in season {key.season_id}",
                reason=f"bucket={key}",
            )
        return bucket

    async def get_or_create_bucket(self, key: BucketKey) -> StockBucket:
        bucket = await self.bucket_repo.get_by_key(key, for_update=True)
        if bucket:
            return bucket

        logger.info(f"Provisioning stock bucket {key}")
        return await self.bucket_repo.create(
            StockBucket(
                product_id=key.product_id,
                season_id=key.season_id,
                cash=ZERO,
                quantity=Decimal("0"),
                total_price=ZERO,
            )
        )

    async def credit(
        self,
        key: BucketKey,
        amount: Decimal,
        reference_type: str,
        reference_id: Optional[str] = None,
    ) -> StockCashTransaction:
        """
        Add cash to a bucket, provisioning the bucket if it does not exist

        Returns:
            The recorded credit transaction
        """
        amount = self._positive(amount)
        bucket = await self.get_or_create_bucket(key)

        updated = await self.bucket_repo.credit_cash(bucket.id, amount)
        transaction = await self._record(
            updated, CashTransactionType.CREDIT, amount, reference_type, reference_id
        )

        logger.info(f"Credited {amount} to stock {key} ({reference_type}:{reference_id}), cash={updated.cash}")
        return transaction

    async def debit(
        self,
        key: BucketKey,
        amount: Decimal,
        reference_type: str,
        reference_id: Optional[str] = None,
    ) -> StockCashTransaction:
        """
        Remove cash from a bucket if it can cover the amount

        Raises:
            NotFoundError: no bucket for the key
            InsufficientFundsError: live cash < amount (nothing written)
        """
        amount = self._positive(amount)
        bucket = await self.get_bucket(key, for_update=True)

        updated = await self.bucket_repo.debit_cash(bucket.id, amount)
        if updated is None:
            current = await self.bucket_repo.get_by_id(bucket.id, for_update=True)
            available = current.cash if current else bucket.cash
            logger.warning(f"Insufficient cash in stock {key}: required={amount}, available={available}")
            raise InsufficientFundsError(key.product_id, key.season_id, available=available, required=amount)

        transaction = await self._record(
            updated, CashTransactionType.DEBIT, amount, reference_type, reference_id
        )

        logger.info(f"Debited {amount} from stock {key} ({reference_type}:{reference_id}), cash={updated.cash}")
        return transaction

    async def _record(
        self,
        bucket: StockBucket,
        transaction_type: CashTransactionType,
        amount: Decimal,
        reference_type: str,
        reference_id: Optional[str],
    ) -> StockCashTransaction:
        balance_after = to_money(bucket.cash)
        if transaction_type == CashTransactionType.CREDIT:
            balance_before = balance_after - amount
        else:
            balance_before = balance_after + amount

        return await self.transaction_repo.create(
            StockCashTransaction(
                bucket_id=bucket.id,
                transaction_type=transaction_type,
                amount=amount,
                balance_before=balance_before,
                balance_after=balance_after,
                reference_type=reference_type,
                reference_id=reference_id,
            )
        )

    @staticmethod
    def _positive(amount: Decimal) -> Decimal:
        amount = to_money(amount)
        if amount <= ZERO:
            raise ValidationError("Amount must be greater than 0", reason=f"amount={amount}")
        return amount

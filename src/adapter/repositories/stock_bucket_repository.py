"""SQLAlchemy implementation of StockBucketRepository

Cash changes are issued as single conditional UPDATE statements, so two
concurrent debits can never both pass the sufficiency check against a stale
balance. Rows are additionally locked with SELECT FOR UPDATE where the
dialect supports it.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from sqlalchemy import update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.stock_bucket_repository import StockBucketRepository
from src.domain.stock_bucket import StockBucket, BucketKey


class SqlAlchemyStockBucketRepository(StockBucketRepository):
    """
    SQLAlchemy implementation of StockBucketRepository

    Features:
    - Conditional debit (cash >= amount) evaluated by the database
    - Pessimistic locking via SELECT FOR UPDATE on reads that precede writes
    - Buckets resolved strictly by (product_id, season_id)
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_key(self, key: BucketKey, for_update: bool = False) -> Optional[StockBucket]:
        stmt = select(StockBucket).where(
            StockBucket.product_id == key.product_id,
            StockBucket.season_id == key.season_id,
        )

        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_id(self, bucket_id: int, for_update: bool = False) -> Optional[StockBucket]:
        stmt = select(StockBucket).where(StockBucket.id == bucket_id)

        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_all(self) -> List[StockBucket]:
        stmt = select(StockBucket).order_by(StockBucket.id).execution_options(populate_existing=True)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, bucket: StockBucket) -> StockBucket:
        self.session.add(bucket)
        await self.session.flush()
        await self.session.refresh(bucket)
        return bucket

    async def credit_cash(self, bucket_id: int, amount: Decimal) -> StockBucket:
        stmt = (
            update(StockBucket)
            .where(StockBucket.id == bucket_id)
            .values(cash=StockBucket.cash + amount, updated_at=datetime.utcnow())
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)
        return await self._reload(bucket_id)

    async def debit_cash(self, bucket_id: int, amount: Decimal) -> Optional[StockBucket]:
        """
        Subtract cash only if the bucket still covers the amount

        Note:
            Zero rows affected means the live balance was insufficient; the
            caller reports InsufficientFundsError and nothing was written.
        """
        stmt = (
            update(StockBucket)
            .where(StockBucket.id == bucket_id, StockBucket.cash >= amount)
            .values(cash=StockBucket.cash - amount, updated_at=datetime.utcnow())
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        if result.rowcount == 0:
            return None
        return await self._reload(bucket_id)

    async def add_inventory(self, bucket_id: int, quantity: Decimal, total_price: Decimal) -> StockBucket:
        stmt = (
            update(StockBucket)
            .where(StockBucket.id == bucket_id)
            .values(
                quantity=StockBucket.quantity + quantity,
                total_price=StockBucket.total_price + total_price,
                updated_at=datetime.utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)
        return await self._reload(bucket_id)

    async def _reload(self, bucket_id: int) -> StockBucket:
        stmt = (
            select(StockBucket)
            .where(StockBucket.id == bucket_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()

"""Stock Bucket Repository Interface

Defines the contract for stock bucket persistence operations.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import List, Optional
from src.domain.stock_bucket import StockBucket, BucketKey


class StockBucketRepository(ABC):
    """
    Repository interface for StockBucket persistence

    Cash mutations are single conditional UPDATE statements so that the
    sufficiency check and the decrement happen atomically in the database.
    """

    @abstractmethod
    async def get_by_key(self, key: BucketKey, for_update: bool = False) -> Optional[StockBucket]:
        """
        Retrieve the bucket for a (product, season) pair

        Args:
            key: BucketKey(product_id, season_id)
            for_update: If True, lock the row (SELECT FOR UPDATE) and reload it

        Returns:
            StockBucket if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_by_id(self, bucket_id: int, for_update: bool = False) -> Optional[StockBucket]:
        pass

    @abstractmethod
    async def get_all(self) -> List[StockBucket]:
        pass

    @abstractmethod
    async def create(self, bucket: StockBucket) -> StockBucket:
        pass

    @abstractmethod
    async def credit_cash(self, bucket_id: int, amount: Decimal) -> StockBucket:
        """
        Atomically add cash to a bucket

        Returns:
            The bucket reloaded after the update
        """
        pass

    @abstractmethod
    async def debit_cash(self, bucket_id: int, amount: Decimal) -> Optional[StockBucket]:
        """
        Atomically subtract cash if the bucket can cover it

        Executes ``cash = cash - amount WHERE id = :id AND cash >= amount``.

        Returns:
            The reloaded bucket, or None when no row matched (insufficient cash)
        """
        pass

    @abstractmethod
    async def add_inventory(self, bucket_id: int, quantity: Decimal, total_price: Decimal) -> StockBucket:
        """Add delivered quantity and its value to the bucket inventory"""
        pass

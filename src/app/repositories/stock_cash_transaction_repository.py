"""Stock Cash Transaction Repository Interface"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import List
from src.domain.stock_cash_transaction import StockCashTransaction


class StockCashTransactionRepository(ABC):

    @abstractmethod
    async def create(self, transaction: StockCashTransaction) -> StockCashTransaction:
        pass

    @abstractmethod
    async def get_by_bucket_id(self, bucket_id: int) -> List[StockCashTransaction]:
        """Transactions of a bucket, oldest first"""
        pass

    @abstractmethod
    async def get_net_sum_by_bucket(self, bucket_id: int) -> Decimal:
        """
        Sum of credits minus sum of debits for a bucket

        Used by reconciliation: must equal the bucket's cash.
        """
        pass

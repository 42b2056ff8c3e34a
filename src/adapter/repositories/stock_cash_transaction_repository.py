"""SQLAlchemy implementation of StockCashTransactionRepository"""

from decimal import Decimal
from typing import List
from sqlalchemy import case, func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.stock_cash_transaction_repository import StockCashTransactionRepository
from src.domain.money import to_money
from src.domain.stock_cash_transaction import StockCashTransaction, CashTransactionType


class SqlAlchemyStockCashTransactionRepository(StockCashTransactionRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, transaction: StockCashTransaction) -> StockCashTransaction:
        self.session.add(transaction)
        await self.session.flush()
        await self.session.refresh(transaction)
        return transaction

    async def get_by_bucket_id(self, bucket_id: int) -> List[StockCashTransaction]:
        stmt = (
            select(StockCashTransaction)
            .where(StockCashTransaction.bucket_id == bucket_id)
            .order_by(StockCashTransaction.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_net_sum_by_bucket(self, bucket_id: int) -> Decimal:
        signed_amount = case(
            (StockCashTransaction.transaction_type == CashTransactionType.DEBIT, -StockCashTransaction.amount),
            else_=StockCashTransaction.amount,
        )
        stmt = select(func.coalesce(func.sum(signed_amount), 0)).where(
            StockCashTransaction.bucket_id == bucket_id
        )
        result = await self.session.execute(stmt)
        return to_money(result.scalar_one())

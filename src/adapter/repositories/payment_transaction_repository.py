"""SQLAlchemy implementation of PaymentTransactionRepository"""

from typing import List
from sqlalchemy import delete
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.payment_transaction_repository import PaymentTransactionRepository
from src.domain.payment_transaction import PaymentTransaction


class SqlAlchemyPaymentTransactionRepository(PaymentTransactionRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, transaction: PaymentTransaction) -> PaymentTransaction:
        self.session.add(transaction)
        await self.session.flush()
        await self.session.refresh(transaction)
        return transaction

    async def get_by_payment_id(self, payment_id: int) -> List[PaymentTransaction]:
        stmt = (
            select(PaymentTransaction)
            .where(PaymentTransaction.payment_id == payment_id)
            .order_by(PaymentTransaction.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete_by_payment_id(self, payment_id: int) -> None:
        stmt = (
            delete(PaymentTransaction)
            .where(PaymentTransaction.payment_id == payment_id)
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)

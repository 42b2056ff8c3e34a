"""SQLAlchemy implementation of PaymentAllocationRepository"""

from typing import List
from sqlalchemy import delete
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.payment_allocation_repository import PaymentAllocationRepository
from src.domain.payment_allocation import PaymentAllocation, ObligationType


class SqlAlchemyPaymentAllocationRepository(PaymentAllocationRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, allocation: PaymentAllocation) -> PaymentAllocation:
        self.session.add(allocation)
        await self.session.flush()
        await self.session.refresh(allocation)
        return allocation

    async def get_by_payment_id(self, payment_id: int) -> List[PaymentAllocation]:
        stmt = (
            select(PaymentAllocation)
            .where(PaymentAllocation.payment_id == payment_id)
            .order_by(PaymentAllocation.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_obligation(self, obligation_type: ObligationType, obligation_id: int) -> List[PaymentAllocation]:
        stmt = (
            select(PaymentAllocation)
            .where(
                PaymentAllocation.obligation_type == obligation_type,
                PaymentAllocation.obligation_id == obligation_id,
            )
            .order_by(PaymentAllocation.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete_by_payment_id(self, payment_id: int) -> None:
        stmt = (
            delete(PaymentAllocation)
            .where(PaymentAllocation.payment_id == payment_id)
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)

"""SQLAlchemy implementation of PaymentRepository"""

from datetime import datetime
from typing import List, Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.payment_repository import PaymentRepository
from src.domain.payment import Payment


class SqlAlchemyPaymentRepository(PaymentRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, payment_id: int, for_update: bool = False) -> Optional[Payment]:
        stmt = select(Payment).where(Payment.id == payment_id)

        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_production_id(self, production_id: int, for_update: bool = False) -> Optional[Payment]:
        stmt = select(Payment).where(Payment.production_id == production_id)

        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_user_and_season(
        self, user_id: str, season_id: str, exclude_production_id: Optional[int] = None
    ) -> List[Payment]:
        stmt = select(Payment).where(Payment.user_id == user_id, Payment.season_id == season_id)

        if exclude_production_id is not None:
            stmt = stmt.where(Payment.production_id != exclude_production_id)

        result = await self.session.execute(stmt.order_by(Payment.created_at, Payment.id))
        return list(result.scalars().all())

    async def get_all(self) -> List[Payment]:
        stmt = select(Payment).order_by(Payment.id).execution_options(populate_existing=True)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, payment: Payment) -> Payment:
        self.session.add(payment)
        await self.session.flush()
        await self.session.refresh(payment)
        return payment

    async def update(self, payment: Payment) -> Payment:
        payment.updated_at = datetime.utcnow()
        self.session.add(payment)
        await self.session.flush()
        return payment

    async def delete(self, payment: Payment) -> None:
        await self.session.delete(payment)
        await self.session.flush()

"""SQLAlchemy implementation of PurchaseInputRepository"""

from datetime import datetime
from typing import List, Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.purchase_input_repository import PurchaseInputRepository
from src.domain.purchase_input import PurchaseInput


class SqlAlchemyPurchaseInputRepository(PurchaseInputRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, purchase_id: int, for_update: bool = False) -> Optional[PurchaseInput]:
        stmt = select(PurchaseInput).where(PurchaseInput.id == purchase_id)

        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_all(self) -> List[PurchaseInput]:
        stmt = select(PurchaseInput).order_by(PurchaseInput.id).execution_options(populate_existing=True)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, purchase: PurchaseInput) -> PurchaseInput:
        self.session.add(purchase)
        await self.session.flush()
        await self.session.refresh(purchase)
        return purchase

    async def update(self, purchase: PurchaseInput) -> PurchaseInput:
        purchase.updated_at = datetime.utcnow()
        self.session.add(purchase)
        await self.session.flush()
        return purchase

    async def delete(self, purchase: PurchaseInput) -> None:
        await self.session.delete(purchase)
        await self.session.flush()

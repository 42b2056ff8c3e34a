"""SQLAlchemy implementation of FeeRepository"""

from typing import List, Optional
from sqlalchemy import or_
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.fee_repository import FeeRepository
from src.domain.fee import Fee, FeeStatus


class SqlAlchemyFeeRepository(FeeRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, fee_id: int, for_update: bool = False) -> Optional[Fee]:
        stmt = select(Fee).where(Fee.id == fee_id)

        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_all(self) -> List[Fee]:
        stmt = select(Fee).order_by(Fee.id).execution_options(populate_existing=True)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, fee: Fee) -> Fee:
        self.session.add(fee)
        await self.session.flush()
        await self.session.refresh(fee)
        return fee

    async def update(self, fee: Fee) -> Fee:
        self.session.add(fee)
        await self.session.flush()
        return fee

    async def get_outstanding_by_user(self, user_id: str, season_id: str) -> List[Fee]:
        stmt = (
            select(Fee)
            .where(
                Fee.user_id == user_id,
                Fee.status != FeeStatus.PAID,
                or_(Fee.season_id == season_id, Fee.season_id.is_(None)),
            )
            .order_by(Fee.created_at, Fee.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

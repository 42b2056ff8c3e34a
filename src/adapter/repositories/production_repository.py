"""SQLAlchemy implementation of ProductionRepository"""

from datetime import datetime
from typing import Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.production_repository import ProductionRepository
from src.domain.production import Production


class SqlAlchemyProductionRepository(ProductionRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, production_id: int, for_update: bool = False) -> Optional[Production]:
        stmt = select(Production).where(Production.id == production_id)

        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, production: Production) -> Production:
        self.session.add(production)
        await self.session.flush()
        await self.session.refresh(production)
        return production

    async def update(self, production: Production) -> Production:
        production.updated_at = datetime.utcnow()
        self.session.add(production)
        await self.session.flush()
        return production

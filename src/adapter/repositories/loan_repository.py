"""SQLAlchemy implementation of LoanRepository"""

from datetime import datetime
from typing import List, Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.loan_repository import LoanRepository
from src.domain.loan import Loan, LoanStatus


class SqlAlchemyLoanRepository(LoanRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, loan_id: int, for_update: bool = False) -> Optional[Loan]:
        stmt = select(Loan).where(Loan.id == loan_id)

        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_purchase_input_id(self, purchase_input_id: int) -> Optional[Loan]:
        stmt = select(Loan).where(Loan.purchase_input_id == purchase_input_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_pending_by_user(self, user_id: str, season_id: Optional[str] = None) -> List[Loan]:
        stmt = select(Loan).where(Loan.user_id == user_id, Loan.status == LoanStatus.PENDING)

        if season_id is not None:
            stmt = stmt.where(Loan.season_id == season_id)

        result = await self.session.execute(stmt.order_by(Loan.created_at, Loan.id))
        return list(result.scalars().all())

    async def get_all(self) -> List[Loan]:
        stmt = select(Loan).order_by(Loan.id).execution_options(populate_existing=True)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, loan: Loan) -> Loan:
        self.session.add(loan)
        await self.session.flush()
        await self.session.refresh(loan)
        return loan

    async def update(self, loan: Loan) -> Loan:
        loan.updated_at = datetime.utcnow()
        self.session.add(loan)
        await self.session.flush()
        return loan

    async def delete(self, loan: Loan) -> None:
        await self.session.delete(loan)
        await self.session.flush()

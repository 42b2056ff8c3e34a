"""SQLAlchemy implementation of LoanTransactionRepository"""

from typing import List
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.loan_transaction_repository import LoanTransactionRepository
from src.domain.loan_transaction import LoanTransaction


class SqlAlchemyLoanTransactionRepository(LoanTransactionRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, transaction: LoanTransaction) -> LoanTransaction:
        self.session.add(transaction)
        await self.session.flush()
        await self.session.refresh(transaction)
        return transaction

    async def get_by_loan_id(self, loan_id: int) -> List[LoanTransaction]:
        stmt = (
            select(LoanTransaction)
            .where(LoanTransaction.loan_id == loan_id)
            .order_by(LoanTransaction.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

"""Loan Transaction Repository Interface"""

from abc import ABC, abstractmethod
from typing import List
from src.domain.loan_transaction import LoanTransaction


class LoanTransactionRepository(ABC):

    @abstractmethod
    async def create(self, transaction: LoanTransaction) -> LoanTransaction:
        pass

    @abstractmethod
    async def get_by_loan_id(self, loan_id: int) -> List[LoanTransaction]:
        pass

"""Loan Repository Interface

Defines the contract for loan persistence and outstanding-balance queries.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from src.domain.loan import Loan


class LoanRepository(ABC):

    @abstractmethod
    async def get_by_id(self, loan_id: int, for_update: bool = False) -> Optional[Loan]:
        pass

    @abstractmethod
    async def get_by_purchase_input_id(self, purchase_input_id: int) -> Optional[Loan]:
        pass

    @abstractmethod
    async def get_pending_by_user(self, user_id: str, season_id: Optional[str] = None) -> List[Loan]:
        """
        Pending loans of a member

        Args:
            user_id: Member identifier
            season_id: Restrict to one season when given

        Returns:
            Pending loans ordered by creation time
        """
        pass

    @abstractmethod
    async def get_all(self) -> List[Loan]:
        pass

    @abstractmethod
    async def create(self, loan: Loan) -> Loan:
        pass

    @abstractmethod
    async def update(self, loan: Loan) -> Loan:
        pass

    @abstractmethod
    async def delete(self, loan: Loan) -> None:
        pass

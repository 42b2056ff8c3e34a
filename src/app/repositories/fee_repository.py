"""Fee Repository Interface"""

from abc import ABC, abstractmethod
from typing import List, Optional
from src.domain.fee import Fee


class FeeRepository(ABC):

    @abstractmethod
    async def get_by_id(self, fee_id: int, for_update: bool = False) -> Optional[Fee]:
        pass

    @abstractmethod
    async def get_all(self) -> List[Fee]:
        pass

    @abstractmethod
    async def create(self, fee: Fee) -> Fee:
        pass

    @abstractmethod
    async def update(self, fee: Fee) -> Fee:
        pass

    @abstractmethod
    async def get_outstanding_by_user(self, user_id: str, season_id: str) -> List[Fee]:
        """
        Fees of a member that are not fully paid

        Includes fees of the given season and fees without a season.
        """
        pass

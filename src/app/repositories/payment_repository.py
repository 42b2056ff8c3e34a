"""Payment Repository Interface"""

from abc import ABC, abstractmethod
from typing import List, Optional
from src.domain.payment import Payment


class PaymentRepository(ABC):

    @abstractmethod
    async def get_by_id(self, payment_id: int, for_update: bool = False) -> Optional[Payment]:
        pass

    @abstractmethod
    async def get_by_production_id(self, production_id: int, for_update: bool = False) -> Optional[Payment]:
        pass

    @abstractmethod
    async def get_by_user_and_season(
        self, user_id: str, season_id: str, exclude_production_id: Optional[int] = None
    ) -> List[Payment]:
        """
        Payments of a member in a season

        Args:
            exclude_production_id: Leave out the payment of this production
        """
        pass

    @abstractmethod
    async def get_all(self) -> List[Payment]:
        pass

    @abstractmethod
    async def create(self, payment: Payment) -> Payment:
        pass

    @abstractmethod
    async def update(self, payment: Payment) -> Payment:
        pass

    @abstractmethod
    async def delete(self, payment: Payment) -> None:
        pass

"""Purchase Input Repository Interface"""

from abc import ABC, abstractmethod
from typing import List, Optional
from src.domain.purchase_input import PurchaseInput


class PurchaseInputRepository(ABC):

    @abstractmethod
    async def get_by_id(self, purchase_id: int, for_update: bool = False) -> Optional[PurchaseInput]:
        pass

    @abstractmethod
    async def get_all(self) -> List[PurchaseInput]:
        pass

    @abstractmethod
    async def create(self, purchase: PurchaseInput) -> PurchaseInput:
        pass

    @abstractmethod
    async def update(self, purchase: PurchaseInput) -> PurchaseInput:
        pass

    @abstractmethod
    async def delete(self, purchase: PurchaseInput) -> None:
        pass

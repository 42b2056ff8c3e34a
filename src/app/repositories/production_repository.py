"""Production Repository Interface"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.production import Production


class ProductionRepository(ABC):

    @abstractmethod
    async def get_by_id(self, production_id: int, for_update: bool = False) -> Optional[Production]:
        pass

    @abstractmethod
    async def create(self, production: Production) -> Production:
        pass

    @abstractmethod
    async def update(self, production: Production) -> Production:
        pass

"""Payment Allocation Repository Interface"""

from abc import ABC, abstractmethod
from typing import List
from src.domain.payment_allocation import PaymentAllocation, ObligationType


class PaymentAllocationRepository(ABC):

    @abstractmethod
    async def create(self, allocation: PaymentAllocation) -> PaymentAllocation:
        pass

    @abstractmethod
    async def get_by_payment_id(self, payment_id: int) -> List[PaymentAllocation]:
        pass

    @abstractmethod
    async def get_by_obligation(self, obligation_type: ObligationType, obligation_id: int) -> List[PaymentAllocation]:
        pass

    @abstractmethod
    async def delete_by_payment_id(self, payment_id: int) -> None:
        pass

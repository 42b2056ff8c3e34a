"""Payment Transaction Repository Interface"""

from abc import ABC, abstractmethod
from typing import List
from src.domain.payment_transaction import PaymentTransaction


class PaymentTransactionRepository(ABC):

    @abstractmethod
    async def create(self, transaction: PaymentTransaction) -> PaymentTransaction:
        pass

    @abstractmethod
    async def get_by_payment_id(self, payment_id: int) -> List[PaymentTransaction]:
        pass

    @abstractmethod
    async def delete_by_payment_id(self, payment_id: int) -> None:
        pass

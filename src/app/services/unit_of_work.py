"""Unit of Work Interface

A use case performs all of its writes inside one unit of work and either
commits them together or rolls every one of them back.
"""

from abc import ABC, abstractmethod


class UnitOfWork(ABC):

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass

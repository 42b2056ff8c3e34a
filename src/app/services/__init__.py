from .unit_of_work import UnitOfWork
from .stock_ledger import StockLedger
from .obligation_aggregator import ObligationAggregator, ObligationSummary
from .obligation_allocator import ObligationAllocator

__all__ = [
    "UnitOfWork",
    "StockLedger",
    "ObligationAggregator",
    "ObligationSummary",
    "ObligationAllocator",
]

from .stock_bucket_repository import StockBucketRepository
from .stock_cash_transaction_repository import StockCashTransactionRepository
from .production_repository import ProductionRepository
from .purchase_input_repository import PurchaseInputRepository
from .loan_repository import LoanRepository
from .loan_transaction_repository import LoanTransactionRepository
from .fee_repository import FeeRepository
from .payment_repository import PaymentRepository
from .payment_transaction_repository import PaymentTransactionRepository
from .payment_allocation_repository import PaymentAllocationRepository

__all__ = [
    "StockBucketRepository",
    "StockCashTransactionRepository",
    "ProductionRepository",
    "PurchaseInputRepository",
    "LoanRepository",
    "LoanTransactionRepository",
    "FeeRepository",
    "PaymentRepository",
    "PaymentTransactionRepository",
    "PaymentAllocationRepository",
]

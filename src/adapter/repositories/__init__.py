from .stock_bucket_repository import SqlAlchemyStockBucketRepository
from .stock_cash_transaction_repository import SqlAlchemyStockCashTransactionRepository
from .production_repository import SqlAlchemyProductionRepository
from .purchase_input_repository import SqlAlchemyPurchaseInputRepository
from .loan_repository import SqlAlchemyLoanRepository
from .loan_transaction_repository import SqlAlchemyLoanTransactionRepository
from .fee_repository import SqlAlchemyFeeRepository
from .payment_repository import SqlAlchemyPaymentRepository
from .payment_transaction_repository import SqlAlchemyPaymentTransactionRepository
from .payment_allocation_repository import SqlAlchemyPaymentAllocationRepository

__all__ = [
    "SqlAlchemyStockBucketRepository",
    "SqlAlchemyStockCashTransactionRepository",
    "SqlAlchemyProductionRepository",
    "SqlAlchemyPurchaseInputRepository",
    "SqlAlchemyLoanRepository",
    "SqlAlchemyLoanTransactionRepository",
    "SqlAlchemyFeeRepository",
    "SqlAlchemyPaymentRepository",
    "SqlAlchemyPaymentTransactionRepository",
    "SqlAlchemyPaymentAllocationRepository",
]

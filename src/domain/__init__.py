from .base import BaseModel
from .stock_bucket import StockBucket, BucketKey
from .stock_cash_transaction import StockCashTransaction, CashTransactionType, CashReferenceType
from .production import Production, ProductionPaymentStatus
from .purchase_input import PurchaseInput, PurchaseStatus
from .loan import Loan, LoanStatus
from .loan_transaction import LoanTransaction
from .fee import Fee, FeeStatus
from .payment import Payment, PaymentStatus
from .payment_transaction import PaymentTransaction, PaymentTransactionType
from .payment_allocation import PaymentAllocation, ObligationType

__all__ = [
    "BaseModel",
    "StockBucket",
    "BucketKey",
    "StockCashTransaction",
    "CashTransactionType",
    "CashReferenceType",
    "Production",
    "ProductionPaymentStatus",
    "PurchaseInput",
    "PurchaseStatus",
    "Loan",
    "LoanStatus",
    "LoanTransaction",
    "Fee",
    "FeeStatus",
    "Payment",
    "PaymentStatus",
    "PaymentTransaction",
    "PaymentTransactionType",
    "PaymentAllocation",
    "ObligationType",
]

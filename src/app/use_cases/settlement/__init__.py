"""Settlement domain use cases"""
from .record_purchase import RecordPurchase
from .update_purchase import UpdatePurchase
from .delete_purchase import DeletePurchase
from .get_outstanding_loans import GetOutstandingLoans
from .repay_loan import RepayLoan
from .get_obligation_summary import GetObligationSummary
from .settle_payment import SettlePayment
from .update_payment import UpdatePayment
from .delete_payment import DeletePayment
from .record_production import RecordProduction
from .provision_stock import ProvisionStock
from .get_stock_balance import GetStockBalance
from .reconcile_settlements import ReconcileSettlements
from .record_fee import RecordFee
from .dtos import (
    RecordPurchaseCommandDTO,
    UpdatePurchaseCommandDTO,
    PurchaseInputResponseDTO,
    DeletePurchaseResponseDTO,
    LoanResponseDTO,
    OutstandingLoansResponseDTO,
    RecordFeeCommandDTO,
    FeeDTO,
    PaymentResponseDTO,
    ObligationSummaryQueryDTO,
    ObligationSummaryResponseDTO,
    SettlePaymentCommandDTO,
    UpdatePaymentCommandDTO,
    DeletePaymentResponseDTO,
    RecordProductionCommandDTO,
    ProductionResponseDTO,
    ProvisionStockCommandDTO,
    StockBalanceResponseDTO,
    SettlementDiscrepancyDTO,
    ReconciliationResultDTO,
)

__all__ = [
    "RecordPurchase",
    "UpdatePurchase",
    "DeletePurchase",
    "GetOutstandingLoans",
    "RepayLoan",
    "GetObligationSummary",
    "SettlePayment",
    "UpdatePayment",
    "DeletePayment",
    "RecordProduction",
    "ProvisionStock",
    "GetStockBalance",
    "ReconcileSettlements",
    "RecordFee",
    "RecordPurchaseCommandDTO",
    "UpdatePurchaseCommandDTO",
    "PurchaseInputResponseDTO",
    "DeletePurchaseResponseDTO",
    "LoanResponseDTO",
    "OutstandingLoansResponseDTO",
    "RecordFeeCommandDTO",
    "FeeDTO",
    "PaymentResponseDTO",
    "ObligationSummaryQueryDTO",
    "ObligationSummaryResponseDTO",
    "SettlePaymentCommandDTO",
    "UpdatePaymentCommandDTO",
    "DeletePaymentResponseDTO",
    "RecordProductionCommandDTO",
    "ProductionResponseDTO",
    "ProvisionStockCommandDTO",
    "StockBalanceResponseDTO",
    "SettlementDiscrepancyDTO",
    "ReconciliationResultDTO",
]

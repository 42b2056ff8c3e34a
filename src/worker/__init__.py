"""Background workers for the settlement service"""
from .settlement_reconciler import SettlementReconcilerWorker

__all__ = ["SettlementReconcilerWorker"]

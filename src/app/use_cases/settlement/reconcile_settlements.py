"""ReconcileSettlements Use Case

Checks stored balances against the transaction history that produced them.
"""

import logging
import time
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from libs.result import Result, Return, Error
from src.app.repositories.stock_bucket_repository import StockBucketRepository
from src.app.repositories.stock_cash_transaction_repository import StockCashTransactionRepository
from src.app.repositories.purchase_input_repository import PurchaseInputRepository
from src.app.repositories.loan_repository import LoanRepository
from src.app.repositories.loan_transaction_repository import LoanTransactionRepository
from src.app.repositories.payment_repository import PaymentRepository
from src.app.repositories.payment_transaction_repository import PaymentTransactionRepository
from src.app.repositories.fee_repository import FeeRepository
from src.app.repositories.payment_allocation_repository import PaymentAllocationRepository
from src.domain.loan import LoanStatus
from src.domain.money import ZERO, sum_money, to_money
from src.domain.payment_allocation import ObligationType
from src.domain.purchase_input import PurchaseStatus
from .dtos import SettlementDiscrepancyDTO, ReconciliationResultDTO

logger = logging.getLogger(__name__)


class ReconcileSettlements:
    """
    Use Case: Reconcile settlement state

    Business Rules:
    1. Bucket cash equals credits minus debits of its cash transactions
    2. Purchase amount_remaining = total_price - amount_paid, and status is
       loan iff amount_remaining > 0
    3. A loan purchase has a pending loan owing exactly amount_remaining,
       and a paid purchase has no pending loan
    4. Loan repayments plus payment allocations never exceed the principal
    5. Payment amount_paid equals the sum of its payment transactions
    6. Allocations to a fee never exceed the amount it charged
    7. Does NOT modify any data
    """

    def __init__(
        self,
        bucket_repo: StockBucketRepository,
        cash_transaction_repo: StockCashTransactionRepository,
        purchase_repo: PurchaseInputRepository,
        loan_repo: LoanRepository,
        loan_transaction_repo: LoanTransactionRepository,
        payment_repo: PaymentRepository,
        payment_transaction_repo: PaymentTransactionRepository,
        fee_repo: FeeRepository,
        allocation_repo: PaymentAllocationRepository,
    ):
        self.bucket_repo = bucket_repo
        self.cash_transaction_repo = cash_transaction_repo
        self.purchase_repo = purchase_repo
        self.loan_repo = loan_repo
        self.loan_transaction_repo = loan_transaction_repo
        self.payment_repo = payment_repo
        self.payment_transaction_repo = payment_transaction_repo
        self.fee_repo = fee_repo
        self.allocation_repo = allocation_repo

    async def execute(self) -> Result[ReconciliationResultDTO]:
        """
        Execute settlement reconciliation

        Returns:
            Result[ReconciliationResultDTO]: Counts checked and every discrepancy found
        """
        start_time = time.time()
        reconciliation_time = datetime.utcnow()

        try:
            logger.info("Starting settlement reconciliation")
            discrepancies: List[SettlementDiscrepancyDTO] = []

            # Step 1: Bucket cash vs cash transactions
            buckets = await self.bucket_repo.get_all()
            for bucket in buckets:
                net = await self.cash_transaction_repo.get_net_sum_by_bucket(bucket.id)
                self._check(
                    discrepancies, "stock_bucket", bucket.id,
                    f"Cash of stock {bucket.key} does not match its transactions",
                    expected=to_money(net), actual=to_money(bucket.cash),
                )

            # Step 2: Purchases vs their loans
            purchases = await self.purchase_repo.get_all()
            for purchase in purchases:
                remaining = to_money(purchase.total_price) - to_money(purchase.amount_paid)
                self._check(
                    discrepancies, "purchase_input", purchase.id,
                    "amount_remaining differs from total_price - amount_paid",
                    expected=remaining, actual=to_money(purchase.amount_remaining),
                )

                expected_status = PurchaseStatus.LOAN if remaining > ZERO else PurchaseStatus.PAID
                if purchase.status != expected_status:
                    discrepancies.append(
                        SettlementDiscrepancyDTO(
                            entity_type="purchase_input",
                            entity_id=purchase.id,
                            description=(
                                f"Status is {purchase.status.value} but should be {expected_status.value}"
                            ),
                        )
                    )

                if purchase.status == PurchaseStatus.LOAN:
                    loan = await self.loan_repo.get_by_purchase_input_id(purchase.id)
                    if not loan or loan.status != LoanStatus.PENDING:
                        discrepancies.append(
                            SettlementDiscrepancyDTO(
                                entity_type="purchase_input",
                                entity_id=purchase.id,
                                description="Loan purchase has no pending loan",
                                expected=to_money(purchase.amount_remaining),
                            )
                        )
                    else:
                        self._check(
                            discrepancies, "loan", loan.id,
                            f"Loan amount_owed differs from purchase {purchase.id} amount_remaining",
                            expected=to_money(purchase.amount_remaining), actual=to_money(loan.amount_owed),
                        )
                else:
                    loan = await self.loan_repo.get_by_purchase_input_id(purchase.id)
                    if loan and loan.status == LoanStatus.PENDING:
                        discrepancies.append(
                            SettlementDiscrepancyDTO(
                                entity_type="purchase_input",
                                entity_id=purchase.id,
                                description=f"Paid purchase still has pending loan {loan.id}",
                                expected=ZERO,
                                actual=to_money(loan.amount_owed),
                            )
                        )

            # Step 3: Loan repayments and allocations
            loans = await self.loan_repo.get_all()
            for loan in loans:
                repaid = sum_money(
                    t.amount_paid for t in await self.loan_transaction_repo.get_by_loan_id(loan.id)
                )
                allocated = sum_money(
                    a.amount for a in await self.allocation_repo.get_by_obligation(ObligationType.LOAN, loan.id)
                )
                if repaid + allocated > to_money(loan.principal):
                    discrepancies.append(
                        SettlementDiscrepancyDTO(
                            entity_type="loan",
                            entity_id=loan.id,
                            description="Repayments and allocations exceed the loan principal",
                            expected=to_money(loan.principal),
                            actual=repaid + allocated,
                        )
                    )

            # Step 4: Payments vs payment transactions
            payments = await self.payment_repo.get_all()
            for payment in payments:
                applied = sum_money(
                    t.amount_paid for t in await self.payment_transaction_repo.get_by_payment_id(payment.id)
                )
                self._check(
                    discrepancies, "payment", payment.id,
                    "amount_paid differs from the sum of its transactions",
                    expected=applied, actual=to_money(payment.amount_paid),
                )

            # Step 5: Fee allocations
            fees = await self.fee_repo.get_all()
            for fee in fees:
                allocated = sum_money(
                    a.amount for a in await self.allocation_repo.get_by_obligation(ObligationType.FEE, fee.id)
                )
                if allocated > to_money(fee.amount_owed) or to_money(fee.amount_paid) > to_money(fee.amount_owed):
                    discrepancies.append(
                        SettlementDiscrepancyDTO(
                            entity_type="fee",
                            entity_id=fee.id,
                            description="Payments applied to the fee exceed the amount charged",
                            expected=to_money(fee.amount_owed),
                            actual=max(allocated, to_money(fee.amount_paid)),
                        )
                    )

            execution_time_ms = int((time.time() - start_time) * 1000)

            response = ReconciliationResultDTO(
                total_buckets_checked=len(buckets),
                total_purchases_checked=len(purchases),
                total_loans_checked=len(loans),
                total_payments_checked=len(payments),
                total_fees_checked=len(fees),
                discrepancies_found=len(discrepancies),
                discrepancies=discrepancies,
                reconciliation_time=reconciliation_time,
                execution_time_ms=execution_time_ms,
            )

            if discrepancies:
                logger.warning(
                    f"Reconciliation complete. Found {len(discrepancies)} discrepancies in {execution_time_ms}ms"
                )
            else:
                logger.info(f"Reconciliation complete. All settlements balanced in {execution_time_ms}ms")

            return Return.ok(response)

        except Exception as e:
            logger.error(f"Settlement reconciliation failed: {e}")
            return Return.err(
                Error(
                    code="RECONCILIATION_FAILED",
                    message="Failed to reconcile settlements",
                    reason=str(e),
                )
            )

    @staticmethod
    def _check(
        discrepancies: List[SettlementDiscrepancyDTO],
        entity_type: str,
        entity_id: int,
        description: str,
        expected: Decimal,
        actual: Optional[Decimal],
    ) -> None:
        if expected == actual:
            return

        discrepancies.append(
            SettlementDiscrepancyDTO(
                entity_type=entity_type,
                entity_id=entity_id,
                description=description,
                expected=expected,
                actual=actual,
            )
        )
        logger.warning(
            f"Discrepancy on {entity_type} {entity_id}: {description} "
            f"(expected={expected}, actual={actual})"
        )

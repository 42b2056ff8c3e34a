"""Obligation Allocator Service

Applies what a payment withholds from a production to the member's fees and
loans, and takes it back when the payment goes away.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import List
from src.app.repositories.fee_repository import FeeRepository
from src.app.repositories.loan_repository import LoanRepository
from src.app.repositories.loan_transaction_repository import LoanTransactionRepository
from src.app.repositories.purchase_input_repository import PurchaseInputRepository
from src.app.repositories.payment_allocation_repository import PaymentAllocationRepository
from src.app.services.obligation_aggregator import ObligationSummary
from src.domain.errors import ConflictError, NotFoundError
from src.domain.fee import Fee, FeeStatus
from src.domain.loan import Loan, LoanStatus
from src.domain.money import ZERO, sum_money, to_money
from src.domain.payment import Payment
from src.domain.payment_allocation import PaymentAllocation, ObligationType
from src.domain.purchase_input import PurchaseStatus

logger = logging.getLogger(__name__)


def fee_status(fee: Fee) -> FeeStatus:
    if fee.remaining_amount <= ZERO:
        return FeeStatus.PAID
    if to_money(fee.amount_paid) > ZERO:
        return FeeStatus.PARTIAL
    return FeeStatus.UNPAID


class ObligationAllocator:
    """
    Allocates payment deductions to fees and loans

    Business Rules:
    1. Fees are covered before loans, each oldest first
    2. One payment allocates at most the value of its production
    3. Every allocation is recorded with what the obligation still owes
    4. A loan covered in full is repaid; its purchase follows the loan balance
    5. Reversal is refused once an allocated loan received a repayment
    6. Writes never commit; the calling use case owns the unit of work
    """

    def __init__(
        self,
        fee_repo: FeeRepository,
        loan_repo: LoanRepository,
        loan_transaction_repo: LoanTransactionRepository,
        purchase_repo: PurchaseInputRepository,
        allocation_repo: PaymentAllocationRepository,
    ):
        self.fee_repo = fee_repo
        self.loan_repo = loan_repo
        self.loan_transaction_repo = loan_transaction_repo
        self.purchase_repo = purchase_repo
        self.allocation_repo = allocation_repo

    async def allocate(self, payment: Payment, summary: ObligationSummary) -> List[PaymentAllocation]:
        """
        Apply the outstanding obligations of a summary to a payment

        Obligations already allocated to this payment are counted in the
        summary and are not applied twice.

        Returns:
            The allocations written by this call
        """
        capacity = summary.production_total - summary.already_allocated
        allocations: List[PaymentAllocation] = []

        for fee in summary.fees:
            if capacity <= ZERO:
                break
            portion = min(to_money(fee.remaining_amount), capacity)
            if portion <= ZERO:
                continue

            fee.amount_paid = to_money(fee.amount_paid) + portion
            fee.status = fee_status(fee)
            if fee.status == FeeStatus.PAID:
                fee.paid_at = datetime.utcnow()
            await self.fee_repo.update(fee)

            allocations.append(
                await self._record(payment, ObligationType.FEE, fee.id, portion, fee.remaining_amount)
            )
            capacity -= portion

        for loan in summary.loans:
            if capacity <= ZERO:
                break
            portion = min(to_money(loan.amount_owed), capacity)
            if portion <= ZERO:
                continue

            loan.amount_owed = to_money(loan.amount_owed) - portion
            if loan.amount_owed <= ZERO:
                loan.status = LoanStatus.REPAID
            await self.loan_repo.update(loan)
            await self._shift_purchase(loan, portion)

            allocations.append(
                await self._record(payment, ObligationType.LOAN, loan.id, portion, loan.amount_owed)
            )
            capacity -= portion

        if allocations:
            logger.info(
                f"Payment {payment.id} allocated {sum_money(a.amount for a in allocations)} "
                f"to {len(allocations)} obligations"
            )
        return allocations

    async def reverse(self, payment: Payment) -> Decimal:
        """
        Return every allocation of a payment to its fee or loan

        Returns:
            Total amount given back to the obligations

        Raises:
            NotFoundError: an allocated fee or loan no longer exists
            ConflictError: an allocated loan was repaid since
        """
        allocations = await self.allocation_repo.get_by_payment_id(payment.id)

        for allocation in allocations:
            amount = to_money(allocation.amount)

            if allocation.obligation_type == ObligationType.FEE:
                fee = await self.fee_repo.get_by_id(allocation.obligation_id, for_update=True)
                if not fee:
                    raise NotFoundError(f"Fee {allocation.obligation_id} not found")
                fee.amount_paid = to_money(fee.amount_paid) - amount
                fee.status = fee_status(fee)
                if fee.status != FeeStatus.PAID:
                    fee.paid_at = None
                await self.fee_repo.update(fee)
                continue

            loan = await self.loan_repo.get_by_id(allocation.obligation_id, for_update=True)
            if not loan:
                raise NotFoundError(f"Loan {allocation.obligation_id} not found")
            if await self.loan_transaction_repo.get_by_loan_id(loan.id):
                raise ConflictError(
                    f"Loan {loan.id} was repaid after payment {payment.id} withheld part of it",
                    reason=f"payment_id={payment.id}, loan_id={loan.id}",
                )
            loan.amount_owed = to_money(loan.amount_owed) + amount
            loan.status = LoanStatus.PENDING
            await self.loan_repo.update(loan)
            await self._shift_purchase(loan, -amount)

        await self.allocation_repo.delete_by_payment_id(payment.id)

        total = sum_money(a.amount for a in allocations)
        if allocations:
            logger.info(f"Reversed {total} allocated by payment {payment.id}")
        return total

    async def _record(
        self,
        payment: Payment,
        obligation_type: ObligationType,
        obligation_id: int,
        amount: Decimal,
        amount_remaining: Decimal,
    ) -> PaymentAllocation:
        return await self.allocation_repo.create(
            PaymentAllocation(
                payment_id=payment.id,
                obligation_type=obligation_type,
                obligation_id=obligation_id,
                amount=amount,
                amount_remaining=amount_remaining,
            )
        )

    async def _shift_purchase(self, loan: Loan, amount: Decimal) -> None:
        # The purchase balance always mirrors the loan balance
        if loan.purchase_input_id is None:
            return
        purchase = await self.purchase_repo.get_by_id(loan.purchase_input_id, for_update=True)
        if not purchase:
            return

        purchase.amount_paid = to_money(purchase.amount_paid) + amount
        purchase.amount_remaining = to_money(purchase.amount_remaining) - amount
        purchase.status = PurchaseStatus.LOAN if purchase.amount_remaining > ZERO else PurchaseStatus.PAID
        await self.purchase_repo.update(purchase)

"""Obligation Aggregator Service

Nets a production's value against what the member still owes. Read only and
always computed fresh from the repositories.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional
from src.app.repositories.fee_repository import FeeRepository
from src.app.repositories.loan_repository import LoanRepository
from src.app.repositories.payment_repository import PaymentRepository
from src.app.repositories.payment_allocation_repository import PaymentAllocationRepository
from src.domain.fee import Fee
from src.domain.loan import Loan
from src.domain.money import ZERO, sum_money, to_money
from src.domain.payment import Payment
from src.domain.payment_allocation import ObligationType
from src.domain.production import Production


@dataclass(frozen=True)
class ObligationSummary:
    """
    Net payable for one production of a member

    fees_due and loans_due include what this production's payment already
    withheld (allocated_fees, allocated_loans) plus what is still outstanding.
    """

    production: Production
    production_total: Decimal
    fees_due: Decimal
    loans_due: Decimal
    previous_remaining: Decimal
    already_paid: Decimal = ZERO
    allocated_fees: Decimal = ZERO
    allocated_loans: Decimal = ZERO
    fees: List[Fee] = field(default_factory=list)
    loans: List[Loan] = field(default_factory=list)
    previous_payments: List[Payment] = field(default_factory=list)

    @property
    def total_deductions(self) -> Decimal:
        return self.fees_due + self.loans_due + self.previous_remaining

    @property
    def amount_due(self) -> Decimal:
        # Not clamped: a negative value means the member owes more than the
        # production covers
        return self.production_total - self.total_deductions

    @property
    def payable(self) -> Decimal:
        """What may still be disbursed for this production"""
        return self.amount_due - self.already_paid

    @property
    def already_allocated(self) -> Decimal:
        return self.allocated_fees + self.allocated_loans


class ObligationAggregator:

    def __init__(
        self,
        fee_repo: FeeRepository,
        loan_repo: LoanRepository,
        payment_repo: PaymentRepository,
        allocation_repo: PaymentAllocationRepository,
    ):
        self.fee_repo = fee_repo
        self.loan_repo = loan_repo
        self.payment_repo = payment_repo
        self.allocation_repo = allocation_repo

    async def summarize(
        self, production: Production, gross_amount: Optional[Decimal] = None
    ) -> ObligationSummary:
        """
        Compute the obligation summary for a production

        Args:
            production: Production being settled (gives user and season)
            gross_amount: Optional override of the production value

        Returns:
            ObligationSummary with totals and the records behind them
        """
        user_id = production.user_id
        season_id = production.season_id

        fees = [
            fee for fee in await self.fee_repo.get_outstanding_by_user(user_id, season_id)
            if fee.remaining_amount > ZERO
        ]
        loans = await self.loan_repo.get_pending_by_user(user_id, season_id)
        previous_payments = await self.payment_repo.get_by_user_and_season(
            user_id, season_id, exclude_production_id=production.id
        )
        current_payment = await self.payment_repo.get_by_production_id(production.id)

        allocations = []
        if current_payment:
            allocations = await self.allocation_repo.get_by_payment_id(current_payment.id)
        allocated_fees = sum_money(a.amount for a in allocations if a.obligation_type == ObligationType.FEE)
        allocated_loans = sum_money(a.amount for a in allocations if a.obligation_type == ObligationType.LOAN)

        production_total = to_money(gross_amount if gross_amount is not None else production.total_price)

        return ObligationSummary(
            production=production,
            production_total=production_total,
            fees_due=allocated_fees + sum_money(fee.remaining_amount for fee in fees),
            loans_due=allocated_loans + sum_money(loan.amount_owed for loan in loans),
            previous_remaining=sum_money(p.amount_remaining_to_pay for p in previous_payments),
            already_paid=to_money(current_payment.amount_paid) if current_payment else ZERO,
            allocated_fees=allocated_fees,
            allocated_loans=allocated_loans,
            fees=fees,
            loans=loans,
            previous_payments=previous_payments,
        )

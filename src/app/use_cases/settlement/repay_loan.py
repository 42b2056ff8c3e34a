"""RepayLoan Use Case

Closes a pending loan, returning principal plus interest to the stock bucket
of the loan's product and season.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.stock_ledger import StockLedger
from src.app.repositories.loan_repository import LoanRepository
from src.app.repositories.loan_transaction_repository import LoanTransactionRepository
from src.app.repositories.purchase_input_repository import PurchaseInputRepository
from src.domain.errors import ConflictError, NotFoundError, SettlementError
from src.domain.loan import LoanStatus
from src.domain.loan_transaction import LoanTransaction
from src.domain.money import ZERO, to_money
from src.domain.purchase_input import PurchaseStatus
from src.domain.stock_bucket import BucketKey
from src.domain.stock_cash_transaction import CashReferenceType
from .dtos import LoanResponseDTO
from .mappers import loan_to_dto

logger = logging.getLogger(__name__)


class RepayLoan:
    """
    Use Case: Repay a loan in full

    Business Rules:
    1. Only pending loans can be repaid; a repaid loan yields ConflictError
    2. Repayment amount = amount_owed + amount_owed * interest / 100
    3. The full repayment (interest included) is credited to the bucket
    4. A LoanTransaction records the repayment
    5. The originating purchase becomes fully paid
    6. All of the above is one unit of work

    Flow:
    1. Lock the loan and check status
    2. Compute interest and total
    3. Record the loan transaction
    4. Mark loan and purchase settled
    5. Credit the bucket
    6. Commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        loan_repo: LoanRepository,
        loan_transaction_repo: LoanTransactionRepository,
        purchase_repo: PurchaseInputRepository,
        ledger: StockLedger,
    ):
        self.uow = uow
        self.loan_repo = loan_repo
        self.loan_transaction_repo = loan_transaction_repo
        self.purchase_repo = purchase_repo
        self.ledger = ledger

    async def execute(self, loan_id: int) -> Result[LoanResponseDTO]:
        try:
            # Step 1: Lock loan
            loan = await self.loan_repo.get_by_id(loan_id, for_update=True)
            if not loan:
                raise NotFoundError(f"Loan {loan_id} not found")

            if loan.status == LoanStatus.REPAID:
                raise ConflictError(f"Loan {loan_id} is already repaid", reason="status=repaid")

            # Step 2: Interest on what is owed
            principal = to_money(loan.amount_owed)
            interest_amount = loan.interest_amount
            total = principal + interest_amount

            # Step 3: Record repayment
            await self.loan_transaction_repo.create(
                LoanTransaction(
                    loan_id=loan.id,
                    amount_paid=principal,
                    interest_paid=interest_amount,
                    amount_remaining_to_pay=ZERO,
                )
            )

            # Step 4: Settle loan and purchase
            loan.amount_owed = ZERO
            loan.status = LoanStatus.REPAID
            await self.loan_repo.update(loan)

            if loan.purchase_input_id is not None:
                purchase = await self.purchase_repo.get_by_id(loan.purchase_input_id, for_update=True)
                if purchase:
                    purchase.amount_paid = purchase.total_price
                    purchase.amount_remaining = ZERO
                    purchase.status = PurchaseStatus.PAID
                    await self.purchase_repo.update(purchase)

            # Step 5: Return the cash to the bucket
            if total > ZERO:
                await self.ledger.credit(
                    BucketKey(loan.product_id, loan.season_id),
                    total,
                    CashReferenceType.LOAN.value,
                    str(loan.id),
                )

            # Step 6: Commit
            await self.uow.commit()

            logger.info(
                f"Repaid loan {loan.id} for user {loan.user_id}: "
                f"principal={principal}, interest={interest_amount}"
            )
            return Return.ok(loan_to_dto(loan))

        except SettlementError as e:
            await self.uow.rollback()
            logger.warning(f"Loan {loan_id} repayment rejected: {e.message}")
            return Return.err(e.to_error())

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to repay loan {loan_id}: {e}")
            return Return.err(
                Error(
                    code="REPAY_LOAN_FAILED",
                    message="Failed to repay loan",
                    reason=str(e),
                )
            )

"""DeletePurchase Use Case

Removes a purchase, reversing the cash it credited and its pending loan.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.stock_ledger import StockLedger
from src.app.repositories.purchase_input_repository import PurchaseInputRepository
from src.app.repositories.loan_repository import LoanRepository
from src.app.repositories.loan_transaction_repository import LoanTransactionRepository
from src.domain.errors import ConflictError, NotFoundError, SettlementError
from src.domain.loan import LoanStatus
from src.domain.money import ZERO, to_money
from src.domain.stock_bucket import BucketKey
from src.domain.stock_cash_transaction import CashReferenceType
from .dtos import DeletePurchaseResponseDTO

logger = logging.getLogger(__name__)


class DeletePurchase:
    """
    Use Case: Delete a purchase

    Business Rules:
    1. The cash credited at purchase time is debited back (may fail with
       InsufficientFundsError if it was already disbursed)
    2. The pending loan is removed with the purchase
    3. Deletion is refused with ConflictError once the loan received any
       repayment or payment allocation; that has to be unwound first
    """

    def __init__(
        self,
        uow: UnitOfWork,
        purchase_repo: PurchaseInputRepository,
        loan_repo: LoanRepository,
        loan_transaction_repo: LoanTransactionRepository,
        ledger: StockLedger,
    ):
        self.uow = uow
        self.purchase_repo = purchase_repo
        self.loan_repo = loan_repo
        self.loan_transaction_repo = loan_transaction_repo
        self.ledger = ledger

    async def execute(self, purchase_id: int) -> Result[DeletePurchaseResponseDTO]:
        try:
            purchase = await self.purchase_repo.get_by_id(purchase_id, for_update=True)
            if not purchase:
                raise NotFoundError(f"Purchase {purchase_id} not found")

            loan = await self.loan_repo.get_by_purchase_input_id(purchase.id)
            if loan and (
                loan.status == LoanStatus.REPAID
                or to_money(loan.amount_owed) < to_money(loan.principal)
                or await self.loan_transaction_repo.get_by_loan_id(loan.id)
            ):
                raise ConflictError(
                    f"Purchase {purchase.id} cannot be deleted: its loan {loan.id} has repayments",
                    reason=f"loan_status={loan.status.value}",
                )

            reversed_amount = to_money(purchase.amount_paid)
            if reversed_amount > ZERO:
                await self.ledger.debit(
                    BucketKey(purchase.product_id, purchase.season_id),
                    reversed_amount,
                    CashReferenceType.PURCHASE_INPUT.value,
                    str(purchase.id),
                )

            if loan:
                await self.loan_repo.delete(loan)

            await self.purchase_repo.delete(purchase)
            await self.uow.commit()

            logger.info(f"Deleted purchase {purchase_id}, reversed {reversed_amount}")
            return Return.ok(
                DeletePurchaseResponseDTO(
                    purchase_id=purchase_id,
                    reversed_amount=reversed_amount,
                    loan_removed=loan is not None,
                )
            )

        except SettlementError as e:
            await self.uow.rollback()
            logger.warning(f"Purchase {purchase_id} deletion rejected: {e.message}")
            return Return.err(e.to_error())

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to delete purchase {purchase_id}: {e}")
            return Return.err(
                Error(
                    code="DELETE_PURCHASE_FAILED",
                    message="Failed to delete purchase",
                    reason=str(e),
                )
            )

"""UpdatePurchase Use Case

Changes quantity, unit price, amount paid or interest of a purchase and
reconciles the stock bucket and the loan by the signed differences.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.stock_ledger import StockLedger
from src.app.repositories.purchase_input_repository import PurchaseInputRepository
from src.app.repositories.loan_repository import LoanRepository
from src.app.repositories.loan_transaction_repository import LoanTransactionRepository
from src.domain.errors import ConflictError, NotFoundError, SettlementError, ValidationError
from src.domain.loan import Loan, LoanStatus
from src.domain.money import ZERO, exact_money, to_money, to_quantity
from src.domain.purchase_input import PurchaseStatus
from src.domain.stock_bucket import BucketKey
from src.domain.stock_cash_transaction import CashReferenceType
from .dtos import UpdatePurchaseCommandDTO, PurchaseInputResponseDTO
from .mappers import purchase_to_dto

logger = logging.getLogger(__name__)


class UpdatePurchase:
    """
    Use Case: Update a purchase

    Business Rules:
    1. Totals are recomputed from scratch from the merged values
    2. The bucket receives only the signed difference of amount_paid
       (credit when it grows, debit when it shrinks)
    3. The loan's owed amount moves by the signed difference of
       amount_remaining; a loan appears or disappears with the balance
    4. A purchase whose loan already received a repayment or a payment
       allocation cannot change
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

    async def execute(self, command: UpdatePurchaseCommandDTO) -> Result[PurchaseInputResponseDTO]:
        try:
            purchase = await self.purchase_repo.get_by_id(command.purchase_id, for_update=True)
            if not purchase:
                raise NotFoundError(f"Purchase {command.purchase_id} not found")

            loan = await self.loan_repo.get_by_purchase_input_id(purchase.id)
            if loan and (
                loan.status == LoanStatus.REPAID
                or to_money(loan.amount_owed) < to_money(loan.principal)
                or await self.loan_transaction_repo.get_by_loan_id(loan.id)
            ):
                raise ConflictError(
                    f"Purchase {purchase.id} cannot be changed: its loan {loan.id} has repayments",
                    reason=f"loan_status={loan.status.value}",
                )

            quantity = to_quantity(command.quantity) if command.quantity is not None else purchase.quantity
            unit_price = exact_money(
                command.unit_price if command.unit_price is not None else purchase.unit_price, "unit_price"
            )
            amount_paid = exact_money(
                command.amount_paid if command.amount_paid is not None else purchase.amount_paid, "amount_paid"
            )
            total_price = to_money(quantity * unit_price, "total_price")

            if amount_paid > total_price:
                raise ValidationError(
                    f"Amount paid ({amount_paid}) exceeds total price ({total_price})",
                    reason=f"amount_paid={amount_paid}, total_price={total_price}",
                )

            amount_remaining = total_price - amount_paid
            status = PurchaseStatus.LOAN if amount_remaining > ZERO else PurchaseStatus.PAID
            if status == PurchaseStatus.LOAN:
                interest = exact_money(
                    command.interest if command.interest is not None else purchase.interest, "interest"
                )
            else:
                interest = ZERO

            cash_diff = amount_paid - to_money(purchase.amount_paid)
            owed_diff = amount_remaining - to_money(purchase.amount_remaining)

            key = BucketKey(purchase.product_id, purchase.season_id)
            if cash_diff > ZERO:
                await self.ledger.credit(
                    key, cash_diff, CashReferenceType.PURCHASE_INPUT.value, str(purchase.id)
                )
            elif cash_diff < ZERO:
                await self.ledger.debit(
                    key, -cash_diff, CashReferenceType.PURCHASE_INPUT.value, str(purchase.id)
                )

            purchase.quantity = quantity
            purchase.unit_price = unit_price
            purchase.total_price = total_price
            purchase.amount_paid = amount_paid
            purchase.amount_remaining = amount_remaining
            purchase.status = status
            purchase.interest = interest
            await self.purchase_repo.update(purchase)

            loan_id = None
            if status == PurchaseStatus.LOAN:
                if loan:
                    loan.amount_owed = to_money(loan.amount_owed) + owed_diff
                    loan.principal = loan.amount_owed
                    loan.quantity = quantity
                    loan.interest = interest
                    await self.loan_repo.update(loan)
                else:
                    loan = await self.loan_repo.create(
                        Loan(
                            purchase_input_id=purchase.id,
                            user_id=purchase.user_id,
                            product_id=purchase.product_id,
                            season_id=purchase.season_id,
                            quantity=quantity,
                            principal=amount_remaining,
                            amount_owed=amount_remaining,
                            interest=interest,
                            status=LoanStatus.PENDING,
                        )
                    )
                loan_id = loan.id
            elif loan:
                await self.loan_repo.delete(loan)

            await self.uow.commit()

            logger.info(
                f"Updated purchase {purchase.id}: cash_diff={cash_diff}, owed_diff={owed_diff}, "
                f"status={status.value}"
            )
            return Return.ok(purchase_to_dto(purchase, loan_id=loan_id))

        except SettlementError as e:
            await self.uow.rollback()
            logger.warning(f"Purchase {command.purchase_id} update rejected: {e.message}")
            return Return.err(e.to_error())

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to update purchase {command.purchase_id}: {e}")
            return Return.err(
                Error(
                    code="UPDATE_PURCHASE_FAILED",
                    message="Failed to update purchase",
                    reason=str(e),
                )
            )

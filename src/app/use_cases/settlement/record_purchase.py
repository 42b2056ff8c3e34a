"""RecordPurchase Use Case

Records a member's purchase, credits the cash received to the product-season
stock bucket and turns any unpaid balance into a loan.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.stock_ledger import StockLedger
from src.app.repositories.purchase_input_repository import PurchaseInputRepository
from src.app.repositories.loan_repository import LoanRepository
from src.domain.errors import SettlementError, ValidationError
from src.domain.loan import Loan, LoanStatus
from src.domain.money import ZERO, exact_money, to_money, to_quantity
from src.domain.purchase_input import PurchaseInput, PurchaseStatus
from src.domain.stock_bucket import BucketKey
from src.domain.stock_cash_transaction import CashReferenceType
from .dtos import RecordPurchaseCommandDTO, PurchaseInputResponseDTO
from .mappers import purchase_to_dto

logger = logging.getLogger(__name__)


class RecordPurchase:
    """
    Use Case: Record a purchase

    Business Rules:
    1. total_price = quantity * unit_price
    2. amount_paid may not exceed total_price
    3. status is loan iff a balance remains
    4. Only the cash actually received is credited to the stock bucket
    5. A remaining balance becomes a pending loan owing exactly that balance
    6. Purchase, credit and loan are committed together or not at all

    Flow:
    1. Compute totals and validate
    2. Persist the purchase
    3. Credit the bucket with amount_paid
    4. Create the loan when a balance remains
    5. Commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        purchase_repo: PurchaseInputRepository,
        loan_repo: LoanRepository,
        ledger: StockLedger,
    ):
        self.uow = uow
        self.purchase_repo = purchase_repo
        self.loan_repo = loan_repo
        self.ledger = ledger

    async def execute(self, command: RecordPurchaseCommandDTO) -> Result[PurchaseInputResponseDTO]:
        """
        Execute purchase recording

        Args:
            command: RecordPurchaseCommandDTO

        Returns:
            Result[PurchaseInputResponseDTO]: Recorded purchase (with loan_id for loans) or error
        """
        try:
            # Step 1: Compute totals
            quantity = to_quantity(command.quantity)
            unit_price = exact_money(command.unit_price, "unit_price")
            amount_paid = exact_money(command.amount_paid, "amount_paid")
            total_price = to_money(quantity * unit_price, "total_price")
            if total_price <= ZERO:
                raise ValidationError(
                    f"Total price of {quantity} x {unit_price} rounds to zero",
                    reason=f"quantity={quantity}, unit_price={unit_price}",
                )

            if amount_paid > total_price:
                raise ValidationError(
                    f"Amount paid ({amount_paid}) exceeds total price ({total_price})",
                    reason=f"amount_paid={amount_paid}, total_price={total_price}",
                )

            amount_remaining = total_price - amount_paid
            status = PurchaseStatus.LOAN if amount_remaining > ZERO else PurchaseStatus.PAID
            interest = (
                exact_money(command.interest or 0, "interest")
                if status == PurchaseStatus.LOAN
                else ZERO
            )

            # Step 2: Persist purchase
            purchase = await self.purchase_repo.create(
                PurchaseInput(
                    user_id=command.user_id,
                    product_id=command.product_id,
                    season_id=command.season_id,
                    quantity=quantity,
                    unit_price=unit_price,
                    total_price=total_price,
                    amount_paid=amount_paid,
                    amount_remaining=amount_remaining,
                    status=status,
                    interest=interest,
                )
            )

            # Step 3: Credit the cash received
            if amount_paid > ZERO:
                await self.ledger.credit(
                    BucketKey(command.product_id, command.season_id),
                    amount_paid,
                    reference_type=CashReferenceType.PURCHASE_INPUT.value,
                    reference_id=str(purchase.id),
                )

            # Step 4: Carry the balance as a loan
            loan = None
            if status == PurchaseStatus.LOAN:
                loan = await self.loan_repo.create(
                    Loan(
                        purchase_input_id=purchase.id,
                        user_id=command.user_id,
                        product_id=command.product_id,
                        season_id=command.season_id,
                        quantity=quantity,
                        principal=amount_remaining,
                        amount_owed=amount_remaining,
                        interest=interest,
                        status=LoanStatus.PENDING,
                    )
                )

            # Step 5: Commit
            await self.uow.commit()

            logger.info(
                f"Recorded purchase {purchase.id} for user {command.user_id}: "
                f"total={total_price}, paid={amount_paid}, status={status.value}"
            )
            return Return.ok(purchase_to_dto(purchase, loan_id=loan.id if loan else None))

        except SettlementError as e:
            await self.uow.rollback()
            logger.warning(f"Purchase rejected for user {command.user_id}: {e.message}")
            return Return.err(e.to_error())

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to record purchase for user {command.user_id}: {e}")
            return Return.err(
                Error(
                    code="RECORD_PURCHASE_FAILED",
                    message="Failed to record purchase",
                    reason=str(e),
                )
            )

"""SettlePayment Use Case

Pays a member for a production out of the product-season stock bucket.
"""

import logging
from decimal import Decimal
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.stock_ledger import StockLedger
from src.app.services.obligation_aggregator import ObligationAggregator
from src.app.services.obligation_allocator import ObligationAllocator
from src.app.repositories.production_repository import ProductionRepository
from src.app.repositories.payment_repository import PaymentRepository
from src.app.repositories.payment_transaction_repository import PaymentTransactionRepository
from src.domain.errors import NotFoundError, SettlementError, ValidationError
from src.domain.money import ZERO, exact_money, to_money
from src.domain.payment import Payment, PaymentStatus
from src.domain.payment_transaction import PaymentTransaction, PaymentTransactionType
from src.domain.production import Production, ProductionPaymentStatus
from src.domain.stock_bucket import BucketKey
from src.domain.stock_cash_transaction import CashReferenceType
from .dtos import SettlePaymentCommandDTO, PaymentResponseDTO
from .mappers import payment_to_dto

logger = logging.getLogger(__name__)


def payment_status(amount_paid: Decimal, amount_remaining: Decimal) -> PaymentStatus:
    if amount_remaining <= ZERO:
        return PaymentStatus.PAID
    if amount_paid > ZERO:
        return PaymentStatus.PARTIAL
    return PaymentStatus.PENDING


def production_status(amount_remaining: Decimal) -> ProductionPaymentStatus:
    if amount_remaining <= ZERO:
        return ProductionPaymentStatus.PAID
    return ProductionPaymentStatus.PENDING


class SettlePayment:
    """
    Use Case: Settle a payment for a production

    Business Rules:
    1. amount_paid must be > 0
    2. The obligation summary is recomputed inside the same transaction
    3. amount_paid may not exceed amount_due minus what was already paid for
       this production (ValidationError)
    4. The bucket debit is atomic; insufficient cash raises
       InsufficientFundsError regardless of the obligation math
    5. A second settlement for the same production tops up its payment
    6. Outstanding fees and loans covered by the deductions are allocated
       to this payment, so no later production deducts them again
    7. Every settlement appends a PaymentTransaction snapshot
    8. All writes commit together or not at all

    Flow:
    1. Lock the production
    2. Summarize obligations
    3. Validate the amount
    4. Create or top up the payment
    5. Debit the bucket
    6. Allocate deductions to fees and loans
    7. Record the payment transaction and production status
    8. Commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        production_repo: ProductionRepository,
        payment_repo: PaymentRepository,
        payment_transaction_repo: PaymentTransactionRepository,
        aggregator: ObligationAggregator,
        ledger: StockLedger,
        allocator: ObligationAllocator,
    ):
        self.uow = uow
        self.production_repo = production_repo
        self.payment_repo = payment_repo
        self.payment_transaction_repo = payment_transaction_repo
        self.aggregator = aggregator
        self.ledger = ledger
        self.allocator = allocator

    async def execute(self, command: SettlePaymentCommandDTO) -> Result[PaymentResponseDTO]:
        """
        Execute payment settlement

        Args:
            command: SettlePaymentCommandDTO

        Returns:
            Result[PaymentResponseDTO]: Payment after settlement or error
        """
        try:
            amount = exact_money(command.amount_paid, "amount_paid")
            if amount <= ZERO:
                raise ValidationError("amount_paid must be greater than 0", reason=f"amount_paid={amount}")

            # Step 1: Lock production
            production = await self.production_repo.get_by_id(command.production_id, for_update=True)
            if not production:
                raise NotFoundError(f"Production {command.production_id} not found")

            # Step 2: Fresh obligations
            summary = await self.aggregator.summarize(production)

            # Step 3: Validate amount
            if amount > summary.payable:
                raise ValidationError(
                    f"Amount paid ({amount}) exceeds amount due ({summary.payable})",
                    reason=(
                        f"amount_due={summary.amount_due}, already_paid={summary.already_paid}, "
                        f"requested={amount}"
                    ),
                )

            # Step 4: Create or top up payment
            payment = await self.payment_repo.get_by_production_id(production.id, for_update=True)
            if payment:
                paid = to_money(payment.amount_paid) + amount
                self._apply_snapshot(payment, summary.production_total, summary.total_deductions, paid)
                payment = await self.payment_repo.update(payment)
            else:
                payment = Payment(
                    production_id=production.id,
                    user_id=production.user_id,
                    season_id=production.season_id,
                    product_id=production.product_id,
                )
                self._apply_snapshot(payment, summary.production_total, summary.total_deductions, amount)
                payment = await self.payment_repo.create(payment)

            # Step 5: Debit the bucket
            await self.ledger.debit(
                BucketKey(production.product_id, production.season_id),
                amount,
                CashReferenceType.PAYMENT.value,
                str(payment.id),
            )

            # Step 6: Apply deductions to the obligations they cover
            await self.allocator.allocate(payment, summary)

            # Step 7: Record transaction and production status
            await self.payment_transaction_repo.create(
                PaymentTransaction(
                    payment_id=payment.id,
                    transaction_type=PaymentTransactionType.SETTLE,
                    amount_paid=amount,
                    amount_remaining_to_pay=payment.amount_remaining_to_pay,
                )
            )
            await self._update_production(production, payment.amount_remaining_to_pay)

            # Step 8: Commit
            await self.uow.commit()

            logger.info(
                f"Settled {amount} for production {production.id} of user {production.user_id}: "
                f"payment={payment.id}, remaining={payment.amount_remaining_to_pay}"
            )
            return Return.ok(payment_to_dto(payment))

        except SettlementError as e:
            await self.uow.rollback()
            logger.warning(f"Settlement rejected for production {command.production_id}: {e.message}")
            return Return.err(e.to_error())

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to settle payment for production {command.production_id}: {e}")
            return Return.err(
                Error(
                    code="SETTLE_PAYMENT_FAILED",
                    message="Failed to settle payment",
                    reason=str(e),
                )
            )

    @staticmethod
    def _apply_snapshot(
        payment: Payment, gross_amount: Decimal, total_deductions: Decimal, amount_paid: Decimal
    ) -> None:
        amount_due = gross_amount - total_deductions
        payment.gross_amount = gross_amount
        payment.total_deductions = total_deductions
        payment.amount_due = amount_due
        payment.amount_paid = amount_paid
        payment.amount_remaining_to_pay = amount_due - amount_paid
        payment.status = payment_status(amount_paid, payment.amount_remaining_to_pay)

    async def _update_production(self, production: Production, amount_remaining: Decimal) -> None:
        production.payment_status = production_status(amount_remaining)
        await self.production_repo.update(production)

"""UpdatePayment Use Case

Changes the total paid on an existing payment, moving only the difference
through the stock bucket.
"""

import logging
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
from src.domain.payment_transaction import PaymentTransaction, PaymentTransactionType
from src.domain.stock_bucket import BucketKey
from src.domain.stock_cash_transaction import CashReferenceType
from .dtos import UpdatePaymentCommandDTO, PaymentResponseDTO
from .mappers import payment_to_dto
from .settle_payment import payment_status, production_status

logger = logging.getLogger(__name__)


class UpdatePayment:
    """
    Use Case: Correct the amount of a payment

    Business Rules:
    1. The new amount_paid must be > 0 and within a freshly computed amount_due
    2. diff = new - old; a positive diff is debited, a negative diff credited
    3. An unchanged amount writes nothing
    4. An adjust PaymentTransaction records the signed diff
    5. Deductions already allocated to this payment stay counted in the
       fresh summary; obligations that appeared since are allocated now
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

    async def execute(self, command: UpdatePaymentCommandDTO) -> Result[PaymentResponseDTO]:
        try:
            new_amount = exact_money(command.amount_paid, "amount_paid")
            if new_amount <= ZERO:
                raise ValidationError("amount_paid must be greater than 0", reason=f"amount_paid={new_amount}")

            payment = await self.payment_repo.get_by_id(command.payment_id, for_update=True)
            if not payment:
                raise NotFoundError(f"Payment {command.payment_id} not found")

            production = await self.production_repo.get_by_id(payment.production_id, for_update=True)
            if not production:
                raise NotFoundError(f"Production {payment.production_id} not found")

            summary = await self.aggregator.summarize(production)
            if new_amount > summary.amount_due:
                raise ValidationError(
                    f"Amount paid ({new_amount}) exceeds amount due ({summary.amount_due})",
                    reason=f"amount_due={summary.amount_due}, requested={new_amount}",
                )

            old_amount = to_money(payment.amount_paid)
            diff = new_amount - old_amount
            if diff == ZERO:
                logger.info(f"Payment {payment.id} unchanged at {old_amount}")
                return Return.ok(payment_to_dto(payment))

            key = BucketKey(payment.product_id, payment.season_id)
            if diff > ZERO:
                await self.ledger.debit(key, diff, CashReferenceType.PAYMENT.value, str(payment.id))
            else:
                await self.ledger.credit(key, -diff, CashReferenceType.PAYMENT.value, str(payment.id))

            payment.gross_amount = summary.production_total
            payment.total_deductions = summary.total_deductions
            payment.amount_due = summary.amount_due
            payment.amount_paid = new_amount
            payment.amount_remaining_to_pay = summary.amount_due - new_amount
            payment.status = payment_status(new_amount, payment.amount_remaining_to_pay)
            payment = await self.payment_repo.update(payment)
            await self.allocator.allocate(payment, summary)

            await self.payment_transaction_repo.create(
                PaymentTransaction(
                    payment_id=payment.id,
                    transaction_type=PaymentTransactionType.ADJUST,
                    amount_paid=diff,
                    amount_remaining_to_pay=payment.amount_remaining_to_pay,
                )
            )

            production.payment_status = production_status(payment.amount_remaining_to_pay)
            await self.production_repo.update(production)

            await self.uow.commit()

            logger.info(f"Updated payment {payment.id}: {old_amount} -> {new_amount} (diff={diff})")
            return Return.ok(payment_to_dto(payment))

        except SettlementError as e:
            await self.uow.rollback()
            logger.warning(f"Payment {command.payment_id} update rejected: {e.message}")
            return Return.err(e.to_error())

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to update payment {command.payment_id}: {e}")
            return Return.err(
                Error(
                    code="UPDATE_PAYMENT_FAILED",
                    message="Failed to update payment",
                    reason=str(e),
                )
            )

"""DeletePayment Use Case

Removes a payment and returns its cash to the stock bucket.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.stock_ledger import StockLedger
from src.app.services.obligation_allocator import ObligationAllocator
from src.app.repositories.production_repository import ProductionRepository
from src.app.repositories.payment_repository import PaymentRepository
from src.app.repositories.payment_transaction_repository import PaymentTransactionRepository
from src.domain.errors import NotFoundError, SettlementError
from src.domain.money import ZERO, to_money
from src.domain.production import ProductionPaymentStatus
from src.domain.stock_bucket import BucketKey
from src.domain.stock_cash_transaction import CashReferenceType
from .dtos import DeletePaymentResponseDTO

logger = logging.getLogger(__name__)


class DeletePayment:
    """
    Use Case: Delete a payment

    Business Rules:
    1. The full amount paid is credited back to the bucket
    2. Fees and loans the payment withheld are owed again
    3. The payment, its transactions and its allocations are removed
    4. The production is pending payment again
    """

    def __init__(
        self,
        uow: UnitOfWork,
        production_repo: ProductionRepository,
        payment_repo: PaymentRepository,
        payment_transaction_repo: PaymentTransactionRepository,
        ledger: StockLedger,
        allocator: ObligationAllocator,
    ):
        self.uow = uow
        self.production_repo = production_repo
        self.payment_repo = payment_repo
        self.payment_transaction_repo = payment_transaction_repo
        self.ledger = ledger
        self.allocator = allocator

    async def execute(self, payment_id: int) -> Result[DeletePaymentResponseDTO]:
        try:
            payment = await self.payment_repo.get_by_id(payment_id, for_update=True)
            if not payment:
                raise NotFoundError(f"Payment {payment_id} not found")

            refunded = to_money(payment.amount_paid)
            if refunded > ZERO:
                await self.ledger.credit(
                    BucketKey(payment.product_id, payment.season_id),
                    refunded,
                    CashReferenceType.PAYMENT.value,
                    str(payment.id),
                )

            released = await self.allocator.reverse(payment)

            production = await self.production_repo.get_by_id(payment.production_id, for_update=True)
            if production:
                production.payment_status = ProductionPaymentStatus.PENDING
                await self.production_repo.update(production)

            await self.payment_transaction_repo.delete_by_payment_id(payment.id)
            await self.payment_repo.delete(payment)
            await self.uow.commit()

            logger.info(f"Deleted payment {payment_id}, refunded {refunded}, released {released} of allocations")
            return Return.ok(
                DeletePaymentResponseDTO(payment_id=payment_id, refunded_amount=refunded, released_amount=released)
            )

        except SettlementError as e:
            await self.uow.rollback()
            logger.warning(f"Payment {payment_id} deletion rejected: {e.message}")
            return Return.err(e.to_error())

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to delete payment {payment_id}: {e}")
            return Return.err(
                Error(
                    code="DELETE_PAYMENT_FAILED",
                    message="Failed to delete payment",
                    reason=str(e),
                )
            )

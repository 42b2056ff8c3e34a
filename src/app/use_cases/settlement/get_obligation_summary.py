"""GetObligationSummary Use Case

Read-only netting of a production's value against the member's fees, loans
and earlier unpaid balances for the season.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.obligation_aggregator import ObligationAggregator, ObligationSummary
from src.app.repositories.production_repository import ProductionRepository
from src.domain.errors import NotFoundError, SettlementError, ValidationError
from .dtos import ObligationSummaryQueryDTO, ObligationSummaryResponseDTO
from .mappers import fee_to_dto, loan_to_dto, payment_to_dto

logger = logging.getLogger(__name__)


def summary_to_dto(summary: ObligationSummary) -> ObligationSummaryResponseDTO:
    production = summary.production
    return ObligationSummaryResponseDTO(
        user_id=production.user_id,
        season_id=production.season_id,
        production_id=production.id,
        production_total=summary.production_total,
        fees_due=summary.fees_due,
        loans_due=summary.loans_due,
        previous_remaining=summary.previous_remaining,
        total_deductions=summary.total_deductions,
        amount_due=summary.amount_due,
        already_paid=summary.already_paid,
        already_allocated=summary.already_allocated,
        fees=[fee_to_dto(fee) for fee in summary.fees],
        loans=[loan_to_dto(loan) for loan in summary.loans],
        previous_payments=[payment_to_dto(p) for p in summary.previous_payments],
    )


class GetObligationSummary:
    """
    Use Case: Compute what a member is owed for a production

    Business Rules:
    1. The production must exist and belong to the given user and season
    2. amount_due = production_total - fees_due - loans_due - previous_remaining
    3. amount_due is not clamped at zero
    4. Nothing is written; two calls without intervening writes are identical
    """

    def __init__(self, production_repo: ProductionRepository, aggregator: ObligationAggregator):
        self.production_repo = production_repo
        self.aggregator = aggregator

    async def execute(self, query: ObligationSummaryQueryDTO) -> Result[ObligationSummaryResponseDTO]:
        try:
            production = await self.production_repo.get_by_id(query.production_id)
            if not production:
                raise NotFoundError(f"Production {query.production_id} not found")

            if production.user_id != query.user_id or production.season_id != query.season_id:
                raise ValidationError(
                    f"Production {production.id} does not belong to user {query.user_id} "
                    f"in season {query.season_id}",
                    reason=f"production.user_id={production.user_id}, production.season_id={production.season_id}",
                )

            summary = await self.aggregator.summarize(production, gross_amount=query.gross_amount)
            return Return.ok(summary_to_dto(summary))

        except SettlementError as e:
            logger.warning(f"Obligation summary rejected for production {query.production_id}: {e.message}")
            return Return.err(e.to_error())

        except Exception as e:
            logger.error(f"Failed to compute obligation summary for production {query.production_id}: {e}")
            return Return.err(
                Error(
                    code="OBLIGATION_SUMMARY_FAILED",
                    message="Failed to compute obligation summary",
                    reason=str(e),
                )
            )

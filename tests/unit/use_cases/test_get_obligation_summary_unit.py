"""Unit tests for GetObligationSummary use case"""

import pytest
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.app.services.obligation_aggregator import ObligationSummary
from src.app.use_cases.settlement.get_obligation_summary import GetObligationSummary
from src.app.use_cases.settlement.dtos import ObligationSummaryQueryDTO
from src.domain.production import Production


@pytest.fixture
def production():
    return Production(
        id=7,
        user_id="member_1",
        product_id="maize",
        season_id="2024A",
        quantity=Decimal("10"),
        unit_price=Decimal("100.00"),
        total_price=Decimal("1000.00"),
    )


@pytest.fixture
def mock_production_repo(production):
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=production)
    return repo


@pytest.fixture
def mock_aggregator(production):
    aggregator = MagicMock()
    aggregator.summarize = AsyncMock(
        return_value=ObligationSummary(
            production=production,
            production_total=Decimal("1000.00"),
            fees_due=Decimal("50.00"),
            loans_due=Decimal("1200.00"),
            previous_remaining=Decimal("0.00"),
        )
    )
    return aggregator


@pytest.fixture
def use_case(mock_production_repo, mock_aggregator):
    return GetObligationSummary(mock_production_repo, mock_aggregator)


@pytest.mark.asyncio
class TestGetObligationSummary:

    async def test_negative_amount_due_is_reported(self, use_case):
        result = await use_case.execute(
            ObligationSummaryQueryDTO(user_id="member_1", season_id="2024A", production_id=7)
        )

        assert result.is_ok()
        assert result.value.total_deductions == Decimal("1250.00")
        assert result.value.amount_due == Decimal("-250.00")
        assert result.value.fees == []

    async def test_gross_amount_is_forwarded(self, use_case, mock_aggregator, production):
        await use_case.execute(
            ObligationSummaryQueryDTO(
                user_id="member_1", season_id="2024A", production_id=7, gross_amount=Decimal("900")
            )
        )

        mock_aggregator.summarize.assert_called_once_with(production, gross_amount=Decimal("900"))

    @pytest.mark.parametrize("user_id,season_id", [("member_2", "2024A"), ("member_1", "2023B")])
    async def test_production_of_someone_else(self, use_case, mock_aggregator, user_id, season_id):
        result = await use_case.execute(
            ObligationSummaryQueryDTO(user_id=user_id, season_id=season_id, production_id=7)
        )

        assert result.is_err()
        assert result.error.code == "VALIDATION_ERROR"
        mock_aggregator.summarize.assert_not_called()

    async def test_missing_production(self, use_case, mock_production_repo):
        mock_production_repo.get_by_id.return_value = None

        result = await use_case.execute(
            ObligationSummaryQueryDTO(user_id="member_1", season_id="2024A", production_id=99)
        )

        assert result.is_err()
        assert result.error.code == "NOT_FOUND"

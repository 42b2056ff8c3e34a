"""Unit tests for SettlementReconcilerWorker

Tests cover:
- Worker initialization with configuration
- run_once execution and discrepancy reporting
- Reconciliation disabled scenario
- Failure propagation
- Shutdown and cleanup
"""

import pytest
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch
from datetime import datetime

from libs.result import Error, Return
from src.worker.settlement_reconciler import SettlementReconcilerWorker
from src.app.use_cases.settlement.dtos import ReconciliationResultDTO, SettlementDiscrepancyDTO


@pytest.fixture
def sample_discrepancy_result():
    return ReconciliationResultDTO(
        total_buckets_checked=2,
        total_purchases_checked=5,
        total_loans_checked=1,
        total_payments_checked=3,
        discrepancies_found=1,
        discrepancies=[
            SettlementDiscrepancyDTO(
                entity_type="stock_bucket",
                entity_id=1,
                description="Cash of stock maize/2024A does not match its transactions",
                expected=Decimal("250.00"),
                actual=Decimal("300.00"),
            )
        ],
        reconciliation_time=datetime.utcnow(),
        execution_time_ms=12,
    )


def session_factory():
    session = MagicMock()
    session.__aenter__ = AsyncMock(return_value=session)
    session.__aexit__ = AsyncMock(return_value=False)
    return MagicMock(return_value=session)


class TestSettlementReconcilerWorkerInit:

    @patch("src.worker.settlement_reconciler.ApplicationConfig")
    @patch("src.worker.settlement_reconciler.create_async_engine")
    def test_initializes_with_default_config(self, mock_create_engine, mock_app_config):
        mock_app_config.DB_URI = "postgresql+asyncpg://default@localhost/db"
        mock_app_config.RECONCILIATION_ENABLED = False

        worker = SettlementReconcilerWorker()

        assert worker.db_uri == "postgresql+asyncpg://default@localhost/db"
        assert worker.enabled is False
        mock_create_engine.assert_called_once()

    @patch("src.worker.settlement_reconciler.create_async_engine")
    def test_initializes_with_custom_db_uri(self, mock_create_engine):
        worker = SettlementReconcilerWorker(db_uri="sqlite+aiosqlite:///custom.db", enabled=True)

        assert worker.db_uri == "sqlite+aiosqlite:///custom.db"
        assert worker.enabled is True


@pytest.mark.asyncio
class TestSettlementReconcilerWorkerRunOnce:

    @patch("src.worker.settlement_reconciler.build_reconciler")
    @patch("src.worker.settlement_reconciler.sessionmaker")
    @patch("src.worker.settlement_reconciler.create_async_engine")
    async def test_run_once_returns_discrepancies(
        self, mock_create_engine, mock_sessionmaker, mock_build_reconciler, sample_discrepancy_result
    ):
        """
        Given: Reconciliation is enabled and finds one discrepancy
        When: run_once is called
        Then: The use case result is returned unchanged
        """
        # Arrange
        mock_sessionmaker.return_value = session_factory()
        reconciler = MagicMock()
        reconciler.execute = AsyncMock(return_value=Return.ok(sample_discrepancy_result))
        mock_build_reconciler.return_value = reconciler

        # Act
        worker = SettlementReconcilerWorker(enabled=True)
        result = await worker.run_once()

        # Assert
        assert result.discrepancies_found == 1
        assert result.discrepancies[0].entity_type == "stock_bucket"
        reconciler.execute.assert_called_once()

    @patch("src.worker.settlement_reconciler.build_reconciler")
    @patch("src.worker.settlement_reconciler.create_async_engine")
    async def test_run_once_skips_when_disabled(self, mock_create_engine, mock_build_reconciler):
        worker = SettlementReconcilerWorker(enabled=False)

        result = await worker.run_once()

        assert result.total_buckets_checked == 0
        assert result.discrepancies == []
        mock_build_reconciler.assert_not_called()

    @patch("src.worker.settlement_reconciler.build_reconciler")
    @patch("src.worker.settlement_reconciler.sessionmaker")
    @patch("src.worker.settlement_reconciler.create_async_engine")
    async def test_run_once_raises_on_failure(self, mock_create_engine, mock_sessionmaker, mock_build_reconciler):
        mock_sessionmaker.return_value = session_factory()
        reconciler = MagicMock()
        reconciler.execute = AsyncMock(
            return_value=Return.err(Error(code="RECONCILIATION_FAILED", message="Failed to reconcile settlements"))
        )
        mock_build_reconciler.return_value = reconciler

        worker = SettlementReconcilerWorker(enabled=True)

        with pytest.raises(RuntimeError, match="Failed to reconcile settlements"):
            await worker.run_once()

    @patch("src.worker.settlement_reconciler.create_async_engine")
    async def test_shutdown_disposes_engine(self, mock_create_engine):
        engine = MagicMock()
        engine.dispose = AsyncMock()
        mock_create_engine.return_value = engine

        worker = SettlementReconcilerWorker()
        await worker.shutdown()

        engine.dispose.assert_called_once()

"""Settlement Reconciliation Background Worker

Periodically checks stock cash, purchases, loans and payments against their
transaction history. Can be run as a standalone script or from a scheduler.
"""

import asyncio
import logging
from datetime import datetime
from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.depends import build_reconciler
from src.app.use_cases.settlement import ReconciliationResultDTO

logger = logging.getLogger(__name__)


class SettlementReconcilerWorker:
    """
    Background worker for settlement reconciliation

    Usage:
        # Run once
        worker = SettlementReconcilerWorker()
        result = await worker.run_once()

        # Run continuously
        await worker.run_forever(interval_seconds=86400)
    """

    def __init__(self, db_uri: Optional[str] = None, enabled: Optional[bool] = None):
        """
        Initialize the worker

        Args:
            db_uri: Database URI (defaults to ApplicationConfig.DB_URI)
            enabled: Overrides ApplicationConfig.RECONCILIATION_ENABLED
        """
        self.db_uri = db_uri or ApplicationConfig.DB_URI
        self.enabled = ApplicationConfig.RECONCILIATION_ENABLED if enabled is None else enabled

        self.engine = create_async_engine(self.db_uri, echo=False, future=True)
        self.async_session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )

        logger.info("SettlementReconcilerWorker initialized")

    async def run_once(self) -> ReconciliationResultDTO:
        """
        Run reconciliation once

        Raises:
            RuntimeError: the reconciliation itself failed
        """
        if not self.enabled:
            logger.info("Settlement reconciliation is disabled, skipping")
            return ReconciliationResultDTO(
                total_buckets_checked=0,
                total_purchases_checked=0,
                total_loans_checked=0,
                total_payments_checked=0,
                discrepancies_found=0,
                discrepancies=[],
                reconciliation_time=datetime.utcnow(),
                execution_time_ms=0,
            )

        async with self.async_session_factory() as session:
            result = await build_reconciler(session).execute()

            if result.is_err():
                logger.error(f"Reconciliation failed: {result.error.message}")
                raise RuntimeError(f"Reconciliation failed: {result.error.message}")

            response = result.value

            if response.discrepancies_found > 0:
                logger.error(f"ALERT: {response.discrepancies_found} settlement discrepancies found!")
                for d in response.discrepancies:
                    logger.error(
                        f"  - {d.entity_type} {d.entity_id}: {d.description} "
                        f"(expected={d.expected}, actual={d.actual})"
                    )

            return response

    async def run_forever(self, interval_seconds: Optional[int] = None):
        interval_seconds = interval_seconds or ApplicationConfig.RECONCILIATION_INTERVAL_SECONDS
        logger.info(f"Starting continuous settlement reconciliation with {interval_seconds}s interval")

        while True:
            try:
                result = await self.run_once()
                logger.info(
                    f"Reconciliation cycle complete. "
                    f"Checked {result.total_buckets_checked} buckets, "
                    f"{result.total_purchases_checked} purchases, "
                    f"{result.total_loans_checked} loans and "
                    f"{result.total_payments_checked} payments; "
                    f"found {result.discrepancies_found} discrepancies "
                    f"in {result.execution_time_ms}ms"
                )
            except Exception as e:
                logger.error(f"Reconciliation cycle failed: {e}")

            await asyncio.sleep(interval_seconds)

    async def shutdown(self):
        """Cleanup resources"""
        await self.engine.dispose()
        logger.info("SettlementReconcilerWorker shutdown complete")


async def main():
    """
    Entry point for running the worker as a standalone script

    Usage:
        python -m src.worker.settlement_reconciler --once
        python -m src.worker.settlement_reconciler --interval 3600
    """
    import argparse

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Settlement Reconciliation Worker")
    parser.add_argument("--once", action="store_true", help="Run once and exit")
    parser.add_argument(
        "--interval", type=int, default=None,
        help="Interval between runs in seconds (default: RECONCILIATION_INTERVAL_SECONDS)"
    )
    args = parser.parse_args()

    worker = SettlementReconcilerWorker()

    try:
        if args.once:
            result = await worker.run_once()
            print("Reconciliation complete:")
            print(f"  Stock buckets checked: {result.total_buckets_checked}")
            print(f"  Purchases checked: {result.total_purchases_checked}")
            print(f"  Loans checked: {result.total_loans_checked}")
            print(f"  Payments checked: {result.total_payments_checked}")
            print(f"  Discrepancies found: {result.discrepancies_found}")
            print(f"  Execution time: {result.execution_time_ms}ms")
            for d in result.discrepancies:
                print(f"  - {d.entity_type} {d.entity_id}: {d.description}")
        else:
            await worker.run_forever(interval_seconds=args.interval)
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()


if __name__ == "__main__":
    asyncio.run(main())

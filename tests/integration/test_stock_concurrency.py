"""Integration tests for concurrent debits of one stock bucket

Two sessions race for the same cash. SQLite only lets one writer in at a
time, so each connection opens its transaction with BEGIN IMMEDIATE and the
second writer waits for the first to commit instead of failing to upgrade
its lock.
"""

import asyncio
import pytest
import pytest_asyncio
from decimal import Decimal
from sqlalchemy import event
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.stock_bucket_repository import SqlAlchemyStockBucketRepository
from src.adapter.repositories.stock_cash_transaction_repository import SqlAlchemyStockCashTransactionRepository
from src.depends import build_ledger
from src.domain.errors import InsufficientFundsError
from src.domain.stock_bucket import BucketKey
from src.domain.stock_cash_transaction import CashReferenceType

KEY = BucketKey("maize", "2024A")


@pytest_asyncio.fixture
async def session_factory(engine):
    @event.listens_for(engine.sync_engine, "connect")
    def _no_implicit_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    # Drop the connection opened for create_all so every new one gets the hooks
    await engine.dispose()

    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def funded(session_factory):
    async with session_factory() as session:
        await build_ledger(session).credit(KEY, Decimal("1000"), CashReferenceType.DEPOSIT.value)
        await session.commit()


async def withdraw(session_factory, amount: str) -> str:
    async with session_factory() as session:
        try:
            await build_ledger(session).debit(KEY, Decimal(amount), CashReferenceType.PAYMENT.value)
            await session.commit()
            return "ok"
        except InsufficientFundsError:
            await session.rollback()
            return "insufficient"


class TestConcurrentDebits:

    @pytest.mark.asyncio
    async def test_only_one_of_two_debits_fits(self, session_factory, funded):
        """
        Given: a bucket holding 1000
        When: two sessions debit 600 at the same time
        Then: one succeeds, the other is refused, and 400 is left
        """
        # Act
        outcomes = await asyncio.gather(
            withdraw(session_factory, "600"),
            withdraw(session_factory, "600"),
        )

        # Assert
        assert sorted(outcomes) == ["insufficient", "ok"]

        async with session_factory() as session:
            bucket = await SqlAlchemyStockBucketRepository(session).get_by_key(KEY)
            net = await SqlAlchemyStockCashTransactionRepository(session).get_net_sum_by_bucket(bucket.id)

        assert bucket.cash == Decimal("400.00")
        assert net == Decimal("400.00")

    @pytest.mark.asyncio
    async def test_debits_that_fit_both_apply(self, session_factory, funded):
        outcomes = await asyncio.gather(
            withdraw(session_factory, "300"),
            withdraw(session_factory, "700"),
        )

        assert outcomes == ["ok", "ok"]

        async with session_factory() as session:
            bucket = await SqlAlchemyStockBucketRepository(session).get_by_key(KEY)

        assert bucket.cash == Decimal("0.00")

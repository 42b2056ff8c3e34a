import pytest_asyncio
from decimal import Decimal
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

import src.domain  # noqa: F401  registers table metadata
from src.depends import get_session, build_aggregator, build_allocator, build_ledger, build_reconciler
from src.adapter.repositories.stock_bucket_repository import SqlAlchemyStockBucketRepository
from src.domain.stock_bucket import BucketKey
from src.domain.stock_cash_transaction import CashReferenceType


@pytest_asyncio.fixture(scope="function")
async def engine(tmp_path):
    """Create a throwaway SQLite database per test"""
    test_db_url = f"sqlite+aiosqlite:///{tmp_path / 'settlement_test.db'}"

    engine = create_async_engine(test_db_url, echo=False, future=True)

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    """Create a new database session for each test"""
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    async with Session() as session:
        yield session


@pytest_asyncio.fixture
async def ledger(db_session):
    return build_ledger(db_session)


@pytest_asyncio.fixture
async def aggregator(db_session):
    return build_aggregator(db_session)


@pytest_asyncio.fixture
async def allocator(db_session):
    return build_allocator(db_session)


@pytest_asyncio.fixture
async def reconciler(db_session):
    return build_reconciler(db_session)


@pytest_asyncio.fixture
async def fund_stock(db_session, ledger):
    """Deposit opening cash into a bucket and commit"""

    async def _fund(product_id: str, season_id: str, cash: str):
        await ledger.credit(BucketKey(product_id, season_id), Decimal(cash), CashReferenceType.DEPOSIT.value)
        await db_session.commit()

    return _fund


@pytest_asyncio.fixture
async def cash_of(db_session):
    """Read the live cash of a bucket"""
    repo = SqlAlchemyStockBucketRepository(db_session)

    async def _cash(product_id: str, season_id: str) -> Decimal:
        bucket = await repo.get_by_key(BucketKey(product_id, season_id), for_update=True)
        return bucket.cash if bucket else None

    return _cash


@pytest_asyncio.fixture
async def client(db_session):
    """Create test client with database session override"""
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

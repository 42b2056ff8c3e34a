from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.repositories.stock_bucket_repository import SqlAlchemyStockBucketRepository
from src.adapter.repositories.stock_cash_transaction_repository import SqlAlchemyStockCashTransactionRepository
from src.adapter.repositories.purchase_input_repository import SqlAlchemyPurchaseInputRepository
from src.adapter.repositories.fee_repository import SqlAlchemyFeeRepository
from src.adapter.repositories.loan_repository import SqlAlchemyLoanRepository
from src.adapter.repositories.loan_transaction_repository import SqlAlchemyLoanTransactionRepository
from src.adapter.repositories.payment_repository import SqlAlchemyPaymentRepository
from src.adapter.repositories.payment_transaction_repository import SqlAlchemyPaymentTransactionRepository
from src.adapter.repositories.payment_allocation_repository import SqlAlchemyPaymentAllocationRepository
from src.app.services.obligation_aggregator import ObligationAggregator
from src.app.services.obligation_allocator import ObligationAllocator
from src.app.services.stock_ledger import StockLedger
from src.app.use_cases.settlement.reconcile_settlements import ReconcileSettlements

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


async def init_models():
    """Create any missing tables for the domain entities"""
    import src.domain  # noqa: F401  registers table metadata

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


def build_ledger(session: AsyncSession) -> StockLedger:
    return StockLedger(
        SqlAlchemyStockBucketRepository(session),
        SqlAlchemyStockCashTransactionRepository(session),
    )


def build_aggregator(session: AsyncSession) -> ObligationAggregator:
    return ObligationAggregator(
        SqlAlchemyFeeRepository(session),
        SqlAlchemyLoanRepository(session),
        SqlAlchemyPaymentRepository(session),
        SqlAlchemyPaymentAllocationRepository(session),
    )


def build_allocator(session: AsyncSession) -> ObligationAllocator:
    return ObligationAllocator(
        SqlAlchemyFeeRepository(session),
        SqlAlchemyLoanRepository(session),
        SqlAlchemyLoanTransactionRepository(session),
        SqlAlchemyPurchaseInputRepository(session),
        SqlAlchemyPaymentAllocationRepository(session),
    )


def build_reconciler(session: AsyncSession) -> ReconcileSettlements:
    return ReconcileSettlements(
        bucket_repo=SqlAlchemyStockBucketRepository(session),
        cash_transaction_repo=SqlAlchemyStockCashTransactionRepository(session),
        purchase_repo=SqlAlchemyPurchaseInputRepository(session),
        loan_repo=SqlAlchemyLoanRepository(session),
        loan_transaction_repo=SqlAlchemyLoanTransactionRepository(session),
        payment_repo=SqlAlchemyPaymentRepository(session),
        payment_transaction_repo=SqlAlchemyPaymentTransactionRepository(session),
        fee_repo=SqlAlchemyFeeRepository(session),
        allocation_repo=SqlAlchemyPaymentAllocationRepository(session),
    )

"""Integration tests for purchases and loans against SQLite

Covers recording, updating and deleting purchases, loan repayment and the
cash each of them moves through the stock bucket.
"""

import pytest
import pytest_asyncio
from decimal import Decimal

from src.adapter.repositories.loan_repository import SqlAlchemyLoanRepository
from src.adapter.repositories.loan_transaction_repository import SqlAlchemyLoanTransactionRepository
from src.adapter.repositories.purchase_input_repository import SqlAlchemyPurchaseInputRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.use_cases.settlement import (
    DeletePurchase,
    GetOutstandingLoans,
    RecordPurchase,
    RecordPurchaseCommandDTO,
    RepayLoan,
    UpdatePurchase,
    UpdatePurchaseCommandDTO,
)
from src.domain.loan import LoanStatus
from src.domain.purchase_input import PurchaseStatus
from src.domain.stock_bucket import BucketKey
from src.domain.stock_cash_transaction import CashReferenceType

PRODUCT, SEASON = "fertilizer", "2024A"


@pytest_asyncio.fixture
async def repos(db_session):
    return (
        SqlAlchemyPurchaseInputRepository(db_session),
        SqlAlchemyLoanRepository(db_session),
        SqlAlchemyLoanTransactionRepository(db_session),
    )


@pytest_asyncio.fixture
async def record(db_session, repos, ledger):
    purchase_repo, loan_repo, _ = repos

    async def _record(amount_paid: str, quantity: str = "10", unit_price: str = "100", interest=None):
        use_case = RecordPurchase(SqlAlchemyUnitOfWork(db_session), purchase_repo, loan_repo, ledger)
        return await use_case.execute(
            RecordPurchaseCommandDTO(
                user_id="member_1",
                product_id=PRODUCT,
                season_id=SEASON,
                quantity=Decimal(quantity),
                unit_price=Decimal(unit_price),
                amount_paid=Decimal(amount_paid),
                interest=interest,
            )
        )

    return _record


@pytest_asyncio.fixture
async def update(db_session, repos, ledger):
    async def _update(purchase_id: int, **changes):
        use_case = UpdatePurchase(SqlAlchemyUnitOfWork(db_session), *repos, ledger)
        return await use_case.execute(UpdatePurchaseCommandDTO(purchase_id=purchase_id, **changes))

    return _update


@pytest_asyncio.fixture
async def delete(db_session, repos, ledger):
    async def _delete(purchase_id: int):
        return await DeletePurchase(SqlAlchemyUnitOfWork(db_session), *repos, ledger).execute(purchase_id)

    return _delete


@pytest_asyncio.fixture
async def repay(db_session, repos, ledger):
    purchase_repo, loan_repo, loan_transaction_repo = repos

    async def _repay(loan_id: int):
        use_case = RepayLoan(
            SqlAlchemyUnitOfWork(db_session), loan_repo, loan_transaction_repo, purchase_repo, ledger
        )
        return await use_case.execute(loan_id)

    return _repay


class TestRecordPurchaseIntegration:

    @pytest.mark.asyncio
    async def test_fully_paid_purchase_credits_total(self, record, repos, cash_of):
        """Cash purchase of 10 x 100 into an empty bucket leaves 1000 cash and no loan"""
        # Act
        result = await record("1000")

        # Assert
        assert result.is_ok()
        assert result.value.status == "paid"
        assert result.value.loan_id is None
        assert await cash_of(PRODUCT, SEASON) == Decimal("1000.00")

        _, loan_repo, _ = repos
        assert await loan_repo.get_by_purchase_input_id(result.value.id) is None

    @pytest.mark.asyncio
    async def test_partial_payment_creates_loan(self, record, repos, cash_of):
        """600 of 1000 paid credits only 600 and opens a 400 loan"""
        result = await record("600")

        assert result.is_ok()
        assert result.value.status == "loan"
        assert result.value.total_price == Decimal("1000.00")
        assert result.value.amount_remaining == Decimal("400.00")
        assert await cash_of(PRODUCT, SEASON) == Decimal("600.00")

        _, loan_repo, _ = repos
        loan = await loan_repo.get_by_id(result.value.loan_id)
        assert loan.amount_owed == Decimal("400.00")
        assert loan.principal == Decimal("400.00")
        assert loan.status == LoanStatus.PENDING
        assert loan.purchase_input_id == result.value.id

    @pytest.mark.asyncio
    async def test_overpayment_leaves_no_trace(self, record, repos, cash_of):
        result = await record("1000.01")

        assert result.is_err()
        assert result.error.code == "VALIDATION_ERROR"
        assert await cash_of(PRODUCT, SEASON) is None

        purchase_repo, _, _ = repos
        assert await purchase_repo.get_all() == []


class TestUpdatePurchaseIntegration:

    @pytest.mark.asyncio
    async def test_paying_more_moves_only_the_difference(self, record, update, repos, cash_of):
        """
        Given: 600 paid of 1000 with a 400 loan
        When: amount_paid becomes 800
        Then: 200 more is credited and the loan owes 200
        """
        created = await record("600")

        result = await update(created.value.id, amount_paid=Decimal("800"))

        assert result.is_ok()
        assert result.value.amount_remaining == Decimal("200.00")
        assert await cash_of(PRODUCT, SEASON) == Decimal("800.00")

        _, loan_repo, _ = repos
        loan = await loan_repo.get_by_id(created.value.loan_id, for_update=True)
        assert loan.amount_owed == Decimal("200.00")

    @pytest.mark.asyncio
    async def test_paying_in_full_removes_loan(self, record, update, repos, cash_of):
        created = await record("600")

        result = await update(created.value.id, amount_paid=Decimal("1000"))

        assert result.is_ok()
        assert result.value.status == "paid"
        assert result.value.loan_id is None
        assert await cash_of(PRODUCT, SEASON) == Decimal("1000.00")

        _, loan_repo, _ = repos
        assert await loan_repo.get_by_purchase_input_id(created.value.id) is None

    @pytest.mark.asyncio
    async def test_higher_price_opens_loan_for_new_balance(self, record, update, repos, cash_of):
        """A cash purchase repriced upward owes the difference as a loan"""
        created = await record("1000")

        result = await update(created.value.id, unit_price=Decimal("120"), interest=Decimal("2"))

        assert result.is_ok()
        assert result.value.total_price == Decimal("1200.00")
        assert result.value.amount_remaining == Decimal("200.00")
        assert result.value.loan_id is not None
        assert await cash_of(PRODUCT, SEASON) == Decimal("1000.00")

        _, loan_repo, _ = repos
        loan = await loan_repo.get_by_id(result.value.loan_id)
        assert loan.amount_owed == Decimal("200.00")
        assert loan.interest == Decimal("2.00")

    @pytest.mark.asyncio
    async def test_refund_blocked_when_cash_was_disbursed(self, record, update, ledger, db_session, repos, cash_of):
        """
        Given: 1000 credited by a purchase and 900 of it already paid out
        When: the purchase's amount_paid is lowered to 500
        Then: INSUFFICIENT_FUNDS and the purchase is unchanged
        """
        created = await record("1000")
        await ledger.debit(BucketKey(PRODUCT, SEASON), Decimal("900"), CashReferenceType.PAYMENT.value, "ext")
        await db_session.commit()

        result = await update(created.value.id, amount_paid=Decimal("500"))

        assert result.is_err()
        assert result.error.code == "INSUFFICIENT_FUNDS"
        assert "Available: 100.00" in result.error.message
        assert await cash_of(PRODUCT, SEASON) == Decimal("100.00")

        purchase_repo, _, _ = repos
        purchase = await purchase_repo.get_by_id(created.value.id, for_update=True)
        assert purchase.amount_paid == Decimal("1000.00")
        assert purchase.status == PurchaseStatus.PAID

    @pytest.mark.asyncio
    async def test_missing_purchase(self, update):
        result = await update(404, amount_paid=Decimal("1"))

        assert result.is_err()
        assert result.error.code == "NOT_FOUND"


class TestDeletePurchaseIntegration:

    @pytest.mark.asyncio
    async def test_delete_reverses_credit_and_loan(self, record, delete, repos, cash_of):
        created = await record("600")

        result = await delete(created.value.id)

        assert result.is_ok()
        assert result.value.reversed_amount == Decimal("600.00")
        assert result.value.loan_removed is True
        assert await cash_of(PRODUCT, SEASON) == Decimal("0.00")

        purchase_repo, loan_repo, _ = repos
        assert await purchase_repo.get_by_id(created.value.id) is None
        assert await loan_repo.get_all() == []

    @pytest.mark.asyncio
    async def test_delete_after_repayment_conflicts(self, record, repay, delete, repos, cash_of):
        created = await record("600", interest=Decimal("5"))
        assert (await repay(created.value.loan_id)).is_ok()

        result = await delete(created.value.id)

        assert result.is_err()
        assert result.error.code == "CONFLICT"
        assert await cash_of(PRODUCT, SEASON) == Decimal("1020.00")

        purchase_repo, _, _ = repos
        assert await purchase_repo.get_by_id(created.value.id, for_update=True) is not None


class TestRepayLoanIntegration:

    @pytest.mark.asyncio
    async def test_repayment_round_trip(self, record, repay, repos, cash_of, db_session):
        """
        Given: 600 paid of 1000 at 5% interest
        When: the loan is repaid
        Then: 420 returns to the bucket, loan repaid, purchase paid, nothing outstanding
        """
        # Arrange
        created = await record("600", interest=Decimal("5"))

        # Act
        result = await repay(created.value.loan_id)

        # Assert
        assert result.is_ok()
        assert result.value.status == "repaid"
        assert await cash_of(PRODUCT, SEASON) == Decimal("1020.00")

        purchase_repo, loan_repo, loan_transaction_repo = repos
        purchase = await purchase_repo.get_by_id(created.value.id)
        assert purchase.status == PurchaseStatus.PAID
        assert purchase.amount_paid == Decimal("1000.00")
        assert purchase.amount_remaining == Decimal("0.00")

        transactions = await loan_transaction_repo.get_by_loan_id(created.value.loan_id)
        assert len(transactions) == 1
        assert transactions[0].amount_paid == Decimal("400.00")
        assert transactions[0].interest_paid == Decimal("20.00")

        outstanding = await GetOutstandingLoans(loan_repo).execute("member_1")
        assert outstanding.value.loans == []
        assert outstanding.value.total_owed == Decimal("0.00")

    @pytest.mark.asyncio
    async def test_second_repayment_conflicts_and_changes_nothing(self, record, repay, cash_of):
        created = await record("600", interest=Decimal("5"))
        await repay(created.value.loan_id)

        result = await repay(created.value.loan_id)

        assert result.is_err()
        assert result.error.code == "CONFLICT"
        assert await cash_of(PRODUCT, SEASON) == Decimal("1020.00")

    @pytest.mark.asyncio
    async def test_outstanding_loans_by_season(self, record, repos):
        await record("600")
        await record("0", quantity="1", unit_price="50")

        _, loan_repo, _ = repos
        result = await GetOutstandingLoans(loan_repo).execute("member_1", SEASON)

        assert result.is_ok()
        assert len(result.value.loans) == 2
        assert result.value.total_owed == Decimal("450.00")

        other_season = await GetOutstandingLoans(loan_repo).execute("member_1", "2023B")
        assert other_season.value.loans == []

    @pytest.mark.asyncio
    async def test_flow_reconciles_cleanly(self, record, update, repay, delete, reconciler):
        first = await record("600", interest=Decimal("5"))
        second = await record("1000")
        third = await record("200")
        await update(second.value.id, amount_paid=Decimal("700"))
        await repay(first.value.loan_id)
        await delete(third.value.id)

        result = await reconciler.execute()

        assert result.is_ok()
        assert result.value.total_purchases_checked == 2
        assert result.value.discrepancies_found == 0, result.value.discrepancies

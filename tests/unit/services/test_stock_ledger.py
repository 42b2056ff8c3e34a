"""Unit tests for StockLedger

Tests cover:
- Credits provisioning a missing bucket
- Debits guarded by the conditional update
- Balance snapshots on recorded transactions
- Amount validation
"""

import pytest
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.app.services.stock_ledger import StockLedger
from src.domain.errors import InsufficientFundsError, NotFoundError, ValidationError
from src.domain.stock_bucket import BucketKey, StockBucket
from src.domain.stock_cash_transaction import CashReferenceType, CashTransactionType

KEY = BucketKey("maize", "2024A")


def make_bucket(cash: str, bucket_id: int = 1) -> StockBucket:
    return StockBucket(
        id=bucket_id,
        product_id=KEY.product_id,
        season_id=KEY.season_id,
        cash=Decimal(cash),
        quantity=Decimal("0"),
        total_price=Decimal("0.00"),
    )


@pytest.fixture
def mock_bucket_repo():
    return MagicMock()


@pytest.fixture
def mock_transaction_repo():
    repo = MagicMock()

    async def echo(transaction):
        transaction.id = 99
        return transaction

    repo.create = AsyncMock(side_effect=echo)
    return repo


@pytest.fixture
def ledger(mock_bucket_repo, mock_transaction_repo):
    return StockLedger(mock_bucket_repo, mock_transaction_repo)


@pytest.mark.asyncio
class TestCredit:

    async def test_credit_provisions_missing_bucket(self, ledger, mock_bucket_repo, mock_transaction_repo):
        """
        Given: No bucket exists for the product and season
        When: credit is called
        Then: A zero-cash bucket is created and the credit is recorded against it
        """
        # Arrange
        mock_bucket_repo.get_by_key = AsyncMock(return_value=None)
        mock_bucket_repo.create = AsyncMock(return_value=make_bucket("0.00"))
        mock_bucket_repo.credit_cash = AsyncMock(return_value=make_bucket("1000.00"))

        # Act
        transaction = await ledger.credit(KEY, Decimal("1000"), CashReferenceType.PURCHASE_INPUT.value, "5")

        # Assert
        created = mock_bucket_repo.create.call_args.args[0]
        assert created.product_id == "maize"
        assert created.season_id == "2024A"
        assert created.cash == Decimal("0.00")
        mock_bucket_repo.credit_cash.assert_called_once_with(1, Decimal("1000.00"))
        assert transaction.transaction_type == CashTransactionType.CREDIT
        assert transaction.balance_before == Decimal("0.00")
        assert transaction.balance_after == Decimal("1000.00")
        assert transaction.reference_type == "purchase_input"
        assert transaction.reference_id == "5"

    async def test_credit_reuses_existing_bucket(self, ledger, mock_bucket_repo):
        mock_bucket_repo.get_by_key = AsyncMock(return_value=make_bucket("600.00"))
        mock_bucket_repo.create = AsyncMock()
        mock_bucket_repo.credit_cash = AsyncMock(return_value=make_bucket("1020.00"))

        transaction = await ledger.credit(KEY, Decimal("420.00"), CashReferenceType.LOAN.value, "3")

        mock_bucket_repo.create.assert_not_called()
        assert transaction.balance_before == Decimal("600.00")
        assert transaction.balance_after == Decimal("1020.00")

    @pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-5.00")])
    async def test_credit_rejects_non_positive_amount(self, ledger, mock_bucket_repo, amount):
        mock_bucket_repo.get_by_key = AsyncMock()

        with pytest.raises(ValidationError):
            await ledger.credit(KEY, amount, CashReferenceType.DEPOSIT.value)

        mock_bucket_repo.get_by_key.assert_not_called()


@pytest.mark.asyncio
class TestDebit:

    async def test_debit_records_snapshots(self, ledger, mock_bucket_repo):
        """
        Given: Bucket holds 1000.00
        When: 750.00 is debited
        Then: The conditional update succeeds and the transaction shows 1000.00 -> 250.00
        """
        # Arrange
        mock_bucket_repo.get_by_key = AsyncMock(return_value=make_bucket("1000.00"))
        mock_bucket_repo.debit_cash = AsyncMock(return_value=make_bucket("250.00"))

        # Act
        transaction = await ledger.debit(KEY, Decimal("750"), CashReferenceType.PAYMENT.value, "8")

        # Assert
        mock_bucket_repo.get_by_key.assert_called_once_with(KEY, for_update=True)
        mock_bucket_repo.debit_cash.assert_called_once_with(1, Decimal("750.00"))
        assert transaction.transaction_type == CashTransactionType.DEBIT
        assert transaction.amount == Decimal("750.00")
        assert transaction.balance_before == Decimal("1000.00")
        assert transaction.balance_after == Decimal("250.00")

    async def test_debit_insufficient_cash(self, ledger, mock_bucket_repo, mock_transaction_repo):
        """
        Given: Bucket holds 600.00
        When: 700.00 is debited
        Then: InsufficientFundsError carries the live balance and nothing is recorded
        """
        # Arrange
        mock_bucket_repo.get_by_key = AsyncMock(return_value=make_bucket("600.00"))
        mock_bucket_repo.debit_cash = AsyncMock(return_value=None)
        mock_bucket_repo.get_by_id = AsyncMock(return_value=make_bucket("600.00"))

        # Act & Assert
        with pytest.raises(InsufficientFundsError) as exc_info:
            await ledger.debit(KEY, Decimal("700.00"), CashReferenceType.PAYMENT.value, "8")

        assert exc_info.value.available == Decimal("600.00")
        assert exc_info.value.required == Decimal("700.00")
        mock_transaction_repo.create.assert_not_called()

    async def test_debit_missing_bucket(self, ledger, mock_bucket_repo):
        mock_bucket_repo.get_by_key = AsyncMock(return_value=None)
        mock_bucket_repo.debit_cash = AsyncMock()

        with pytest.raises(NotFoundError):
            await ledger.debit(KEY, Decimal("10.00"), CashReferenceType.PAYMENT.value)

        mock_bucket_repo.debit_cash.assert_not_called()

    async def test_get_bucket_never_falls_back_to_another_key(self, ledger, mock_bucket_repo):
        mock_bucket_repo.get_by_key = AsyncMock(return_value=None)

        with pytest.raises(NotFoundError) as exc_info:
            await ledger.get_bucket(BucketKey("beans", "2024A"))

        assert "beans" in exc_info.value.message
        mock_bucket_repo.get_by_key.assert_called_once_with(BucketKey("beans", "2024A"), for_update=False)

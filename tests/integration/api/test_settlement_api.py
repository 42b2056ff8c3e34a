"""Integration tests for Settlement API endpoints"""

import pytest
from decimal import Decimal
from httpx import AsyncClient


async def _provision(client: AsyncClient, product_id: str, season_id: str, cash: str):
    response = await client.post(
        "/stock", json={"product_id": product_id, "season_id": season_id, "cash": cash}
    )
    assert response.status_code == 201
    return response.json()


async def _produce(client: AsyncClient, user_id: str, product_id: str, season_id: str, total: str):
    response = await client.post(
        "/productions",
        json={
            "user_id": user_id,
            "product_id": product_id,
            "season_id": season_id,
            "quantity": "10",
            "unit_price": str(Decimal(total) / Decimal("10")),
        },
    )
    assert response.status_code == 201
    return response.json()


class TestSettlementAPIIntegration:
    """Integration test suite for Settlement API endpoints"""

    @pytest.mark.asyncio
    async def test_health(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    @pytest.mark.asyncio
    async def test_provision_and_get_stock(self, client: AsyncClient):
        # Act
        created = await _provision(client, "maize", "2024A", "1500.00")
        response = await client.get("/stock/maize/2024A")

        # Assert
        assert response.status_code == 200
        data = response.json()
        assert data["bucket_id"] == created["bucket_id"]
        assert Decimal(data["cash"]) == Decimal("1500.00")
        assert Decimal(data["quantity"]) == Decimal("0")

    @pytest.mark.asyncio
    async def test_get_missing_stock_returns_404(self, client: AsyncClient):
        response = await client.get("/stock/unknown/2024A")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    @pytest.mark.asyncio
    async def test_record_purchase_with_loan(self, client: AsyncClient):
        """POST /purchases with a partial payment returns 201 and opens a loan"""
        # Act
        payload = {
            "user_id": "member_api_1",
            "product_id": "fertilizer",
            "season_id": "2024A",
            "quantity": "10",
            "unit_price": "100.00",
            "amount_paid": "600.00",
        }
        response = await client.post("/purchases", json=payload)

        # Assert
        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "loan"
        assert Decimal(data["amount_remaining"]) == Decimal("400.00")
        assert data["loan_id"] is not None

        stock = await client.get("/stock/fertilizer/2024A")
        assert Decimal(stock.json()["cash"]) == Decimal("600.00")

        loans = await client.get("/loans/outstanding", params={"user_id": "member_api_1"})
        assert loans.status_code == 200
        assert Decimal(loans.json()["total_owed"]) == Decimal("400.00")
        assert loans.json()["loans"][0]["id"] == data["loan_id"]

    @pytest.mark.asyncio
    async def test_record_purchase_validation_error(self, client: AsyncClient):
        """Negative payments are rejected before reaching the use case"""
        payload = {
            "user_id": "member_api_2",
            "product_id": "fertilizer",
            "season_id": "2024A",
            "quantity": "10",
            "unit_price": "100.00",
            "amount_paid": "-1",
        }
        response = await client.post("/purchases", json=payload)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_record_purchase_overpayment_rejected(self, client: AsyncClient):
        payload = {
            "user_id": "member_api_3",
            "product_id": "fertilizer",
            "season_id": "2024A",
            "quantity": "1",
            "unit_price": "100.00",
            "amount_paid": "150.00",
        }
        response = await client.post("/purchases", json=payload)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_repay_loan_then_conflict(self, client: AsyncClient):
        # Arrange
        purchase = await client.post(
            "/purchases",
            json={
                "user_id": "member_api_4",
                "product_id": "seed",
                "season_id": "2024A",
                "quantity": "2",
                "unit_price": "150.00",
                "amount_paid": "100.00",
            },
        )
        loan_id = purchase.json()["loan_id"]

        # Act
        first = await client.post(f"/loans/{loan_id}/repay")
        second = await client.post(f"/loans/{loan_id}/repay")

        # Assert
        assert first.status_code == 200
        assert first.json()["status"] == "repaid"
        assert Decimal(first.json()["amount_owed"]) == Decimal("0")

        assert second.status_code == 409
        assert second.json()["error"]["code"] == "CONFLICT"

        stock = await client.get("/stock/seed/2024A")
        assert Decimal(stock.json()["cash"]) == Decimal("300.00")

    @pytest.mark.asyncio
    async def test_repay_missing_loan_returns_404(self, client: AsyncClient):
        response = await client.post("/loans/9999/repay")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    @pytest.mark.asyncio
    async def test_summary_and_settle_payment(self, client: AsyncClient):
        # Arrange
        await _provision(client, "coffee", "2024A", "2000.00")
        production = await _produce(client, "member_api_5", "coffee", "2024A", "1000.00")

        # Act
        summary = await client.get(
            "/payments/summary",
            params={"user_id": "member_api_5", "season_id": "2024A", "production_id": production["id"]},
        )
        payment = await client.post(
            "/payments", json={"production_id": production["id"], "amount_paid": "700.00"}
        )

        # Assert
        assert summary.status_code == 200
        assert Decimal(summary.json()["amount_due"]) == Decimal("1000.00")

        assert payment.status_code == 201
        data = payment.json()
        assert data["status"] == "partial"
        assert Decimal(data["amount_remaining_to_pay"]) == Decimal("300.00")

        stock = await client.get("/stock/coffee/2024A")
        assert Decimal(stock.json()["cash"]) == Decimal("1300.00")
        assert Decimal(stock.json()["quantity"]) == Decimal("10")

    @pytest.mark.asyncio
    async def test_summary_for_other_member_rejected(self, client: AsyncClient):
        await _provision(client, "coffee", "2024A", "0")
        production = await _produce(client, "member_api_6", "coffee", "2024A", "500.00")

        response = await client.get(
            "/payments/summary",
            params={"user_id": "someone_else", "season_id": "2024A", "production_id": production["id"]},
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_settle_payment_insufficient_funds(self, client: AsyncClient):
        """Production value is due but the stock holds no cash"""
        production = await _produce(client, "member_api_7", "rice", "2024A", "800.00")

        response = await client.post(
            "/payments", json={"production_id": production["id"], "amount_paid": "500.00"}
        )

        assert response.status_code == 402
        assert response.json()["error"]["code"] == "INSUFFICIENT_FUNDS"

    @pytest.mark.asyncio
    async def test_settle_payment_above_due(self, client: AsyncClient):
        await _provision(client, "rice", "2024B", "5000.00")
        production = await _produce(client, "member_api_8", "rice", "2024B", "400.00")

        response = await client.post(
            "/payments", json={"production_id": production["id"], "amount_paid": "400.01"}
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_update_and_delete_payment(self, client: AsyncClient):
        # Arrange
        await _provision(client, "beans", "2024A", "1000.00")
        production = await _produce(client, "member_api_9", "beans", "2024A", "600.00")
        created = await client.post(
            "/payments", json={"production_id": production["id"], "amount_paid": "200.00"}
        )
        payment_id = created.json()["id"]

        # Act
        updated = await client.patch(f"/payments/{payment_id}", json={"amount_paid": "600.00"})
        deleted = await client.delete(f"/payments/{payment_id}")

        # Assert
        assert updated.status_code == 200
        assert updated.json()["status"] == "paid"
        assert Decimal(updated.json()["amount_paid"]) == Decimal("600.00")

        assert deleted.status_code == 200
        assert Decimal(deleted.json()["refunded_amount"]) == Decimal("600.00")

        stock = await client.get("/stock/beans/2024A")
        assert Decimal(stock.json()["cash"]) == Decimal("1000.00")

        missing = await client.delete(f"/payments/{payment_id}")
        assert missing.status_code == 404

    @pytest.mark.asyncio
    async def test_reconciliation_clean_after_activity(self, client: AsyncClient):
        # Arrange
        await _provision(client, "sorghum", "2024A", "900.00")
        await client.post(
            "/purchases",
            json={
                "user_id": "member_api_10",
                "product_id": "sorghum",
                "season_id": "2024A",
                "quantity": "3",
                "unit_price": "50.00",
                "amount_paid": "50.00",
            },
        )
        production = await _produce(client, "member_api_10", "sorghum", "2024A", "500.00")
        await client.post("/payments", json={"production_id": production["id"], "amount_paid": "300.00"})

        # Act
        response = await client.get("/reconciliation")

        # Assert
        assert response.status_code == 200
        data = response.json()
        assert data["total_buckets_checked"] == 1
        assert data["total_payments_checked"] == 1
        assert data["discrepancies_found"] == 0

    @pytest.mark.asyncio
    async def test_fee_is_withheld_once(self, client: AsyncClient):
        """
        Given: a 40.00 fee and two productions of 500.00
        When: the first production is settled
        Then: the fee is paid and the second production no longer deducts it
        """
        # Arrange
        await _provision(client, "cassava", "2024A", "2000.00")
        fee = await client.post(
            "/fees",
            json={"user_id": "member_api_11", "season_id": "2024A", "fee_type": "membership", "amount_owed": "40.00"},
        )
        first = await _produce(client, "member_api_11", "cassava", "2024A", "500.00")
        second = await _produce(client, "member_api_11", "cassava", "2024A", "500.00")

        # Act
        settled = await client.post("/payments", json={"production_id": first["id"], "amount_paid": "460.00"})
        summary = await client.get(
            "/payments/summary",
            params={"user_id": "member_api_11", "season_id": "2024A", "production_id": second["id"]},
        )

        # Assert
        assert fee.status_code == 201
        assert fee.json()["status"] == "unpaid"
        assert Decimal(fee.json()["remaining_amount"]) == Decimal("40.00")

        assert settled.status_code == 201
        assert settled.json()["status"] == "paid"

        assert summary.status_code == 200
        assert Decimal(summary.json()["fees_due"]) == Decimal("0.00")
        assert summary.json()["fees"] == []
        assert Decimal(summary.json()["amount_due"]) == Decimal("500.00")

    @pytest.mark.asyncio
    async def test_record_fee_validation_error(self, client: AsyncClient):
        response = await client.post(
            "/fees", json={"user_id": "member_api_12", "fee_type": "membership", "amount_owed": "0"}
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

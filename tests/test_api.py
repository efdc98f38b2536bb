"""
TaxReturn Assessment - API Integration Tests

Integration tests for REST API endpoints.
"""

import pytest
from decimal import Decimal
from httpx import AsyncClient

from main import app


ASSESSMENT_URL = "/api/v1/tax-return/2025-26/assessment"


class TestHealthEndpoint:
    """Test health check endpoint."""

    @pytest.mark.asyncio
    async def test_health_check(self, client: AsyncClient):
        """Test health check returns 200."""
        response = await client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["tax_year"] == "2025-26"


class TestParametersAPI:

    @pytest.mark.asyncio
    async def test_get_parameters(self, client: AsyncClient):
        response = await client.get("/api/v1/tax-return/parameters")

        assert response.status_code == 200
        data = response.json()
        assert data["tax_year"] == "2025-26"
        assert data["currency_code"] == "LKR"
        assert Decimal(data["personal_relief_cap"]) == Decimal("1800000")
        assert len(data["slabs"]) == 5
        assert data["slabs"][-1]["upper"] is None
        assert Decimal(data["withholding_rates"]["Rent"]) == Decimal("0.10")
        assert data["qualifying_payment_caps"]["Government"] is None


class TestAssessmentAPI:
    """Test assessment computation endpoint."""

    @pytest.mark.asyncio
    async def test_complete_assessment(self, client: AsyncClient, assessment_payload):
        response = await client.post(ASSESSMENT_URL, json=assessment_payload)

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "complete"
        assert Decimal(data["total_assessable"]) == Decimal("3100000")
        assert Decimal(data["investment_income"]) == Decimal("700000")
        assert Decimal(data["investment_by_type"]["Rent"]["withholding_tax"]) == Decimal("50000")
        assert Decimal(data["investment_by_type"]["Dividend"]["withholding_tax"]) == Decimal("15000")
        assert Decimal(data["qualifying_relief"]) == Decimal("650000")
        assert Decimal(data["taxable_income"]) == Decimal("525000")
        assert Decimal(data["total_tax_liability"]) == Decimal("31500")
        assert Decimal(data["total_credits"]) == Decimal("140000")
        assert Decimal(data["balance"]) == Decimal("-108500")
        assert data["is_refund"] is True
        assert len(data["slab_breakdown"]) == 5
        assert Decimal(data["tax_paid_by_period"]["Q1"]) == Decimal("20000")

    @pytest.mark.asyncio
    async def test_entered_values_are_trusted(self, client: AsyncClient, assessment_payload):
        """Explicit WHT and deductible values override the rate and cap tables."""
        assessment_payload["investment"] = [
            {"type": "Rent", "amount": 500000, "withholding_tax": 0, "date": "2025-06-30"},
        ]
        assessment_payload["qualifying_payments"] = [
            {"type": "Solar", "amount": 700000, "deductible": 100000},
        ]

        response = await client.post(ASSESSMENT_URL, json=assessment_payload)

        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["total_withholding"]) == Decimal("0")
        assert Decimal(data["qualifying_relief"]) == Decimal("100000")

    @pytest.mark.asyncio
    async def test_missing_source_is_incomplete(self, client: AsyncClient, assessment_payload):
        del assessment_payload["business"]
        assessment_payload["tax_payments"] = None

        response = await client.post(ASSESSMENT_URL, json=assessment_payload)

        assert response.status_code == 202
        data = response.json()
        assert data["status"] == "incomplete"
        assert data["missing_sources"] == ["business", "tax_payments"]
        assert "balance" not in data

    @pytest.mark.asyncio
    async def test_empty_sources_are_complete(self, client: AsyncClient):
        payload = {
            "employment": {"months": []},
            "business": [],
            "investment": [],
            "qualifying_payments": [],
            "tax_payments": [],
        }

        response = await client.post(ASSESSMENT_URL, json=payload)

        assert response.status_code == 200
        assert Decimal(response.json()["balance"]) == 0

    @pytest.mark.asyncio
    async def test_wrong_tax_year(self, client: AsyncClient, assessment_payload):
        response = await client.post("/api/v1/tax-return/2019-20/assessment", json=assessment_payload)

        assert response.status_code == 422
        detail = response.json()["detail"]
        assert detail["code"] == "INVALID_TAX_PERIOD"
        assert detail["field"] == "tax_year"

    @pytest.mark.asyncio
    async def test_unknown_investment_type(self, client: AsyncClient, assessment_payload):
        assessment_payload["investment"].append({"type": "Crypto", "amount": 10, "date": "2025-06-30"})

        response = await client.post(ASSESSMENT_URL, json=assessment_payload)

        assert response.status_code == 422
        assert response.json()["detail"]["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_negative_amount(self, client: AsyncClient, assessment_payload):
        assessment_payload["tax_payments"][0]["amount"] = -100

        response = await client.post(ASSESSMENT_URL, json=assessment_payload)

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_duplicate_month(self, client: AsyncClient, assessment_payload):
        assessment_payload["employment"]["months"][1]["month_index"] = 0

        response = await client.post(ASSESSMENT_URL, json=assessment_payload)

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_amounts_keep_full_precision(self, client: AsyncClient):
        """Large fractional amounts come back exactly, not as floats."""
        payload = {
            "employment": {"months": []},
            "business": [
                {"type": "income", "category": "Sales", "amount": "12345678901234567.89", "date": "2025-05-10"},
            ],
            "investment": [],
            "qualifying_payments": [],
            "tax_payments": [],
        }

        response = await client.post(ASSESSMENT_URL, json=payload)

        assert response.status_code == 200
        data = response.json()
        assert isinstance(data["business_net"], str)
        assert Decimal(data["business_net"]) == Decimal("12345678901234567.89")
        assert Decimal(data["taxable_income"]) == Decimal("12345678899434567.89")
        assert sum(Decimal(b["band_amount"]) for b in data["slab_breakdown"]) == Decimal(data["taxable_income"])

    @pytest.mark.asyncio
    async def test_engine_not_initialised(self, client: AsyncClient, assessment_payload):
        """Without the startup-built engine requests fail instead of building one."""
        app.state.assessment_service = None

        response = await client.post(ASSESSMENT_URL, json=assessment_payload)

        assert response.status_code == 500
        assert response.json()["detail"]["code"] == "CONFIGURATION_ERROR"


class TestExportAPI:
    """Test CSV export endpoint."""

    @pytest.mark.asyncio
    async def test_export_csv(self, client: AsyncClient, assessment_payload):
        response = await client.post(f"{ASSESSMENT_URL}/export", json=assessment_payload)

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert "tax_return_2025-26.csv" in response.headers["content-disposition"]
        lines = response.text.splitlines()
        assert lines[0] == "Tax_Year,Section,Line,Amount,Is_Total,Is_Muted"
        assert len(lines) == 24

    @pytest.mark.asyncio
    async def test_export_incomplete(self, client: AsyncClient, assessment_payload):
        assessment_payload["investment"] = None

        response = await client.post(f"{ASSESSMENT_URL}/export", json=assessment_payload)

        assert response.status_code == 409
        detail = response.json()["detail"]
        assert detail["code"] == "ASSESSMENT_INCOMPLETE"
        assert detail["details"]["missing_sources"] == ["investment"]

"""
TaxReturn Assessment - Test Configuration

Pytest fixtures and configuration.
"""

from datetime import date
from decimal import Decimal
from typing import AsyncGenerator, List

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from app.config import Settings
from app.models.tax_return import (
    BusinessTransaction,
    EmploymentRecord,
    InvestmentLine,
    QualifyingPaymentLine,
    TaxPaymentRecord,
)
from app.services.tax_assessment import AssessmentParameters, TaxAssessmentService, load_parameters
from app.services.tax_assessment.record_entry import (
    build_business_transaction,
    build_investment_line,
    build_qualifying_payment_line,
    build_tax_payment,
    estimated_year,
)
from main import app


# ===========================================
# ENGINE FIXTURES
# ===========================================

@pytest.fixture
def parameters() -> AssessmentParameters:
    """Default 2025-26 parameters, independent of any local .env file."""
    return load_parameters(Settings(_env_file=None))


@pytest.fixture
def service(parameters: AssessmentParameters) -> TaxAssessmentService:
    return TaxAssessmentService(parameters)


# ===========================================
# DATA FIXTURES
# ===========================================

@pytest.fixture
def employment() -> EmploymentRecord:
    """150,000 a month with 5,000 PAYE: 1,800,000 gross, 60,000 PAYE."""
    return estimated_year(Decimal("150000"), Decimal("5000"), employer_name="Acme Holdings")


@pytest.fixture
def business() -> List[BusinessTransaction]:
    """900,000 income less 300,000 expense."""
    return [
        build_business_transaction("income", "Sales", Decimal("600000"), date(2025, 5, 10)),
        build_business_transaction("income", "Services", Decimal("300000"), date(2025, 8, 2)),
        build_business_transaction("expense", "Rent", Decimal("300000"), date(2025, 9, 1)),
    ]


@pytest.fixture
def investment(parameters: AssessmentParameters) -> List[InvestmentLine]:
    """Rent 500,000, Interest 200,000 and Dividend 100,000 with WHT at entry."""
    return [
        build_investment_line("Rent", Decimal("500000"), date(2025, 6, 30), parameters=parameters),
        build_investment_line("Interest", Decimal("200000"), date(2025, 12, 31), parameters=parameters),
        build_investment_line("Dividend", Decimal("100000"), date(2026, 1, 15), parameters=parameters),
    ]


@pytest.fixture
def qualifying_payments(parameters: AssessmentParameters) -> List[QualifyingPaymentLine]:
    """Solar 700,000 (capped to 600,000) and Charity 50,000."""
    return [
        build_qualifying_payment_line("Solar", Decimal("700000"), date(2025, 7, 1), parameters=parameters),
        build_qualifying_payment_line("Charity", Decimal("50000"), date(2025, 11, 20), parameters=parameters),
    ]


@pytest.fixture
def tax_payments() -> List[TaxPaymentRecord]:
    return [build_tax_payment("Q1", Decimal("20000"), date(2025, 8, 15))]


@pytest.fixture
def assessment_payload() -> dict:
    """Request body equivalent to the record fixtures above."""
    return {
        "employment": {
            "employer_name": "Acme Holdings",
            "months": [
                {"month_index": i, "estimated_gross": 150000, "estimated_tax": 5000}
                for i in range(12)
            ],
        },
        "business": [
            {"type": "income", "category": "Sales", "amount": 600000, "date": "2025-05-10"},
            {"type": "income", "category": "Services", "amount": 300000, "date": "2025-08-02"},
            {"type": "expense", "category": "Rent", "amount": 300000, "date": "2025-09-01"},
        ],
        "investment": [
            {"type": "Rent", "amount": 500000, "date": "2025-06-30"},
            {"type": "Interest", "amount": 200000, "date": "2025-12-31"},
            {"type": "Dividend", "amount": 100000, "date": "2026-01-15"},
        ],
        "qualifying_payments": [
            {"type": "Solar", "amount": 700000, "date": "2025-07-01"},
            {"type": "Charity", "amount": 50000, "date": "2025-11-20"},
        ],
        "tax_payments": [
            {"type": "Q1", "amount": 20000, "date": "2025-08-15"},
        ],
    }


# ===========================================
# API CLIENT
# ===========================================

@pytest_asyncio.fixture(scope="function")
async def client(service: TaxAssessmentService) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client sharing the default-parameter engine."""
    app.state.assessment_service = service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.state.assessment_service = None

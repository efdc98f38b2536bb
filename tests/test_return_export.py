"""
TaxReturn Assessment - Return Export Tests
"""

import csv
import io

import pytest
from decimal import Decimal

from app.services.tax_assessment import build_return_rows, export_assessment_csv
from app.services.tax_assessment.return_export import RETURN_CSV_COLUMNS


@pytest.fixture
def result(service, employment, business, investment, qualifying_payments, tax_payments):
    return service.compute_assessment(
        "2025-26", employment, business, investment, qualifying_payments, tax_payments
    )


class TestReturnRows:
    """Test the sections of the return."""

    def test_section_order(self, result):
        sections = build_return_rows(result)

        assert [s.title for s in sections] == [
            "Assessable Income",
            "Reliefs & Qualifying Payments",
            "Taxable Income",
            "Tax Slabs",
            "Tax Credits & Payments",
            "Balance Payable / (Refund)",
        ]

    def test_investment_breakdown_excludes_dividend(self, result):
        assessable = build_return_rows(result)[0]
        labels = [row.label for row in assessable.rows]

        assert "Dividend" not in labels
        assert [row.label for row in assessable.rows if row.indent] == ["Rent", "Interest", "Other"]
        assert assessable.rows[-1].value == Decimal("3100000")
        assert assessable.rows[-1].bold

    def test_unreached_slabs_are_muted(self, result):
        slabs = build_return_rows(result)[3]

        assert len(slabs.rows) == 6
        assert [row.muted for row in slabs.rows[:5]] == [False, True, True, True, True]
        assert slabs.rows[-1].label == "Total Tax Liability"
        assert slabs.rows[-1].value == Decimal("31500")

    def test_balance_row(self, result):
        balance = build_return_rows(result)[-1]

        assert balance.rows[0].value == Decimal("-108500")


class TestCSVExport:
    """Test CSV rendering of the return."""

    def test_header_and_rows(self, result):
        rows = list(csv.reader(io.StringIO(export_assessment_csv(result))))

        assert rows[0] == RETURN_CSV_COLUMNS
        assert len(rows) == 1 + 7 + 4 + 1 + 6 + 4 + 1
        assert all(row[0] == "2025-26" for row in rows[1:])

    def test_values(self, result):
        rows = list(csv.reader(io.StringIO(export_assessment_csv(result))))
        by_line = {(row[1], row[2]): row for row in rows[1:]}

        personal = by_line[("Reliefs & Qualifying Payments", "Personal Relief")]
        assert Decimal(personal[3]) == Decimal("1800000")
        assert personal[4] == "N"

        total_credits = by_line[("Tax Credits & Payments", "Total Credits")]
        assert Decimal(total_credits[3]) == Decimal("140000")
        assert total_credits[4] == "Y"

        top_slab = by_line[("Tax Slabs", "2,500,000 – ∞ @ 36%")]
        assert top_slab[5] == "Y"

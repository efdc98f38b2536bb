"""
TaxReturn Assessment - Return Export

Lays an AssessmentResult out as the sections of the tax return (the same rows
the return screen shows) and exports them to CSV.
"""

import csv
import io
from dataclasses import dataclass
from decimal import Decimal
from typing import List

from app.models.tax_return import InvestmentType
from app.services.tax_assessment.assessment_service import AssessmentResult

RETURN_CSV_COLUMNS = ["Tax_Year", "Section", "Line", "Amount", "Is_Total", "Is_Muted"]


@dataclass(frozen=True)
class ReturnRow:
    label: str
    value: Decimal
    bold: bool = False
    indent: bool = False
    muted: bool = False


@dataclass(frozen=True)
class ReturnSection:
    title: str
    rows: List[ReturnRow]


def build_return_rows(result: AssessmentResult) -> List[ReturnSection]:
    """Return sections in display order."""
    inv = result.investment_by_type

    assessable = ReturnSection("Assessable Income", [
        ReturnRow("Employment Income", result.employment_income),
        ReturnRow("Business Income (net)", result.business_net),
        ReturnRow("Investment Income", result.investment_income),
        ReturnRow("Rent", inv[InvestmentType.RENT].amount, indent=True),
        ReturnRow("Interest", inv[InvestmentType.INTEREST].amount, indent=True),
        ReturnRow("Other", inv[InvestmentType.OTHER].amount, indent=True),
        ReturnRow("Total Assessable Income", result.total_assessable, bold=True),
    ])

    reliefs = ReturnSection("Reliefs & Qualifying Payments", [
        ReturnRow("Personal Relief", result.personal_relief),
        ReturnRow("Rental Relief", result.rental_relief),
        ReturnRow("Qualifying Payments", result.qualifying_relief),
        ReturnRow("Total Reliefs", result.total_reliefs, bold=True),
    ])

    taxable = ReturnSection("Taxable Income", [
        ReturnRow("Taxable Income", result.taxable_income, bold=True),
    ])

    slab_rows = [
        ReturnRow(band.label, band.band_tax, muted=band.is_empty)
        for band in result.slab_breakdown
    ]
    slab_rows.append(ReturnRow("Total Tax Liability", result.total_tax_liability, bold=True))
    slabs = ReturnSection("Tax Slabs", slab_rows)

    credits = ReturnSection("Tax Credits & Payments", [
        ReturnRow("PAYE", result.total_paye),
        ReturnRow("WHT (Rent + Interest + Other)", result.total_withholding),
        ReturnRow("Tax Payments (Q1-Q4 + Final)", result.total_tax_paid),
        ReturnRow("Total Credits", result.total_credits, bold=True),
    ])

    balance = ReturnSection("Balance Payable / (Refund)", [
        ReturnRow("Balance", result.balance, bold=True),
    ])

    return [assessable, reliefs, taxable, slabs, credits, balance]


def export_assessment_csv(result: AssessmentResult) -> str:
    """Export the return to CSV, one line per row."""
    output = io.StringIO()
    writer = csv.writer(output)

    writer.writerow(RETURN_CSV_COLUMNS)

    for section in build_return_rows(result):
        for row in section.rows:
            writer.writerow([
                result.tax_year,
                section.title,
                row.label,
                str(row.value),
                "Y" if row.bold else "N",
                "Y" if row.muted else "N",
            ])

    return output.getvalue()

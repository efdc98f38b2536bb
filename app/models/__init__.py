"""
TaxReturn Assessment - Models Package

In-memory records for the income sources an assessment is built from.
"""

from app.models.tax_return import (
    BUSINESS_CATEGORIES,
    MONTH_LABELS,
    BusinessTransaction,
    EmploymentRecord,
    InvestmentLine,
    InvestmentType,
    MonthEntry,
    QualifyingPaymentLine,
    QualifyingPaymentType,
    SourceName,
    TaxPaymentRecord,
    TaxPaymentType,
    TransactionType,
)

__all__ = [
    "BUSINESS_CATEGORIES",
    "MONTH_LABELS",
    "BusinessTransaction",
    "EmploymentRecord",
    "InvestmentLine",
    "InvestmentType",
    "MonthEntry",
    "QualifyingPaymentLine",
    "QualifyingPaymentType",
    "SourceName",
    "TaxPaymentRecord",
    "TaxPaymentType",
    "TransactionType",
]

"""
TaxReturn Assessment - Income Source Records

In-memory records handed to the assessment engine by the income-source
modules. Every record here has already been validated and had its entry-time
values (investment withholding, qualifying-payment deductible) computed by its
owning source module; the engine only reads them.
"""

import datetime
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import List, Optional


# ===========================================
# ENUMS
# ===========================================

class TransactionType(str, Enum):
    """Business transaction direction."""
    INCOME = "income"
    EXPENSE = "expense"


class InvestmentType(str, Enum):
    """Investment income categories."""
    RENT = "Rent"
    INTEREST = "Interest"
    DIVIDEND = "Dividend"
    OTHER = "Other"


class QualifyingPaymentType(str, Enum):
    """Elective payments deductible from assessable income."""
    SOLAR = "Solar"
    CHARITY = "Charity"
    GOVERNMENT = "Government"


class TaxPaymentType(str, Enum):
    """Advance (quarterly) and final self-assessment payments."""
    Q1 = "Q1"
    Q2 = "Q2"
    Q3 = "Q3"
    Q4 = "Q4"
    FINAL = "Final"


class SourceName(str, Enum):
    """The five datasets an assessment is built from."""
    EMPLOYMENT = "employment"
    BUSINESS = "business"
    INVESTMENT = "investment"
    QUALIFYING_PAYMENTS = "qualifying_payments"
    TAX_PAYMENTS = "tax_payments"


# Assessment year runs April to March; month_index 0 is April.
MONTH_LABELS = ["Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec", "Jan", "Feb", "Mar"]

BUSINESS_CATEGORIES = [
    "Sales",
    "Services",
    "Supplies",
    "Rent",
    "Utilities",
    "Travel",
    "Wages",
    "Other",
]


# ===========================================
# RECORDS
# ===========================================

@dataclass
class MonthEntry:
    """One month of employment income, estimated with optional actuals."""
    month_index: int
    estimated_gross: Decimal = Decimal("0")
    estimated_tax: Decimal = Decimal("0")
    actual_gross: Optional[Decimal] = None
    actual_tax: Optional[Decimal] = None

    @property
    def effective_gross(self) -> Decimal:
        return self.actual_gross if self.actual_gross is not None else self.estimated_gross

    @property
    def effective_tax(self) -> Decimal:
        return self.actual_tax if self.actual_tax is not None else self.estimated_tax

    @property
    def has_actuals(self) -> bool:
        return self.actual_gross is not None or self.actual_tax is not None

    @property
    def label(self) -> str:
        return MONTH_LABELS[self.month_index]


@dataclass
class EmploymentRecord:
    """Employment income for one tax year."""
    months: List[MonthEntry] = field(default_factory=list)
    employer_name: Optional[str] = None


@dataclass
class BusinessTransaction:
    """Business income or expense; amount is always positive."""
    type: TransactionType
    category: str
    amount: Decimal
    date: datetime.date


@dataclass
class InvestmentLine:
    """Investment income line with withholding computed at entry."""
    type: InvestmentType
    amount: Decimal
    withholding_tax: Decimal
    date: datetime.date
    category: Optional[str] = None  # free-text label for Other lines


@dataclass
class QualifyingPaymentLine:
    """Qualifying payment with its capped deductible computed at entry."""
    type: QualifyingPaymentType
    amount: Decimal
    deductible: Decimal
    date: Optional[datetime.date] = None


@dataclass
class TaxPaymentRecord:
    """Advance or final tax payment already remitted."""
    type: TaxPaymentType
    amount: Decimal
    date: datetime.date

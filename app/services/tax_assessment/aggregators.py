"""
TaxReturn Assessment - Income Source Aggregators

Reduce each source's raw records for one tax year into category subtotals.

All aggregators are pure and total on well-formed input, and their results do
not depend on record order.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Iterable, Union

from app.models.tax_return import (
    BusinessTransaction,
    EmploymentRecord,
    InvestmentLine,
    InvestmentType,
    QualifyingPaymentLine,
    QualifyingPaymentType,
    TaxPaymentRecord,
    TaxPaymentType,
    TransactionType,
)

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

# Investment income assessable at the slab rates; Dividend is taxed finally at source.
ASSESSABLE_INVESTMENT_TYPES = (InvestmentType.RENT, InvestmentType.INTEREST, InvestmentType.OTHER)
CREDITABLE_WHT_TYPES = ASSESSABLE_INVESTMENT_TYPES


# ===========================================
# SUMMARIES
# ===========================================

@dataclass(frozen=True)
class EmploymentSummary:
    """Employment totals. `total_*` use actuals where present."""
    total_gross: Decimal = ZERO
    total_tax: Decimal = ZERO
    estimated_gross: Decimal = ZERO
    estimated_tax: Decimal = ZERO
    months_recorded: int = 0
    months_with_actuals: int = 0


@dataclass(frozen=True)
class BusinessSummary:
    total_income: Decimal = ZERO
    total_expense: Decimal = ZERO
    income_by_category: Dict[str, Decimal] = field(default_factory=dict)
    expense_by_category: Dict[str, Decimal] = field(default_factory=dict)

    @property
    def net(self) -> Decimal:
        """Income less expense; negative in a loss year."""
        return self.total_income - self.total_expense


@dataclass(frozen=True)
class InvestmentBucket:
    amount: Decimal = ZERO
    withholding_tax: Decimal = ZERO


@dataclass(frozen=True)
class InvestmentSummary:
    buckets: Dict[InvestmentType, InvestmentBucket]

    def bucket(self, investment_type: InvestmentType) -> InvestmentBucket:
        return self.buckets[investment_type]

    @property
    def rent_amount(self) -> Decimal:
        return self.buckets[InvestmentType.RENT].amount

    @property
    def assessable_amount(self) -> Decimal:
        return sum((self.buckets[t].amount for t in ASSESSABLE_INVESTMENT_TYPES), ZERO)

    @property
    def creditable_withholding(self) -> Decimal:
        return sum((self.buckets[t].withholding_tax for t in CREDITABLE_WHT_TYPES), ZERO)


@dataclass(frozen=True)
class QualifyingPaymentBucket:
    amount: Decimal = ZERO
    deductible: Decimal = ZERO


@dataclass(frozen=True)
class QualifyingPaymentSummary:
    buckets: Dict[QualifyingPaymentType, QualifyingPaymentBucket]

    @property
    def total_amount(self) -> Decimal:
        return sum((b.amount for b in self.buckets.values()), ZERO)

    @property
    def total_deductible(self) -> Decimal:
        return sum((b.deductible for b in self.buckets.values()), ZERO)


@dataclass(frozen=True)
class TaxPaymentSummary:
    buckets: Dict[TaxPaymentType, Decimal]

    @property
    def total(self) -> Decimal:
        return sum(self.buckets.values(), ZERO)


# ===========================================
# AGGREGATORS
# ===========================================

def aggregate_employment(record: EmploymentRecord) -> EmploymentSummary:
    """
    Sum effective gross and tax across the months present.

    Missing months count as zero; completeness of the year is the source
    module's concern.
    """
    total_gross = ZERO
    total_tax = ZERO
    estimated_gross = ZERO
    estimated_tax = ZERO
    with_actuals = 0

    for month in record.months:
        total_gross += month.effective_gross
        total_tax += month.effective_tax
        estimated_gross += month.estimated_gross
        estimated_tax += month.estimated_tax
        if month.has_actuals:
            with_actuals += 1

    return EmploymentSummary(
        total_gross=total_gross,
        total_tax=total_tax,
        estimated_gross=estimated_gross,
        estimated_tax=estimated_tax,
        months_recorded=len(record.months),
        months_with_actuals=with_actuals,
    )


def aggregate_business(transactions: Iterable[BusinessTransaction]) -> BusinessSummary:
    """Partition transactions by direction and sum each side."""
    income = ZERO
    expense = ZERO
    income_by_category: Dict[str, Decimal] = {}
    expense_by_category: Dict[str, Decimal] = {}

    for tx in transactions:
        if TransactionType(tx.type) == TransactionType.INCOME:
            income += tx.amount
            income_by_category[tx.category] = income_by_category.get(tx.category, ZERO) + tx.amount
        else:
            expense += tx.amount
            expense_by_category[tx.category] = expense_by_category.get(tx.category, ZERO) + tx.amount

    return BusinessSummary(
        total_income=income,
        total_expense=expense,
        income_by_category=income_by_category,
        expense_by_category=expense_by_category,
    )


def investment_bucket_for(line_type: Union[InvestmentType, str]) -> InvestmentType:
    """Map a line type to its bucket; anything unrecognised is Other."""
    try:
        return InvestmentType(line_type)
    except ValueError:
        logger.debug(f"Folding unrecognised investment type {line_type!r} into Other")
        return InvestmentType.OTHER


def aggregate_investment(lines: Iterable[InvestmentLine]) -> InvestmentSummary:
    """Group lines into exactly Rent, Interest, Dividend and Other."""
    amounts = {t: ZERO for t in InvestmentType}
    withholding = {t: ZERO for t in InvestmentType}

    for line in lines:
        bucket = investment_bucket_for(line.type)
        amounts[bucket] += line.amount
        withholding[bucket] += line.withholding_tax

    return InvestmentSummary(
        buckets={
            t: InvestmentBucket(amount=amounts[t], withholding_tax=withholding[t])
            for t in InvestmentType
        }
    )


def aggregate_qualifying_payments(lines: Iterable[QualifyingPaymentLine]) -> QualifyingPaymentSummary:
    """Group lines by type; deductible values are trusted as entered."""
    amounts = {t: ZERO for t in QualifyingPaymentType}
    deductible = {t: ZERO for t in QualifyingPaymentType}

    for line in lines:
        payment_type = QualifyingPaymentType(line.type)
        amounts[payment_type] += line.amount
        deductible[payment_type] += line.deductible

    return QualifyingPaymentSummary(
        buckets={
            t: QualifyingPaymentBucket(amount=amounts[t], deductible=deductible[t])
            for t in QualifyingPaymentType
        }
    )


def aggregate_tax_payments(payments: Iterable[TaxPaymentRecord]) -> TaxPaymentSummary:
    """Sum payments into the five fixed period buckets."""
    buckets = {t: ZERO for t in TaxPaymentType}

    for payment in payments:
        buckets[TaxPaymentType(payment.type)] += payment.amount

    return TaxPaymentSummary(buckets=buckets)

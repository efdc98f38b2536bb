"""
TaxReturn Assessment - Record Entry

Entry-time computations performed by the income-source modules before records
ever reach the engine:
- Investment lines: WHT = amount x rate(type) (Rent 10%, Interest 5%,
  Dividend 15%, Other 0%), stored on the line
- Qualifying payments: deductible = min(amount, cap(type)) for capped types
  (Solar 600,000; Charity 75,000); Government is uncapped
- Tax payments: type must be one of Q1-Q4 or Final
- Employment: exactly one entry for each of the 12 months

Anything outside a fixed enum, a negative amount or a duplicated month raises
MalformedRecordError here, at the boundary.
"""

from datetime import date
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Iterable, Optional, Type, TypeVar, Union

from app.models.tax_return import (
    BUSINESS_CATEGORIES,
    BusinessTransaction,
    EmploymentRecord,
    InvestmentLine,
    InvestmentType,
    MonthEntry,
    QualifyingPaymentLine,
    QualifyingPaymentType,
    TaxPaymentRecord,
    TaxPaymentType,
    TransactionType,
)
from app.services.tax_assessment.parameters import AssessmentParameters, get_default_parameters
from app.utils.error_handling import MalformedRecordError

E = TypeVar("E", bound=Enum)

MONTHS_IN_YEAR = 12


def coerce_enum(enum_cls: Type[E], value: Union[E, str], field: str = "type") -> E:
    """Accept an enum member or its value; anything else is malformed."""
    try:
        return enum_cls(value)
    except ValueError:
        allowed = [member.value for member in enum_cls]
        raise MalformedRecordError(
            f"Invalid {field} {value!r}; expected one of {', '.join(allowed)}",
            field=field,
            details={"value": str(value), "allowed": allowed},
        )


def coerce_amount(value: Any, field: str = "amount") -> Decimal:
    """Convert to Decimal and require a finite, non-negative value."""
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise MalformedRecordError(f"Invalid {field}: {value!r}", field=field)

    if not amount.is_finite() or amount < 0:
        raise MalformedRecordError(
            f"{field} must be a non-negative number, got {value!r}",
            field=field,
        )
    return amount


def _optional_amount(value: Any, field: str) -> Optional[Decimal]:
    return None if value is None else coerce_amount(value, field)


def build_investment_line(
    line_type: Union[InvestmentType, str],
    amount: Any,
    line_date: date,
    category: Optional[str] = None,
    parameters: Optional[AssessmentParameters] = None,
) -> InvestmentLine:
    """Create an investment line, computing and storing its WHT."""
    parameters = parameters or get_default_parameters()
    investment_type = coerce_enum(InvestmentType, line_type)
    value = coerce_amount(amount)

    return InvestmentLine(
        type=investment_type,
        amount=value,
        withholding_tax=value * parameters.withholding_rate(investment_type),
        date=line_date,
        category=category if investment_type == InvestmentType.OTHER else None,
    )


def calculate_deductible(
    payment_type: QualifyingPaymentType,
    amount: Decimal,
    parameters: AssessmentParameters,
) -> Decimal:
    cap = parameters.qualifying_payment_cap(payment_type)
    if cap is None:
        return amount
    return min(amount, cap)


def build_qualifying_payment_line(
    payment_type: Union[QualifyingPaymentType, str],
    amount: Any,
    payment_date: Optional[date] = None,
    parameters: Optional[AssessmentParameters] = None,
) -> QualifyingPaymentLine:
    """Create a qualifying payment line with its capped deductible."""
    parameters = parameters or get_default_parameters()
    qp_type = coerce_enum(QualifyingPaymentType, payment_type)
    value = coerce_amount(amount)

    return QualifyingPaymentLine(
        type=qp_type,
        amount=value,
        deductible=calculate_deductible(qp_type, value, parameters),
        date=payment_date,
    )


def build_tax_payment(
    payment_type: Union[TaxPaymentType, str],
    amount: Any,
    payment_date: date,
) -> TaxPaymentRecord:
    return TaxPaymentRecord(
        type=coerce_enum(TaxPaymentType, payment_type),
        amount=coerce_amount(amount),
        date=payment_date,
    )


def build_business_transaction(
    transaction_type: Union[TransactionType, str],
    category: str,
    amount: Any,
    transaction_date: date,
    custom_category: Optional[str] = None,
) -> BusinessTransaction:
    """
    Create a business transaction.

    Choosing "Other" with a custom label records the label as the category.
    """
    if category not in BUSINESS_CATEGORIES:
        raise MalformedRecordError(
            f"Invalid category {category!r}",
            field="category",
            details={"value": category, "allowed": BUSINESS_CATEGORIES},
        )
    if category == "Other" and custom_category:
        category = custom_category.strip() or "Other"

    return BusinessTransaction(
        type=coerce_enum(TransactionType, transaction_type),
        category=category,
        amount=coerce_amount(amount),
        date=transaction_date,
    )


def build_month_entry(
    month_index: int,
    estimated_gross: Any,
    estimated_tax: Any,
    actual_gross: Any = None,
    actual_tax: Any = None,
) -> MonthEntry:
    if not isinstance(month_index, int) or not 0 <= month_index < MONTHS_IN_YEAR:
        raise MalformedRecordError(
            f"month_index must be 0-{MONTHS_IN_YEAR - 1}, got {month_index!r}",
            field="month_index",
        )
    return MonthEntry(
        month_index=month_index,
        estimated_gross=coerce_amount(estimated_gross, "estimated_gross"),
        estimated_tax=coerce_amount(estimated_tax, "estimated_tax"),
        actual_gross=_optional_amount(actual_gross, "actual_gross"),
        actual_tax=_optional_amount(actual_tax, "actual_tax"),
    )


def build_employment_record(
    months: Iterable[MonthEntry],
    employer_name: Optional[str] = None,
) -> EmploymentRecord:
    """Require exactly one entry per month; entries are returned in month order."""
    entries = list(months)
    seen = set()
    for entry in entries:
        if entry.month_index in seen:
            raise MalformedRecordError(
                f"Duplicate entry for month {entry.month_index}",
                field="months",
                details={"month_index": entry.month_index},
            )
        seen.add(entry.month_index)

    missing = sorted(set(range(MONTHS_IN_YEAR)) - seen)
    if missing or len(entries) != MONTHS_IN_YEAR:
        raise MalformedRecordError(
            f"Employment record needs {MONTHS_IN_YEAR} months; missing {missing}",
            field="months",
            details={"missing_months": missing},
        )

    return EmploymentRecord(
        months=sorted(entries, key=lambda m: m.month_index),
        employer_name=employer_name,
    )


def estimated_year(
    monthly_gross: Any,
    monthly_tax: Any,
    employer_name: Optional[str] = None,
) -> EmploymentRecord:
    """A full year of identical estimates, the starting point before actuals arrive."""
    return build_employment_record(
        [build_month_entry(i, monthly_gross, monthly_tax) for i in range(MONTHS_IN_YEAR)],
        employer_name=employer_name,
    )

"""
TaxReturn Assessment - Assessment Orchestrator

Composes the aggregators, relief calculator, progressive tax calculator and
credit netting into one immutable AssessmentResult.

The five source datasets are passed in explicitly. If any of them is still
unavailable (None) the orchestrator returns Incomplete instead of computing a
partial figure; callers must treat Incomplete as "not ready", never as zero.
An empty collection is a present dataset with nothing recorded.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from types import MappingProxyType
from typing import Mapping, Optional, Sequence, Tuple, Union

from app.models.tax_return import (
    BusinessTransaction,
    EmploymentRecord,
    InvestmentLine,
    InvestmentType,
    QualifyingPaymentLine,
    SourceName,
    TaxPaymentRecord,
    TaxPaymentType,
)
from app.services.tax_assessment.aggregators import (
    ASSESSABLE_INVESTMENT_TYPES,
    InvestmentBucket,
    aggregate_business,
    aggregate_employment,
    aggregate_investment,
    aggregate_qualifying_payments,
    aggregate_tax_payments,
)
from app.services.tax_assessment.credit_netting import calculate_credits
from app.services.tax_assessment.parameters import AssessmentParameters, get_default_parameters
from app.services.tax_assessment.progressive_tax import ProgressiveTaxCalculator, SlabBand
from app.services.tax_assessment.relief_calculator import ReliefCalculator

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


@dataclass(frozen=True)
class AssessmentResult:
    """Consolidated tax return for one year. Recomputed on every call."""
    tax_year: str
    employment_income: Decimal
    business_net: Decimal
    investment_by_type: Mapping[InvestmentType, InvestmentBucket] = field(hash=False)
    total_assessable: Decimal
    personal_relief: Decimal
    rental_relief: Decimal
    qualifying_relief: Decimal
    total_reliefs: Decimal
    taxable_income: Decimal
    slab_breakdown: Tuple[SlabBand, ...]
    total_tax_liability: Decimal
    total_paye: Decimal
    total_withholding: Decimal
    total_tax_paid: Decimal
    total_credits: Decimal
    balance: Decimal
    tax_paid_by_period: Mapping[TaxPaymentType, Decimal] = field(hash=False)

    is_complete = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "investment_by_type", MappingProxyType(dict(self.investment_by_type)))
        object.__setattr__(self, "tax_paid_by_period", MappingProxyType(dict(self.tax_paid_by_period)))

    @property
    def investment_income(self) -> Decimal:
        """Assessable investment income (Rent + Interest + Other)."""
        return sum((self.investment_by_type[t].amount for t in ASSESSABLE_INVESTMENT_TYPES), ZERO)

    @property
    def is_refund(self) -> bool:
        return self.balance < 0

    @property
    def amount_payable(self) -> Decimal:
        return self.balance if self.balance > 0 else ZERO

    @property
    def amount_refundable(self) -> Decimal:
        return -self.balance if self.balance < 0 else ZERO


@dataclass(frozen=True)
class Incomplete:
    """One or more source datasets are not yet available."""
    tax_year: str
    missing_sources: Tuple[SourceName, ...]

    is_complete = False


class TaxAssessmentService:
    """
    Tax assessment engine.

    Dependency order: aggregators -> reliefs -> progressive tax -> credits.
    Holds only its (immutable) parameters, so one instance may be shared.
    """

    def __init__(self, parameters: Optional[AssessmentParameters] = None):
        # Injected tables are held to the same checks as those loaded at startup
        self.parameters = (parameters or get_default_parameters()).validate()
        self.relief_calculator = ReliefCalculator(
            personal_relief_cap=self.parameters.personal_relief_cap,
            rental_relief_rate=self.parameters.rental_relief_rate,
        )
        self.tax_calculator = ProgressiveTaxCalculator(self.parameters.slabs)

    def compute_assessment(
        self,
        tax_year: str,
        employment: Optional[EmploymentRecord],
        business: Optional[Sequence[BusinessTransaction]],
        investment: Optional[Sequence[InvestmentLine]],
        qualifying_payments: Optional[Sequence[QualifyingPaymentLine]],
        tax_payments: Optional[Sequence[TaxPaymentRecord]],
    ) -> Union[AssessmentResult, Incomplete]:
        """Compute the consolidated return, or report which sources are missing."""
        sources = {
            SourceName.EMPLOYMENT: employment,
            SourceName.BUSINESS: business,
            SourceName.INVESTMENT: investment,
            SourceName.QUALIFYING_PAYMENTS: qualifying_payments,
            SourceName.TAX_PAYMENTS: tax_payments,
        }
        missing = tuple(name for name, data in sources.items() if data is None)
        if missing:
            logger.info(
                f"Assessment {tax_year} incomplete; waiting on: "
                f"{', '.join(name.value for name in missing)}"
            )
            return Incomplete(tax_year=tax_year, missing_sources=missing)

        # Aggregate
        employment_summary = aggregate_employment(employment)
        business_summary = aggregate_business(business)
        investment_summary = aggregate_investment(investment)
        qualifying_summary = aggregate_qualifying_payments(qualifying_payments)
        payment_summary = aggregate_tax_payments(tax_payments)

        total_assessable = (
            employment_summary.total_gross
            + business_summary.net
            + investment_summary.assessable_amount
        )

        # Reliefs
        reliefs = self.relief_calculator.calculate_reliefs(
            total_assessable, investment_summary, qualifying_summary
        )
        taxable_income = max(ZERO, total_assessable - reliefs.total_reliefs)

        # Progressive tax
        total_tax, bands = self.tax_calculator.calculate_tax(taxable_income)

        # Credits
        credits = calculate_credits(total_tax, employment_summary, investment_summary, payment_summary)

        result = AssessmentResult(
            tax_year=tax_year,
            employment_income=employment_summary.total_gross,
            business_net=business_summary.net,
            investment_by_type=investment_summary.buckets,
            total_assessable=total_assessable,
            personal_relief=reliefs.personal_relief,
            rental_relief=reliefs.rental_relief,
            qualifying_relief=reliefs.qualifying_relief,
            total_reliefs=reliefs.total_reliefs,
            taxable_income=taxable_income,
            slab_breakdown=tuple(bands),
            total_tax_liability=total_tax,
            total_paye=credits.total_paye,
            total_withholding=credits.total_withholding,
            total_tax_paid=credits.total_tax_paid,
            total_credits=credits.total_credits,
            balance=credits.balance,
            tax_paid_by_period=payment_summary.buckets,
        )

        logger.debug(
            f"Assessment {tax_year}: assessable={total_assessable} taxable={taxable_income} "
            f"liability={total_tax} credits={credits.total_credits} balance={credits.balance}"
        )
        return result


def compute_assessment(
    tax_year: str,
    employment: Optional[EmploymentRecord],
    business: Optional[Sequence[BusinessTransaction]],
    investment: Optional[Sequence[InvestmentLine]],
    qualifying_payments: Optional[Sequence[QualifyingPaymentLine]],
    tax_payments: Optional[Sequence[TaxPaymentRecord]],
    parameters: Optional[AssessmentParameters] = None,
) -> Union[AssessmentResult, Incomplete]:
    """
    Compute a tax return assessment.

    Args:
        tax_year: Assessment year key, e.g. "2025-26"
        employment: Employment record, or None if not yet available
        business: Business transactions, or None
        investment: Investment lines, or None
        qualifying_payments: Qualifying payment lines, or None
        tax_payments: Advance/final tax payments, or None
        parameters: Year parameters; defaults to those from settings

    Returns:
        AssessmentResult, or Incomplete naming the missing sources
    """
    service = TaxAssessmentService(parameters)
    return service.compute_assessment(
        tax_year, employment, business, investment, qualifying_payments, tax_payments
    )

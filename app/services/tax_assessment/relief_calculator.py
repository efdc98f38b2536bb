"""
TaxReturn Assessment - Relief Calculator

Reliefs subtracted from total assessable income before the slab table is
applied:
- Personal relief: assessable income, capped at the personal relief cap
- Rental relief: a flat share (25%) of rent received, uncapped
- Qualifying payments: the sum of per-line deductibles (capped at entry)
"""

from dataclasses import dataclass
from decimal import Decimal

from app.services.tax_assessment.aggregators import InvestmentSummary, QualifyingPaymentSummary


@dataclass(frozen=True)
class ReliefBreakdown:
    personal_relief: Decimal
    rental_relief: Decimal
    qualifying_relief: Decimal

    @property
    def total_reliefs(self) -> Decimal:
        return self.personal_relief + self.rental_relief + self.qualifying_relief


class ReliefCalculator:
    """Derives automatic and elective reliefs from aggregator outputs."""

    def __init__(self, personal_relief_cap: Decimal, rental_relief_rate: Decimal):
        self.personal_relief_cap = personal_relief_cap
        self.rental_relief_rate = rental_relief_rate

    def calculate_personal_relief(self, total_assessable: Decimal) -> Decimal:
        """
        min(assessable, cap).

        Not floored at zero: a loss year yields a negative relief.
        """
        return min(total_assessable, self.personal_relief_cap)

    def calculate_rental_relief(self, rent_amount: Decimal) -> Decimal:
        return rent_amount * self.rental_relief_rate

    def calculate_qualifying_relief(self, qualifying_payments: QualifyingPaymentSummary) -> Decimal:
        return qualifying_payments.total_deductible

    def calculate_reliefs(
        self,
        total_assessable: Decimal,
        investment: InvestmentSummary,
        qualifying_payments: QualifyingPaymentSummary,
    ) -> ReliefBreakdown:
        return ReliefBreakdown(
            personal_relief=self.calculate_personal_relief(total_assessable),
            rental_relief=self.calculate_rental_relief(investment.rent_amount),
            qualifying_relief=self.calculate_qualifying_relief(qualifying_payments),
        )

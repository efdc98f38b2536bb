"""
TaxReturn Assessment - Credit Netting

Tax already suffered or paid during the year, set against the liability:
- PAYE withheld by the employer
- Creditable WHT on Rent, Interest and Other investment income
  (Dividend WHT is a final tax and is not credited)
- Advance quarterly and final payments

balance = liability - credits. A positive balance is payable; a negative one
is a refund due. Balances are never clamped.
"""

from dataclasses import dataclass
from decimal import Decimal

from app.services.tax_assessment.aggregators import (
    EmploymentSummary,
    InvestmentSummary,
    TaxPaymentSummary,
)


@dataclass(frozen=True)
class CreditSummary:
    total_paye: Decimal
    total_withholding: Decimal
    total_tax_paid: Decimal
    total_credits: Decimal
    balance: Decimal


def net_balance(
    total_tax_liability: Decimal,
    total_paye: Decimal,
    total_withholding: Decimal,
    total_tax_paid: Decimal,
) -> CreditSummary:
    total_credits = total_paye + total_withholding + total_tax_paid
    return CreditSummary(
        total_paye=total_paye,
        total_withholding=total_withholding,
        total_tax_paid=total_tax_paid,
        total_credits=total_credits,
        balance=total_tax_liability - total_credits,
    )


def calculate_credits(
    total_tax_liability: Decimal,
    employment: EmploymentSummary,
    investment: InvestmentSummary,
    tax_payments: TaxPaymentSummary,
) -> CreditSummary:
    """Sum the three credit sources and net them against the liability."""
    return net_balance(
        total_tax_liability,
        total_paye=employment.total_tax,
        total_withholding=investment.creditable_withholding,
        total_tax_paid=tax_payments.total,
    )

"""
TaxReturn Assessment - Tax Assessment Engine

Turns per-source income records into one consolidated tax return.

Modules:
- aggregators: per-source subtotals (employment, business, investment,
  qualifying payments, tax payments)
- relief_calculator: personal, rental and qualifying-payment reliefs
- progressive_tax: slab apportionment and liability
- credit_netting: PAYE + creditable WHT + tax paid, and the balance
- assessment_service: the orchestrator callers invoke
- parameters: the assessment year's configuration
- record_entry: entry-time computations for the source modules
- return_export: return sections and CSV export
"""

from app.services.tax_assessment.parameters import (
    AssessmentParameters,
    TaxSlab,
    get_default_parameters,
    load_parameters,
)
from app.services.tax_assessment.progressive_tax import ProgressiveTaxCalculator, SlabBand
from app.services.tax_assessment.relief_calculator import ReliefCalculator, ReliefBreakdown
from app.services.tax_assessment.credit_netting import CreditSummary, calculate_credits, net_balance
from app.services.tax_assessment.assessment_service import (
    AssessmentResult,
    Incomplete,
    TaxAssessmentService,
    compute_assessment,
)
from app.services.tax_assessment.return_export import build_return_rows, export_assessment_csv


__all__ = [
    "AssessmentParameters",
    "TaxSlab",
    "get_default_parameters",
    "load_parameters",
    "ProgressiveTaxCalculator",
    "SlabBand",
    "ReliefCalculator",
    "ReliefBreakdown",
    "CreditSummary",
    "calculate_credits",
    "net_balance",
    "AssessmentResult",
    "Incomplete",
    "TaxAssessmentService",
    "compute_assessment",
    "build_return_rows",
    "export_assessment_csv",
]

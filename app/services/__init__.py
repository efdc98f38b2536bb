"""
TaxReturn Assessment - Services Package

Business logic services.
"""

from app.services.tax_assessment import TaxAssessmentService, compute_assessment

__all__ = [
    "TaxAssessmentService",
    "compute_assessment",
]

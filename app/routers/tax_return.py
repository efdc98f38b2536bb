"""
TaxReturn Assessment - Tax Return Router

API endpoints for the consolidated tax return:
- Assessment of the five source datasets (read-only, recomputed per call)
- CSV export of the return
- Active assessment-year parameters
"""

import logging
from typing import Union

from fastapi import APIRouter, Depends, Path, Request, Response, status

from app.schemas.tax_return import (
    AssessmentParametersResponse,
    AssessmentRequest,
    AssessmentResponse,
    IncompleteResponse,
)
from app.services.tax_assessment import (
    AssessmentResult,
    Incomplete,
    TaxAssessmentService,
    export_assessment_csv,
)
from app.utils.error_handling import (
    AssessmentIncompleteException,
    ConfigurationError,
    InvalidTaxPeriodException,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def get_assessment_service(request: Request) -> TaxAssessmentService:
    """Engine built and validated by the application lifespan."""
    service = getattr(request.app.state, "assessment_service", None)
    if service is None:
        raise ConfigurationError("Assessment engine was not initialised at startup")
    return service


def _run_assessment(
    tax_year: str,
    request: AssessmentRequest,
    service: TaxAssessmentService,
) -> Union[AssessmentResult, Incomplete]:
    parameters = service.parameters
    if tax_year != parameters.tax_year:
        raise InvalidTaxPeriodException(tax_year, parameters.tax_year)

    return service.compute_assessment(
        tax_year,
        employment=request.employment.to_record() if request.employment is not None else None,
        business=(
            [tx.to_record() for tx in request.business]
            if request.business is not None else None
        ),
        investment=(
            [line.to_record(parameters) for line in request.investment]
            if request.investment is not None else None
        ),
        qualifying_payments=(
            [line.to_record(parameters) for line in request.qualifying_payments]
            if request.qualifying_payments is not None else None
        ),
        tax_payments=(
            [p.to_record() for p in request.tax_payments]
            if request.tax_payments is not None else None
        ),
    )


@router.get(
    "/parameters",
    response_model=AssessmentParametersResponse,
    summary="Get assessment-year parameters",
)
async def get_parameters(
    service: TaxAssessmentService = Depends(get_assessment_service),
):
    """Slab table, relief caps and withholding rates in force."""
    return AssessmentParametersResponse.from_parameters(service.parameters)


@router.post(
    "/{tax_year}/assessment",
    response_model=Union[AssessmentResponse, IncompleteResponse],
    summary="Compute tax return assessment",
    responses={202: {"model": IncompleteResponse, "description": "One or more sources not yet available"}},
)
async def compute_assessment(
    request: AssessmentRequest,
    response: Response,
    tax_year: str = Path(..., description="Assessment year, e.g. 2025-26"),
    service: TaxAssessmentService = Depends(get_assessment_service),
):
    """
    Compute the consolidated return from the five source datasets.

    Returns 202 with the missing sources while any dataset is absent; the
    client should keep showing a loading state and never display zeros.
    """
    result = _run_assessment(tax_year, request, service)

    if not result.is_complete:
        response.status_code = status.HTTP_202_ACCEPTED
        return IncompleteResponse.from_incomplete(result)

    return AssessmentResponse.from_result(result)


@router.post(
    "/{tax_year}/assessment/export",
    summary="Export tax return as CSV",
    response_class=Response,
    responses={200: {"content": {"text/csv": {}}}},
)
async def export_assessment(
    request: AssessmentRequest,
    tax_year: str = Path(..., description="Assessment year, e.g. 2025-26"),
    service: TaxAssessmentService = Depends(get_assessment_service),
):
    """Same computation as the assessment endpoint, rendered as CSV."""
    result = _run_assessment(tax_year, request, service)

    if not result.is_complete:
        raise AssessmentIncompleteException(
            tax_year, [s.value for s in result.missing_sources]
        )

    logger.info(f"Exporting tax return {tax_year}")
    return Response(
        content=export_assessment_csv(result),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="tax_return_{tax_year}.csv"'},
    )

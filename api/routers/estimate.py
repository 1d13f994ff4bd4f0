"""Estimate Router - similar-case estimates, rule-based calculator and market rates"""
import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from api.models.repair_schemas import CalculateRequest, SimilarCasesResponse
from api.services.estimate_service import EstimateService, get_estimate_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/v1/estimate", tags=["Estimate"])


@router.get("/similar", response_model=SimilarCasesResponse)
def similar_cases(
    request: Request,
    q: str = Query("", description="Free-text symptom description"),
    service: EstimateService = Depends(get_estimate_service),
):
    """
    Price range from the five most similar historical cases.

    A missing or empty ``q`` is rejected. A query with no usable tokens,
    such as whitespace or punctuation only, returns
    ``{estimate: null, similarCases: []}``.
    """
    trace_id = getattr(request.state, "trace_id", str(uuid.uuid4()))
    if not q:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "code": "VALIDATION_ERROR",
                "message": "Query is required",
                "hint": "Pass the symptom description as ?q=",
            },
        )
    return service.similar_cases(q, trace_id=trace_id)


@router.post("/calculate")
def calculate(
    request: Request,
    body: CalculateRequest,
    service: EstimateService = Depends(get_estimate_service),
):
    """Itemized estimate: work items, surcharges, multiplier, strings, minimum charge"""
    trace_id = getattr(request.state, "trace_id", str(uuid.uuid4()))
    return service.calculate(
        body.instrument_type,
        body.to_specs(),
        body.to_condition(),
        body.selected_work_ids,
        trace_id=trace_id,
    )


@router.get("/catalog")
def get_catalog(service: EstimateService = Depends(get_estimate_service)):
    """Work item catalog and accepted option values for the calculator"""
    return service.catalog()


@router.get("/market-rates")
def get_market_rates(
    q: str = Query("", description="Optional keyword query"),
    service: EstimateService = Depends(get_estimate_service),
):
    return service.market_rates(q)

"""Repairs Router - case listing, save / update / delete and price table"""
import logging
import uuid
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, Request, status

from api.config import config
from api.models.repair_schemas import CaseRequest, MutationResponse
from api.services.repair_service import RepairService, get_repair_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/v1/repairs", tags=["Repairs"])


def _trace_id(request: Request) -> str:
    return getattr(request.state, "trace_id", str(uuid.uuid4()))


@router.get("")
def list_repairs(
    q: str = Query("", description="Filter on customer, model, symptoms, date or serial"),
    sort: Literal["asc", "desc"] = Query("desc"),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=config.LIST_PAGE_SIZE_MAX),
    service: RepairService = Depends(get_repair_service),
):
    """Grouped cases, filtered, date-sorted (unknown dates last) and paginated"""
    return service.list_cases(q=q, sort=sort, page=page, limit=limit)


@router.post("", response_model=MutationResponse, status_code=status.HTTP_201_CREATED)
def save_repair(
    request: Request,
    body: CaseRequest,
    service: RepairService = Depends(get_repair_service),
):
    """Store a new case as one row per work item"""
    return service.save_case(body.to_case_input(), trace_id=_trace_id(request))


@router.get("/price-table")
def get_price_table(
    search: str = Query("", description="Work item name filter"),
    category: Optional[str] = Query(None, description="Category filter, 'All' for none"),
    page: int = Query(1, ge=1),
    limit: int = Query(100, ge=1, le=config.LIST_PAGE_SIZE_MAX),
    service: RepairService = Depends(get_repair_service),
):
    """Historical min / max / average price per work item"""
    return service.price_table(search=search, category=category, page=page, limit=limit)


@router.get("/price-table/examples")
def get_price_examples(
    name: str = Query(..., min_length=1, description="Normalized work item name"),
    service: RepairService = Depends(get_repair_service),
):
    """Every past case containing the given work item, highest price first"""
    return service.price_examples(name)


@router.put("/{case_id}", response_model=MutationResponse, response_model_exclude_none=True)
def update_repair(
    request: Request,
    case_id: str,
    body: CaseRequest,
    service: RepairService = Depends(get_repair_service),
):
    """Replace every row of a case with freshly built rows under the same id"""
    return service.update_case(case_id, body.to_case_input(), trace_id=_trace_id(request))


@router.delete("/{case_id}", response_model=MutationResponse, response_model_exclude_none=True)
def delete_repair(
    request: Request,
    case_id: str,
    scope: Literal["id", "raw_text"] = Query("id", description="raw_text also removes rows sharing the case text"),
    service: RepairService = Depends(get_repair_service),
):
    return service.delete_case(case_id, scope=scope, trace_id=_trace_id(request))

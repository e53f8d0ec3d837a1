"""
Officer API endpoints.

The API layer is thin: it maps service errors to status codes
and delegates everything else to OfficerService.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from officer_registry.dependencies import (
    get_audit_recorder,
    get_cache,
    get_request_context,
)
from officer_registry.exceptions import NotFoundError
from officer_registry.models.base import get_db
from officer_registry.schemas.common import MessageResponse
from officer_registry.schemas.context import RequestContext
from officer_registry.schemas.officer import (
    OfficerCreate,
    OfficerUpdate,
    OfficerResponse,
    OfficerCountResponse,
    PromotionResponse,
    RecentPromotionResponse,
)
from officer_registry.services.audit_recorder import AuditRecorder
from officer_registry.services.cache import CacheGateway
from officer_registry.services.officer_service import OfficerService

router = APIRouter(prefix="/officers", tags=["Officers"])


def get_officer_service(
    db: Session = Depends(get_db),
    recorder: AuditRecorder = Depends(get_audit_recorder),
    cache: CacheGateway = Depends(get_cache),
) -> OfficerService:
    return OfficerService(db, recorder, cache)


@router.post("", response_model=OfficerResponse, status_code=201)
def create_officer(
    request: OfficerCreate,
    context: RequestContext = Depends(get_request_context),
    service: OfficerService = Depends(get_officer_service),
):
    """Register a new officer."""
    return service.create_officer(request, context)


@router.get("", response_model=list[OfficerResponse])
def list_officers(service: OfficerService = Depends(get_officer_service)):
    """All officers ordered by rank, most junior first."""
    return service.list_officers()


@router.get("/count", response_model=OfficerCountResponse)
def count_officers(service: OfficerService = Depends(get_officer_service)):
    return service.count_officers()


@router.get(
    "/recent-promotions",
    response_model=list[RecentPromotionResponse],
)
def recent_promotions(service: OfficerService = Depends(get_officer_service)):
    return service.recent_promotions()


@router.get("/{officer_id}", response_model=OfficerResponse)
def get_officer(
    officer_id: int,
    service: OfficerService = Depends(get_officer_service),
):
    try:
        return service.get_officer(officer_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/{officer_id}", response_model=OfficerResponse)
def update_officer(
    officer_id: int,
    request: OfficerUpdate,
    context: RequestContext = Depends(get_request_context),
    service: OfficerService = Depends(get_officer_service),
):
    """
    Update an officer's name or start date.

    Rank cannot be changed here; use the promotion endpoint.
    """
    try:
        return service.update_officer(officer_id, request, context)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{officer_id}", response_model=MessageResponse)
def delete_officer(
    officer_id: int,
    context: RequestContext = Depends(get_request_context),
    service: OfficerService = Depends(get_officer_service),
):
    """Delete an officer together with their evaluations."""
    try:
        service.delete_officer(officer_id, context)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return MessageResponse(message=f"Officer {officer_id} deleted")


@router.put("/{officer_id}/promote", response_model=PromotionResponse)
def promote_officer(
    officer_id: int,
    context: RequestContext = Depends(get_request_context),
    service: OfficerService = Depends(get_officer_service),
):
    """Promote an officer one rank."""
    try:
        return service.promote_officer(officer_id, context)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

"""
Evaluation API endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from officer_registry.dependencies import (
    get_admin_context,
    get_audit_recorder,
    get_cache,
    get_request_context,
)
from officer_registry.exceptions import NotFoundError
from officer_registry.models.base import get_db
from officer_registry.schemas.common import MessageResponse
from officer_registry.schemas.context import RequestContext
from officer_registry.schemas.evaluation import (
    EvaluationCreate,
    EvaluationResponse,
    RecentEvaluationResponse,
)
from officer_registry.services.audit_recorder import AuditRecorder
from officer_registry.services.cache import CacheGateway
from officer_registry.services.evaluation_service import EvaluationService

router = APIRouter(prefix="/evaluations", tags=["Evaluations"])


def get_evaluation_service(
    db: Session = Depends(get_db),
    recorder: AuditRecorder = Depends(get_audit_recorder),
    cache: CacheGateway = Depends(get_cache),
) -> EvaluationService:
    return EvaluationService(db, recorder, cache)


@router.post("", response_model=EvaluationResponse, status_code=201)
def create_evaluation(
    request: EvaluationCreate,
    context: RequestContext = Depends(get_request_context),
    service: EvaluationService = Depends(get_evaluation_service),
):
    """Record an evaluation; the caller is the evaluator."""
    try:
        return service.create_evaluation(request, context)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/recent", response_model=list[RecentEvaluationResponse])
def recent_evaluations(
    service: EvaluationService = Depends(get_evaluation_service),
):
    return service.recent_evaluations()


@router.get("/officer/{officer_id}", response_model=list[EvaluationResponse])
def officer_evaluations(
    officer_id: int,
    service: EvaluationService = Depends(get_evaluation_service),
):
    """All evaluations for one officer, newest first."""
    return service.evaluations_for_officer(officer_id)


@router.delete("/{evaluation_id}", response_model=MessageResponse)
def delete_evaluation(
    evaluation_id: int,
    context: RequestContext = Depends(get_admin_context),
    service: EvaluationService = Depends(get_evaluation_service),
):
    """Delete an evaluation. Admins only."""
    try:
        service.delete_evaluation(evaluation_id, context)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return MessageResponse(message=f"Evaluation {evaluation_id} deleted")

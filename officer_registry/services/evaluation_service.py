"""
Evaluation service — recording and removing skill evaluations.

The officer's current rank is copied onto the evaluation when
it is recorded and is never touched again.
"""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from officer_registry.exceptions import NotFoundError
from officer_registry.models.evaluation import Evaluation
from officer_registry.models.officer import Officer
from officer_registry.schemas.context import RequestContext
from officer_registry.schemas.evaluation import (
    EvaluationCreate,
    EvaluationResponse,
    RecentEvaluationResponse,
    SkillScores,
)
from officer_registry.services import cache_keys
from officer_registry.services.audit_recorder import AuditRecorder
from officer_registry.services.cache import CacheGateway
from officer_registry.services.mutations import MutationCoordinator

logger = logging.getLogger(__name__)

RECENT_EVALUATIONS_LIMIT = 10


class EvaluationService:

    def __init__(self, db: Session, recorder: AuditRecorder, cache: CacheGateway):
        self.db = db
        self.cache = cache
        self.mutations = MutationCoordinator(db, recorder, cache)

    def get_evaluation(self, evaluation_id: int) -> Evaluation:
        evaluation = self.db.get(Evaluation, evaluation_id)
        if not evaluation:
            raise NotFoundError(f"Evaluation {evaluation_id} not found")
        return evaluation

    def create_evaluation(
        self, request: EvaluationCreate, context: RequestContext
    ) -> Evaluation:
        """
        Record an evaluation for an officer.

        The evaluator is the acting principal; the rank is the
        officer's rank right now.
        """
        officer = self.db.get(Officer, request.officer_id)
        if not officer:
            raise NotFoundError(f"Officer {request.officer_id} not found")

        actor = context.actor
        if actor is None:
            raise ValueError("An evaluation needs an authenticated evaluator")

        evaluation = Evaluation(
            officer_id=officer.id,
            evaluator_id=actor.id,
            evaluator_name=actor.username or str(actor.id),
            rank_at_evaluation=officer.rank,
            **request.skills.model_dump(),
        )
        self.db.add(evaluation)
        self.db.flush()

        self.mutations.commit(
            action=cache_keys.CREATE,
            context=context,
            target_entity=cache_keys.EVALUATION,
            target_id=evaluation.id,
            metadata={
                "officerName": officer.name,
                "scores": request.skills.model_dump(by_alias=True),
            },
            invalidate=cache_keys.invalidation_set(
                cache_keys.EVALUATION, cache_keys.CREATE, officer.id
            ),
        )
        logger.info(
            "Recorded evaluation %s for officer %s",
            evaluation.id, evaluation.officer_id,
        )
        return evaluation

    def delete_evaluation(
        self, evaluation_id: int, context: RequestContext
    ) -> None:
        evaluation = self.get_evaluation(evaluation_id)
        officer_id = evaluation.officer_id
        metadata = {
            "officerName": evaluation.officer.name,
            "scores": SkillScores.model_validate(evaluation.skills).model_dump(
                by_alias=True
            ),
            "evaluator": evaluation.evaluator_name,
        }
        self.db.delete(evaluation)
        self.db.flush()

        self.mutations.commit(
            action=cache_keys.DELETE,
            context=context,
            target_entity=cache_keys.EVALUATION,
            target_id=evaluation_id,
            metadata=metadata,
            invalidate=cache_keys.invalidation_set(
                cache_keys.EVALUATION, cache_keys.DELETE, officer_id
            ),
        )

    def recent_evaluations(self) -> list[dict]:
        """The latest evaluations with officer and evaluator names."""
        def compute():
            evaluations = self.db.execute(
                select(Evaluation)
                .options(joinedload(Evaluation.officer))
                .order_by(Evaluation.date.desc(), Evaluation.id.desc())
                .limit(RECENT_EVALUATIONS_LIMIT)
            ).scalars().all()
            return [
                RecentEvaluationResponse(
                    evaluation_id=e.id,
                    officer_id=e.officer_id,
                    name=e.officer.name,
                    rank=e.officer.rank,
                    date=e.date,
                    evaluator=e.evaluator_name,
                ).model_dump(mode="json", by_alias=True)
                for e in evaluations
            ]

        return self.cache.read_through(cache_keys.EVALUATIONS_RECENT, compute)

    def evaluations_for_officer(self, officer_id: int) -> list[dict]:
        """All evaluations of one officer, newest first."""
        def compute():
            evaluations = self.db.execute(
                select(Evaluation)
                .where(Evaluation.officer_id == officer_id)
                .order_by(Evaluation.date.desc(), Evaluation.id.desc())
            ).scalars().all()
            return [
                EvaluationResponse.model_validate(e).model_dump(
                    mode="json", by_alias=True
                )
                for e in evaluations
            ]

        return self.cache.read_through(
            cache_keys.officer_evaluations(officer_id), compute
        )

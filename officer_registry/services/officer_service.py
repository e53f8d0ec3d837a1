"""
Officer service — roster reads and officer mutations.

Every mutation follows the same shape: load and check, stage
the change on the session, then hand off to the mutation
coordinator, which commits, audits and invalidates.
"""

import logging
from datetime import datetime

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from officer_registry.exceptions import NotFoundError, RuleViolation
from officer_registry.models.officer import Officer
from officer_registry.models.ranks import RANK_HIERARCHY, RankHierarchy
from officer_registry.schemas.context import RequestContext
from officer_registry.schemas.officer import (
    OfficerCreate,
    OfficerUpdate,
    OfficerResponse,
    OfficerCountResponse,
    PromotionResponse,
    RecentPromotionResponse,
)
from officer_registry.services import cache_keys
from officer_registry.services.audit_recorder import AuditRecorder
from officer_registry.services.cache import CacheGateway
from officer_registry.services.mutations import MutationCoordinator, diff_fields

logger = logging.getLogger(__name__)

# Fields the generic update may change and the audit diff covers
UPDATABLE_FIELDS = ("name", "start_date")

RECENT_PROMOTIONS_LIMIT = 10


class OfficerService:

    def __init__(
        self,
        db: Session,
        recorder: AuditRecorder,
        cache: CacheGateway,
        hierarchy: RankHierarchy = RANK_HIERARCHY,
    ):
        self.db = db
        self.cache = cache
        self.hierarchy = hierarchy
        self.mutations = MutationCoordinator(db, recorder, cache)

    # --- Reads ---

    def get_officer(self, officer_id: int) -> Officer:
        """Get an officer by ID."""
        officer = self.db.get(Officer, officer_id)
        if not officer:
            raise NotFoundError(f"Officer {officer_id} not found")
        return officer

    def list_officers(self) -> list[dict]:
        """All officers, most junior rank first."""
        def compute():
            officers = self.db.execute(
                select(Officer).order_by(Officer.id)
            ).scalars().all()
            ordered = sorted(
                officers, key=lambda o: self.hierarchy.sort_key(o.rank)
            )
            return [
                OfficerResponse.model_validate(o).model_dump(
                    mode="json", by_alias=True
                )
                for o in ordered
            ]

        return self.cache.read_through(cache_keys.OFFICERS_ALL, compute)

    def count_officers(self) -> dict:
        def compute():
            total = self.db.execute(select(func.count(Officer.id))).scalar()
            return OfficerCountResponse(total=total).model_dump(
                mode="json", by_alias=True
            )

        return self.cache.read_through(cache_keys.OFFICERS_COUNT, compute)

    def recent_promotions(self) -> list[dict]:
        """The most recently promoted officers, newest first."""
        def compute():
            officers = self.db.execute(
                select(Officer)
                .where(Officer.promoted_at.is_not(None))
                .order_by(Officer.promoted_at.desc(), Officer.id.desc())
                .limit(RECENT_PROMOTIONS_LIMIT)
            ).scalars().all()
            return [
                RecentPromotionResponse(
                    officer_id=o.id,
                    name=o.name,
                    new_rank=o.rank,
                    promoted_at=o.promoted_at,
                ).model_dump(mode="json", by_alias=True)
                for o in officers
            ]

        return self.cache.read_through(
            cache_keys.OFFICERS_RECENT_PROMOTIONS, compute
        )

    # --- Mutations ---

    def create_officer(
        self, request: OfficerCreate, context: RequestContext
    ) -> Officer:
        officer = Officer(
            name=request.name,
            rank=request.rank,
            start_date=request.start_date,
        )
        self.db.add(officer)
        self.db.flush()

        self.mutations.commit(
            action=cache_keys.CREATE,
            context=context,
            target_entity=cache_keys.OFFICER,
            target_id=officer.id,
            metadata={"name": officer.name, "rank": officer.rank},
            invalidate=cache_keys.invalidation_set(
                cache_keys.OFFICER, cache_keys.CREATE, officer.id
            ),
        )
        logger.info("Registered officer %s (%s)", officer.id, officer.rank)
        return officer

    def update_officer(
        self, officer_id: int, request: OfficerUpdate, context: RequestContext
    ) -> Officer:
        """
        Apply an update to an officer's editable fields.

        Only fields that actually change are written and audited.
        An update that changes nothing produces no audit entry and
        leaves the cache alone.
        """
        officer = self.get_officer(officer_id)
        requested = request.model_dump(exclude_unset=True, exclude_none=True)
        changes = diff_fields(officer, requested, UPDATABLE_FIELDS)

        if not changes:
            logger.info("Update to officer %s changed nothing", officer_id)
            return officer

        for field in changes:
            setattr(officer, field, requested[field])
        self.db.flush()

        self.mutations.commit(
            action=cache_keys.UPDATE,
            context=context,
            target_entity=cache_keys.OFFICER,
            target_id=officer.id,
            metadata={"changes": changes, "name": officer.name},
            invalidate=cache_keys.invalidation_set(
                cache_keys.OFFICER, cache_keys.UPDATE, officer.id
            ),
        )
        return officer

    def delete_officer(self, officer_id: int, context: RequestContext) -> None:
        officer = self.get_officer(officer_id)
        metadata = {
            "name": officer.name,
            "rank": officer.rank,
            "startDate": officer.start_date.isoformat(),
        }
        self.db.delete(officer)
        self.db.flush()

        self.mutations.commit(
            action=cache_keys.DELETE,
            context=context,
            target_entity=cache_keys.OFFICER,
            target_id=officer_id,
            metadata=metadata,
            invalidate=cache_keys.invalidation_set(
                cache_keys.OFFICER, cache_keys.DELETE, officer_id
            ),
        )

    def promote_officer(
        self, officer_id: int, context: RequestContext
    ) -> PromotionResponse:
        """
        Advance an officer exactly one rank.

        An officer at the top of the hierarchy, or holding a rank
        the hierarchy does not know, cannot be promoted.
        """
        officer = self.get_officer(officer_id)
        old_rank = officer.rank
        new_rank = self.hierarchy.next_rank(old_rank)

        if new_rank is None:
            if old_rank in self.hierarchy:
                reason = f"Officer {officer_id} is already at the highest rank"
            else:
                reason = (
                    f"Officer {officer_id} has unknown rank '{old_rank}' "
                    f"and cannot be promoted"
                )
            logger.warning("Promotion rejected: %s", reason)
            raise RuleViolation(reason)

        officer.rank = new_rank
        officer.promoted_at = datetime.utcnow()
        self.db.flush()

        self.mutations.commit(
            action=cache_keys.PROMOTE,
            context=context,
            target_entity=cache_keys.OFFICER,
            target_id=officer.id,
            metadata={
                "oldRank": old_rank,
                "newRank": new_rank,
                "name": officer.name,
                "promotedAt": officer.promoted_at.isoformat(),
            },
            invalidate=cache_keys.invalidation_set(
                cache_keys.OFFICER, cache_keys.PROMOTE, officer.id
            ),
        )
        logger.info(
            "Promoted officer %s from %s to %s", officer.id, old_rank, new_rank
        )
        return PromotionResponse(
            officer_id=officer.id,
            old_rank=old_rank,
            new_rank=new_rank,
            promoted_at=officer.promoted_at,
        )

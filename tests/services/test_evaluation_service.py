"""
Tests for the EvaluationService.
"""

from datetime import date

import pytest

from officer_registry.exceptions import NotFoundError
from officer_registry.models import Evaluation, SKILL_NAMES
from officer_registry.schemas.context import RequestContext
from officer_registry.schemas.evaluation import EvaluationCreate, SkillScores
from officer_registry.schemas.officer import OfficerCreate
from officer_registry.services import cache_keys
from officer_registry.services.evaluation_service import EvaluationService
from officer_registry.services.officer_service import OfficerService


def scores(value=7.0, **overrides):
    values = {name: value for name in SKILL_NAMES}
    values.update(overrides)
    return SkillScores(**values)


@pytest.fixture
def officers(db_session, recorder, cache):
    return OfficerService(db_session, recorder, cache)


@pytest.fixture
def service(db_session, recorder, cache):
    return EvaluationService(db_session, recorder, cache)


@pytest.fixture
def officer(officers, context):
    return officers.create_officer(OfficerCreate(
        name="Bruno Lima", rank="Cadet", start_date=date(2024, 5, 1),
    ), context)


def evaluate(service, context, officer_id, value=7.0, **overrides):
    return service.create_evaluation(EvaluationCreate(
        officer_id=officer_id, skills=scores(value, **overrides),
    ), context)


class TestCreateEvaluation:

    def test_snapshots_current_rank(self, service, context, officer):
        evaluation = evaluate(service, context, officer.id)

        assert evaluation.rank_at_evaluation == "Cadet"
        assert evaluation.evaluator_id == 1
        assert evaluation.evaluator_name == "chief"
        assert evaluation.skills["arrest"] == 7.0

    def test_snapshot_not_resynced_on_promotion(
        self, service, officers, context, officer
    ):
        evaluation = evaluate(service, context, officer.id)
        officers.promote_officer(officer.id, context)

        assert evaluation.rank_at_evaluation == "Cadet"
        assert officer.rank == "Patrol Officer"

    def test_create_audited(self, service, context, officer, audit_entries):
        evaluation = evaluate(service, context, officer.id, arrest=9.0)

        entry = audit_entries()[-1]
        assert entry.action == "create"
        assert entry.target_entity == "Evaluation"
        assert entry.target_id == str(evaluation.id)
        assert entry.details["officerName"] == "Bruno Lima"
        assert entry.details["scores"]["arrest"] == 9.0
        assert entry.details["scores"]["incidentReport"] == 7.0

    def test_missing_officer(self, service, context, audit_entries):
        with pytest.raises(NotFoundError, match="Officer 999"):
            evaluate(service, context, 999)
        assert audit_entries() == []

    def test_requires_actor(self, service, officer):
        with pytest.raises(ValueError, match="authenticated"):
            evaluate(service, RequestContext(), officer.id)

    def test_scores_are_bounded(self):
        with pytest.raises(ValueError):
            scores(11.0)
        with pytest.raises(ValueError):
            scores(-1.0)

    def test_invalidates_every_mapped_key(
        self, service, context, officer, cache
    ):
        keys = cache_keys.invalidation_set("Evaluation", "create", officer.id)
        for key in keys:
            cache.set(key, {"warm": True})

        evaluate(service, context, officer.id)

        for key in keys:
            assert cache.get(key) is None, key


class TestReads:

    def test_evaluations_for_officer_newest_first(
        self, service, context, officer
    ):
        first = evaluate(service, context, officer.id, 5.0)
        second = evaluate(service, context, officer.id, 6.0)

        rows = service.evaluations_for_officer(officer.id)
        assert [r["id"] for r in rows] == [second.id, first.id]
        assert rows[0]["rankAtEvaluation"] == "Cadet"
        assert rows[0]["skills"]["legalKnowledge"] == 6.0

    def test_recent_evaluations_feed(self, service, context, officer):
        evaluate(service, context, officer.id)

        [row] = service.recent_evaluations()
        assert row["name"] == "Bruno Lima"
        assert row["rank"] == "Cadet"
        assert row["evaluator"] == "chief"

    def test_officer_view_refreshed_after_new_evaluation(
        self, service, context, officer
    ):
        evaluate(service, context, officer.id)
        assert len(service.evaluations_for_officer(officer.id)) == 1

        evaluate(service, context, officer.id)
        assert len(service.evaluations_for_officer(officer.id)) == 2


class TestDeleteEvaluation:

    def test_delete_removes_row(self, service, context, officer, db_session):
        evaluation = evaluate(service, context, officer.id)
        evaluation_id = evaluation.id

        service.delete_evaluation(evaluation_id, context)

        assert db_session.get(Evaluation, evaluation_id) is None

    def test_delete_audited(self, service, context, officer, audit_entries):
        evaluation = evaluate(service, context, officer.id, 4.0)
        evaluation_id = evaluation.id

        service.delete_evaluation(evaluation_id, context)

        entry = audit_entries()[-1]
        assert entry.action == "delete"
        assert entry.target_id == str(evaluation_id)
        assert entry.details["officerName"] == "Bruno Lima"
        assert entry.details["evaluator"] == "chief"
        assert entry.details["scores"]["approach"] == 4.0

    def test_delete_invalidates_every_mapped_key(
        self, service, context, officer, cache
    ):
        evaluation = evaluate(service, context, officer.id)
        service.recent_evaluations()
        service.evaluations_for_officer(officer.id)

        service.delete_evaluation(evaluation.id, context)

        for key in cache_keys.invalidation_set("Evaluation", "delete", officer.id):
            assert cache.get(key) is None, key
        assert service.recent_evaluations() == []

    def test_delete_missing(self, service, context, audit_entries):
        with pytest.raises(NotFoundError):
            service.delete_evaluation(999, context)
        assert audit_entries() == []

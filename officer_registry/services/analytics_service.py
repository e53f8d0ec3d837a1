"""
Analytics service — cached aggregate views over evaluations.

The queries here only fetch rows; the arithmetic lives in the
aggregation module. Each view is read through the cache and
rendered with two-decimal averages.
"""

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from pydantic.alias_generators import to_camel

from officer_registry.models.evaluation import Evaluation, SKILL_NAMES
from officer_registry.models.officer import Officer
from officer_registry.schemas.analytics import (
    AnalyticsSummary,
    OfficerAnalytics,
    RankingEntry,
)
from officer_registry.services import aggregation, cache_keys
from officer_registry.services.aggregation import EvaluationSnapshot
from officer_registry.services.cache import CacheGateway

SKILL_COLUMNS = [getattr(Evaluation, name) for name in SKILL_NAMES]


def _render_averages(averages: dict[str, float]) -> dict:
    return {to_camel(name): aggregation.to_fixed(v) for name, v in averages.items()}


class AnalyticsService:

    def __init__(self, db: Session, cache: CacheGateway):
        self.db = db
        self.cache = cache

    def _snapshots(self, *criteria) -> list[EvaluationSnapshot]:
        rows = self.db.execute(
            select(
                Evaluation.officer_id,
                Evaluation.rank_at_evaluation,
                *SKILL_COLUMNS,
            )
            .where(*criteria)
            .order_by(Evaluation.date, Evaluation.id)
        ).all()
        return [
            EvaluationSnapshot(
                officer_id=row[0],
                rank_at_evaluation=row[1],
                skills=dict(zip(SKILL_NAMES, row[2:])),
            )
            for row in rows
        ]

    def summary(self) -> dict:
        """Roster and evaluation totals with overall skill averages."""
        def compute():
            total_officers = self.db.execute(
                select(func.count(Officer.id))
            ).scalar()
            total_evaluations = self.db.execute(
                select(func.count(Evaluation.id))
            ).scalar()
            evaluated_officers = self.db.execute(
                select(func.count(func.distinct(Evaluation.officer_id)))
            ).scalar()
            averages = aggregation.average_skills(
                s.skills for s in self._snapshots()
            )
            return AnalyticsSummary(
                total_officers=total_officers,
                total_evaluations=total_evaluations,
                evaluated_officers=evaluated_officers,
                average_skills=_render_averages(averages),
            ).model_dump(mode="json", by_alias=True)

        return self.cache.read_through(cache_keys.ANALYTICS_SUMMARY, compute)

    def officer_statistics(self, officer_id: int) -> dict:
        """
        Per-officer statistics.

        An officer with no evaluations (or an unknown id) gets
        zero counts and empty maps rather than a not-found error.
        """
        def compute():
            stats = aggregation.officer_statistics(
                officer_id,
                self._snapshots(Evaluation.officer_id == officer_id),
            )
            return OfficerAnalytics(
                officer_id=officer_id,
                total_evaluations=stats.total_evaluations,
                ranks=stats.ranks,
                evaluations_by_rank=stats.evaluations_by_rank,
                average_skills={
                    key: _render_averages(averages)
                    for key, averages in stats.average_skills.items()
                },
            ).model_dump(mode="json", by_alias=True)

        return self.cache.read_through(
            cache_keys.officer_analytics(officer_id), compute
        )

    def ranking(self, top_n: int = aggregation.DEFAULT_TOP_N) -> list[dict]:
        """The leaderboard, best average first."""
        def compute():
            rows = aggregation.leaderboard(self._snapshots(), top_n=top_n)
            officers = {
                o.id: o
                for o in self.db.execute(
                    select(Officer).where(
                        Officer.id.in_([r.officer_id for r in rows])
                    )
                ).scalars()
            }
            return [
                RankingEntry(
                    officer_id=row.officer_id,
                    name=officers[row.officer_id].name,
                    rank=officers[row.officer_id].rank,
                    avg_score=aggregation.to_fixed(row.average_score),
                    evaluations=row.evaluation_count,
                ).model_dump(mode="json", by_alias=True)
                for row in rows
                if row.officer_id in officers
            ]

        return self.cache.read_through(cache_keys.ANALYTICS_RANKING, compute)

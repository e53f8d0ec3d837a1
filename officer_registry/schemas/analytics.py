"""
Pydantic schemas for aggregate views.

Every average is a Decimal quantized to two places, so it
serializes as a fixed-precision string such as "7.50".
"""

from decimal import Decimal

from officer_registry.schemas.common import CamelModel


class AnalyticsSummary(CamelModel):
    total_officers: int
    total_evaluations: int
    evaluated_officers: int
    average_skills: dict[str, Decimal]


class OfficerAnalytics(CamelModel):
    officer_id: int
    total_evaluations: int
    ranks: list[str]
    evaluations_by_rank: dict[str, int]
    # "geral" holds the overall averages, every other key is a rank
    average_skills: dict[str, dict[str, Decimal]]


class RankingEntry(CamelModel):
    officer_id: int
    name: str
    rank: str
    avg_score: Decimal
    evaluations: int

"""
Pydantic schemas for evaluation operations.
"""

from datetime import datetime

from pydantic import Field

from officer_registry.models.evaluation import MIN_SCORE, MAX_SCORE
from officer_registry.schemas.common import CamelModel


class SkillScores(CamelModel):
    """The fixed skill vector. Every score is required."""
    incident_report: float = Field(ge=MIN_SCORE, le=MAX_SCORE)
    approach: float = Field(ge=MIN_SCORE, le=MAX_SCORE)
    identity_check: float = Field(ge=MIN_SCORE, le=MAX_SCORE)
    negotiation: float = Field(ge=MIN_SCORE, le=MAX_SCORE)
    arrest: float = Field(ge=MIN_SCORE, le=MAX_SCORE)
    patrol_positioning: float = Field(ge=MIN_SCORE, le=MAX_SCORE)
    legal_knowledge: float = Field(ge=MIN_SCORE, le=MAX_SCORE)


class EvaluationCreate(CamelModel):
    officer_id: int
    skills: SkillScores


class EvaluationResponse(CamelModel):
    id: int
    officer_id: int
    evaluator_id: int
    evaluator_name: str
    rank_at_evaluation: str
    skills: SkillScores
    date: datetime


class RecentEvaluationResponse(CamelModel):
    """One row of the recently-evaluated feed."""
    evaluation_id: int
    officer_id: int
    name: str
    rank: str
    date: datetime
    evaluator: str

"""
Evaluation model.

An evaluation scores one officer on a fixed set of skills.
rank_at_evaluation is a snapshot of the officer's rank when
the evaluation was recorded. It is never updated on promotion,
so statistics grouped by it stay historically accurate.
"""

from datetime import datetime

from sqlalchemy import String, DateTime, Float, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from officer_registry.models.base import Base


# The skill vector. Order is the order used in responses.
SKILL_NAMES = (
    "incident_report",
    "approach",
    "identity_check",
    "negotiation",
    "arrest",
    "patrol_positioning",
    "legal_knowledge",
)

MIN_SCORE = 0
MAX_SCORE = 10


class Evaluation(Base):
    __tablename__ = "evaluations"

    id: Mapped[int] = mapped_column(primary_key=True)
    officer_id: Mapped[int] = mapped_column(
        ForeignKey("officers.id"), nullable=False, index=True
    )
    evaluator_id: Mapped[int] = mapped_column(nullable=False, index=True)
    evaluator_name: Mapped[str] = mapped_column(String(100), nullable=False)
    rank_at_evaluation: Mapped[str] = mapped_column(String(50), nullable=False)

    incident_report: Mapped[float] = mapped_column(Float, nullable=False)
    approach: Mapped[float] = mapped_column(Float, nullable=False)
    identity_check: Mapped[float] = mapped_column(Float, nullable=False)
    negotiation: Mapped[float] = mapped_column(Float, nullable=False)
    arrest: Mapped[float] = mapped_column(Float, nullable=False)
    patrol_positioning: Mapped[float] = mapped_column(Float, nullable=False)
    legal_knowledge: Mapped[float] = mapped_column(Float, nullable=False)

    date: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow, index=True
    )

    officer: Mapped["Officer"] = relationship(back_populates="evaluations")

    @property
    def skills(self) -> dict[str, float]:
        return {name: getattr(self, name) for name in SKILL_NAMES}

    def __repr__(self) -> str:
        return (
            f"<Evaluation officer={self.officer_id} "
            f"({self.rank_at_evaluation})>"
        )

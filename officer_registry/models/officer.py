"""
Officer model.

Rank is kept as a free string so legacy values survive; new
officers are validated against the rank hierarchy at the API
boundary. Rank only changes through promotion, which is also
the only operation that sets promoted_at.
"""

from datetime import date, datetime

from sqlalchemy import String, Date, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship

from officer_registry.models.base import Base


class Officer(Base):
    __tablename__ = "officers"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    rank: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    register_date: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    promoted_at: Mapped[datetime | None] = mapped_column(
        DateTime, nullable=True, default=None
    )

    # Deleting an officer removes their evaluations with them
    evaluations: Mapped[list["Evaluation"]] = relationship(
        back_populates="officer",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Officer {self.name} ({self.rank})>"

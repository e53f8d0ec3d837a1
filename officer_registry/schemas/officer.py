"""
Pydantic schemas for officer operations.
"""

from datetime import date, datetime

from pydantic import Field, field_validator

from officer_registry.models.ranks import RANK_HIERARCHY
from officer_registry.schemas.common import CamelModel


# --- Request Schemas ---

class OfficerCreate(CamelModel):
    name: str = Field(min_length=3, max_length=50)
    rank: str
    start_date: date

    @field_validator("rank")
    @classmethod
    def rank_must_be_known(cls, v: str) -> str:
        if v not in RANK_HIERARCHY:
            raise ValueError(f"unknown rank '{v}'")
        return v


class OfficerUpdate(CamelModel):
    """
    Editable officer fields.

    Rank is deliberately absent: it only changes through
    promotion. Omitted fields are left as they are.
    """
    name: str | None = Field(default=None, min_length=3, max_length=50)
    start_date: date | None = None


# --- Response Schemas ---

class OfficerResponse(CamelModel):
    id: int
    name: str
    rank: str
    start_date: date
    register_date: datetime
    promoted_at: datetime | None


class OfficerCountResponse(CamelModel):
    total: int


class PromotionResponse(CamelModel):
    officer_id: int
    old_rank: str
    new_rank: str
    promoted_at: datetime


class RecentPromotionResponse(CamelModel):
    officer_id: int
    name: str
    new_rank: str
    promoted_at: datetime

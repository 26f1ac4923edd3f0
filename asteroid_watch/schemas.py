from datetime import date
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class SearchRequest(BaseModel):
    start_date: Optional[date] = None
    days: int = Field(default=7, ge=1, le=7)
    hazardous_only: bool = False


class TopRequest(BaseModel):
    period: Literal["week", "month", "year"] = "week"
    limit: int = Field(default=10, ge=1, le=20)
    max_distance_ld: float = Field(default=10, gt=0)


class CompareRequest(BaseModel):
    asteroid_ids: List[str] = Field(min_length=2, max_length=5)


class ReportRequest(BaseModel):
    days_ahead: int = Field(default=7, ge=1, le=30)
    include_sentry: bool = True

from pydantic import Field
from datetime import datetime
from typing import Dict, List, Optional
from app.schemas.common.pagination import CamelModel, RegionBrief


class RatingCreate(CamelModel):
    region_id: int
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=2000)


class RatingCreated(CamelModel):
    id: int
    submitted_at: datetime


class RatingOut(CamelModel):
    id: int
    region_id: int
    region: Optional[RegionBrief] = None
    rating: int
    comment: Optional[str] = None
    submitted_at: Optional[datetime] = None


class StatsRange(CamelModel):
    start: datetime
    end: datetime


class RegionDistribution(CamelModel):
    region_id: int
    region_name: str
    counts: Dict[str, int]
    total: int


class TrendPoint(CamelModel):
    date: str
    average: float
    count: int


class RegionTrend(CamelModel):
    region_id: int
    region_name: str
    points: List[TrendPoint]


class RatingStats(CamelModel):
    period: str
    range: StatsRange
    distribution: List[RegionDistribution]
    trend: List[RegionTrend]

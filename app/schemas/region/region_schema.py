from pydantic import Field
from datetime import datetime
from typing import Dict, Optional, Union
from app.schemas.common.pagination import CamelModel


class RegionCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)


class RegionUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)


class RegionOut(CamelModel):
    id: int
    name: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class RegionDetail(RegionOut):
    admin_count: int
    # star value ("1".."5") -> count, plus "total" and "average"
    rating: Dict[str, Union[int, float]]


class RegionDeleted(CamelModel):
    id: int

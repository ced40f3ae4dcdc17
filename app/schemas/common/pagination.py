from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Generic, List, Optional, TypeVar
import math

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base for API payloads: camelCase on the wire, snake_case accepted too."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class PaginationMeta(CamelModel):
    total: int
    page: int
    limit: int
    pages: int
    has_next_page: bool
    has_prev_page: bool


def build_pagination_meta(total: int, page: int, limit: int) -> PaginationMeta:
    pages = math.ceil(total / limit) or 1
    return PaginationMeta(
        total=total,
        page=page,
        limit=limit,
        pages=pages,
        has_next_page=page < pages,
        has_prev_page=page > 1,
    )


class ApiResponse(CamelModel, Generic[T]):
    success: bool = True
    message: Optional[str] = None
    data: T


class PageResponse(CamelModel, Generic[T]):
    success: bool = True
    meta: PaginationMeta
    data: List[T]


class RegionBrief(CamelModel):
    id: int
    name: str

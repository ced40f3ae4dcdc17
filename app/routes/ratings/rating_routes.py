from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from app.core.database import get_db
from app.dependencies.auth import require_admin
from app.dependencies.pagination import PageParams, page_params
from app.schemas.auth.auth import CurrentAdmin
from app.schemas.common.pagination import ApiResponse, PageResponse
from app.schemas.rating.rating_schema import RatingCreate, RatingCreated, RatingOut, RatingStats
from app.services.rating.rating_service import RatingService
from app.services.rating.rating_stats import DEFAULT_PERIOD, RatingStatsService

router = APIRouter(tags=["Ratings"])


@router.post("/ratings", response_model=ApiResponse[RatingCreated], status_code=status.HTTP_201_CREATED)
async def submit_rating(
    data: RatingCreate,
    db: AsyncSession = Depends(get_db),
):
    rating = await RatingService.create(db, data)
    return {"message": "Thank you! Your feedback matters to us.", "data": rating}


@router.get("/admin/ratings", response_model=PageResponse[RatingOut])
async def list_ratings(
    params: PageParams = Depends(page_params),
    region: Optional[int] = None,
    sort: Optional[str] = Query(None, description="submittedAt|rating, e.g. rating:asc"),
    db: AsyncSession = Depends(get_db),
    current_admin: CurrentAdmin = Depends(require_admin),
):
    return await RatingService.find_all(db, params, current_admin, region, sort)


# declared before /{rating_id} so "stats" is not parsed as an id
@router.get("/admin/ratings/stats", response_model=ApiResponse[RatingStats])
async def rating_stats(
    period: str = Query(DEFAULT_PERIOD, pattern="^(day|week|month|year)$"),
    region: Optional[int] = None,
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    db: AsyncSession = Depends(get_db),
    current_admin: CurrentAdmin = Depends(require_admin),
):
    """
    Star distribution and daily average per region over a date range.

    - **period**: window ending at `endDate` (or today) when `startDate` is absent
    - **startDate** / **endDate**: ISO-8601 dates overriding the window
    - **region**: restrict to one region; outside the caller's scope the result is empty
    """
    stats = await RatingStatsService.get_stats(db, current_admin, period, region, start_date, end_date)
    return {"data": stats}


@router.get("/admin/ratings/{rating_id}", response_model=ApiResponse[RatingOut])
async def get_rating(
    rating_id: int,
    db: AsyncSession = Depends(get_db),
    current_admin: CurrentAdmin = Depends(require_admin),
):
    return {"data": await RatingService.find_one(db, rating_id, current_admin)}

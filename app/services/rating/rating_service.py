from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from app.core.exceptions import NotFoundError
from app.core.logger import logger
from app.dependencies.pagination import PageParams
from app.models.log.log_model import AuditAction
from app.models.rating.rating_model import Rating
from app.models.region.region_model import Region
from app.schemas.auth.auth import CurrentAdmin
from app.schemas.common.pagination import build_pagination_meta
from app.schemas.rating.rating_schema import RatingCreate
from app.services.access.region_scope import scope_for
from app.services.log.log_service import LogService
from app.services.region.region_service import RegionService
from app.utils.region_ref import region_ref, region_ref_dict, region_ref_id
from app.utils.sorting import parse_sort

RATING_SORT_FIELDS = {
    "submittedAt": Rating.submitted_at,
    "rating": Rating.rating,
}


def format_rating(rating: Rating, region_name: Optional[str] = None) -> dict:
    ref = region_ref(rating.region_id, region_name)
    return {
        "id": rating.id,
        "region_id": region_ref_id(ref),
        "region": region_ref_dict(ref),
        "rating": rating.rating,
        "comment": rating.comment,
        "submitted_at": rating.submitted_at,
    }


class RatingService:
    @staticmethod
    async def create(db: AsyncSession, data: RatingCreate) -> Rating:
        await RegionService.ensure_exists(db, data.region_id)

        rating = Rating(region_id=data.region_id, rating=data.rating, comment=data.comment)
        db.add(rating)
        await db.commit()
        await db.refresh(rating)

        logger.info(f"Rating {rating.id} ({rating.rating}*) submitted for region {rating.region_id}")
        await LogService.record(db, AuditAction.CREATE_RATING)
        return rating

    @staticmethod
    async def find_all(
        db: AsyncSession,
        params: PageParams,
        caller: CurrentAdmin,
        region: Optional[int] = None,
        sort: Optional[str] = None,
    ) -> dict:
        order_by = parse_sort(sort, RATING_SORT_FIELDS, ("submittedAt", "desc"))

        scope = scope_for(caller, region)
        if scope.is_empty:
            return {"meta": build_pagination_meta(0, params.page, params.limit), "data": []}

        conditions = []
        clause = scope.clause(Rating.region_id)
        if clause is not None:
            conditions.append(clause)

        total = await db.scalar(select(func.count()).select_from(Rating).where(*conditions))
        result = await db.execute(
            select(Rating, Region.name)
            .outerjoin(Region, Region.id == Rating.region_id)
            .where(*conditions)
            .order_by(*order_by, Rating.id.desc())
            .offset(params.offset)
            .limit(params.limit)
        )

        return {
            "meta": build_pagination_meta(total, params.page, params.limit),
            "data": [format_rating(rating, name) for rating, name in result.all()],
        }

    @staticmethod
    async def find_one(db: AsyncSession, rating_id: int, caller: CurrentAdmin) -> dict:
        result = await db.execute(
            select(Rating, Region.name)
            .outerjoin(Region, Region.id == Rating.region_id)
            .where(Rating.id == rating_id)
        )
        row = result.first()
        # out-of-scope ratings are reported exactly like missing ones
        if row is None or not scope_for(caller).allows(row[0].region_id):
            if row is not None:
                logger.info(f"Admin {caller.id} probed rating {rating_id} outside its scope")
            raise NotFoundError("Rating not found")

        rating, region_name = row
        return format_rating(rating, region_name)

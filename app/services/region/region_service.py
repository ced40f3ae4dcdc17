from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from app.core.exceptions import ConflictError, NotFoundError
from app.core.logger import logger
from app.dependencies.pagination import PageParams
from app.models.admin.admin_model import Admin, AdminRole, admin_regions
from app.models.log.log_model import AuditAction
from app.models.rating.rating_model import Rating
from app.models.region.region_model import Region
from app.schemas.auth.auth import CurrentAdmin
from app.schemas.common.pagination import build_pagination_meta
from app.schemas.region.region_schema import RegionCreate, RegionUpdate
from app.services.access.region_scope import Unrestricted, scope_for
from app.services.log.log_service import LogService


class RegionService:
    @staticmethod
    async def ensure_exists(db: AsyncSession, region_id: int) -> Region:
        region = await db.get(Region, region_id)
        if region is None:
            raise NotFoundError("Region not found")
        return region

    @staticmethod
    async def _ensure_name_free(db: AsyncSession, name: str, exclude_id: Optional[int] = None):
        query = select(Region.id).where(Region.name == name)
        if exclude_id is not None:
            query = query.where(Region.id != exclude_id)
        if await db.scalar(query) is not None:
            raise ConflictError("Region already exists")

    @staticmethod
    async def create(db: AsyncSession, data: RegionCreate, actor: CurrentAdmin) -> Region:
        name = data.name.strip()
        await RegionService._ensure_name_free(db, name)

        region = Region(name=name)
        db.add(region)
        try:
            await db.commit()
        except IntegrityError:
            # lost a race against a concurrent create
            await db.rollback()
            raise ConflictError("Region already exists")
        await db.refresh(region)

        logger.info(f"Region {region.id} '{region.name}' created by admin {actor.id}")
        await LogService.record(db, AuditAction.CREATE_REGION, actor.id)
        return region

    @staticmethod
    async def find_all(db: AsyncSession, params: PageParams, caller: Optional[CurrentAdmin] = None) -> dict:
        # anonymous callers browse the public directory
        scope = scope_for(caller) if caller is not None else Unrestricted()
        if scope.is_empty:
            return {"meta": build_pagination_meta(0, params.page, params.limit), "data": []}

        clause = scope.clause(Region.id)
        count_query = select(func.count()).select_from(Region)
        query = select(Region)
        if clause is not None:
            count_query = count_query.where(clause)
            query = query.where(clause)

        total = await db.scalar(count_query)
        result = await db.execute(
            query.order_by(Region.created_at.desc(), Region.id.desc())
            .offset(params.offset)
            .limit(params.limit)
        )
        return {
            "meta": build_pagination_meta(total, params.page, params.limit),
            "data": result.scalars().all(),
        }

    @staticmethod
    async def find_one(db: AsyncSession, region_id: int, caller: Optional[CurrentAdmin] = None) -> dict:
        region = await db.get(Region, region_id)
        if region is None:
            raise NotFoundError("Region not found")

        if caller is not None and not scope_for(caller).allows(region.id):
            logger.info(f"Admin {caller.id} probed region {region_id} outside its scope")
            raise NotFoundError("Region not found")

        counts = {str(star): 0 for star in range(1, 6)}
        result = await db.execute(
            select(Rating.rating, func.count(Rating.id))
            .where(Rating.region_id == region.id)
            .group_by(Rating.rating)
        )
        for star, count in result.all():
            if str(star) in counts:
                counts[str(star)] += count

        total = sum(counts.values())
        average = await db.scalar(select(func.avg(Rating.rating)).where(Rating.region_id == region.id))

        admin_count = await db.scalar(
            select(func.count(func.distinct(Admin.id)))
            .select_from(Admin)
            .join(admin_regions, admin_regions.c.admin_id == Admin.id)
            .where(admin_regions.c.region_id == region.id, Admin.role != AdminRole.SUPER_ADMIN)
        )

        return {
            "id": region.id,
            "name": region.name,
            "created_at": region.created_at,
            "updated_at": region.updated_at,
            "admin_count": admin_count or 0,
            "rating": {
                **counts,
                "total": total,
                "average": round(float(average), 2) if average is not None else 0,
            },
        }

    @staticmethod
    async def update(db: AsyncSession, region_id: int, data: RegionUpdate, actor: CurrentAdmin) -> Region:
        region = await RegionService.ensure_exists(db, region_id)

        if data.name is not None:
            name = data.name.strip()
            await RegionService._ensure_name_free(db, name, exclude_id=region.id)
            region.name = name

        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise ConflictError("Region already exists")
        await db.refresh(region)

        logger.info(f"Region {region.id} updated by admin {actor.id}")
        await LogService.record(db, AuditAction.UPDATE_REGION, actor.id)
        return region

    @staticmethod
    async def remove(db: AsyncSession, region_id: int, actor: CurrentAdmin) -> dict:
        region = await RegionService.ensure_exists(db, region_id)

        # Ratings, feedbacks and admin assignments keep the dangling id
        await db.delete(region)
        await db.commit()

        logger.info(f"Region {region_id} deleted by admin {actor.id}")
        await LogService.record(db, AuditAction.DELETE_REGION, actor.id)
        return {"id": region_id}

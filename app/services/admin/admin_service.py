from sqlalchemy import select, func, or_, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Dict, Iterable, List, Optional, Tuple
from app.core.exceptions import ConflictError, ForbiddenError, NotFoundError, ValidationError
from app.core.logger import logger
from app.core.security import hash_password
from app.dependencies.pagination import PageParams
from app.models.admin.admin_model import Admin, AdminRole, admin_regions
from app.models.log.log_model import AuditAction
from app.models.region.region_model import Region
from app.schemas.admin.admin_schema import AdminCreate, AdminUpdate
from app.schemas.auth.auth import CurrentAdmin
from app.schemas.common.pagination import build_pagination_meta
from app.services.access.region_scope import Unrestricted, scope_for
from app.services.log.log_service import LogService
from app.utils.search import LIKE_ESCAPE, build_search_pattern
from app.utils.sorting import parse_sort

ADMIN_SORT_FIELDS = {
    "fullname": Admin.fullname,
    "created_at": Admin.created_at,
}


def normalize_email(email: str) -> str:
    return email.strip().lower()


async def load_regions(db: AsyncSession, admin_ids: Iterable[int]) -> Dict[int, List[Tuple[int, str]]]:
    """Assigned regions per admin as ``(id, name)`` pairs; dangling ids are skipped."""
    admin_ids = list(admin_ids)
    regions = {admin_id: [] for admin_id in admin_ids}
    if not admin_ids:
        return regions

    result = await db.execute(
        select(admin_regions.c.admin_id, Region.id, Region.name)
        .join(Region, Region.id == admin_regions.c.region_id)
        .where(admin_regions.c.admin_id.in_(admin_ids))
        .order_by(Region.id)
    )
    for admin_id, region_id, name in result.all():
        regions[admin_id].append((region_id, name))
    return regions


async def load_region_ids(db: AsyncSession, admin_ids: Iterable[int]) -> Dict[int, List[int]]:
    regions = await load_regions(db, admin_ids)
    return {admin_id: [region_id for region_id, _ in pairs] for admin_id, pairs in regions.items()}


def format_admin(admin: Admin, regions: List[Tuple[int, str]], detailed: bool = False) -> dict:
    return {
        "id": admin.id,
        "fullname": admin.fullname,
        "email": admin.email,
        "role": admin.role,
        "allowed_regions": (
            [{"id": region_id, "name": name} for region_id, name in regions]
            if detailed else [region_id for region_id, _ in regions]
        ),
        "created_at": admin.created_at,
        "updated_at": admin.updated_at,
    }


class AdminService:
    @staticmethod
    async def find_by_email(db: AsyncSession, email: str) -> Optional[Admin]:
        return await db.scalar(select(Admin).where(Admin.email == normalize_email(email)))

    @staticmethod
    async def _ensure_email_free(db: AsyncSession, email: str, exclude_id: Optional[int] = None):
        query = select(Admin.id).where(Admin.email == email)
        if exclude_id is not None:
            query = query.where(Admin.id != exclude_id)
        if await db.scalar(query) is not None:
            raise ConflictError("Email already exists")

    @staticmethod
    async def _validate_regions(db: AsyncSession, region_ids: List[int]) -> List[int]:
        unique_ids = sorted(set(region_ids))
        if not unique_ids:
            return unique_ids
        found = await db.scalar(select(func.count(Region.id)).where(Region.id.in_(unique_ids)))
        if found != len(unique_ids):
            raise ValidationError("One or more regions are invalid")
        return unique_ids

    @staticmethod
    async def _assign_regions(db: AsyncSession, admin_id: int, region_ids: List[int]):
        await db.execute(delete(admin_regions).where(admin_regions.c.admin_id == admin_id))
        if region_ids:
            await db.execute(
                admin_regions.insert(),
                [{"admin_id": admin_id, "region_id": region_id} for region_id in region_ids],
            )

    @staticmethod
    async def create(db: AsyncSession, data: AdminCreate, actor: CurrentAdmin) -> dict:
        email = normalize_email(data.email)
        await AdminService._ensure_email_free(db, email)
        region_ids = await AdminService._validate_regions(db, data.allowed_regions)

        admin = Admin(
            fullname=data.fullname.strip(),
            email=email,
            password_hash=hash_password(data.password),
            role=data.role,
        )
        db.add(admin)
        try:
            await db.flush()
            await AdminService._assign_regions(db, admin.id, region_ids)
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise ConflictError("Email already exists")
        await db.refresh(admin)

        logger.info(f"Admin {admin.id} ({admin.role.value}) created by admin {actor.id}")
        await LogService.record(db, AuditAction.CREATE_ADMIN, actor.id)

        regions = await load_regions(db, [admin.id])
        return format_admin(admin, regions[admin.id])

    @staticmethod
    async def find_all(
        db: AsyncSession,
        params: PageParams,
        caller: CurrentAdmin,
        role: Optional[AdminRole] = None,
        region: Optional[int] = None,
        search: Optional[str] = None,
        sort: Optional[str] = None,
    ) -> dict:
        order_by = parse_sort(sort, ADMIN_SORT_FIELDS, ("created_at", "desc"))

        scope = scope_for(caller, region)
        if scope.is_empty:
            return {"meta": build_pagination_meta(0, params.page, params.limit), "data": []}

        conditions = []
        clause = scope.clause(admin_regions.c.region_id)
        if clause is not None:
            # admins sharing at least one region with the scope
            conditions.append(Admin.id.in_(select(admin_regions.c.admin_id).where(clause)))
        if role is not None:
            conditions.append(Admin.role == role)
        if search and search.strip():
            pattern = build_search_pattern(search)
            conditions.append(or_(
                Admin.fullname.ilike(pattern, escape=LIKE_ESCAPE),
                Admin.email.ilike(pattern, escape=LIKE_ESCAPE),
            ))

        total = await db.scalar(select(func.count()).select_from(Admin).where(*conditions))
        result = await db.execute(
            select(Admin)
            .where(*conditions)
            .order_by(*order_by, Admin.id.desc())
            .offset(params.offset)
            .limit(params.limit)
        )
        admins = result.scalars().all()
        regions = await load_regions(db, [admin.id for admin in admins])

        return {
            "meta": build_pagination_meta(total, params.page, params.limit),
            "data": [format_admin(admin, regions[admin.id]) for admin in admins],
        }

    @staticmethod
    async def _get_scoped(db: AsyncSession, admin_id: int, caller: CurrentAdmin) -> Tuple[Admin, List[Tuple[int, str]]]:
        admin = await db.get(Admin, admin_id)
        if admin is None:
            raise NotFoundError("Admin not found")

        regions = (await load_regions(db, [admin.id]))[admin.id]
        scope = scope_for(caller)
        visible = (
            isinstance(scope, Unrestricted)
            or admin.id == caller.id
            or any(scope.allows(region_id) for region_id, _ in regions)
        )
        if not visible:
            logger.info(f"Admin {caller.id} probed admin {admin_id} outside its scope")
            raise NotFoundError("Admin not found")
        return admin, regions

    @staticmethod
    async def find_one(db: AsyncSession, admin_id: int, caller: CurrentAdmin) -> dict:
        admin, regions = await AdminService._get_scoped(db, admin_id, caller)
        return format_admin(admin, regions, detailed=True)

    @staticmethod
    async def update(db: AsyncSession, admin_id: int, data: AdminUpdate, actor: CurrentAdmin) -> dict:
        admin, _ = await AdminService._get_scoped(db, admin_id, actor)

        if actor.role != AdminRole.SUPER_ADMIN:
            if admin.role == AdminRole.SUPER_ADMIN:
                raise ForbiddenError("Cannot modify a super admin")
            if data.role is not None and data.role != admin.role:
                raise ForbiddenError("Cannot change admin role")
            if data.allowed_regions is not None and not set(data.allowed_regions) <= set(actor.allowed_regions):
                raise ForbiddenError("Cannot assign regions outside your scope")
            if admin.id != actor.id and (data.password is not None or data.email is not None):
                raise ForbiddenError("Cannot change credentials of another admin")

        # validate everything before touching the row
        email = normalize_email(data.email) if data.email is not None else None
        if email is not None:
            await AdminService._ensure_email_free(db, email, exclude_id=admin.id)
        region_ids = None
        if data.allowed_regions is not None:
            region_ids = await AdminService._validate_regions(db, data.allowed_regions)
            if actor.role != AdminRole.SUPER_ADMIN:
                # assignments outside the caller's scope stay untouched
                current = await db.scalars(
                    select(admin_regions.c.region_id).where(admin_regions.c.admin_id == admin.id)
                )
                kept = set(current.all()) - set(actor.allowed_regions)
                region_ids = sorted(kept | set(region_ids))

        if email is not None:
            admin.email = email
        if data.fullname is not None:
            admin.fullname = data.fullname.strip()
        if data.password is not None:
            admin.password_hash = hash_password(data.password)
        if data.role is not None:
            admin.role = data.role

        try:
            if region_ids is not None:
                await AdminService._assign_regions(db, admin.id, region_ids)
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise ConflictError("Email already exists")
        await db.refresh(admin)

        logger.info(f"Admin {admin.id} updated by admin {actor.id}")
        await LogService.record(db, AuditAction.UPDATE_ADMIN, actor.id)

        regions = await load_regions(db, [admin.id])
        return format_admin(admin, regions[admin.id])

    @staticmethod
    async def remove(db: AsyncSession, admin_id: int, actor: CurrentAdmin) -> dict:
        admin, _ = await AdminService._get_scoped(db, admin_id, actor)
        if admin.role == AdminRole.SUPER_ADMIN:
            raise ValidationError("Super admin cannot be deleted")

        await db.execute(delete(admin_regions).where(admin_regions.c.admin_id == admin.id))
        await db.delete(admin)
        await db.commit()

        logger.info(f"Admin {admin_id} deleted by admin {actor.id}")
        await LogService.record(db, AuditAction.DELETE_ADMIN, actor.id)
        return {"id": admin_id}

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from app.core.database import get_db
from app.dependencies.auth import require_admin, require_super_admin
from app.dependencies.pagination import PageParams, page_params
from app.models.admin.admin_model import AdminRole
from app.schemas.admin.admin_schema import AdminCreate, AdminDeleted, AdminDetail, AdminOut, AdminUpdate
from app.schemas.auth.auth import CurrentAdmin
from app.schemas.common.pagination import ApiResponse, PageResponse
from app.services.admin.admin_service import AdminService

router = APIRouter(prefix="/admins", tags=["Admins"])


@router.post("", response_model=ApiResponse[AdminOut], status_code=status.HTTP_201_CREATED)
async def create_admin(
    data: AdminCreate,
    db: AsyncSession = Depends(get_db),
    current_admin: CurrentAdmin = Depends(require_super_admin),
):
    admin = await AdminService.create(db, data, current_admin)
    return {"message": "Admin created", "data": admin}


@router.get("", response_model=PageResponse[AdminOut])
async def list_admins(
    params: PageParams = Depends(page_params),
    role: Optional[AdminRole] = None,
    region: Optional[int] = None,
    search: Optional[str] = None,
    sort: Optional[str] = Query(None, description="fullname|created_at, e.g. created_at:desc"),
    db: AsyncSession = Depends(get_db),
    current_admin: CurrentAdmin = Depends(require_admin),
):
    return await AdminService.find_all(db, params, current_admin, role, region, search, sort)


@router.get("/{admin_id}", response_model=ApiResponse[AdminDetail])
async def get_admin(
    admin_id: int,
    db: AsyncSession = Depends(get_db),
    current_admin: CurrentAdmin = Depends(require_admin),
):
    return {"data": await AdminService.find_one(db, admin_id, current_admin)}


@router.patch("/{admin_id}", response_model=ApiResponse[AdminOut])
async def update_admin(
    admin_id: int,
    data: AdminUpdate,
    db: AsyncSession = Depends(get_db),
    current_admin: CurrentAdmin = Depends(require_admin),
):
    admin = await AdminService.update(db, admin_id, data, current_admin)
    return {"message": "Admin updated", "data": admin}


@router.delete("/{admin_id}", response_model=ApiResponse[AdminDeleted])
async def delete_admin(
    admin_id: int,
    db: AsyncSession = Depends(get_db),
    current_admin: CurrentAdmin = Depends(require_admin),
):
    deleted = await AdminService.remove(db, admin_id, current_admin)
    return {"message": "Admin deleted", "data": deleted}

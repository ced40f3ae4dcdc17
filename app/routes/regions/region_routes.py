from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from app.core.database import get_db
from app.dependencies.auth import get_optional_admin, require_super_admin
from app.dependencies.pagination import PageParams, page_params
from app.schemas.auth.auth import CurrentAdmin
from app.schemas.common.pagination import ApiResponse, PageResponse
from app.schemas.region.region_schema import RegionCreate, RegionDeleted, RegionDetail, RegionOut, RegionUpdate
from app.services.region.region_service import RegionService

router = APIRouter(prefix="/regions", tags=["Regions"])


@router.post("", response_model=ApiResponse[RegionOut], status_code=status.HTTP_201_CREATED)
async def create_region(
    data: RegionCreate,
    db: AsyncSession = Depends(get_db),
    current_admin: CurrentAdmin = Depends(require_super_admin),
):
    region = await RegionService.create(db, data, current_admin)
    return {"message": "Region created", "data": region}


@router.get("", response_model=PageResponse[RegionOut])
async def list_regions(
    params: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_db),
    current_admin: Optional[CurrentAdmin] = Depends(get_optional_admin),
):
    """Public directory; narrowed to assigned regions when an admin token is sent"""
    return await RegionService.find_all(db, params, current_admin)


@router.get("/{region_id}", response_model=ApiResponse[RegionDetail])
async def get_region(
    region_id: int,
    db: AsyncSession = Depends(get_db),
    current_admin: Optional[CurrentAdmin] = Depends(get_optional_admin),
):
    return {"data": await RegionService.find_one(db, region_id, current_admin)}


@router.patch("/{region_id}", response_model=ApiResponse[RegionOut])
async def update_region(
    region_id: int,
    data: RegionUpdate,
    db: AsyncSession = Depends(get_db),
    current_admin: CurrentAdmin = Depends(require_super_admin),
):
    region = await RegionService.update(db, region_id, data, current_admin)
    return {"message": "Region updated", "data": region}


@router.delete("/{region_id}", response_model=ApiResponse[RegionDeleted])
async def delete_region(
    region_id: int,
    db: AsyncSession = Depends(get_db),
    current_admin: CurrentAdmin = Depends(require_super_admin),
):
    deleted = await RegionService.remove(db, region_id, current_admin)
    return {"message": "Region deleted", "data": deleted}

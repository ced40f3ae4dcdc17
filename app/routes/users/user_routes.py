from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from app.core.database import get_db
from app.dependencies.auth import require_admin
from app.dependencies.pagination import PageParams, page_params
from app.schemas.auth.auth import CurrentAdmin
from app.schemas.common.pagination import ApiResponse, PageResponse
from app.schemas.feedback.feedback_schema import FeedbackOut
from app.schemas.user.user import UserDetail, UserOut
from app.services.user.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("", response_model=PageResponse[UserOut])
async def list_users(
    params: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_db),
    current_admin: CurrentAdmin = Depends(require_admin),
):
    return await UserService.find_all(db, params)


@router.get("/{user_id}", response_model=ApiResponse[UserDetail])
async def get_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    current_admin: CurrentAdmin = Depends(require_admin),
):
    return {"data": await UserService.find_one(db, user_id, current_admin)}


@router.get("/{user_id}/feedbacks", response_model=ApiResponse[List[FeedbackOut]])
async def get_user_feedbacks(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    current_admin: CurrentAdmin = Depends(require_admin),
):
    return {"data": await UserService.feedbacks(db, user_id, current_admin)}

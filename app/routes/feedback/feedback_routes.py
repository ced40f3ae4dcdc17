from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from app.core.database import get_db
from app.dependencies.auth import require_admin
from app.dependencies.pagination import PageParams, page_params
from app.models.feedback.feedback_model import FeedbackStatus
from app.schemas.auth.auth import CurrentAdmin
from app.schemas.common.pagination import ApiResponse, PageResponse
from app.schemas.feedback.feedback_schema import FeedbackCreate, FeedbackCreated, FeedbackOut, FeedbackUpdate
from app.services.feedback.feedback_service import (
    create_feedback,
    get_all_feedbacks,
    get_feedback,
    update_feedback,
)

router = APIRouter(tags=["Feedbacks"])


@router.post("/feedbacks", response_model=ApiResponse[FeedbackCreated], status_code=status.HTTP_201_CREATED)
async def submit_feedback(
    feedback_data: FeedbackCreate,
    session: AsyncSession = Depends(get_db),
):
    """Public submission; identity fields are dropped when `anonymous` is true"""
    feedback = await create_feedback(session, feedback_data)
    return {"message": "Thank you! Your feedback matters to us.", "data": feedback}


@router.get("/admin/feedbacks", response_model=PageResponse[FeedbackOut])
async def list_feedbacks(
    params: PageParams = Depends(page_params),
    region: Optional[int] = None,
    status: Optional[FeedbackStatus] = None,
    search: Optional[str] = None,
    sort: Optional[str] = Query(None, description="submittedAt|status, e.g. submittedAt:desc"),
    session: AsyncSession = Depends(get_db),
    current_admin: CurrentAdmin = Depends(require_admin),
):
    return await get_all_feedbacks(session, params, current_admin, region, status, search, sort)


@router.get("/admin/feedbacks/{feedback_id}", response_model=ApiResponse[FeedbackOut])
async def get_single_feedback(
    feedback_id: int,
    session: AsyncSession = Depends(get_db),
    current_admin: CurrentAdmin = Depends(require_admin),
):
    return {"data": await get_feedback(session, feedback_id, current_admin)}


@router.patch("/admin/feedbacks/{feedback_id}", response_model=ApiResponse[FeedbackOut])
async def update_existing_feedback(
    feedback_id: int,
    feedback_data: FeedbackUpdate,
    session: AsyncSession = Depends(get_db),
    current_admin: CurrentAdmin = Depends(require_admin),
):
    feedback = await update_feedback(session, feedback_id, feedback_data, current_admin)
    return {"message": "Feedback updated", "data": feedback}

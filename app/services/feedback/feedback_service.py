from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_
from sqlalchemy.orm import aliased
from typing import Optional
from app.core.exceptions import NotFoundError
from app.core.logger import logger
from app.dependencies.pagination import PageParams
from app.models.feedback.feedback_model import Feedback, FeedbackStatus
from app.models.log.log_model import AuditAction
from app.models.rating.rating_model import Rating
from app.models.region.region_model import Region
from app.schemas.auth.auth import CurrentAdmin
from app.schemas.common.pagination import build_pagination_meta
from app.schemas.feedback.feedback_schema import FeedbackCreate, FeedbackUpdate
from app.services.access.region_scope import scope_for
from app.services.log.log_service import LogService
from app.services.region.region_service import RegionService
from app.utils.region_ref import region_ref, region_ref_dict, region_ref_id
from app.utils.search import LIKE_ESCAPE, build_search_pattern
from app.utils.sorting import parse_sort

FEEDBACK_SORT_FIELDS = {
    "submittedAt": Feedback.submitted_at,
    "status": Feedback.status,
}

LinkedRating = aliased(Rating)


def feedback_query():
    """Feedback rows joined with their region name and linked rating, if still present."""
    return (
        select(Feedback, Region.name, LinkedRating)
        .outerjoin(Region, Region.id == Feedback.region_id)
        .outerjoin(LinkedRating, LinkedRating.id == Feedback.rating_id)
    )


def format_feedback(feedback: Feedback, region_name: Optional[str] = None, rating: Optional[Rating] = None) -> dict:
    ref = region_ref(feedback.region_id, region_name)
    return {
        "id": feedback.id,
        "rating_id": feedback.rating_id,
        "rating": (
            {"id": rating.id, "rating": rating.rating, "comment": rating.comment}
            if rating is not None else None
        ),
        "region_id": region_ref_id(ref),
        "region": region_ref_dict(ref),
        "user_id": feedback.user_id,
        "user_info": feedback.user_info,
        "anonymous": feedback.anonymous,
        "subject": feedback.subject,
        "message": feedback.message,
        "status": feedback.status,
        "response": feedback.response,
        "submitted_at": feedback.submitted_at,
    }


async def create_feedback(session: AsyncSession, data: FeedbackCreate) -> Feedback:
    # imported here: the user directory formats feedbacks from this module
    from app.services.user.user_service import UserService

    await RegionService.ensure_exists(session, data.region_id)
    if await session.get(Rating, data.rating_id) is None:
        raise NotFoundError("Rating not found")

    feedback = Feedback(
        region_id=data.region_id,
        rating_id=data.rating_id,
        anonymous=data.anonymous,
        message=data.message,
        subject=data.subject,
        status=FeedbackStatus.PENDING,
    )

    if not data.anonymous and data.user_info is not None:
        info = data.user_info
        feedback.user_full_name = info.full_name
        feedback.user_phone = info.phone
        feedback.user_email = info.email.lower() if info.email else None
        if info.email:
            user = await UserService.find_or_create_by_email(session, info.email, info.full_name, info.phone)
            feedback.user_id = user.id

    session.add(feedback)
    await session.commit()
    await session.refresh(feedback)

    logger.info(
        f"Feedback {feedback.id} submitted for region {feedback.region_id} "
        f"({'anonymous' if feedback.anonymous else f'user {feedback.user_id}'})"
    )
    await LogService.record(session, AuditAction.CREATE_FEEDBACK, feedback.user_id)
    return feedback


async def get_all_feedbacks(
    session: AsyncSession,
    params: PageParams,
    caller: CurrentAdmin,
    region: Optional[int] = None,
    status: Optional[FeedbackStatus] = None,
    search: Optional[str] = None,
    sort: Optional[str] = None,
) -> dict:
    order_by = parse_sort(sort, FEEDBACK_SORT_FIELDS, ("submittedAt", "desc"))

    scope = scope_for(caller, region)
    if scope.is_empty:
        return {"meta": build_pagination_meta(0, params.page, params.limit), "data": []}

    conditions = []
    clause = scope.clause(Feedback.region_id)
    if clause is not None:
        conditions.append(clause)
    if status is not None:
        conditions.append(Feedback.status == status)
    if search and search.strip():
        pattern = build_search_pattern(search)
        conditions.append(or_(
            Feedback.user_full_name.ilike(pattern, escape=LIKE_ESCAPE),
            Feedback.subject.ilike(pattern, escape=LIKE_ESCAPE),
            Feedback.message.ilike(pattern, escape=LIKE_ESCAPE),
        ))

    total = await session.scalar(select(func.count()).select_from(Feedback).where(*conditions))
    result = await session.execute(
        feedback_query()
        .where(*conditions)
        .order_by(*order_by, Feedback.id.desc())
        .offset(params.offset)
        .limit(params.limit)
    )

    return {
        "meta": build_pagination_meta(total, params.page, params.limit),
        "data": [format_feedback(*row) for row in result.all()],
    }


async def _get_scoped_feedback(session: AsyncSession, feedback_id: int, caller: CurrentAdmin):
    result = await session.execute(feedback_query().where(Feedback.id == feedback_id))
    row = result.first()
    if row is None or not scope_for(caller).allows(row[0].region_id):
        if row is not None:
            logger.info(f"Admin {caller.id} probed feedback {feedback_id} outside its scope")
        raise NotFoundError("Feedback not found")
    return row


async def get_feedback(session: AsyncSession, feedback_id: int, caller: CurrentAdmin) -> dict:
    return format_feedback(*await _get_scoped_feedback(session, feedback_id, caller))


async def update_feedback(
    session: AsyncSession,
    feedback_id: int,
    data: FeedbackUpdate,
    caller: CurrentAdmin,
) -> dict:
    feedback, region_name, rating = await _get_scoped_feedback(session, feedback_id, caller)

    update_data = data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(feedback, field, value)

    await session.commit()
    await session.refresh(feedback)

    logger.info(f"Feedback {feedback.id} set to {feedback.status.value} by admin {caller.id}")
    await LogService.record(session, AuditAction.UPDATE_FEEDBACK, caller.id)
    return format_feedback(feedback, region_name, rating)

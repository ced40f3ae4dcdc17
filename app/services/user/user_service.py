from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from app.core.exceptions import NotFoundError
from app.core.logger import logger
from app.dependencies.pagination import PageParams
from app.models.feedback.feedback_model import Feedback
from app.models.user.user import User
from app.schemas.auth.auth import CurrentAdmin
from app.schemas.common.pagination import build_pagination_meta
from app.services.access.region_scope import scope_for
from app.services.feedback.feedback_service import feedback_query, format_feedback


class UserService:
    @staticmethod
    async def find_or_create_by_email(
        db: AsyncSession,
        email: str,
        full_name: str,
        phone: Optional[str] = None,
    ) -> User:
        """
        Return the submitter for ``email``, creating it on first sight.

        Later submissions overwrite name and phone; the caller commits.
        """
        email = email.strip().lower()
        user = await db.scalar(select(User).where(User.email == email))
        if user is None:
            user = User(email=email, full_name=full_name, phone=phone)
            db.add(user)
            logger.info(f"New feedback submitter {email}")
        else:
            user.full_name = full_name
            user.phone = phone
        await db.flush()
        return user

    @staticmethod
    async def find_all(db: AsyncSession, params: PageParams) -> dict:
        total = await db.scalar(select(func.count()).select_from(User))

        feedback_count = (
            select(Feedback.user_id, func.count(Feedback.id).label("feedback_count"))
            .group_by(Feedback.user_id)
            .subquery()
        )
        result = await db.execute(
            select(User, func.coalesce(feedback_count.c.feedback_count, 0))
            .outerjoin(feedback_count, feedback_count.c.user_id == User.id)
            .order_by(User.created_at.desc(), User.id.desc())
            .offset(params.offset)
            .limit(params.limit)
        )

        users = []
        for user, count in result.all():
            users.append({
                "id": user.id,
                "email": user.email,
                "full_name": user.full_name,
                "phone": user.phone,
                "created_at": user.created_at,
                "feedback_count": count,
            })

        return {
            "meta": build_pagination_meta(total, params.page, params.limit),
            "data": users,
        }

    @staticmethod
    async def feedbacks(db: AsyncSession, user_id: int, caller: CurrentAdmin) -> list:
        if await db.get(User, user_id) is None:
            raise NotFoundError("User not found")
        return await UserService._scoped_feedbacks(db, user_id, caller)

    @staticmethod
    async def _scoped_feedbacks(db: AsyncSession, user_id: int, caller: CurrentAdmin) -> list:
        scope = scope_for(caller)
        if scope.is_empty:
            return []

        query = feedback_query().where(Feedback.user_id == user_id)
        clause = scope.clause(Feedback.region_id)
        if clause is not None:
            query = query.where(clause)

        result = await db.execute(query.order_by(Feedback.submitted_at.desc(), Feedback.id.desc()))
        return [format_feedback(*row) for row in result.all()]

    @staticmethod
    async def find_one(db: AsyncSession, user_id: int, caller: CurrentAdmin) -> dict:
        user = await db.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")

        feedbacks = await UserService._scoped_feedbacks(db, user_id, caller)
        return {
            "id": user.id,
            "email": user.email,
            "full_name": user.full_name,
            "phone": user.phone,
            "created_at": user.created_at,
            "feedback_count": len(feedbacks),
            "feedbacks": feedbacks,
        }

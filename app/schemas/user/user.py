from datetime import datetime
from typing import List, Optional
from app.schemas.common.pagination import CamelModel
from app.schemas.feedback.feedback_schema import FeedbackOut


class UserOut(CamelModel):
    id: int
    email: str
    full_name: str
    phone: Optional[str] = None
    created_at: Optional[datetime] = None
    feedback_count: int = 0


class UserDetail(UserOut):
    feedbacks: List[FeedbackOut] = []

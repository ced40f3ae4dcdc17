from pydantic import EmailStr, Field, model_validator
from datetime import datetime
from typing import Optional
from app.models.feedback.feedback_model import FeedbackStatus
from app.schemas.common.pagination import CamelModel, RegionBrief


class UserInfo(CamelModel):
    full_name: str = Field(..., min_length=1, max_length=200)
    phone: Optional[str] = Field(None, max_length=50)
    email: Optional[EmailStr] = None


class FeedbackCreate(CamelModel):
    region_id: int
    rating_id: int
    anonymous: bool
    message: str = Field(..., min_length=1, max_length=5000)
    subject: Optional[str] = Field(None, max_length=200)
    user_info: Optional[UserInfo] = None

    @model_validator(mode="after")
    def require_identity_unless_anonymous(self):
        if not self.anonymous and self.user_info is None:
            raise ValueError("userInfo is required for non-anonymous feedback")
        return self


class FeedbackUpdate(CamelModel):
    status: FeedbackStatus
    response: Optional[str] = Field(None, max_length=5000)


class FeedbackCreated(CamelModel):
    id: int
    submitted_at: datetime


class RatingBrief(CamelModel):
    id: int
    rating: int
    comment: Optional[str] = None


class UserInfoOut(CamelModel):
    full_name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None


class FeedbackOut(CamelModel):
    id: int
    rating_id: int
    rating: Optional[RatingBrief] = None
    region_id: int
    region: Optional[RegionBrief] = None
    user_id: Optional[int] = None
    user_info: Optional[UserInfoOut] = None
    anonymous: bool
    subject: Optional[str] = None
    message: str
    status: FeedbackStatus
    response: Optional[str] = None
    submitted_at: Optional[datetime] = None

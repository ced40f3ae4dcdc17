from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Boolean, Enum
from datetime import datetime
from app.core.database import Base
import enum


class FeedbackStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED_AND_FORWARDED = "accepted_and_forwarded"
    COMPLETED = "completed"
    # legacy statuses, still accepted
    REVIEWED = "reviewed"
    ANSWERED = "answered"


class Feedback(Base):
    __tablename__ = "feedbacks"

    id = Column(Integer, primary_key=True, index=True)
    region_id = Column(Integer, index=True, nullable=False)
    rating_id = Column(Integer, index=True, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), index=True, nullable=True)
    anonymous = Column(Boolean, nullable=False, default=False)
    message = Column(Text, nullable=False)
    subject = Column(String, nullable=True)

    # submitter identity; always NULL for anonymous feedback
    user_full_name = Column(String, nullable=True)
    user_phone = Column(String, nullable=True)
    user_email = Column(String, nullable=True)

    status = Column(
        Enum(FeedbackStatus, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=FeedbackStatus.PENDING,
    )
    response = Column(Text, nullable=True)
    submitted_at = Column(DateTime, default=datetime.utcnow)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def user_info(self):
        if self.anonymous:
            return None
        return {
            "fullName": self.user_full_name,
            "phone": self.user_phone,
            "email": self.user_email,
        }

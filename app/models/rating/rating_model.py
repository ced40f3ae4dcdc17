from sqlalchemy import Column, Integer, Text, DateTime, CheckConstraint
from datetime import datetime
from app.core.database import Base


class Rating(Base):
    __tablename__ = "ratings"
    __table_args__ = (
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_ratings_rating_range"),
    )

    id = Column(Integer, primary_key=True, index=True)
    region_id = Column(Integer, index=True, nullable=False)
    rating = Column(Integer, nullable=False)  # 1-5 stars
    comment = Column(Text, nullable=True)
    submitted_at = Column(DateTime, default=datetime.utcnow)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)

from sqlalchemy import Column, String, Integer, DateTime
from datetime import datetime
from app.core.database import Base


class User(Base):
    """A non-anonymous feedback submitter, deduplicated by email."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    full_name = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

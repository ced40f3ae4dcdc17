from sqlalchemy import Column, Integer, String, DateTime
from datetime import datetime
from app.core.database import Base


class AuditAction:
    LOGIN = "LOGIN"
    FAILED_LOGIN = "FAILED_LOGIN"

    CREATE_RATING = "CREATE_RATING"
    CREATE_FEEDBACK = "CREATE_FEEDBACK"
    UPDATE_FEEDBACK = "UPDATE_FEEDBACK"

    CREATE_ADMIN = "CREATE_ADMIN"
    UPDATE_ADMIN = "UPDATE_ADMIN"
    DELETE_ADMIN = "DELETE_ADMIN"

    CREATE_REGION = "CREATE_REGION"
    UPDATE_REGION = "UPDATE_REGION"
    DELETE_REGION = "DELETE_REGION"


class LogEntry(Base):
    __tablename__ = "logs"

    # Autoincrement id doubles as the pagination cursor
    id = Column(Integer, primary_key=True, autoincrement=True)
    action = Column(String, index=True, nullable=False)
    user_id = Column(String, nullable=True)
    timestamp = Column(DateTime, default=datetime.utcnow, nullable=False)

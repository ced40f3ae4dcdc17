from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Table, Enum
from datetime import datetime
from app.core.database import Base
import enum


class AdminRole(str, enum.Enum):
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


# region_id carries no foreign key: deleting a region leaves dangling
# entries that readers skip.
admin_regions = Table(
    "admin_regions",
    Base.metadata,
    Column("admin_id", Integer, ForeignKey("admins.id", ondelete="CASCADE"), primary_key=True),
    Column("region_id", Integer, primary_key=True, index=True),
)


class Admin(Base):
    __tablename__ = "admins"

    id = Column(Integer, primary_key=True, index=True)
    fullname = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    role = Column(Enum(AdminRole), nullable=False, default=AdminRole.ADMIN)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

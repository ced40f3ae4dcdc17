from pydantic import EmailStr, Field, field_validator
from datetime import datetime
from typing import List, Optional
from app.models.admin.admin_model import AdminRole
from app.schemas.common.pagination import CamelModel, RegionBrief
import re

PASSWORD_MIN_LENGTH = 12
PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])")


def check_password_strength(password: str) -> str:
    if len(password) < PASSWORD_MIN_LENGTH:
        raise ValueError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters long")
    if not PASSWORD_PATTERN.match(password):
        raise ValueError(
            "Password must contain at least one uppercase letter, one lowercase letter, "
            "one number, and one special character (@$!%*?&)"
        )
    return password


class AdminCreate(CamelModel):
    fullname: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    password: str
    role: AdminRole = AdminRole.ADMIN
    allowed_regions: List[int] = []

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        return check_password_strength(value)


class AdminUpdate(CamelModel):
    fullname: Optional[str] = Field(None, min_length=1, max_length=200)
    email: Optional[EmailStr] = None
    password: Optional[str] = None
    role: Optional[AdminRole] = None
    allowed_regions: Optional[List[int]] = None

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        return check_password_strength(value)


class AdminOut(CamelModel):
    id: int
    fullname: str
    email: str
    role: AdminRole
    allowed_regions: List[int] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AdminDetail(AdminOut):
    allowed_regions: List[RegionBrief] = []


class AdminDeleted(CamelModel):
    id: int

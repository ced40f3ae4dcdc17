from pydantic import BaseModel, EmailStr, Field
from typing import List, Optional
from app.models.admin.admin_model import AdminRole


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class RefreshRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1)


class AuthUser(BaseModel):
    id: int
    fullname: str
    email: str


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    success: bool = True
    token_type: str = "bearer"
    role: AdminRole
    user: AuthUser


class CurrentAdmin(BaseModel):
    """The authenticated caller, rebuilt from access token claims."""
    id: int
    email: str
    role: AdminRole
    fullname: Optional[str] = None
    allowed_regions: List[int] = []

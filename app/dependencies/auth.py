from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from pydantic import ValidationError as PydanticValidationError
from typing import Optional
from app.core.exceptions import ForbiddenError, UnauthorizedError
from app.core.logger import logger
from app.core.security import decode_access_token
from app.models.admin.admin_model import AdminRole
from app.schemas.auth.auth import CurrentAdmin

security = HTTPBearer(auto_error=False)


def _parse_region_ids(raw) -> list:
    # claims carry ids as strings; anything unparsable is dropped
    region_ids = []
    for value in raw or []:
        try:
            region_ids.append(int(value))
        except (TypeError, ValueError):
            continue
    return region_ids


def admin_from_token(token: str) -> CurrentAdmin:
    try:
        payload = decode_access_token(token)
        return CurrentAdmin(
            id=int(payload.get("sub")),
            email=payload.get("email"),
            role=payload.get("role"),
            fullname=payload.get("fullname"),
            allowed_regions=_parse_region_ids(payload.get("allowedRegions")),
        )
    except (JWTError, PydanticValidationError, TypeError, ValueError):
        raise UnauthorizedError("Invalid or expired token")


async def get_current_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> CurrentAdmin:
    if credentials is None:
        raise UnauthorizedError("Authentication required")
    return admin_from_token(credentials.credentials)


async def get_optional_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[CurrentAdmin]:
    """For public routes that narrow results when a caller is known."""
    if credentials is None:
        return None
    try:
        return admin_from_token(credentials.credentials)
    except UnauthorizedError:
        return None


def require_role(*roles: AdminRole):
    async def role_checker(admin: CurrentAdmin = Depends(get_current_admin)):
        if admin.role not in roles:
            logger.warning(f"Admin {admin.id} with role {admin.role.value} denied; requires {[r.value for r in roles]}")
            raise ForbiddenError("Forbidden resource")
        return admin
    return role_checker


require_admin = require_role(AdminRole.ADMIN, AdminRole.SUPER_ADMIN)
require_super_admin = require_role(AdminRole.SUPER_ADMIN)

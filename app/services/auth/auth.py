from sqlalchemy.ext.asyncio import AsyncSession
from jose import JWTError
from app.core.exceptions import UnauthorizedError
from app.core.logger import logger
from app.core.security import (
    create_access_token,
    create_refresh_token,
    decode_refresh_token,
    dummy_verify,
    verify_password,
)
from app.models.admin.admin_model import Admin
from app.models.log.log_model import AuditAction
from app.services.admin.admin_service import AdminService, load_region_ids
from app.services.log.log_service import LogService


async def build_claims(db: AsyncSession, admin: Admin) -> dict:
    region_ids = (await load_region_ids(db, [admin.id]))[admin.id]
    return {
        "sub": str(admin.id),
        "email": admin.email,
        "role": admin.role.value,
        "fullname": admin.fullname,
        "allowedRegions": [str(region_id) for region_id in region_ids],
    }


async def issue_tokens(db: AsyncSession, admin: Admin) -> dict:
    claims = await build_claims(db, admin)
    return {
        "access_token": create_access_token(claims),
        "refresh_token": create_refresh_token(claims),
        "token_type": "bearer",
        "role": admin.role,
        "user": {"id": admin.id, "fullname": admin.fullname, "email": admin.email},
    }


async def login_admin(email: str, password: str, db: AsyncSession) -> dict:
    admin = await AdminService.find_by_email(db, email)

    if admin is None:
        # keep the timing of an unknown email close to a wrong password
        dummy_verify()
        logger.warning("Failed login for unknown email")
        await LogService.record(db, AuditAction.FAILED_LOGIN)
        raise UnauthorizedError("Invalid credentials")

    if not verify_password(password, admin.password_hash):
        logger.warning(f"Failed login for admin {admin.id}")
        await LogService.record(db, AuditAction.FAILED_LOGIN, admin.id)
        raise UnauthorizedError("Invalid credentials")

    tokens = await issue_tokens(db, admin)
    logger.info(f"Admin {admin.id} logged in")
    await LogService.record(db, AuditAction.LOGIN, admin.id)
    return tokens


async def refresh_tokens(refresh_token: str, db: AsyncSession) -> dict:
    """Reissue both tokens from the admin's current role and regions."""
    try:
        payload = decode_refresh_token(refresh_token)
        admin_id = int(payload.get("sub"))
    except (JWTError, TypeError, ValueError):
        raise UnauthorizedError("Invalid refresh token")

    admin = await db.get(Admin, admin_id)
    if admin is None:
        raise UnauthorizedError("Invalid refresh token")

    # pick up role or region changes made since the token was issued
    await db.refresh(admin)
    return await issue_tokens(db, admin)

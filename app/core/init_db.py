from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.config import settings
from app.core.database import engine, Base, SessionLocal
from app.core.logger import logger
from app.core.security import hash_password
from app.models.admin.admin_model import Admin, AdminRole
import app.models  # noqa: F401  registers every table on Base.metadata


async def init_db():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def ensure_super_admin(db: AsyncSession) -> Admin:
    """Create the configured super admin unless an account with that email exists."""
    email = settings.DEFAULT_ADMIN_EMAIL.strip().lower()
    admin = await db.scalar(select(Admin).where(Admin.email == email))
    if admin is not None:
        return admin

    admin = Admin(
        fullname=settings.DEFAULT_ADMIN_FULLNAME,
        email=email,
        password_hash=hash_password(settings.DEFAULT_ADMIN_PASSWORD),
        role=AdminRole.SUPER_ADMIN,
    )
    db.add(admin)
    await db.commit()
    await db.refresh(admin)
    logger.info(f"Seeded super admin {email}")
    return admin


async def bootstrap():
    await init_db()
    async with SessionLocal() as db:
        await ensure_super_admin(db)

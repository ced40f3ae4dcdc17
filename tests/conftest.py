import os

# Settings are read when app.core.config is first imported
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["JWT_SECRET"] = "test-access-secret"
os.environ["REFRESH_SECRET"] = "test-refresh-secret"
os.environ["DEFAULT_ADMIN_EMAIL"] = "root@feedback.uz"
os.environ["DEFAULT_ADMIN_PASSWORD"] = "R00t!Password"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ.pop("REDIS_URL", None)

from typing import AsyncIterator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from app.core.database import Base, get_db
from app.core.init_db import ensure_super_admin
from app.core.security import create_access_token, hash_password
from app.main import app as fastapi_app
from app.models.admin.admin_model import Admin, AdminRole, admin_regions
from app.models.rating.rating_model import Rating
from app.models.region.region_model import Region
from app.services.auth.auth import build_claims

ADMIN_PASSWORD = "Regi0n!Admin#1"


@pytest_asyncio.fixture()
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture()
async def db(engine) -> AsyncIterator[AsyncSession]:
    session_factory = sessionmaker(bind=engine, expire_on_commit=False, class_=AsyncSession)
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture()
async def client(db) -> AsyncIterator[AsyncClient]:
    async def override_get_db():
        yield db

    fastapi_app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=fastapi_app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac
    fastapi_app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def super_admin(db) -> Admin:
    return await ensure_super_admin(db)


@pytest.fixture()
def make_region(db):
    async def _make(name: str) -> Region:
        region = Region(name=name)
        db.add(region)
        await db.commit()
        await db.refresh(region)
        return region
    return _make


@pytest.fixture()
def make_admin(db):
    async def _make(
        email: str,
        regions=(),
        role: AdminRole = AdminRole.ADMIN,
        fullname: str = "Regional Admin",
        password: str = ADMIN_PASSWORD,
    ) -> Admin:
        admin = Admin(fullname=fullname, email=email, password_hash=hash_password(password), role=role)
        db.add(admin)
        await db.flush()
        for region_id in regions:
            await db.execute(admin_regions.insert().values(admin_id=admin.id, region_id=region_id))
        await db.commit()
        await db.refresh(admin)
        return admin
    return _make


@pytest.fixture()
def make_rating(db):
    async def _make(region_id: int, stars: int, comment=None, created_at=None) -> Rating:
        rating = Rating(region_id=region_id, rating=stars, comment=comment)
        if created_at is not None:
            rating.created_at = created_at
            rating.submitted_at = created_at
        db.add(rating)
        await db.commit()
        await db.refresh(rating)
        return rating
    return _make


@pytest.fixture()
def headers_for(db):
    async def _headers(admin: Admin) -> dict:
        claims = await build_claims(db, admin)
        return {"Authorization": f"Bearer {create_access_token(claims)}"}
    return _headers

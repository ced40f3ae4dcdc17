from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from app.core.config import settings


def engine_options(url: str) -> dict:
    # sqlite (tests, local runs) uses a static pool without sizing knobs
    if url.startswith("sqlite"):
        return {}
    return {"pool_pre_ping": True, "pool_size": 10, "max_overflow": 20}


engine = create_async_engine(settings.DATABASE_URL, echo=False, **engine_options(settings.DATABASE_URL))
SessionLocal = sessionmaker(
    bind=engine,
    expire_on_commit=False,
    class_=AsyncSession
)

Base = declarative_base()


async def get_db():
    """One session per request; uncommitted work is rolled back on storage errors."""
    async with SessionLocal() as db:
        try:
            yield db
        except SQLAlchemyError:
            await db.rollback()
            raise

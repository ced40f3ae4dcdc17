from contextlib import asynccontextmanager
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from app.core.config import settings
from app.core.exceptions import register_exception_handlers
from app.core.init_db import bootstrap
from app.core.logger import configure_logging, logger
from app.core.redis_lifecyle import init_redis_client, close_redis
from app.routes import api_router

configure_logging(settings.LOG_LEVEL)

# Slow request threshold (ms)
SLOW_THRESHOLD_MS = 1000
_SKIP_LOG = frozenset({"/health"})


@asynccontextmanager
async def lifespan(app: FastAPI):
    await bootstrap()
    await init_redis_client()
    logger.info(f"{settings.PROJECT_NAME} {settings.PROJECT_VERSION} started")
    yield
    await close_redis()


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.PROJECT_VERSION,
    description=settings.PROJECT_DESCRIPTION,
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_request_timing(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000
    response.headers["X-Request-Duration-Ms"] = f"{duration_ms:.1f}"

    if request.url.path not in _SKIP_LOG:
        line = f"{request.method} {request.url.path} {response.status_code} ({duration_ms:.0f}ms)"
        if duration_ms > SLOW_THRESHOLD_MS:
            logger.warning(f"Slow request: {line}")
        elif response.status_code >= 500:
            logger.error(f"Server error: {line}")
        else:
            logger.debug(f"Request: {line}")
    return response


register_exception_handlers(app)

# Include all API routes
app.include_router(api_router)


@app.get("/")
async def root():
    return {"message": f"Welcome to {settings.PROJECT_NAME}"}


@app.get("/health")
async def health_check():
    return {"status": "healthy"}

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.database import get_db
from app.dependencies.rate_limit import login_rate_limit, refresh_rate_limit
from app.schemas.auth.auth import LoginRequest, RefreshRequest, TokenResponse
from app.services.auth import auth as auth_service

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/login", response_model=TokenResponse, dependencies=[Depends(login_rate_limit)])
async def login_route(
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    return await auth_service.login_admin(credentials.email, credentials.password, db)


@router.post("/refresh", response_model=TokenResponse, dependencies=[Depends(refresh_rate_limit)])
async def refresh_token_route(
    body: RefreshRequest,
    db: AsyncSession = Depends(get_db),
):
    return await auth_service.refresh_tokens(body.refresh_token, db)

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from app.core.database import get_db
from app.dependencies.auth import get_current_admin
from app.schemas.auth.auth import CurrentAdmin
from app.schemas.log.log_schema import LogPage
from app.services.log.log_service import LogService

router = APIRouter(prefix="/logs", tags=["Logs"])


@router.get("", response_model=LogPage)
async def list_logs(
    cursor: Optional[str] = None,
    limit: int = Query(50, ge=1, le=200),
    action: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    current_admin: CurrentAdmin = Depends(get_current_admin),
):
    """
    Audit entries in insertion order.

    Pass `cursor.next` from a previous page as `cursor` to continue; it is
    null once the last page has been reached.
    """
    return await LogService.list_entries(db, cursor, limit, action)

from datetime import datetime
from typing import List, Optional
from app.schemas.common.pagination import CamelModel


class LogEntryOut(CamelModel):
    id: int
    action: str
    user_id: Optional[str] = None
    timestamp: datetime


class CursorInfo(CamelModel):
    next: Optional[str] = None
    prev: Optional[str] = None


class LogPage(CamelModel):
    success: bool = True
    data: List[LogEntryOut]
    cursor: CursorInfo

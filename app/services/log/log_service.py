from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from app.core.logger import logger
from app.models.log.log_model import LogEntry
from app.utils.cursor import decode_cursor, encode_cursor


class LogService:
    @staticmethod
    async def record(db: AsyncSession, action: str, user_id=None) -> Optional[LogEntry]:
        """
        Append an audit entry.

        Best effort: the triggering change is already committed, so a
        failed log write is rolled back and reported in the server log
        instead of failing the request.
        """
        entry = LogEntry(action=action, user_id=str(user_id) if user_id is not None else None)
        db.add(entry)
        try:
            await db.commit()
        except SQLAlchemyError:
            await db.rollback()
            logger.exception(f"Failed to write audit entry action={action} user_id={user_id}")
            return None
        return entry

    @staticmethod
    async def list_entries(
        db: AsyncSession,
        cursor: Optional[str] = None,
        limit: int = 50,
        action: Optional[str] = None,
    ) -> dict:
        last_seen_id = decode_cursor(cursor)

        query = select(LogEntry)
        if last_seen_id is not None:
            query = query.where(LogEntry.id > last_seen_id)
        if action:
            query = query.where(LogEntry.action == action)
        query = query.order_by(LogEntry.id.asc()).limit(limit)

        result = await db.execute(query)
        entries = result.scalars().all()

        next_cursor = encode_cursor(entries[-1].id) if len(entries) == limit else None

        return {
            "data": entries,
            "cursor": {
                "next": next_cursor,
                # echoes the request cursor; not a computed reverse cursor
                "prev": cursor or None,
            },
        }

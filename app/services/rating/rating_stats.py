"""
Rating statistics: star distribution and daily trend per region.

Both aggregates are computed over the regions visible to the caller and a
closed date range. Regions without ratings in the range still appear, with
zero counts and no trend points.
"""

from datetime import date, datetime, timedelta, timezone
from typing import Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ValidationError
from app.core.logger import logger
from app.models.rating.rating_model import Rating
from app.models.region.region_model import Region
from app.schemas.auth.auth import CurrentAdmin
from app.services.access.region_scope import scope_for

PERIODS = ("day", "week", "month", "year")
DEFAULT_PERIOD = "week"
STAR_VALUES = ("1", "2", "3", "4", "5")


def _parse_date(value: str, label: str) -> datetime:
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except (AttributeError, ValueError):
        raise ValidationError(f"Invalid {label} date")
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def resolve_date_range(
    period: str = DEFAULT_PERIOD,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Tuple[datetime, datetime]:
    """
    Work out the closed ``[start, end]`` window for a stats request.

    ``end`` is the explicit end date or ``now``, pushed to the last
    millisecond of its day. ``start`` is the explicit start date at
    midnight, otherwise derived from ``end``: the same day for ``day``,
    a 7-day inclusive window for ``week``, the 1st of the month for
    ``month`` and January 1st for ``year``.
    """
    if period not in PERIODS:
        raise ValidationError("Invalid period")

    end = _parse_date(end_date, "end") if end_date else (now or datetime.utcnow())
    end = end.replace(hour=23, minute=59, second=59, microsecond=999000)

    if start_date:
        start = _parse_date(start_date, "start")
        start = start.replace(hour=0, minute=0, second=0, microsecond=0)
    else:
        start = end.replace(hour=0, minute=0, second=0, microsecond=0)
        if period == "week":
            start = start - timedelta(days=6)
        elif period == "month":
            start = start.replace(day=1)
        elif period == "year":
            start = start.replace(month=1, day=1)

    if start > end:
        raise ValidationError("Invalid date range")

    return start, end


def _bucket_key(value) -> str:
    # sqlite hands back the string, postgres a date
    if isinstance(value, (date, datetime)):
        return value.strftime("%Y-%m-%d")
    return str(value)


class RatingStatsService:
    @staticmethod
    async def get_stats(
        db: AsyncSession,
        caller: CurrentAdmin,
        period: str = DEFAULT_PERIOD,
        region: Optional[int] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> dict:
        start, end = resolve_date_range(period, start_date, end_date, now)
        stats = {
            "period": period,
            "range": {"start": start, "end": end},
            "distribution": [],
            "trend": [],
        }

        scope = scope_for(caller, region)
        if scope.is_empty:
            return stats

        region_query = select(Region.id, Region.name).order_by(Region.id)
        region_clause = scope.clause(Region.id)
        if region_clause is not None:
            region_query = region_query.where(region_clause)
        regions = (await db.execute(region_query)).all()
        if not regions:
            return stats

        effective_at = func.coalesce(Rating.created_at, Rating.submitted_at)
        conditions = [effective_at >= start, effective_at <= end]
        rating_clause = scope.clause(Rating.region_id)
        if rating_clause is not None:
            conditions.append(rating_clause)

        distribution_rows = await db.execute(
            select(Rating.region_id, Rating.rating, func.count(Rating.id))
            .where(*conditions)
            .group_by(Rating.region_id, Rating.rating)
        )

        bucket = func.date(effective_at).label("bucket")
        trend_rows = await db.execute(
            select(Rating.region_id, bucket, func.avg(Rating.rating), func.count(Rating.id))
            .where(*conditions)
            .group_by(Rating.region_id, bucket)
            .order_by(bucket)
        )

        counts_by_region = {}
        for region_id, star, count in distribution_rows.all():
            counts = counts_by_region.setdefault(region_id, dict.fromkeys(STAR_VALUES, 0))
            if str(star) in counts:
                counts[str(star)] += count

        points_by_region = {}
        for region_id, day, average, count in trend_rows.all():
            points_by_region.setdefault(region_id, []).append({
                "date": _bucket_key(day),
                "average": round(float(average), 2),
                "count": count,
            })

        for region_id, region_name in regions:
            counts = counts_by_region.get(region_id, dict.fromkeys(STAR_VALUES, 0))
            stats["distribution"].append({
                "region_id": region_id,
                "region_name": region_name,
                "counts": counts,
                "total": sum(counts.values()),
            })
            stats["trend"].append({
                "region_id": region_id,
                "region_name": region_name,
                "points": sorted(points_by_region.get(region_id, []), key=lambda p: p["date"]),
            })

        logger.debug(f"Rating stats for admin {caller.id}: {len(regions)} regions, {start} .. {end}")
        return stats

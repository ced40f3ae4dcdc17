from datetime import datetime

import pytest

from app.core.exceptions import ValidationError
from app.models.admin.admin_model import AdminRole
from app.schemas.auth.auth import CurrentAdmin
from app.services.rating.rating_stats import RatingStatsService, resolve_date_range

NOW = datetime(2024, 3, 14, 9, 30)


def caller(role=AdminRole.SUPER_ADMIN, regions=()):
    return CurrentAdmin(id=1, email="stats@feedback.uz", role=role, allowed_regions=list(regions))


def test_week_is_seven_inclusive_days():
    start, end = resolve_date_range("week", now=NOW)
    assert start == datetime(2024, 3, 8)
    assert end == datetime(2024, 3, 14, 23, 59, 59, 999000)


@pytest.mark.parametrize(
    "period, expected_start",
    [
        ("day", datetime(2024, 3, 14)),
        ("month", datetime(2024, 3, 1)),
        ("year", datetime(2024, 1, 1)),
    ],
)
def test_period_start(period, expected_start):
    start, _ = resolve_date_range(period, now=NOW)
    assert start == expected_start


def test_explicit_dates_override_period():
    start, end = resolve_date_range("year", "2024-02-03T15:00:00", "2024-02-05")
    assert start == datetime(2024, 2, 3)
    assert end == datetime(2024, 2, 5, 23, 59, 59, 999000)


def test_period_start_derives_from_explicit_end():
    start, end = resolve_date_range("month", end_date="2023-07-20")
    assert start == datetime(2023, 7, 1)
    assert end.date() == datetime(2023, 7, 20).date()


def test_timezone_aware_input_is_converted_to_utc():
    start, _ = resolve_date_range("week", start_date="2024-03-10T01:00:00+05:00", end_date="2024-03-12")
    assert start == datetime(2024, 3, 9)


@pytest.mark.parametrize(
    "kwargs, message",
    [
        ({"start_date": "yesterday"}, "Invalid start date"),
        ({"end_date": "2024-13-45"}, "Invalid end date"),
        ({"start_date": "2024-03-10", "end_date": "2024-03-01"}, "Invalid date range"),
    ],
)
def test_invalid_dates(kwargs, message):
    with pytest.raises(ValidationError) as exc:
        resolve_date_range("week", **kwargs)
    assert exc.value.detail == message


@pytest.mark.asyncio
async def test_distribution_and_trend_for_one_day(db, make_region, make_rating):
    region = await make_region("Samarkand")
    day = datetime(2024, 3, 10, 12, 0)
    for stars in (1, 1, 2, 5, 5, 5):
        await make_rating(region.id, stars, created_at=day)

    stats = await RatingStatsService.get_stats(db, caller(), "day", end_date="2024-03-10")

    (distribution,) = stats["distribution"]
    assert distribution["region_id"] == region.id
    assert distribution["region_name"] == "Samarkand"
    assert distribution["counts"] == {"1": 2, "2": 1, "3": 0, "4": 0, "5": 3}
    assert distribution["total"] == 6

    (trend,) = stats["trend"]
    assert trend["points"] == [{"date": "2024-03-10", "average": 3.17, "count": 6}]


@pytest.mark.asyncio
async def test_regions_without_ratings_are_listed(db, make_region, make_rating):
    busy = await make_region("Bukhara")
    quiet = await make_region("Khiva")
    await make_rating(busy.id, 4, created_at=datetime(2024, 3, 9, 8))
    await make_rating(busy.id, 2, created_at=datetime(2024, 3, 11, 8))
    # outside the window
    await make_rating(busy.id, 5, created_at=datetime(2024, 2, 1, 8))

    stats = await RatingStatsService.get_stats(db, caller(), "week", now=NOW)

    assert [d["region_id"] for d in stats["distribution"]] == [busy.id, quiet.id]
    assert stats["distribution"][0]["total"] == 2
    assert stats["distribution"][1]["counts"] == {"1": 0, "2": 0, "3": 0, "4": 0, "5": 0}
    assert [p["date"] for p in stats["trend"][0]["points"]] == ["2024-03-09", "2024-03-11"]
    assert stats["trend"][1]["points"] == []


@pytest.mark.asyncio
async def test_admin_sees_only_assigned_regions(db, make_region, make_rating):
    mine = await make_region("Fergana")
    other = await make_region("Navoi")
    await make_rating(mine.id, 3, created_at=datetime(2024, 3, 13))
    await make_rating(other.id, 5, created_at=datetime(2024, 3, 13))

    stats = await RatingStatsService.get_stats(db, caller(AdminRole.ADMIN, [mine.id]), now=NOW)
    assert [d["region_id"] for d in stats["distribution"]] == [mine.id]

    foreign = await RatingStatsService.get_stats(db, caller(AdminRole.ADMIN, [mine.id]), region=other.id, now=NOW)
    assert foreign["distribution"] == []
    assert foreign["trend"] == []


@pytest.mark.asyncio
async def test_admin_without_regions_gets_empty_stats(db, make_region, make_rating):
    region = await make_region("Termez")
    await make_rating(region.id, 5, created_at=datetime(2024, 3, 13))

    stats = await RatingStatsService.get_stats(db, caller(AdminRole.ADMIN), now=NOW)
    assert stats["period"] == "week"
    assert stats["distribution"] == []
    assert stats["trend"] == []


@pytest.mark.asyncio
async def test_stats_endpoint(client, super_admin, headers_for, make_region, make_rating):
    region = await make_region("Andijan")
    await make_rating(region.id, 4, created_at=datetime(2024, 3, 10, 10))

    resp = await client.get(
        "/admin/ratings/stats",
        params={"period": "day", "endDate": "2024-03-10"},
        headers=await headers_for(super_admin),
    )
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["distribution"][0]["regionName"] == "Andijan"
    assert data["distribution"][0]["counts"]["4"] == 1
    assert data["trend"][0]["points"][0]["average"] == 4.0


@pytest.mark.asyncio
async def test_stats_endpoint_rejects_bad_range(client, super_admin, headers_for):
    resp = await client.get(
        "/admin/ratings/stats",
        params={"startDate": "2024-03-10", "endDate": "2024-03-01"},
        headers=await headers_for(super_admin),
    )
    assert resp.status_code == 400
    assert resp.json()["message"] == "Invalid date range"

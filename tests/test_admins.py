import pytest
from sqlalchemy import select

from app.models.admin.admin_model import Admin, AdminRole
from app.models.log.log_model import AuditAction, LogEntry
from tests.conftest import ADMIN_PASSWORD

STRONG_PASSWORD = "Str0ng!Passw0rd"


@pytest.mark.asyncio
async def test_create_admin(client, db, super_admin, headers_for, make_region):
    region = await make_region("Tashkent")
    resp = await client.post(
        "/admins",
        json={
            "fullname": "Dilnoza Yusupova",
            "email": "Dilnoza@Feedback.uz",
            "password": STRONG_PASSWORD,
            "allowedRegions": [region.id],
        },
        headers=await headers_for(super_admin),
    )
    assert resp.status_code == 201
    data = resp.json()["data"]
    assert data["email"] == "dilnoza@feedback.uz"
    assert data["role"] == "admin"
    assert data["allowedRegions"] == [region.id]
    assert "password" not in data and "passwordHash" not in data

    entry = await db.scalar(select(LogEntry).where(LogEntry.action == AuditAction.CREATE_ADMIN))
    assert entry.user_id == str(super_admin.id)


@pytest.mark.asyncio
async def test_create_admin_duplicate_email(client, super_admin, headers_for, make_admin):
    await make_admin("taken@feedback.uz")
    resp = await client.post(
        "/admins",
        json={"fullname": "Someone", "email": "TAKEN@feedback.uz", "password": STRONG_PASSWORD},
        headers=await headers_for(super_admin),
    )
    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_create_admin_unknown_region(client, super_admin, headers_for):
    resp = await client.post(
        "/admins",
        json={"fullname": "Someone", "email": "new@feedback.uz", "password": STRONG_PASSWORD, "allowedRegions": [404]},
        headers=await headers_for(super_admin),
    )
    assert resp.status_code == 400
    assert resp.json()["message"] == "One or more regions are invalid"


@pytest.mark.asyncio
@pytest.mark.parametrize("password", ["Sh0rt!pw", "alllowercase1!", "NoDigitsHere!!", "NoSpecial12345"])
async def test_weak_passwords_rejected(client, super_admin, headers_for, password):
    resp = await client.post(
        "/admins",
        json={"fullname": "Weak", "email": "weak@feedback.uz", "password": password},
        headers=await headers_for(super_admin),
    )
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_only_super_admin_creates(client, headers_for, make_admin):
    admin = await make_admin("regular@feedback.uz")
    resp = await client.post(
        "/admins",
        json={"fullname": "Other", "email": "other@feedback.uz", "password": STRONG_PASSWORD},
        headers=await headers_for(admin),
    )
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_admin_sees_colleagues_sharing_regions(client, headers_for, make_region, make_admin):
    shared = await make_region("Fergana")
    elsewhere = await make_region("Khorezm")
    me = await make_admin("me@feedback.uz", regions=[shared.id], fullname="Me")
    await make_admin("colleague@feedback.uz", regions=[shared.id, elsewhere.id], fullname="Colleague")
    stranger = await make_admin("stranger@feedback.uz", regions=[elsewhere.id], fullname="Stranger")
    headers = await headers_for(me)

    resp = await client.get("/admins", params={"sort": "fullname:asc"}, headers=headers)
    assert [a["fullname"] for a in resp.json()["data"]] == ["Colleague", "Me"]

    resp = await client.get("/admins", params={"region": elsewhere.id}, headers=headers)
    assert resp.json()["data"] == []

    resp = await client.get(f"/admins/{stranger.id}", headers=headers)
    assert resp.status_code == 404
    assert resp.json()["message"] == "Admin not found"


@pytest.mark.asyncio
async def test_super_admin_filters(client, super_admin, headers_for, make_region, make_admin):
    region = await make_region("Navoi")
    await make_admin("navoi@feedback.uz", regions=[region.id], fullname="Navoi Admin")
    await make_admin("zarafshan@feedback.uz", fullname="Zarafshan_Admin")
    headers = await headers_for(super_admin)

    resp = await client.get("/admins", params={"role": "super_admin"}, headers=headers)
    assert [a["email"] for a in resp.json()["data"]] == [super_admin.email]

    resp = await client.get("/admins", params={"region": region.id}, headers=headers)
    assert [a["email"] for a in resp.json()["data"]] == ["navoi@feedback.uz"]

    resp = await client.get("/admins", params={"search": "n_admin"}, headers=headers)
    assert [a["fullname"] for a in resp.json()["data"]] == ["Zarafshan_Admin"]

    resp = await client.get("/admins", params={"sort": "email:asc"}, headers=headers)
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_admin_detail_resolves_region_names(client, super_admin, headers_for, make_region, make_admin):
    region = await make_region("Jizzakh")
    admin = await make_admin("jizzakh@feedback.uz", regions=[region.id, 777])

    resp = await client.get(f"/admins/{admin.id}", headers=await headers_for(super_admin))
    assert resp.json()["data"]["allowedRegions"] == [{"id": region.id, "name": "Jizzakh"}]


@pytest.mark.asyncio
async def test_admin_cannot_change_roles(client, headers_for, make_region, make_admin):
    region = await make_region("Sirdarya")
    me = await make_admin("me2@feedback.uz", regions=[region.id])
    colleague = await make_admin("peer@feedback.uz", regions=[region.id])

    resp = await client.patch(f"/admins/{colleague.id}", json={"role": "super_admin"}, headers=await headers_for(me))
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_admin_cannot_grant_foreign_regions(client, db, headers_for, make_region, make_admin):
    mine = await make_region("Surkhandarya")
    foreign = await make_region("Kashkadarya")
    me = await make_admin("me3@feedback.uz", regions=[mine.id])
    colleague = await make_admin("peer3@feedback.uz", regions=[mine.id])
    headers = await headers_for(me)

    resp = await client.patch(
        f"/admins/{colleague.id}", json={"allowedRegions": [mine.id, foreign.id]}, headers=headers
    )
    assert resp.status_code == 403

    resp = await client.patch(f"/admins/{colleague.id}", json={"fullname": "Renamed Peer"}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["fullname"] == "Renamed Peer"


@pytest.mark.asyncio
async def test_admin_cannot_change_peer_credentials(client, headers_for, make_region, make_admin):
    shared = await make_region("Shared Oblast")
    private = await make_region("Private Oblast")
    me = await make_admin("me4@feedback.uz", regions=[shared.id])
    colleague = await make_admin("peer4@feedback.uz", regions=[shared.id, private.id])
    headers = await headers_for(me)

    resp = await client.patch(f"/admins/{colleague.id}", json={"password": STRONG_PASSWORD}, headers=headers)
    assert resp.status_code == 403
    resp = await client.patch(f"/admins/{colleague.id}", json={"email": "hijacked@feedback.uz"}, headers=headers)
    assert resp.status_code == 403

    hijack = await client.post("/auth/login", json={"email": "peer4@feedback.uz", "password": STRONG_PASSWORD})
    assert hijack.status_code == 401
    login = await client.post("/auth/login", json={"email": "peer4@feedback.uz", "password": ADMIN_PASSWORD})
    assert login.status_code == 200


@pytest.mark.asyncio
async def test_admin_changes_own_password(client, headers_for, make_region, make_admin):
    region = await make_region("Own Oblast")
    me = await make_admin("self@feedback.uz", regions=[region.id])

    resp = await client.patch(f"/admins/{me.id}", json={"password": STRONG_PASSWORD}, headers=await headers_for(me))
    assert resp.status_code == 200
    login = await client.post("/auth/login", json={"email": "self@feedback.uz", "password": STRONG_PASSWORD})
    assert login.status_code == 200


@pytest.mark.asyncio
async def test_admin_region_update_keeps_foreign_assignments(client, headers_for, make_region, make_admin):
    shared = await make_region("Shared Valley")
    private = await make_region("Private Valley")
    me = await make_admin("me5@feedback.uz", regions=[shared.id])
    colleague = await make_admin("peer5@feedback.uz", regions=[shared.id, private.id])
    headers = await headers_for(me)

    resp = await client.patch(f"/admins/{colleague.id}", json={"allowedRegions": [shared.id]}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["allowedRegions"] == sorted([shared.id, private.id])

    resp = await client.patch(f"/admins/{colleague.id}", json={"allowedRegions": []}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["allowedRegions"] == [private.id]


@pytest.mark.asyncio
async def test_update_email_conflict(client, super_admin, headers_for, make_admin):
    await make_admin("first@feedback.uz")
    second = await make_admin("second@feedback.uz")
    resp = await client.patch(
        f"/admins/{second.id}", json={"email": "first@feedback.uz"}, headers=await headers_for(super_admin)
    )
    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_super_admin_reassigns_regions(client, super_admin, headers_for, make_region, make_admin):
    old = await make_region("Old Region")
    new = await make_region("New Region")
    admin = await make_admin("moved@feedback.uz", regions=[old.id])

    resp = await client.patch(
        f"/admins/{admin.id}", json={"allowedRegions": [new.id]}, headers=await headers_for(super_admin)
    )
    assert resp.status_code == 200
    assert resp.json()["data"]["allowedRegions"] == [new.id]


@pytest.mark.asyncio
async def test_delete_admin(client, db, super_admin, headers_for, make_admin):
    admin = await make_admin("leaving@feedback.uz")
    headers = await headers_for(super_admin)

    resp = await client.delete(f"/admins/{admin.id}", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["data"] == {"id": admin.id}
    assert await db.scalar(select(Admin).where(Admin.email == "leaving@feedback.uz")) is None

    resp = await client.delete(f"/admins/{super_admin.id}", headers=headers)
    assert resp.status_code == 400
    assert resp.json()["message"] == "Super admin cannot be deleted"


@pytest.mark.asyncio
async def test_role_is_checked_on_every_admin_route(client, headers_for, make_admin):
    boss = await make_admin("boss2@feedback.uz", role=AdminRole.SUPER_ADMIN)
    resp = await client.get("/admins", headers=await headers_for(boss))
    assert resp.status_code == 200


@pytest.mark.asyncio
async def test_admin_without_regions_lists_no_admins(client, headers_for, make_region, make_admin):
    region = await make_region("Margilan")
    await make_admin("seeded@feedback.uz", regions=[region.id])
    admin = await make_admin("nobody@feedback.uz")

    resp = await client.get("/admins", headers=await headers_for(admin))
    assert resp.status_code == 200
    assert resp.json()["meta"]["total"] == 0
    assert resp.json()["data"] == []

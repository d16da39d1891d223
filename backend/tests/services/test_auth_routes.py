"""Auth Routes — tests for identity sync, /me, and credential rejection.

Tests cover:
    - Missing/invalid/expired bearer → 401 with WWW-Authenticate
    - Sync creates the user once; repeated syncs keep the same id
    - Profile fields updated when sent, preserved when omitted
    - Email always follows the verified token
    - First authenticated request provisions the user without a sync
"""

from datetime import datetime, timedelta, timezone


# ─── Credential rejection ───────────────────────────────────────

async def test_sync_without_header_is_401(client):
    res = await client.post("/api/v1/auth/sync")
    assert res.status_code == 401
    assert res.headers["www-authenticate"] == "Bearer"
    assert res.json()["error"]["code"] == "UNAUTHENTICATED"


async def test_wrong_scheme_is_401(client):
    res = await client.get("/api/v1/auth/me", headers={"Authorization": "Token abc"})
    assert res.status_code == 401


async def test_expired_token_is_401(client, token_for):
    past = datetime.now(timezone.utc) - timedelta(hours=2)
    token = token_for("late-uid", exp=past)
    res = await client.get(
        "/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"},
    )
    assert res.status_code == 401


async def test_protected_file_routes_need_credentials(client):
    res = await client.get("/api/v1/files")
    assert res.status_code == 401


# ─── Sync ───────────────────────────────────────────────────────

async def test_sync_creates_user(client, headers_for):
    res = await client.post(
        "/api/v1/auth/sync",
        json={"displayName": "Dana", "photoURL": "https://img.example.com/d.png"},
        headers=headers_for("dana-uid"),
    )
    assert res.status_code == 200
    body = res.json()
    assert body["success"] is True
    assert body["user"]["subject_id"] == "dana-uid"
    assert body["user"]["email"] == "dana-uid@example.com"
    assert body["user"]["display_name"] == "Dana"
    assert body["user"]["avatar_url"] == "https://img.example.com/d.png"


async def test_sync_without_body(client, headers_for):
    res = await client.post("/api/v1/auth/sync", headers=headers_for("quiet-uid"))
    assert res.status_code == 200
    assert res.json()["user"]["display_name"] is None


async def test_repeated_sync_is_idempotent(client, headers_for):
    headers = headers_for("eve-uid")
    first = await client.post("/api/v1/auth/sync", json={"displayName": "Eve"}, headers=headers)
    second = await client.post("/api/v1/auth/sync", json={"displayName": "Eve"}, headers=headers)
    assert first.json()["user"]["id"] == second.json()["user"]["id"]


async def test_sync_updates_sent_fields_and_keeps_others(client, headers_for):
    headers = headers_for("fay-uid")
    await client.post(
        "/api/v1/auth/sync",
        json={"displayName": "Fay", "photoURL": "https://img.example.com/f.png"},
        headers=headers,
    )
    res = await client.post(
        "/api/v1/auth/sync", json={"displayName": "Fay B."}, headers=headers,
    )
    user = res.json()["user"]
    assert user["display_name"] == "Fay B."
    assert user["avatar_url"] == "https://img.example.com/f.png"


async def test_email_follows_token(client, headers_for):
    first = await client.post(
        "/api/v1/auth/sync", headers=headers_for("gus-uid", "gus@old.example.com"),
    )
    second = await client.post(
        "/api/v1/auth/sync", headers=headers_for("gus-uid", "gus@new.example.com"),
    )
    assert first.json()["user"]["id"] == second.json()["user"]["id"]
    assert second.json()["user"]["email"] == "gus@new.example.com"


# ─── /me ────────────────────────────────────────────────────────

async def test_me_returns_synced_user(client, alice):
    res = await client.get("/api/v1/auth/me", headers=alice["headers"])
    assert res.status_code == 200
    assert res.json()["id"] == alice["id"]
    assert res.json()["display_name"] == "Alice"


async def test_first_request_provisions_user(client, headers_for):
    headers = headers_for("new-uid")
    me = await client.get("/api/v1/auth/me", headers=headers)
    assert me.status_code == 200
    synced = await client.post("/api/v1/auth/sync", headers=headers)
    assert synced.json()["user"]["id"] == me.json()["id"]

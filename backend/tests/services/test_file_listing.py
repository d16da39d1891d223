"""File Listing — tests for views and ordering over GET /files.

Tests cover:
    - all = owned ∪ shared, no duplicates
    - my-files = owned only; shared = memberships minus owned,
      even when the owner also holds a membership row
    - trash = caller's own trashed files, newest deletion first
    - Trashed files never appear outside trash (not even to collaborators)
    - Unknown view → 400, unknown sort → last-modified
"""

from datetime import datetime, timedelta, timezone
from uuid import UUID

from canvasdesk.models.file_collaborator import FileCollaborator

T0 = datetime(2026, 1, 1, tzinfo=timezone.utc)


async def _names(client, user, **params):
    res = await client.get("/api/v1/files", params=params, headers=user["headers"])
    assert res.status_code == 200, res.text
    return [f["name"] for f in res.json()]


async def test_views_partition_owned_and_shared(client, alice, bob, create_file, share_file):
    await create_file(alice, "A-own")
    theirs = await create_file(bob, "B-shared")
    await create_file(bob, "B-private")
    await share_file(bob, theirs["id"], alice)

    assert sorted(await _names(client, alice, view="all")) == ["A-own", "B-shared"]
    assert await _names(client, alice, view="my-files") == ["A-own"]
    assert await _names(client, alice, view="shared") == ["B-shared"]


async def test_default_view_is_all(client, alice, create_file):
    await create_file(alice, "Only")
    assert await _names(client, alice) == ["Only"]


async def test_shared_never_lists_owned(client, alice, create_file):
    await create_file(alice, "Mine")
    assert await _names(client, alice, view="shared") == []


async def test_trash_view(client, alice, bob, create_file, share_file, set_file_fields):
    first = await create_file(alice, "First")
    second = await create_file(alice, "Second")
    await create_file(alice, "Alive")
    shared = await create_file(bob, "Bob's")
    await share_file(bob, shared["id"], alice)

    for f in (first, second, shared):
        owner = bob if f is shared else alice
        res = await client.delete(f"/api/v1/files/{f['id']}", headers=owner["headers"])
        assert res.status_code == 200
    await set_file_fields(first["id"], deleted_at=T0 + timedelta(hours=2))
    await set_file_fields(second["id"], deleted_at=T0 + timedelta(hours=1))

    assert await _names(client, alice, view="trash", sort="name-desc") == ["First", "Second"]
    assert await _names(client, alice, view="all") == ["Alive"]
    assert await _names(client, alice, view="shared") == []


async def test_unknown_view_is_400(client, alice):
    res = await client.get("/api/v1/files", params={"view": "archived"}, headers=alice["headers"])
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_VIEW"


async def test_sort_by_name(client, alice, create_file):
    for name in ("Charlie", "Alpha", "Bravo"):
        await create_file(alice, name)
    assert await _names(client, alice, sort="name-asc") == ["Alpha", "Bravo", "Charlie"]
    assert await _names(client, alice, sort="name-desc") == ["Charlie", "Bravo", "Alpha"]


async def test_sort_newest(client, alice, create_file, set_file_fields):
    old = await create_file(alice, "Old")
    new = await create_file(alice, "New")
    await set_file_fields(old["id"], created_at=T0)
    await set_file_fields(new["id"], created_at=T0 + timedelta(days=1))
    assert await _names(client, alice, sort="newest") == ["New", "Old"]


async def test_unknown_sort_falls_back_to_last_modified(client, alice, create_file, set_file_fields):
    stale = await create_file(alice, "Stale")
    fresh = await create_file(alice, "Fresh")
    await set_file_fields(stale["id"], updated_at=T0)
    await set_file_fields(fresh["id"], updated_at=T0 + timedelta(minutes=5))

    expected = ["Fresh", "Stale"]
    assert await _names(client, alice, sort="bogus") == expected
    assert await _names(client, alice, sort="last-modified") == expected


async def test_all_has_no_duplicates(client, alice, bob, carol, create_file, share_file):
    f = await create_file(alice, "Team")
    await share_file(alice, f["id"], bob)
    await share_file(alice, f["id"], carol)
    assert await _names(client, alice, view="all") == ["Team"]
    assert await _names(client, bob, view="all") == ["Team"]


async def test_shared_skips_owned_file_with_membership_row(
    client, alice, create_file, test_session_factory,
):
    f = await create_file(alice, "Mine")
    async with test_session_factory() as session:
        session.add(FileCollaborator(file_id=UUID(f["id"]), user_id=UUID(alice["id"])))
        await session.commit()

    assert await _names(client, alice, view="shared") == []
    assert await _names(client, alice, view="all") == ["Mine"]

"""Collaborator Routes — tests for membership management and read-only sharing.

Tests cover:
    - Owner adds, lists and removes collaborators
    - Adding twice is a no-op; unknown email → 404; owner's own email → 400
    - Collaborators can read the file and its children but never mutate
    - Removing a collaborator revokes access
"""


async def test_add_and_list(client, alice, bob, create_file):
    f = await create_file(alice)
    res = await client.post(
        f"/api/v1/files/{f['id']}/collaborators",
        json={"email": bob["email"]}, headers=alice["headers"],
    )
    assert res.status_code == 201
    assert res.json()["user_id"] == bob["id"]
    assert res.json()["display_name"] == "Bob"

    listing = await client.get(
        f"/api/v1/files/{f['id']}/collaborators", headers=alice["headers"],
    )
    assert [m["user_id"] for m in listing.json()] == [bob["id"]]


async def test_email_lookup_ignores_case(client, alice, bob, create_file):
    f = await create_file(alice)
    res = await client.post(
        f"/api/v1/files/{f['id']}/collaborators",
        json={"email": bob["email"].upper()}, headers=alice["headers"],
    )
    assert res.status_code == 201


async def test_add_twice_is_noop(client, alice, bob, create_file, share_file):
    f = await create_file(alice)
    await share_file(alice, f["id"], bob)
    await share_file(alice, f["id"], bob)
    listing = await client.get(
        f"/api/v1/files/{f['id']}/collaborators", headers=alice["headers"],
    )
    assert len(listing.json()) == 1


async def test_unknown_email_is_404(client, alice, create_file):
    f = await create_file(alice)
    res = await client.post(
        f"/api/v1/files/{f['id']}/collaborators",
        json={"email": "nobody@example.com"}, headers=alice["headers"],
    )
    assert res.status_code == 404


async def test_owner_cannot_join_own_file(client, alice, create_file):
    f = await create_file(alice)
    res = await client.post(
        f"/api/v1/files/{f['id']}/collaborators",
        json={"email": alice["email"]}, headers=alice["headers"],
    )
    assert res.status_code == 400


async def test_collaborator_can_list_but_not_manage(client, alice, bob, carol, create_file, share_file):
    f = await create_file(alice)
    await share_file(alice, f["id"], bob)

    listing = await client.get(
        f"/api/v1/files/{f['id']}/collaborators", headers=bob["headers"],
    )
    assert listing.status_code == 200

    res = await client.post(
        f"/api/v1/files/{f['id']}/collaborators",
        json={"email": carol["email"]}, headers=bob["headers"],
    )
    assert res.status_code == 404


async def test_collaborator_reads_children_but_cannot_mutate(
    client, alice, bob, create_file, share_file, create_asset,
):
    f = await create_file(alice)
    asset = await create_asset(alice, f["id"])
    await share_file(alice, f["id"], bob)

    assets = await client.get("/api/v1/assets", params={"fileId": f["id"]}, headers=bob["headers"])
    assert assets.status_code == 200
    assert len(assets.json()) == 1

    create = await client.post(
        "/api/v1/assets",
        json={
            "file_id": f["id"], "name": "b.png", "file_type": "image/png",
            "storage_url": "https://cdn.example.com/b.png",
        },
        headers=bob["headers"],
    )
    rename = await client.patch(
        f"/api/v1/assets/{asset['id']}", json={"name": "hijack"}, headers=bob["headers"],
    )
    element = await client.post(
        "/api/v1/elements",
        json={
            "file_id": f["id"], "type": "rectangle", "sort_index": 0,
            "props": {"x": 0, "y": 0, "width": 1, "height": 1},
        },
        headers=bob["headers"],
    )
    assert create.status_code == rename.status_code == element.status_code == 404


async def test_remove_revokes_access(client, alice, bob, create_file, share_file):
    f = await create_file(alice)
    await share_file(alice, f["id"], bob)
    res = await client.delete(
        f"/api/v1/files/{f['id']}/collaborators/{bob['id']}", headers=alice["headers"],
    )
    assert res.status_code == 204
    get = await client.get(f"/api/v1/files/{f['id']}", headers=bob["headers"])
    assert get.status_code == 404


async def test_remove_non_member_is_404(client, alice, bob, create_file):
    f = await create_file(alice)
    res = await client.delete(
        f"/api/v1/files/{f['id']}/collaborators/{bob['id']}", headers=alice["headers"],
    )
    assert res.status_code == 404

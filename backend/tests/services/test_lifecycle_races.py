"""Service-level races — guarded transitions and the hardened asset ceiling.

Tests cover:
    - A transition planned from a stale snapshot loses to the one that committed
    - Losing transitions roll back and emit access_denied(concurrent_transition)
    - Successful transitions emit lifecycle_transition with source/target states
    - Asset creation that crosses the ceiling after insert is rolled back
    - Denials emit access_denied with the internal reason
"""

import logging

import pytest
from sqlalchemy import func, select

from canvasdesk.core.domain_types import AccessRight
from canvasdesk.core.errors import CapacityExceededError, ResourceNotFoundError
from canvasdesk.core.repository_protocols import Identity
from canvasdesk.infrastructure.observability import EVENT_LOGGER_NAME
from canvasdesk.models.asset import Asset
from canvasdesk.models.file import File
from canvasdesk.schemas.asset import AssetCreate
from canvasdesk.services.access_gate import AccessGate
from canvasdesk.services.assets import AssetService
from canvasdesk.services.file_lifecycle import FileLifecycle
from canvasdesk.services.user_directory import UserDirectory


async def _owner_and_file(db, subject="owner-uid"):
    user = await UserDirectory(db).upsert(Identity(subject, f"{subject}@example.com"))
    file = await FileLifecycle(db).create(user.id, "Board", "canvas")
    return user, file


def _events(caplog, name):
    return [r for r in caplog.records if r.name == EVENT_LOGGER_NAME and r.event == name]


def _asset(file_id, name):
    return AssetCreate(
        file_id=file_id, name=name, file_type="image/png",
        storage_url=f"https://cdn.example.com/{name}",
    )


# ─── Guarded transitions ────────────────────────────────────────

async def test_stale_trash_loses_to_committed_trash(test_session_factory, caplog):
    async with test_session_factory() as setup:
        user, file = await _owner_and_file(setup)

    async with test_session_factory() as slow, test_session_factory() as fast:
        # slow reads the Active snapshot first and keeps it in its identity map
        snapshot = await AccessGate(slow).load_file(file.id)
        assert snapshot.deleted_at is None

        await FileLifecycle(fast).trash(user.id, file.id)

        with caplog.at_level(logging.INFO, logger=EVENT_LOGGER_NAME):
            with pytest.raises(ResourceNotFoundError):
                await FileLifecycle(slow).trash(user.id, file.id)

    [denied] = _events(caplog, "access_denied")
    assert denied.reason == "concurrent_transition"
    assert denied.action == "trash"


async def test_transition_emits_event(test_db, caplog):
    user, file = await _owner_and_file(test_db)
    with caplog.at_level(logging.INFO, logger=EVENT_LOGGER_NAME):
        await FileLifecycle(test_db).trash(user.id, file.id)
        await FileLifecycle(test_db).restore(user.id, file.id)

    transitions = _events(caplog, "lifecycle_transition")
    assert [(e.action, e.source_state, e.target_state) for e in transitions] == [
        ("trash", "active", "trashed"),
        ("restore", "trashed", "active"),
    ]


async def test_illegal_transition_reports_state(test_db, caplog):
    user, file = await _owner_and_file(test_db)
    with caplog.at_level(logging.INFO, logger=EVENT_LOGGER_NAME):
        with pytest.raises(ResourceNotFoundError):
            await FileLifecycle(test_db).restore(user.id, file.id)
    [denied] = _events(caplog, "access_denied")
    assert denied.reason == "state:active"


async def test_purge_deletes_row(test_session_factory):
    async with test_session_factory() as db:
        user, file = await _owner_and_file(db)
        await FileLifecycle(db).purge(user.id, file.id)

    async with test_session_factory() as fresh:
        assert await fresh.get(File, file.id) is None


# ─── Access gate ────────────────────────────────────────────────

async def test_denial_emits_reason(test_db, caplog):
    _, file = await _owner_and_file(test_db)
    stranger = await UserDirectory(test_db).upsert(Identity("stranger", "s@example.com"))
    gate = AccessGate(test_db)

    assert not await gate.can_read(stranger.id, file.id)
    with caplog.at_level(logging.INFO, logger=EVENT_LOGGER_NAME):
        with pytest.raises(ResourceNotFoundError):
            await gate.require(stranger.id, file.id, AccessRight.READ)
    [denied] = _events(caplog, "access_denied")
    assert denied.reason == "no_membership"


async def test_owner_passes_gate(test_db):
    user, file = await _owner_and_file(test_db)
    gate = AccessGate(test_db)
    assert await gate.can_write(user.id, file.id)
    assert (await gate.require(user.id, file.id, AccessRight.WRITE)).id == file.id


# ─── Hardened ceiling ───────────────────────────────────────────

async def test_ceiling_with_small_limit(test_db, caplog):
    user, file = await _owner_and_file(test_db)
    service = AssetService(test_db, max_assets=2)
    await service.create(user.id, _asset(file.id, "a.png"))
    await service.create(user.id, _asset(file.id, "b.png"))

    with caplog.at_level(logging.INFO, logger=EVENT_LOGGER_NAME):
        with pytest.raises(CapacityExceededError):
            await service.create(user.id, _asset(file.id, "c.png"))
    [rejected] = _events(caplog, "capacity_rejected")
    assert rejected.count == 2
    assert rejected.limit == 2


async def test_insert_that_crosses_ceiling_is_rolled_back(test_session_factory, monkeypatch):
    async with test_session_factory() as db:
        user, file = await _owner_and_file(db)
        service = AssetService(db, max_assets=2)
        # rollback expires ORM rows: keep plain ids
        user_id, file_id = user.id, file.id
        await service.create(user_id, _asset(file_id, "a.png"))
        await service.create(user_id, _asset(file_id, "b.png"))

        # First count sees a stale total, as a concurrent creator would
        real_count = service.count_for_file
        calls = []

        async def stale_then_real(counted_file_id):
            calls.append(counted_file_id)
            if len(calls) == 1:
                return 1
            return await real_count(counted_file_id)

        monkeypatch.setattr(service, "count_for_file", stale_then_real)
        with pytest.raises(CapacityExceededError):
            await service.create(user_id, _asset(file_id, "c.png"))
        assert len(calls) == 2

    async with test_session_factory() as fresh:
        count = await fresh.execute(
            select(func.count()).select_from(Asset).where(Asset.file_id == file_id),
        )
        assert count.scalar_one() == 2


# ─── User directory ─────────────────────────────────────────────

async def test_resolve_provisions_once(test_db):
    directory = UserDirectory(test_db)
    identity = Identity("first-contact", "fc@example.com")
    first = await directory.resolve(identity)
    second = await directory.resolve(identity)
    assert first.id == second.id


async def test_resolve_keeps_profile(test_db):
    directory = UserDirectory(test_db)
    identity = Identity("profiled", "p@example.com")
    await directory.upsert(identity, display_name="Pat")
    user = await directory.resolve(identity)
    assert user.display_name == "Pat"

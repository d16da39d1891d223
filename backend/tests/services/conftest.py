"""Service test fixtures — async DB + FastAPI test client + signed bearer tokens.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use the test DB
    - db_manager patched so the readiness check sees the test engine
    - Tokens are real HS256 JWTs verified by the real JWTIdentityResolver

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
      (ADR: FOR UPDATE and ON DELETE CASCADE are PostgreSQL-only, the services
      do not depend on either for correctness)
    - Users are created through POST /auth/sync, the same path clients use
"""

from datetime import datetime, timedelta, timezone

import jwt
import pytest
from sqlalchemy import update
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from canvasdesk.config import get_settings
from canvasdesk.db.session import create_all, drop_all
from canvasdesk.infrastructure.database import get_db, DatabaseSessionManager
from canvasdesk.models.file import File
import canvasdesk.infrastructure.database as db_module
from canvasdesk.main import app


def make_token(subject: str, email: str | None = None, **overrides) -> str:
    """Sign a token the way the identity provider would."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": subject,
        "email": email if email is not None else f"{subject}@example.com",
        "iat": now,
        "exp": now + timedelta(hours=1),
        **overrides,
    }
    return jwt.encode(payload, get_settings().auth_jwt_secret, algorithm="HS256")


def auth_headers(subject: str, email: str | None = None) -> dict:
    return {"Authorization": f"Bearer {make_token(subject, email)}"}


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    await create_all(engine)
    yield engine
    await drop_all(engine)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


async def _sync(client, subject: str, display_name: str) -> dict:
    headers = auth_headers(subject)
    res = await client.post(
        "/api/v1/auth/sync", json={"displayName": display_name}, headers=headers,
    )
    assert res.status_code == 200, res.text
    return {"id": res.json()["user"]["id"], "headers": headers,
            "email": f"{subject}@example.com"}


@pytest.fixture
def headers_for():
    return auth_headers


@pytest.fixture
def token_for():
    return make_token


@pytest.fixture
async def alice(client):
    return await _sync(client, "alice-uid", "Alice")


@pytest.fixture
async def bob(client):
    return await _sync(client, "bob-uid", "Bob")


@pytest.fixture
async def carol(client):
    return await _sync(client, "carol-uid", "Carol")


@pytest.fixture
def create_file(client):
    async def _create(user: dict, name: str = "Board", file_type: str = "canvas") -> dict:
        res = await client.post(
            "/api/v1/files", json={"name": name, "file_type": file_type},
            headers=user["headers"],
        )
        assert res.status_code == 201, res.text
        return res.json()
    return _create


@pytest.fixture
def share_file(client):
    async def _share(owner: dict, file_id: str, member: dict) -> None:
        res = await client.post(
            f"/api/v1/files/{file_id}/collaborators",
            json={"email": member["email"]}, headers=owner["headers"],
        )
        assert res.status_code == 201, res.text
    return _share


@pytest.fixture
def create_asset(client):
    async def _create(user: dict, file_id: str, name: str = "sprite.png") -> dict:
        res = await client.post(
            "/api/v1/assets",
            json={
                "file_id": file_id,
                "name": name,
                "file_type": "image/png",
                "storage_url": f"https://cdn.example.com/{name}",
            },
            headers=user["headers"],
        )
        assert res.status_code == 201, res.text
        return res.json()
    return _create


@pytest.fixture
def set_file_fields(test_session_factory):
    """Overwrite file columns directly (timestamps for ordering tests)."""
    async def _set(file_id, **fields) -> None:
        from uuid import UUID
        async with test_session_factory() as session:
            await session.execute(
                update(File).where(File.id == UUID(str(file_id))).values(**fields),
            )
            await session.commit()
    return _set

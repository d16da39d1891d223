"""Request Dependencies — bearer credential → verified identity → internal user.

Invariants:
    - Missing/malformed Authorization header fails with 401 before any DB access
    - Every authenticated request re-resolves the user (no cache)
    - get_identity_resolver is the single override point for tests

Design Decisions:
    - Resolver cached per process: it only holds immutable key material
"""

from functools import lru_cache

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from canvasdesk.config import get_settings
from canvasdesk.core.repository_protocols import Identity, IdentityResolver
from canvasdesk.infrastructure.database import get_db
from canvasdesk.infrastructure.identity import JWTIdentityResolver, parse_bearer_header
from canvasdesk.models.user import User
from canvasdesk.services.user_directory import UserDirectory


@lru_cache
def get_identity_resolver() -> IdentityResolver:
    return JWTIdentityResolver.from_settings(get_settings())


async def get_identity(
    authorization: str | None = Header(None),
    resolver: IdentityResolver = Depends(get_identity_resolver),
) -> Identity:
    token = parse_bearer_header(authorization)
    return resolver.resolve(token)


async def get_current_user(
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
) -> User:
    return await UserDirectory(db).resolve(identity)

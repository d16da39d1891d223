"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - Policy functions accept anything shaped like FileLike (ORM row or test double)
    - The identity provider is a Protocol; the shell injects the implementation

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy (ADR: ExMA anti-pattern)
    - Identity is a frozen dataclass, not a dict: the core trusts exactly two fields
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID


class FileLike(Protocol):
    """Structural contract for File rows passed to access and lifecycle policy."""
    id: UUID
    owner_id: UUID
    deleted_at: datetime | None


@dataclass(frozen=True)
class Identity:
    """Verified subject yielded by the identity provider."""
    subject_id: str
    email: str


class IdentityResolver(Protocol):
    """Contract for bearer credential verification — implemented by shell.

    Raises UnauthenticatedError on any failure (malformed, expired, invalid).
    """
    def resolve(self, token: str) -> Identity: ...


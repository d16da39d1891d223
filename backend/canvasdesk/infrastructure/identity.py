"""Identity Resolver — verifies bearer JWTs issued by the external identity provider.

Invariants:
    - Any verification failure (malformed, expired, bad signature, wrong
      audience/issuer, missing subject) raises UnauthenticatedError — callers
      never see which check failed
    - The only trusted outputs are the subject (`sub`) and `email` claims

Design Decisions:
    - PyJWT with a configured key: HS256 shared secret by default, an RS256
      public key in PEM form works with the same setting
    - parse_bearer_header kept separate so the API dependency can reject a
      missing header before any crypto runs
"""

import logging

import jwt

from canvasdesk.config import Settings
from canvasdesk.core.errors import UnauthenticatedError
from canvasdesk.core.repository_protocols import Identity

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def parse_bearer_header(authorization: str | None) -> str:
    """Extract the token from an `Authorization: Bearer <token>` header."""
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise UnauthenticatedError("Missing or invalid authorization header")
    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        raise UnauthenticatedError("Missing or invalid authorization header")
    return token


class JWTIdentityResolver:
    """Verify a JWT and yield the subject identity."""

    def __init__(
        self,
        key: str,
        algorithms: list[str],
        audience: str | None = None,
        issuer: str | None = None,
        leeway_seconds: int = 0,
    ):
        self.key = key
        self.algorithms = algorithms
        self.audience = audience
        self.issuer = issuer
        self.leeway_seconds = leeway_seconds

    @classmethod
    def from_settings(cls, settings: Settings) -> "JWTIdentityResolver":
        return cls(
            key=settings.auth_jwt_secret,
            algorithms=settings.auth_jwt_algorithms,
            audience=settings.auth_jwt_audience,
            issuer=settings.auth_jwt_issuer,
            leeway_seconds=settings.auth_jwt_leeway_seconds,
        )

    def resolve(self, token: str) -> Identity:
        try:
            payload = jwt.decode(
                token,
                self.key,
                algorithms=self.algorithms,
                audience=self.audience,
                issuer=self.issuer,
                leeway=self.leeway_seconds,
                options={
                    "require": ["sub", "exp"],
                    "verify_aud": self.audience is not None,
                    "verify_iss": self.issuer is not None,
                },
            )
        except jwt.ExpiredSignatureError:
            logger.info("Token verification failed: token expired")
            raise UnauthenticatedError("Invalid or expired token")
        except jwt.InvalidTokenError as e:
            logger.info(f"Token verification failed: {type(e).__name__}")
            raise UnauthenticatedError("Invalid or expired token")

        subject = payload.get("sub")
        if not isinstance(subject, str) or not subject:
            raise UnauthenticatedError("Invalid or expired token")
        return Identity(subject_id=subject, email=payload.get("email") or "")

"""
Password Hashing and Session Tokens

Thin wrappers over bcrypt and PyJWT. Services depend on these two
collaborators only through hash/verify and sign/verify.

Usage:
    from tiffin.core.security import PasswordHasher, TokenSigner

    digest = await PasswordHasher.from_settings(settings).hash("secret")
    token = TokenSigner.from_settings(settings).sign(TokenClaims(id=1, email="a@b.c", role="user"))

Author: Mumma Tiffin Team
Version: 1.0.0
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import bcrypt
import jwt
from fastapi.concurrency import run_in_threadpool

from tiffin.core.config import Settings
from tiffin.core.exceptions import Unauthenticated

logger = logging.getLogger(__name__)

ROLE_USER = "user"
ROLE_ADMIN = "admin"


@dataclass(frozen=True)
class TokenClaims:
    """Identity carried by a session token."""
    id: int
    email: str
    role: str
    city: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


class PasswordHasher:
    """
    One-way bcrypt hashing of account secrets.

    hash and verify run in the threadpool, off the event loop.
    """

    def __init__(self, rounds: int = 10):
        self.rounds = rounds

    @classmethod
    def from_settings(cls, settings: Settings) -> "PasswordHasher":
        return cls(rounds=settings.bcrypt_rounds)

    async def hash(self, plaintext: str) -> str:
        return await run_in_threadpool(self._hash, plaintext)

    async def verify(self, plaintext: str, digest: Optional[str]) -> bool:
        if not digest:
            return False
        return await run_in_threadpool(self._check, plaintext, digest)

    def _hash(self, plaintext: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(plaintext.encode("utf-8"), salt).decode("utf-8")

    def _check(self, plaintext: str, digest: str) -> bool:
        try:
            return bcrypt.checkpw(plaintext.encode("utf-8"), digest.encode("utf-8"))
        except ValueError:
            # Stored value is not a bcrypt hash
            logger.warning("Rejecting login against malformed password hash")
            return False


class TokenSigner:
    """
    Issues and validates time-bounded HS256 session tokens.

    Tokens are stateless: validity is decided from the signature and the
    `exp` claim alone, so verification never touches the database.
    """

    def __init__(self, secret: str, algorithm: str = "HS256", ttl: timedelta = timedelta(days=7)):
        self.secret = secret
        self.algorithm = algorithm
        self.ttl = ttl

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenSigner":
        return cls(
            secret=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            ttl=timedelta(days=settings.token_ttl_days),
        )

    def sign(self, claims: TokenClaims) -> str:
        now = datetime.now(timezone.utc)
        payload: dict[str, Any] = {
            "sub": str(claims.id),
            "email": claims.email,
            "role": claims.role,
            "iat": now,
            "exp": now + self.ttl,
        }
        if claims.city is not None:
            payload["city"] = claims.city
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenClaims:
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError:
            raise Unauthenticated("token expired")
        except jwt.PyJWTError as e:
            logger.debug(f"Token rejected: {e}")
            raise Unauthenticated("invalid token")

        try:
            return TokenClaims(
                id=int(payload["sub"]),
                email=payload.get("email", ""),
                role=payload.get("role", ""),
                city=payload.get("city"),
            )
        except (TypeError, ValueError):
            raise Unauthenticated("invalid token")

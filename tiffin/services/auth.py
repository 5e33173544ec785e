"""
Authenticator

Registration, login and session-token verification for customers and
administrators, plus administrator management.

Login failures deliberately share one error message whether the email is
unknown or the password is wrong.

Author: Mumma Tiffin Team
Version: 1.0.0
"""

import logging
from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tiffin.core.exceptions import Conflict, InvalidCredentials, InvalidInput
from tiffin.core.security import (
    ROLE_ADMIN,
    ROLE_USER,
    PasswordHasher,
    TokenClaims,
    TokenSigner,
)
from tiffin.models import ALL_CITIES, Admin, User

logger = logging.getLogger(__name__)


class Authenticator:
    """
    Account operations backed by the users and admins tables.

    Example:
        >>> auth = Authenticator(db, hasher, signer)
        >>> user, token = await auth.register("asha@example.com", "s3cret", "Asha")
        >>> claims = auth.verify_token(token)
        >>> claims.role
        'user'
    """

    def __init__(
        self,
        db: AsyncSession,
        hasher: PasswordHasher,
        signer: TokenSigner,
    ):
        self.db = db
        self.hasher = hasher
        self.signer = signer

    # =========================================================================
    # CUSTOMERS
    # =========================================================================

    async def register(
        self,
        email: Optional[str],
        password: Optional[str],
        name: Optional[str] = None,
    ) -> tuple[User, str]:
        """Create a customer account and return it with a fresh token."""
        if not email or not password:
            raise InvalidInput("email & password required")

        existing = await self.db.execute(select(User.id).where(User.email == email))
        if existing.scalar_one_or_none() is not None:
            raise Conflict("user exists")

        user = User(email=email, password_hash=await self.hasher.hash(password), name=name or "")
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration of the same email
            await self.db.rollback()
            raise Conflict("user exists")

        logger.info(f"User #{user.id} registered ({user.email})")
        return user, self._issue(user.id, user.email, ROLE_USER)

    async def login(self, email: Optional[str], password: Optional[str]) -> tuple[User, str]:
        if not email or not password:
            raise InvalidInput("email & password required")

        result = await self.db.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()
        if user is None or not await self.hasher.verify(password, user.password_hash):
            logger.info("Rejected customer login")
            raise InvalidCredentials()

        return user, self._issue(user.id, user.email, ROLE_USER)

    # =========================================================================
    # ADMINISTRATORS
    # =========================================================================

    async def admin_login(self, email: Optional[str], password: Optional[str]) -> tuple[Admin, str]:
        """Authenticate an administrator; the token carries their city scope."""
        if not email or not password:
            raise InvalidCredentials()

        result = await self.db.execute(select(Admin).where(Admin.email == email))
        admin = result.scalar_one_or_none()
        if admin is None or not await self.hasher.verify(password, admin.password_hash):
            logger.info("Rejected admin login")
            raise InvalidCredentials()

        return admin, self._issue(admin.id, admin.email, ROLE_ADMIN, city=admin.city)

    async def create_admin(
        self,
        email: Optional[str],
        password: Optional[str],
        name: Optional[str] = None,
        city: Optional[str] = None,
    ) -> Admin:
        if not email or not password:
            raise InvalidInput("email & password required")

        existing = await self.db.execute(select(Admin.id).where(Admin.email == email))
        if existing.scalar_one_or_none() is not None:
            raise Conflict("admin exists")

        admin = Admin(
            email=email,
            password_hash=await self.hasher.hash(password),
            name=name or "",
            city=city or ALL_CITIES,
        )
        self.db.add(admin)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise Conflict("admin exists")

        logger.info(f"Admin #{admin.id} created ({admin.email}, city={admin.city})")
        return admin

    async def list_admins(self) -> Sequence[Admin]:
        result = await self.db.execute(select(Admin).order_by(Admin.id))
        return result.scalars().all()

    # =========================================================================
    # TOKENS
    # =========================================================================

    def verify_token(self, token: str) -> TokenClaims:
        """Decode a session token. Raises Unauthenticated when invalid or expired."""
        return self.signer.verify(token)

    def _issue(self, identity: int, email: str, role: str, city: Optional[str] = None) -> str:
        return self.signer.sign(TokenClaims(id=identity, email=email, role=role, city=city))

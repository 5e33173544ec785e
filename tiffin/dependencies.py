"""
FastAPI Dependencies

Builds the per-request services around a database session and resolves
the caller's identity from the bearer token.
"""

from typing import Optional

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from tiffin.core.config import Settings
from tiffin.core.exceptions import Unauthenticated
from tiffin.core.security import ROLE_ADMIN, ROLE_USER, TokenClaims
from tiffin.database import get_db
from tiffin.services.addresses import AddressBook
from tiffin.services.auth import Authenticator
from tiffin.services.menu import MenuCatalog
from tiffin.services.notifications import NotificationFeed
from tiffin.services.orders import OrderLedger
from tiffin.services.policy import require_role


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_authenticator(request: Request, db: AsyncSession = Depends(get_db)) -> Authenticator:
    return Authenticator(db, request.app.state.hasher, request.app.state.signer)


def get_menu_catalog(db: AsyncSession = Depends(get_db)) -> MenuCatalog:
    return MenuCatalog(db)


def get_notification_feed(db: AsyncSession = Depends(get_db)) -> NotificationFeed:
    return NotificationFeed(db)


def get_order_ledger(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> OrderLedger:
    return OrderLedger(db, strict_snapshot_visibility=settings.strict_snapshot_visibility)


def get_address_book(db: AsyncSession = Depends(get_db)) -> AddressBook:
    return AddressBook(db)


def get_claims(
    request: Request,
    authorization: Optional[str] = Header(None),
) -> TokenClaims:
    """Verify the `Authorization: Bearer <token>` header without touching the database."""
    if not authorization:
        raise Unauthenticated("missing authorization")
    parts = authorization.split(" ")
    if len(parts) != 2 or not parts[1]:
        raise Unauthenticated("invalid authorization")
    return request.app.state.signer.verify(parts[1])


def require_user(claims: TokenClaims = Depends(get_claims)) -> TokenClaims:
    return require_role(claims, ROLE_USER)


def require_admin(claims: TokenClaims = Depends(get_claims)) -> TokenClaims:
    return require_role(claims, ROLE_ADMIN)

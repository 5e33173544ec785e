"""
Shared fixtures: an in-memory database per test and services around it.
"""

import pytest
from fastapi.testclient import TestClient

from tiffin.core.config import Settings
from tiffin.core.security import ROLE_ADMIN, PasswordHasher, TokenClaims, TokenSigner
from tiffin.database import Database
from tiffin.services.auth import Authenticator
from tiffin.services.menu import MenuCatalog
from tiffin.services.notifications import NotificationFeed
from tiffin.services.orders import OrderLedger


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        database_url="sqlite+aiosqlite:///:memory:",
        jwt_secret="test-secret",
        bcrypt_rounds=4,
        seed_defaults=False,
    )


@pytest.fixture
async def database(settings):
    db = Database(settings.database_url)
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
async def session(database):
    async with database.session_maker() as s:
        yield s


@pytest.fixture
def hasher(settings) -> PasswordHasher:
    return PasswordHasher.from_settings(settings)


@pytest.fixture
def signer(settings) -> TokenSigner:
    return TokenSigner.from_settings(settings)


@pytest.fixture
def auth(session, hasher, signer) -> Authenticator:
    return Authenticator(session, hasher, signer)


@pytest.fixture
def catalog(session) -> MenuCatalog:
    return MenuCatalog(session)


@pytest.fixture
def feed(session) -> NotificationFeed:
    return NotificationFeed(session)


@pytest.fixture
def ledger(session) -> OrderLedger:
    return OrderLedger(session)


@pytest.fixture
async def customer(auth):
    user, _ = await auth.register("asha@example.com", "s3cret", "Asha")
    return user


@pytest.fixture
def admin_claims():
    """Build admin claims for a city scope without touching the database."""
    def build(city: str, admin_id: int = 1) -> TokenClaims:
        return TokenClaims(id=admin_id, email=f"{city.lower()}@mummatiffin.com", role=ROLE_ADMIN, city=city)
    return build


@pytest.fixture
def client(settings):
    from tiffin.main import create_app

    app_settings = settings.model_copy(update={"seed_defaults": True})
    with TestClient(create_app(app_settings)) as test_client:
        yield test_client

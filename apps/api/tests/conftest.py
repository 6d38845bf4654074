"""
Test configuration and fixtures.

Provides:
- In-memory SQLite database, rebuilt for every test
- Staff users and a bail client with known passwords
- HTTPX AsyncClients carrying a session cookie and the CSRF header
"""
import os
from dataclasses import dataclass
from typing import AsyncGenerator, Generator

# Must be set before the app (and its settings) are imported
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["TESTING"] = "1"
os.environ["ENV"] = "dev"
os.environ["INTERNAL_SECRET"] = "test-internal-secret"
os.environ["GEOLOCATION_API_KEY"] = ""
os.environ["SUPABASE_URL"] = ""
os.environ["SUPABASE_ANON_KEY"] = ""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.orm import Session

from securebond.core.deps import COOKIE_NAME, get_db
from securebond.core.performance import performance_monitor
from securebond.core.security import create_session_token, hash_password
from securebond.db.base import Base
from securebond.db.enums import PrincipalType, Role
from securebond.db.models import Client, User
from securebond.db.session import SessionLocal, engine
from securebond.main import app

ADMIN_PASSWORD = "AdminPass123!"
CLIENT_PASSWORD = "ClientPass1"
INTERNAL_SECRET = "test-internal-secret"
CSRF_HEADERS = {"X-Requested-With": "XMLHttpRequest"}


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """
    Fresh schema per test.

    The in-memory engine uses a single shared connection, so the app,
    the internal cron endpoints and the test all see the same data.
    """
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def reset_performance_monitor():
    performance_monitor.clear()
    yield
    performance_monitor.clear()


def _make_user(db: Session, role: Role, email: str, display_name: str) -> User:
    user = User(
        email=email,
        display_name=display_name,
        password_hash=hash_password(ADMIN_PASSWORD),
        role=role.value,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture(scope="function")
def admin_user(db: Session) -> User:
    return _make_user(db, Role.ADMIN, "admin@alohabailbonds.com", "Leilani Admin")


@pytest.fixture(scope="function")
def maintenance_user(db: Session) -> User:
    return _make_user(db, Role.MAINTENANCE, "ops@alohabailbonds.com", "Keoni Ops")


@pytest.fixture(scope="function")
def bail_client(db: Session) -> Client:
    """An active bail client with a known portal password."""
    client = Client(
        client_number="SB100001",
        password_hash=hash_password(CLIENT_PASSWORD),
        full_name="Kai Kahale",
        phone_number="+18085550100",
        email="kai.kahale@gmail.com",
    )
    db.add(client)
    db.commit()
    db.refresh(client)
    return client


# =============================================================================
# Auth Fixtures
# =============================================================================

@dataclass
class TestAuth:
    """Session cookie for one principal."""
    principal_id: object
    token: str
    cookie_name: str = COOKIE_NAME


def user_token(user: User) -> str:
    return create_session_token(
        principal_id=user.id,
        principal_type=PrincipalType.USER.value,
        role=user.role,
        token_version=user.token_version,
    )


def client_token(client: Client) -> str:
    return create_session_token(
        principal_id=client.id,
        principal_type=PrincipalType.CLIENT.value,
        role=Role.CLIENT.value,
        token_version=client.token_version,
    )


@pytest.fixture(scope="function")
def admin_auth(admin_user: User) -> TestAuth:
    return TestAuth(principal_id=admin_user.id, token=user_token(admin_user))


@pytest.fixture(scope="function")
def maintenance_auth(maintenance_user: User) -> TestAuth:
    return TestAuth(principal_id=maintenance_user.id, token=user_token(maintenance_user))


@pytest.fixture(scope="function")
def client_auth(bail_client: Client) -> TestAuth:
    return TestAuth(principal_id=bail_client.id, token=client_token(bail_client))


# =============================================================================
# HTTP Client Fixtures
# =============================================================================

def _http_client(auth: TestAuth | None = None, raise_app_exceptions: bool = True) -> AsyncClient:
    return AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=raise_app_exceptions),
        base_url="http://test",
        cookies={auth.cookie_name: auth.token} if auth else None,
        headers=CSRF_HEADERS if auth else None,
    )


@pytest.fixture(scope="function")
async def client(db: Session) -> AsyncGenerator[AsyncClient, None]:
    """Unauthenticated AsyncClient for public endpoints."""
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    async with _http_client() as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def admin_client(db: Session, admin_auth: TestAuth) -> AsyncGenerator[AsyncClient, None]:
    """AsyncClient signed in as an admin, with the CSRF header."""
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    async with _http_client(admin_auth) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def maintenance_client(db: Session, maintenance_auth: TestAuth) -> AsyncGenerator[AsyncClient, None]:
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    async with _http_client(maintenance_auth) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def portal_client(db: Session, client_auth: TestAuth) -> AsyncGenerator[AsyncClient, None]:
    """AsyncClient signed in as the bail client (client portal)."""
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    async with _http_client(client_auth) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def error_client(db: Session, admin_auth: TestAuth) -> AsyncGenerator[AsyncClient, None]:
    """Admin client that receives 500 responses instead of re-raised app errors."""
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    async with _http_client(admin_auth, raise_app_exceptions=False) as c:
        yield c
    app.dependency_overrides.clear()

"""Pytest configuration and fixtures."""

import os
import sys
from collections.abc import AsyncGenerator
from pathlib import Path
from uuid import uuid4

# Disable rate limiting and point the app at SQLite before anything imports settings
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from infrastructure.auth.jwt_provider import JWTCredentialVerifier
from infrastructure.auth.provider import Identity
from infrastructure.database.models import Base, UserProfileModel

# Test database URL (SQLite in memory)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_SECRET_KEY = "test-secret-key"

# Fixed IDs for consistency
ADMIN_ID = uuid4()
USER_ID = uuid4()
OTHER_USER_ID = uuid4()


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh in-memory database per test.

    StaticPool keeps every session on the one connection, so all of them see
    the same in-memory database.
    """
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session factory."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
def admin_identity() -> Identity:
    return Identity(id=ADMIN_ID, email="admin@example.com", is_admin=True)


@pytest.fixture
def user_identity() -> Identity:
    return Identity(id=USER_ID, email="traveler@example.com")


@pytest.fixture
def other_identity() -> Identity:
    return Identity(id=OTHER_USER_ID, email="friend@example.com")


@pytest.fixture
async def profiles(
    session_factory: async_sessionmaker[AsyncSession],
    admin_identity: Identity,
    user_identity: Identity,
    other_identity: Identity,
) -> None:
    """Insert a profile row for each test identity."""
    async with session_factory() as session:
        session.add_all(
            [
                UserProfileModel(
                    id=admin_identity.id,
                    email=admin_identity.email,
                    display_name="Admin",
                    is_admin=True,
                ),
                UserProfileModel(
                    id=user_identity.id,
                    email=user_identity.email,
                    display_name="Traveler",
                ),
                UserProfileModel(
                    id=other_identity.id,
                    email=other_identity.email,
                    display_name=None,
                ),
            ]
        )
        await session.commit()


@pytest.fixture
def verifier() -> JWTCredentialVerifier:
    """Create credential verifier for testing."""
    return JWTCredentialVerifier(
        secret_key=TEST_SECRET_KEY,
        algorithm="HS256",
        expire_minutes=30,
    )


def _bearer(verifier: JWTCredentialVerifier, identity: Identity) -> dict[str, str]:
    return {"Authorization": f"Bearer {verifier.create_token(identity)}"}


@pytest.fixture
def admin_headers(verifier: JWTCredentialVerifier, admin_identity: Identity) -> dict[str, str]:
    return _bearer(verifier, admin_identity)


@pytest.fixture
def user_headers(verifier: JWTCredentialVerifier, user_identity: Identity) -> dict[str, str]:
    return _bearer(verifier, user_identity)


@pytest.fixture
def other_headers(verifier: JWTCredentialVerifier, other_identity: Identity) -> dict[str, str]:
    return _bearer(verifier, other_identity)


@pytest.fixture
def app(
    session_factory: async_sessionmaker[AsyncSession],
    verifier: JWTCredentialVerifier,
    profiles: None,
) -> FastAPI:
    """
    Create the application wired to the test database.

    Real JWT verification runs against the test secret; only the verifier
    instance and the services' UoW factory are swapped.
    """
    from api.dependencies.auth import get_credential_verifier
    from api.dependencies.services import get_access_grant_service, get_invitation_service
    from domain.services.access_grant_service import AccessGrantService
    from domain.services.invitation_service import InvitationService
    from infrastructure.database.session import get_async_session
    from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
    from main import create_app

    app = create_app()

    def test_uow_factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    app.dependency_overrides[get_credential_verifier] = lambda: verifier
    app.dependency_overrides[get_access_grant_service] = lambda: AccessGrantService(
        test_uow_factory
    )
    app.dependency_overrides[get_invitation_service] = lambda: InvitationService(
        test_uow_factory
    )

    async def test_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_async_session] = test_session
    return app


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client. Send the *_headers fixtures to authenticate."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()

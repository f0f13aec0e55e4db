"""
Pytest fixtures for testing.

Provides:
- Async database session on an in-memory SQLite database
- Test client with the database dependency overridden
- Factory fixtures for users, seeded roles and auth headers
"""

from typing import AsyncGenerator
from uuid import uuid4

import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from taskboard.main import app
from taskboard.models import Base, Role, User
from taskboard.models.user import LegacyRole
from taskboard.api.dependencies.database import get_db
from taskboard.core.auth import Principal
from taskboard.rbac import RBACService, seed_catalog
from taskboard.services.auth import create_access_token, hash_password


# Test database URL (SQLite in-memory for speed)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Database session shared by the test body and the app."""
    session_factory = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture(scope="function")
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    Test client with database session override.
    """

    async def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def catalog(db: AsyncSession) -> dict[str, Role]:
    """Seeded roles, permissions and grants, keyed by role name."""
    await seed_catalog(db)
    await db.commit()
    roles = await RBACService(db).list_roles()
    return {role.name: role for role in roles}


# ============ Factory Fixtures ============


class UserFactory:
    """Factory for creating test users."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(
        self,
        email: str | None = None,
        password: str = "testpassword123",
        name: str = "Test User",
        role: str = LegacyRole.USER,
        rbac_roles: list[Role] | None = None,
    ) -> User:
        """Create a user, optionally with RBAC role assignments."""
        email = email or f"test-{uuid4().hex[:8]}@example.com"

        user = User(
            email=email,
            password_hash=hash_password(password),
            name=name,
            role=role,
        )
        self.db.add(user)
        await self.db.flush()

        service = RBACService(self.db)
        for rbac_role in rbac_roles or []:
            await service.assign_role_to_user(user.id, rbac_role.id)

        await self.db.commit()
        return user


@pytest_asyncio.fixture
async def user_factory(db: AsyncSession) -> UserFactory:
    """Fixture that provides UserFactory."""
    return UserFactory(db)


@pytest_asyncio.fixture
async def test_user(user_factory: UserFactory, catalog) -> User:
    """Standard user: legacy "user" plus RBAC "user"."""
    return await user_factory.create(
        email="user@example.com",
        rbac_roles=[catalog["user"]],
    )


@pytest_asyncio.fixture
async def admin_user(user_factory: UserFactory, catalog) -> User:
    """Admin user: legacy "admin" plus RBAC "admin"."""
    return await user_factory.create(
        email="admin@example.com",
        name="Admin User",
        role=LegacyRole.ADMIN,
        rbac_roles=[catalog["admin"]],
    )


# ============ Auth Helpers ============


def get_auth_headers(user: User, roles: str | list[str] | None = None) -> dict[str, str]:
    """Auth headers for any user; roles defaults to the user's legacy role."""
    token = create_access_token(user.id, roles if roles is not None else user.role)
    return {"Authorization": f"Bearer {token}"}


def principal_for(
    user: User,
    rbac_roles: tuple[str, ...] = (),
    roles: tuple[str, ...] | None = None,
) -> Principal:
    return Principal(
        user_id=user.id,
        roles=roles if roles is not None else (user.role,),
        rbac_roles=rbac_roles,
    )


@pytest_asyncio.fixture
async def auth_headers(test_user: User) -> dict[str, str]:
    """Get auth headers for test user."""
    return get_auth_headers(test_user)


@pytest_asyncio.fixture
async def admin_auth_headers(admin_user: User) -> dict[str, str]:
    """Get auth headers for admin user."""
    return get_auth_headers(admin_user)

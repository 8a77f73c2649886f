# tests/conftest.py
import os

# Set up test environment variables BEFORE any other imports
os.environ.setdefault("TESTING", "true")
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")
os.environ.setdefault("TEST_DATABASE_URL", os.environ["DATABASE_URL"])
os.environ.setdefault("SECRET_KEY", "test-secret-key-with-at-least-32-bytes!")
os.environ.setdefault("LOG_FORMAT", "simple")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.core.security import create_access_token
from app.database import Database, get_db
from app.main import app
from app.schemas.user import Caller
from tests.factories import create_project, create_task, create_user


@pytest_asyncio.fixture
async def database(tmp_path):
    """A fresh SQLite database per test."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await db.create_all()
    yield db
    await db.drop_all()
    await db.dispose()


@pytest_asyncio.fixture
async def test_db(database):
    """Create a test database session."""
    async with database.session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


@pytest_asyncio.fixture
async def client(test_db):
    """Create a test client with database dependency override and no credentials."""
    app.dependency_overrides[get_db] = lambda: test_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def client_for(client):
    """Return a helper that sets the bearer token of ``client`` to the given user."""

    def _client_for(user) -> AsyncClient:
        client.headers["Authorization"] = f"Bearer {create_access_token(user.id, user.role)}"
        return client

    return _client_for


def as_caller(user) -> Caller:
    return Caller(id=user.id, role=user.role)


# User fixtures
@pytest_asyncio.fixture
async def admin_user(test_db):
    return await create_user(test_db, name="Ada Admin", role="admin")


@pytest_asyncio.fixture
async def manager_user(test_db):
    return await create_user(test_db, name="Max Manager", role="manager")


@pytest_asyncio.fixture
async def other_manager(test_db):
    return await create_user(test_db, name="Olive Other", role="manager")


@pytest_asyncio.fixture
async def developer_user(test_db):
    return await create_user(test_db, name="Dev Eloper", role="developer")


@pytest_asyncio.fixture
async def outsider_user(test_db):
    return await create_user(test_db, name="Out Sider", role="developer")


# Caller fixtures
@pytest.fixture
def admin(admin_user) -> Caller:
    return as_caller(admin_user)


@pytest.fixture
def manager(manager_user) -> Caller:
    return as_caller(manager_user)


@pytest.fixture
def developer(developer_user) -> Caller:
    return as_caller(developer_user)


@pytest.fixture
def outsider(outsider_user) -> Caller:
    return as_caller(outsider_user)


# Project fixtures
@pytest_asyncio.fixture
async def test_project(test_db, manager_user, developer_user):
    """A project managed by ``manager_user`` with ``developer_user`` on the team."""
    return await create_project(
        test_db,
        manager=manager_user,
        name="Apollo",
        description="Launch tracking dashboard",
        members=[(developer_user, "developer")],
    )


@pytest_asyncio.fixture
async def test_tasks(test_db, test_project, manager_user, developer_user):
    """Two live tasks and one already inactive task on ``test_project``."""
    first = await create_task(
        test_db, project=test_project, created_by=manager_user, assigned_to=developer_user
    )
    second = await create_task(test_db, project=test_project, created_by=manager_user)
    dead = await create_task(
        test_db, project=test_project, created_by=manager_user, is_active=False
    )
    return [first, second, dead]

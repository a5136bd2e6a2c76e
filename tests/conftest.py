"""
Shared fixtures: a throwaway SQLite database per test and services bound to it.
"""
from datetime import datetime, timezone
import pytest
from databases import Database
from taskwatch.modules.database import init_db
from taskwatch.modules.users.api.context import UserAdminContext
from taskwatch.modules.users.domain.user import User
from taskwatch.modules.users.repositories.user_repository import UserRepository
from taskwatch.modules.users.services.password_service import PasswordHasher
from taskwatch.modules.users.services.user_service import UserService


@pytest.fixture
async def db(tmp_path):
    """Connected database with the users table created."""
    database = Database(f"sqlite:///{tmp_path / 'taskwatch.db'}")
    await database.connect()
    await init_db(database)
    yield database
    await database.disconnect()


@pytest.fixture
def hasher():
    """Low-cost hasher so tests stay fast."""
    return PasswordHasher(n=2 ** 10)


@pytest.fixture
def repository(db):
    return UserRepository(db)


@pytest.fixture
def user_service(repository, hasher):
    return UserService(repository=repository, hasher=hasher)


@pytest.fixture
def admin_user():
    now = datetime.now(timezone.utc)
    return User(
        key="admin-key",
        first_name="Ada",
        last_name="Admin",
        email="ada@example.com",
        role="adm",
        created_at=now,
        updated_at=now,
    )


@pytest.fixture
def regular_user(admin_user):
    return User(
        key="regular-key",
        first_name="Rex",
        last_name="Regular",
        email="rex@example.com",
        role="usr",
        created_at=admin_user.created_at,
        updated_at=admin_user.updated_at,
    )


@pytest.fixture
def admin_context(user_service, admin_user):
    return UserAdminContext(user_service=user_service, current_user=admin_user)


@pytest.fixture
def anonymous_context(user_service):
    return UserAdminContext(user_service=user_service)


@pytest.fixture
def create_user(user_service):
    """Factory that stores a valid user and returns it."""
    async def _create(first_name="Ann", last_name="Lee", email=None, role="usr"):
        return await user_service.upsert_user({
            "first_name": first_name,
            "last_name": last_name,
            "email": email or f"{first_name.lower()}.{last_name.lower()}@example.com",
            "role": role,
        })
    return _create

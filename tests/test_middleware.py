"""
Tests for caller resolution and the admin check
"""
import pytest
from taskwatch.modules.users.api.context import UserAdminContext
from taskwatch.modules.users.auth.middleware import get_optional_user
from taskwatch.modules.users.auth.permissions import is_admin, require_admin
from taskwatch.modules.users.domain.errors import AuthorizationError


@pytest.mark.asyncio
async def test_no_header_is_anonymous(user_service):
    assert await get_optional_user(user_key=None, user_service=user_service) is None


@pytest.mark.asyncio
async def test_unknown_key_is_anonymous(user_service):
    assert await get_optional_user(user_key="ghost", user_service=user_service) is None


@pytest.mark.asyncio
async def test_known_key_resolves_user(user_service, create_user):
    user = await create_user(role="adm")

    caller = await get_optional_user(user_key=user.key, user_service=user_service)

    assert caller.key == user.key
    assert is_admin(caller)


def test_require_admin(admin_user, regular_user):
    assert require_admin(admin_user) is admin_user

    with pytest.raises(AuthorizationError, match="Admin access required"):
        require_admin(regular_user)
    with pytest.raises(AuthorizationError):
        require_admin(None)


def test_context_require_admin(user_service, admin_user, regular_user):
    assert UserAdminContext(user_service, admin_user).require_admin() is admin_user

    with pytest.raises(AuthorizationError):
        UserAdminContext(user_service, regular_user).require_admin()

"""
Permission Utilities

Admin capability check used by the administrative resolvers.
"""
import logging
from typing import Optional
from taskwatch.modules.config import ADMIN_ROLE
from taskwatch.modules.users.domain.errors import AuthorizationError
from taskwatch.modules.users.domain.user import User

logger = logging.getLogger("taskwatch.users.permissions")


def is_admin(user: Optional[User], admin_role: str = ADMIN_ROLE) -> bool:
    return user is not None and user.role == admin_role


def require_admin(user: Optional[User], admin_role: str = ADMIN_ROLE) -> User:
    """
    Return `user` if it holds the admin role.

    Raises:
        AuthorizationError: If there is no caller or the caller is not an admin
    """
    if not is_admin(user, admin_role):
        logger.warning(f"[require_admin] Denied for user={user.key if user else None}")
        raise AuthorizationError()
    return user

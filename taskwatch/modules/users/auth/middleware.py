"""
Caller Resolution

FastAPI dependencies that identify the user behind a request.
"""
import logging
from typing import Optional
from fastapi import Header, Depends
from taskwatch.modules.users.domain.user import User
from taskwatch.modules.users.services.user_service import UserService

logger = logging.getLogger("taskwatch.users.auth")

_user_service = UserService()


def get_user_service() -> UserService:
    return _user_service


async def get_user_key_from_header(
    x_user_key: Optional[str] = Header(None, alias="X-User-Key")
) -> Optional[str]:
    """
    Extract the caller's user key from the X-User-Key header.

    Note: a deployment behind a real identity provider would derive this
    from a verified token instead.
    """
    return x_user_key


async def get_optional_user(
    user_key: Optional[str] = Depends(get_user_key_from_header),
    user_service: UserService = Depends(get_user_service)
) -> Optional[User]:
    """
    FastAPI dependency to get the calling user if known, None otherwise.

    Does not raise when the header is missing or names no user.
    """
    if not user_key:
        return None

    user = await user_service.get_user(user_key)
    if user is None:
        logger.warning(f"Unknown caller user_key={user_key}")
    return user

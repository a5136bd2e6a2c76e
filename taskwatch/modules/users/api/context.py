"""
GraphQL Request Context

Carries the caller and the collaborators resolvers depend on.
"""
from typing import Optional
from strawberry.fastapi import BaseContext
from taskwatch.modules.users.auth.permissions import require_admin
from taskwatch.modules.users.domain.user import User
from taskwatch.modules.users.services.user_service import UserService


class UserAdminContext(BaseContext):
    """Per-request context for the user administration schema."""

    def __init__(self, user_service: UserService, current_user: Optional[User] = None):
        super().__init__()
        self.user_service = user_service
        self.current_user = current_user

    def require_admin(self) -> User:
        """Abort the operation unless the caller is an administrator."""
        return require_admin(self.current_user)

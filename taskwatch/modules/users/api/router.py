"""
User Administration GraphQL Endpoint
"""
from typing import Optional
from fastapi import Depends
from strawberry.fastapi import GraphQLRouter
from taskwatch.modules.users.api.context import UserAdminContext
from taskwatch.modules.users.api.schema import schema
from taskwatch.modules.users.auth.middleware import get_optional_user, get_user_service
from taskwatch.modules.users.domain.user import User
from taskwatch.modules.users.services.user_service import UserService


async def get_context(
    current_user: Optional[User] = Depends(get_optional_user),
    user_service: UserService = Depends(get_user_service)
) -> UserAdminContext:
    return UserAdminContext(user_service=user_service, current_user=current_user)


router = GraphQLRouter(schema, context_getter=get_context)

"""
User Administration GraphQL Schema

Types, queries and mutations for managing users. Field names are exposed in
camelCase (firstName, pageCount, userRole, ...).
"""
import logging
from datetime import datetime
from typing import List, Optional
import strawberry
from graphql import GraphQLError
from strawberry.extensions import MaskErrors
from strawberry.types import Info
from taskwatch.modules.users.domain.errors import UserFacingError
from taskwatch.modules.users.domain import user as domain
from taskwatch.modules.users.api.context import UserAdminContext

logger = logging.getLogger("taskwatch.users.api")


@strawberry.type
class User:
    key: strawberry.ID
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @strawberry.field
    def full_name(self) -> str:
        return domain.full_name(self.first_name, self.last_name)

    @classmethod
    def from_domain(cls, user: domain.User) -> "User":
        return cls(
            key=strawberry.ID(user.key),
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            role=user.role,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )

    @classmethod
    def from_summary(cls, summary: domain.UserSummary) -> "User":
        return cls(
            key=strawberry.ID(summary.key),
            first_name=summary.first_name,
            last_name=summary.last_name,
            email=summary.email,
        )


@strawberry.type
class UserConnection:
    count: int
    page_count: int
    items: List[User]


@strawberry.input
class UserInput:
    key: Optional[strawberry.ID] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None


@strawberry.input
class UserPasswordInput:
    key: strawberry.ID
    password: Optional[str] = None


def _optional_user(user: Optional[domain.User]) -> Optional[User]:
    return User.from_domain(user) if user else None


@strawberry.type
class Query:
    @strawberry.field
    async def all_users(
        self,
        info: Info,
        page: int = 1,
        page_size: int = 10,
        search: str = "",
        user_role: Optional[str] = None
    ) -> UserConnection:
        ctx: UserAdminContext = info.context
        ctx.require_admin()

        connection = await ctx.user_service.list_users(
            page=page,
            page_size=page_size,
            search=search,
            user_role=user_role
        )
        return UserConnection(
            count=connection.count,
            page_count=connection.page_count,
            items=[User.from_domain(item) for item in connection.items]
        )

    @strawberry.field
    async def get_user(self, info: Info, key: strawberry.ID) -> Optional[User]:
        ctx: UserAdminContext = info.context
        ctx.require_admin()
        return _optional_user(await ctx.user_service.get_user(key))

    @strawberry.field
    async def users_autocomplete(
        self,
        info: Info,
        user_keys: Optional[List[strawberry.ID]] = None,
        search: str = ""
    ) -> List[User]:
        # Public: backs typeahead inputs
        ctx: UserAdminContext = info.context
        summaries = await ctx.user_service.autocomplete(user_keys=user_keys, search=search)
        return [User.from_summary(summary) for summary in summaries]


@strawberry.type
class Mutation:
    @strawberry.mutation
    async def upsert_user(self, info: Info, user: UserInput) -> User:
        ctx: UserAdminContext = info.context
        ctx.require_admin()

        saved = await ctx.user_service.upsert_user({
            "key": user.key,
            "first_name": user.first_name,
            "last_name": user.last_name,
            "email": user.email,
            "role": user.role,
        })
        return User.from_domain(saved)

    @strawberry.mutation
    async def destroy_user(self, info: Info, key: strawberry.ID) -> Optional[User]:
        ctx: UserAdminContext = info.context
        ctx.require_admin()
        return _optional_user(await ctx.user_service.destroy_user(key))

    @strawberry.mutation
    async def reset_password(
        self,
        info: Info,
        user_key: str,
        old_password: str,
        new_password: str,
        confirm_password: str
    ) -> Optional[User]:
        ctx: UserAdminContext = info.context
        user = await ctx.user_service.reset_password(
            user_key=user_key,
            old_password=old_password,
            new_password=new_password,
            confirm_password=confirm_password
        )
        return _optional_user(user)

    @strawberry.mutation
    async def set_user_password(self, info: Info, user: UserPasswordInput) -> User:
        ctx: UserAdminContext = info.context
        ctx.require_admin()
        return User.from_domain(await ctx.user_service.set_password(user.key, user.password))


def is_internal_error(error: GraphQLError) -> bool:
    """Errors not meant for the caller are replaced with a generic message."""
    original = error.original_error
    return original is not None and not isinstance(original, UserFacingError)


schema = strawberry.Schema(
    query=Query,
    mutation=Mutation,
    extensions=[lambda: MaskErrors(should_mask_error=is_internal_error)]
)

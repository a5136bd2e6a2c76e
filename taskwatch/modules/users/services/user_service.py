"""
User Service

Business logic for user administration: validation, pagination and
password changes.
"""
import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any, Iterable
from pydantic import BaseModel, EmailStr, Field, ValidationError as PydanticValidationError
from taskwatch.modules.config import AUTOCOMPLETE_LIMIT, PASSWORD_MIN_LENGTH
from taskwatch.modules.users.domain.errors import StorageError, ValidationError
from taskwatch.modules.users.domain.user import User, UserConnection, UserSummary
from taskwatch.modules.users.repositories.user_repository import UserRepository
from taskwatch.modules.users.services.password_service import PasswordHasher

logger = logging.getLogger("taskwatch.users.service")

FIELD_LABELS = {
    "first_name": "First name",
    "last_name": "Last name",
    "email": "Email",
    "role": "Role",
}


class UserInput(BaseModel):
    """Editable user fields, validated in declaration order."""
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: EmailStr
    role: str = Field(min_length=3, max_length=3)


def describe_violation(error: Dict[str, Any]) -> str:
    """Turn one pydantic error into a sentence about the offending field."""
    field = str(error["loc"][0]) if error.get("loc") else ""
    label = FIELD_LABELS.get(field, field)
    kind = error.get("type", "")

    if kind == "missing" or error.get("input") is None:
        return f"{label} is required"
    if field == "role" and kind in ("string_too_short", "string_too_long"):
        return "Role must be exactly 3 characters"
    if kind == "string_too_short":
        return f"{label} can't be blank"
    if kind == "string_type":
        return f"{label} must be a string"
    if field == "email":
        return "Email is not a valid email"
    return f"{label} {error.get('msg', 'is invalid')}"


def validate_user_input(data: Dict[str, Any]) -> UserInput:
    """Validate editable fields, raising the first violation found."""
    try:
        return UserInput.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(describe_violation(e.errors()[0]))


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class UserService:
    """Service for user business logic."""

    def __init__(
        self,
        repository: Optional[UserRepository] = None,
        hasher: Optional[PasswordHasher] = None,
        password_min_length: int = PASSWORD_MIN_LENGTH,
        autocomplete_limit: int = AUTOCOMPLETE_LIMIT
    ):
        self.repository = repository or UserRepository()
        self.hasher = hasher or PasswordHasher()
        self.password_min_length = password_min_length
        self.autocomplete_limit = autocomplete_limit

    async def list_users(
        self,
        page: int = 1,
        page_size: int = 10,
        search: str = "",
        user_role: Optional[str] = None
    ) -> UserConnection:
        """Return one page of users matching `search`, sorted by name."""
        logger.debug(f"[UserService.list_users] page={page}, page_size={page_size}, search={search!r}, user_role={user_role}")

        if page < 1:
            raise ValidationError("Page must be at least 1")
        if page_size < 1:
            raise ValidationError("Page size must be at least 1")

        offset = page_size * (page - 1)
        try:
            rows, count = await self.repository.search(
                search=search,
                role_filter=user_role,
                limit=page_size,
                offset=offset
            )
        except Exception as e:
            logger.error(f"[UserService.list_users] ERROR: {e}", exc_info=True)
            raise StorageError(f"Failed to list users: {e}") from e

        return UserConnection(
            count=count,
            page_size=page_size,
            items=[User.from_dict(row) for row in rows]
        )

    async def get_user(self, user_key: str) -> Optional[User]:
        """Get user by key; None when it does not exist."""
        logger.debug(f"[UserService.get_user] user_key={user_key}")

        try:
            user_data = await self.repository.get_by_key(user_key)
        except Exception as e:
            logger.error(f"[UserService.get_user] ERROR: {e}", exc_info=True)
            raise StorageError(f"Failed to load user: {e}") from e

        if not user_data:
            return None
        return User.from_dict(user_data)

    async def autocomplete(
        self,
        user_keys: Optional[Iterable[str]] = None,
        search: str = ""
    ) -> List[UserSummary]:
        """Recent matches for typeahead, always including `user_keys` that exist."""
        logger.debug(f"[UserService.autocomplete] user_keys={user_keys}, search={search!r}")

        try:
            rows = await self.repository.autocomplete(
                search=search or "",
                user_keys=user_keys or [],
                limit=self.autocomplete_limit
            )
        except Exception as e:
            logger.error(f"[UserService.autocomplete] ERROR: {e}", exc_info=True)
            raise StorageError(f"Failed to search users: {e}") from e

        return [UserSummary.from_dict(row) for row in rows]

    async def upsert_user(self, data: Dict[str, Any]) -> User:
        """
        Create a user when `data` has no key, otherwise update that user.

        Only the editable fields are written on update; creation time and
        password hash are left as they are.
        """
        user_key = data.get("key")
        logger.debug(f"[UserService.upsert_user] user_key={user_key}")

        fields = validate_user_input({name: data.get(name) for name in FIELD_LABELS})
        record = fields.model_dump()
        # EmailStr normalizes the address; keep it as the caller wrote it
        record["email"] = data.get("email")
        record["updated_at"] = _now()

        if user_key is None:
            user_key = uuid.uuid4().hex
            record["user_key"] = user_key
            record["created_at"] = record["updated_at"]
            try:
                await self.repository.create(record)
            except Exception as e:
                logger.error(f"[UserService.upsert_user] ERROR: {e}", exc_info=True)
                raise StorageError(f"Failed to create user: {e}") from e
            logger.info(f"Created user {user_key}")
        else:
            if await self.get_user(user_key) is None:
                raise ValidationError("User not found")
            try:
                await self.repository.update(user_key, record)
            except Exception as e:
                logger.error(f"[UserService.upsert_user] ERROR: {e}", exc_info=True)
                raise StorageError(f"Failed to update user: {e}") from e
            logger.info(f"Updated user {user_key}")

        return await self.get_user(user_key)

    async def destroy_user(self, user_key: str) -> Optional[User]:
        """Delete a user. Unknown keys are not an error."""
        logger.debug(f"[UserService.destroy_user] user_key={user_key}")

        user = await self.get_user(user_key)
        try:
            await self.repository.delete(user_key)
        except Exception as e:
            logger.error(f"[UserService.destroy_user] ERROR: {e}", exc_info=True)
            raise StorageError(f"Failed to delete user: {e}") from e

        if user:
            logger.info(f"Deleted user {user_key}")
        return user

    def check_new_password(self, new_password: Optional[str]) -> None:
        if not new_password:
            raise ValidationError("New password is required")
        if len(new_password) < self.password_min_length:
            raise ValidationError(f"Password must be at least {self.password_min_length} characters")

    async def reset_password(
        self,
        user_key: str,
        old_password: str,
        new_password: str,
        confirm_password: str
    ) -> User:
        """Self-service password change gated on the old password."""
        logger.debug(f"[UserService.reset_password] user_key={user_key}")

        user = await self.get_user(user_key)
        if user is None:
            raise ValidationError("User not found")

        if not await asyncio.to_thread(self.hasher.check, old_password, user.password_hash):
            raise ValidationError("Old password is incorrect")

        self.check_new_password(new_password)

        if new_password != confirm_password:
            raise ValidationError("New password does not match confirm password")

        return await self._store_password(user_key, new_password)

    async def set_password(self, user_key: str, password: str) -> User:
        """Give a user a new password without knowing the old one."""
        logger.debug(f"[UserService.set_password] user_key={user_key}")

        if await self.get_user(user_key) is None:
            raise ValidationError("User not found")

        self.check_new_password(password)
        return await self._store_password(user_key, password)

    async def _store_password(self, user_key: str, password: str) -> User:
        password_hash = await asyncio.to_thread(self.hasher.hash, password)
        try:
            await self.repository.update(user_key, {
                "password_hash": password_hash,
                "updated_at": _now()
            })
        except Exception as e:
            logger.error(f"[UserService._store_password] ERROR: {e}", exc_info=True)
            raise StorageError(f"Failed to store password: {e}") from e

        logger.info(f"Password changed for user {user_key}")
        return await self.get_user(user_key)

"""
User Domain Model

Pure data models for user records and the shapes derived from them.
"""
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List, Optional


def full_name(first_name: Optional[str], last_name: Optional[str]) -> str:
    """Join first and last name with a space, skipping empty parts."""
    return " ".join(part for part in (first_name, last_name) if part)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Timestamps are stored as ISO-8601 strings; drivers may also hand back datetimes."""
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


@dataclass
class User:
    """User domain model."""
    key: str
    first_name: str
    last_name: str
    email: str
    role: str
    created_at: datetime
    updated_at: datetime
    password_hash: Optional[str] = None

    @property
    def full_name(self) -> str:
        return full_name(self.first_name, self.last_name)

    @classmethod
    def from_dict(cls, data: dict) -> "User":
        """Create User from a database row."""
        return cls(
            key=data["user_key"],
            first_name=data["first_name"],
            last_name=data["last_name"],
            email=data["email"],
            role=data["role"],
            password_hash=data.get("password_hash"),
            created_at=parse_timestamp(data.get("created_at")),
            updated_at=parse_timestamp(data.get("updated_at")),
        )


@dataclass
class UserSummary:
    """Public projection used for typeahead lookups."""
    key: str
    first_name: str
    last_name: str
    email: str

    @property
    def full_name(self) -> str:
        return full_name(self.first_name, self.last_name)

    @classmethod
    def from_dict(cls, data: dict) -> "UserSummary":
        return cls(
            key=data["user_key"],
            first_name=data["first_name"],
            last_name=data["last_name"],
            email=data["email"],
        )


@dataclass
class UserConnection:
    """One page of users plus totals for the whole filtered set."""
    count: int
    page_size: int
    items: List[User] = field(default_factory=list)

    @property
    def page_count(self) -> int:
        return math.ceil(self.count / self.page_size)

"""
User Repository

Handles all database operations for the users table.
"""
import logging
from typing import Optional, List, Dict, Any, Iterable, Tuple
from databases import Database
from taskwatch.modules.database import database

logger = logging.getLogger("taskwatch.users.repository")

USER_COLUMNS = "user_key, first_name, last_name, email, role, password_hash, created_at, updated_at"
SUMMARY_COLUMNS = "user_key, first_name, last_name, email"

SEARCHABLE_FIELDS = ("first_name", "last_name", "email")

# search_text holds the case-folded searchable fields, one per line, so
# matching does not depend on the database folding non-ASCII letters
SEARCH_FILTER = "search_text LIKE :search ESCAPE '\\'"


def build_search_text(first_name: Optional[str], last_name: Optional[str], email: Optional[str]) -> str:
    return "\n".join((value or "").casefold() for value in (first_name, last_name, email))


def like_pattern(search: Optional[str]) -> str:
    """Build a case-folded LIKE pattern that matches `search` as a literal substring."""
    text = (search or "").casefold()
    text = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{text}%"


class UserRepository:
    """Repository for user data access."""

    def __init__(self, db: Optional[Database] = None):
        self.db = db or database

    async def create(self, record: Dict[str, Any]) -> str:
        """Insert a new user row and return its key."""
        query = f"""
            INSERT INTO users ({USER_COLUMNS}, search_text)
            VALUES (:user_key, :first_name, :last_name, :email, :role,
                    :password_hash, :created_at, :updated_at, :search_text)
        """
        await self.db.execute(query, {
            "user_key": record["user_key"],
            "first_name": record["first_name"],
            "last_name": record["last_name"],
            "email": record["email"],
            "role": record["role"],
            "password_hash": record.get("password_hash"),
            "created_at": record["created_at"],
            "updated_at": record["updated_at"],
            "search_text": build_search_text(record["first_name"], record["last_name"], record["email"]),
        })
        return record["user_key"]

    async def get_by_key(self, user_key: str) -> Optional[Dict[str, Any]]:
        """Get user by key."""
        query = f"SELECT {USER_COLUMNS} FROM users WHERE user_key = :user_key"
        row = await self.db.fetch_one(query, {"user_key": user_key})
        if not row:
            return None
        return dict(row._mapping)

    async def update(self, user_key: str, updates: Dict[str, Any]) -> bool:
        """Update user fields, refreshing search_text when a searchable field changes."""
        allowed_fields = ["first_name", "last_name", "email", "role", "password_hash", "updated_at", "search_text"]
        set_clauses = []
        values = {"user_key": user_key}

        if any(field in updates for field in SEARCHABLE_FIELDS):
            current = await self.get_by_key(user_key) or {}
            merged = {**current, **updates}
            updates = {
                **updates,
                "search_text": build_search_text(merged.get("first_name"), merged.get("last_name"), merged.get("email")),
            }

        for field in allowed_fields:
            if field in updates:
                set_clauses.append(f"{field} = :{field}")
                values[field] = updates[field]

        if not set_clauses:
            return False

        query = f"UPDATE users SET {', '.join(set_clauses)} WHERE user_key = :user_key"
        await self.db.execute(query, values)
        return True

    async def delete(self, user_key: str) -> None:
        """Remove the user row; missing keys are a no-op."""
        await self.db.execute("DELETE FROM users WHERE user_key = :user_key", {"user_key": user_key})

    async def search(
        self,
        search: str = "",
        role_filter: Optional[str] = None,
        limit: int = 10,
        offset: int = 0
    ) -> Tuple[List[Dict[str, Any]], int]:
        """
        Page through users matching `search` on first name, last name or email.

        Returns the rows for the requested slice and the total number of
        matches across all pages.
        """
        where = f"WHERE {SEARCH_FILTER}"
        values: Dict[str, Any] = {"search": like_pattern(search)}

        if role_filter is not None:
            where += " AND role = :role"
            values["role"] = role_filter

        count = await self.db.fetch_val(f"SELECT COUNT(*) FROM users {where}", values)

        query = f"""
            SELECT {USER_COLUMNS}
            FROM users
            {where}
            ORDER BY first_name ASC, last_name ASC, user_key ASC
            LIMIT :limit OFFSET :offset
        """
        rows = await self.db.fetch_all(query, {**values, "limit": limit, "offset": offset})
        return [dict(row._mapping) for row in rows], int(count or 0)

    async def autocomplete(
        self,
        search: str = "",
        user_keys: Iterable[str] = (),
        limit: int = 10
    ) -> List[Dict[str, Any]]:
        """
        Most recently created matches (at most `limit`) plus any explicitly
        requested keys, newest first.
        """
        values: Dict[str, Any] = {"search": like_pattern(search), "limit": limit}
        forced = ""
        keys = list(dict.fromkeys(user_keys))
        if keys:
            placeholders = []
            for index, key in enumerate(keys):
                placeholders.append(f":key_{index}")
                values[f"key_{index}"] = key
            forced = f" OR user_key IN ({', '.join(placeholders)})"

        query = f"""
            SELECT {SUMMARY_COLUMNS}
            FROM users
            WHERE user_key IN (
                SELECT user_key FROM users
                WHERE {SEARCH_FILTER}
                ORDER BY created_at DESC
                LIMIT :limit
            ){forced}
            ORDER BY created_at DESC
        """
        rows = await self.db.fetch_all(query, values)
        return [dict(row._mapping) for row in rows]

import logging
from databases import Database
from taskwatch.modules.config import DATABASE_URL

logger = logging.getLogger("taskwatch.database")

# Create the database instance
database = Database(DATABASE_URL)

USERS_SCHEMA = [
    """
    CREATE TABLE IF NOT EXISTS users (
        user_key TEXT PRIMARY KEY,
        first_name TEXT NOT NULL,
        last_name TEXT NOT NULL,
        email TEXT NOT NULL,
        role TEXT NOT NULL,
        password_hash TEXT,
        search_text TEXT NOT NULL DEFAULT '',
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_users_name ON users (first_name, last_name)",
    "CREATE INDEX IF NOT EXISTS idx_users_created_at ON users (created_at)",
]


async def connect_to_db():
    await database.connect()


async def disconnect_from_db():
    await database.disconnect()


async def init_db(db: Database = None):
    """Create the users table and its indexes if they are missing."""
    db = db or database
    for stmt in USERS_SCHEMA:
        await db.execute(query=stmt)
    logger.info("Users schema ready")

"""
Runtime Configuration

Values are read from the environment (a local .env file is loaded first).
"""
import os
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./taskwatch.db")

# Role code that grants user administration
ADMIN_ROLE = os.getenv("TASKWATCH_ADMIN_ROLE", "adm")

PASSWORD_MIN_LENGTH = int(os.getenv("TASKWATCH_PASSWORD_MIN_LENGTH", "10"))
AUTOCOMPLETE_LIMIT = int(os.getenv("TASKWATCH_AUTOCOMPLETE_LIMIT", "10"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()]

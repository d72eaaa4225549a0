import os
from dotenv import load_dotenv

load_dotenv(dotenv_path=".env")

# Database
# PostgreSQL connection string format:
# postgresql://postgres:[PASSWORD]@[HOST]:[PORT]/postgres
# Local development and tests may use sqlite+aiosqlite:///./timer.db
DATABASE_URL = os.getenv("DATABASE_URL")

# Connection pool configuration (ignored for SQLite)
POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "5"))  # Default 5 connections
MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", "10"))  # Default 10 overflow
POOL_TIMEOUT = int(os.getenv("DB_POOL_TIMEOUT", "30"))  # Default 30 seconds
POOL_RECYCLE = int(os.getenv("DB_POOL_RECYCLE", "3600"))  # Default 1 hour

# Create missing tables on startup
CREATE_TABLES = os.getenv("DB_CREATE_TABLES", "true").lower() in ("1", "true", "yes")

# Timer defaults
DEFAULT_DURATION_SECONDS = int(os.getenv("DEFAULT_DURATION_SECONDS", "240"))  # 4 minutes

# HTTP server
SERVER_HOST = os.getenv("SERVER_HOST", "0.0.0.0")
SERVER_PORT = int(os.getenv("SERVER_PORT", "2022"))
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Client
TIMER_API_URL = os.getenv("TIMER_API_URL", f"http://localhost:{SERVER_PORT}")

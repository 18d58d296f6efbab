# tracker/core/config.py
import os
import logging
from dotenv import load_dotenv
from pathlib import Path
from typing import Optional, List
from pydantic_settings import BaseSettings

# --- Path Setup & .env Loading ---
# .env lives in the backend root, two levels up from core
BASE_DIR = Path(__file__).resolve().parent.parent.parent
ENV_PATH = BASE_DIR / '.env'

if ENV_PATH.is_file():
    load_dotenv(dotenv_path=ENV_PATH)
else:
    # Logger is not configured yet at this point
    print(f"Warning: .env file not found at {ENV_PATH}. Relying on system environment variables.")

# --- Pydantic Settings Class ---
class Settings(BaseSettings):
    PROJECT_NAME: str = "Assignment Tracker"
    DEBUG: bool = False
    VERSION: str = "0.1.0"
    API_PREFIX: str = "/api"

    # Database Settings
    MONGODB_URL: Optional[str] = None
    DB_NAME: str = "assignment_tracker_dev"
    # Multi-document transactions need a replica set; standalone servers run without them
    MONGODB_USE_TRANSACTIONS: bool = False

    # Frontend origins allowed by CORS
    CORS_ORIGINS: List[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
        "http://127.0.0.1:5173",
        "http://127.0.0.1:3000",
    ]

    # Client (sync) settings
    TRACKER_API_URL: str = "http://localhost:8000/api"
    CLIENT_TIMEOUT_SECONDS: Optional[float] = None # None keeps httpx's own default

    # Derived view windows (days)
    DUE_SOON_DAYS: int = 3
    UPCOMING_DAYS: int = 7
    UPCOMING_LIMIT: int = 5

settings = Settings()

# --- Logging Setup ---
LOG_LEVEL_NAME: str = os.getenv("LOG_LEVEL", "WARNING").upper()
if settings.DEBUG:
    LOG_LEVEL_NAME = "DEBUG"

ACTUAL_LOG_LEVEL = getattr(logging, LOG_LEVEL_NAME, logging.WARNING)

logging.basicConfig(
    level=ACTUAL_LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logging.getLogger('uvicorn').setLevel(logging.WARNING)
logging.getLogger('uvicorn.access').setLevel(logging.WARNING)
logging.getLogger('fastapi').setLevel(logging.INFO if settings.DEBUG else logging.WARNING)
logging.getLogger('motor').setLevel(logging.WARNING)
logging.getLogger('pymongo').setLevel(logging.WARNING)
logging.getLogger('httpx').setLevel(logging.WARNING)

logger = logging.getLogger(__name__)

# --- Validate critical settings after loading ---
if not settings.MONGODB_URL:
    logger.critical("CRITICAL: MONGODB_URL environment variable is not set and no default provided.")

if settings.DEBUG:
    logger.debug(f"PROJECT_NAME: {settings.PROJECT_NAME}")
    logger.debug(f"API_PREFIX: {settings.API_PREFIX}")
    logger.debug(f"DB_NAME: {settings.DB_NAME}")
    logger.debug(f"TRACKER_API_URL: {settings.TRACKER_API_URL}")
    logger.debug(f"MONGODB_URL Set: {'Yes' if settings.MONGODB_URL else 'No - CRITICAL'}")

# Module-level aliases for modules that import constants directly
PROJECT_NAME = settings.PROJECT_NAME
DEBUG = settings.DEBUG
VERSION = settings.VERSION
API_PREFIX = settings.API_PREFIX
MONGODB_URL = settings.MONGODB_URL
DB_NAME = settings.DB_NAME
MONGODB_USE_TRANSACTIONS = settings.MONGODB_USE_TRANSACTIONS

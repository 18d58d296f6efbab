# tracker/db/database.py
import motor.motor_asyncio
import logging
from typing import Optional, Dict, Any
from datetime import datetime, timezone

from tracker.core.config import MONGODB_URL, DB_NAME, PROJECT_NAME

logger = logging.getLogger(f"{PROJECT_NAME}.db")

# Module-level client and database instances, set by connect_to_mongo()
_client: Optional[motor.motor_asyncio.AsyncIOMotorClient] = None
_db: Optional[motor.motor_asyncio.AsyncIOMotorDatabase] = None

async def connect_to_mongo() -> bool:
    """Opens the motor client and pings it; False leaves the API up without storage."""
    global _client, _db

    if _db is not None:
        logger.info("Database connection already established.")
        return True

    if not MONGODB_URL:
        logger.error("MONGODB_URL is not set; assignments cannot be stored.")
        return False

    logger.info(f"Connecting to tracker database '{DB_NAME}'")
    try:
        _client = motor.motor_asyncio.AsyncIOMotorClient(
            MONGODB_URL,
            serverSelectionTimeoutMS=10000,
            maxPoolSize=10,
            uuidRepresentation='standard',
            tz_aware=True, # Return aware UTC datetimes so comparisons with parsed input work
            appname=PROJECT_NAME
        )
        await _client.admin.command('ping')
        _db = _client[DB_NAME]
        logger.info(f"Connected to tracker database '{DB_NAME}'")
        return True

    except Exception as e:
        logger.error(f"Could not connect to the tracker database: {e}", exc_info=True)
        _client = None
        _db = None
        return False

async def close_mongo_connection():
    global _client, _db
    if _client is None:
        return
    _client.close()
    _client, _db = None, None
    logger.info("Tracker database connection closed.")

def get_database() -> Optional[motor.motor_asyncio.AsyncIOMotorDatabase]:
    """The tracker database, or None before a successful connect_to_mongo()."""
    if _db is None:
        logger.warning("Tracker database requested before connect_to_mongo() succeeded.")
    return _db

async def ensure_indexes() -> None:
    """Creates the indexes the list and cascade queries rely on."""
    from . import crud

    db_instance = get_database()
    if db_instance is None:
        logger.error("Could not get database instance to ensure indexes.")
        return

    assignments = db_instance.get_collection(crud.ASSIGNMENT_COLLECTION)
    await assignments.create_index([("created_at", -1)], name="idx_assignment_created_at")

    work_ranges = db_instance.get_collection(crud.WORK_RANGE_COLLECTION)
    await work_ranges.create_index(
        [("assignment_id", 1), ("start_date", 1)],
        name="idx_work_range_assignment_start"
    )
    logger.info("Database indexes ensured.")

async def check_database_health() -> Dict[str, Any]:
    """Ping plus a check for the assignments and work_date_ranges collections (status OK, WARNING or ERROR)."""
    from . import crud
    expected = [crud.ASSIGNMENT_COLLECTION, crud.WORK_RANGE_COLLECTION]
    health_info: Dict[str, Any] = {
        "status": "OK",
        "connected": False,
        "missing_collections": [],
        "error": None,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }

    db_instance = get_database()
    if db_instance is None:
        health_info.update(status="ERROR", error="Tracker database not connected")
        return health_info

    try:
        await db_instance.client.admin.command('ping')
        existing = await db_instance.list_collection_names()
    except Exception as e:
        logger.error(f"Tracker database health check failed: {e}", exc_info=True)
        health_info.update(status="ERROR", error=str(e))
        return health_info

    health_info["connected"] = True
    # Both collections appear on first insert; until then the service is usable but empty
    missing = [name for name in expected if name not in existing]
    if missing:
        health_info.update(status="WARNING", missing_collections=missing)
        logger.warning(f"Tracker database is missing collections: {missing}")
    return health_info


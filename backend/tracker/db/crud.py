# tracker/db/crud.py

# --- Core Imports ---
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ReturnDocument, ASCENDING, DESCENDING
import uuid
from typing import List, Optional
from datetime import datetime, timezone
import logging
from contextlib import asynccontextmanager
from functools import wraps

# --- Database Access ---
from .database import get_database
from tracker.core.config import MONGODB_USE_TRANSACTIONS

# --- Pydantic Models ---
from tracker.models.assignment import Assignment, AssignmentCreate, AssignmentUpdate
from tracker.models.work_range import WorkDateRange, WorkDateRangeCreate

# --- Logging Setup ---
logger = logging.getLogger(__name__)

# --- MongoDB Collection Names ---
ASSIGNMENT_COLLECTION = "assignments"
WORK_RANGE_COLLECTION = "work_date_ranges"

# --- Transaction and Helper Functions ---
@asynccontextmanager
async def transaction():
    db = get_database()
    if db is None: raise RuntimeError("Database connection not available for transaction (db is None)")
    if not MONGODB_USE_TRANSACTIONS:
        # Standalone servers reject multi-document transactions
        yield None
        return
    async with await db.client.start_session() as session:
        async with session.start_transaction():
            logger.debug("MongoDB transaction started.")
            yield session
            logger.debug("MongoDB transaction committing.")


def with_transaction(func):
    @wraps(func)
    async def wrapper(*args, **kwargs):
        # Reuse a session passed in by the caller (nested call)
        if kwargs.get('session') is not None:
            logger.debug(f"Function {func.__name__} called within existing session.")
            return await func(*args, **kwargs)
        try:
            async with transaction() as new_session:
                kwargs['session'] = new_session
                return await func(*args, **kwargs)
        except Exception as e:
            logger.error(f"Operation failed for function {func.__name__}: {e}", exc_info=True)
            return None
    return wrapper

def _get_collection(collection_name: str) -> Optional[AsyncIOMotorCollection]:
    db = get_database()
    if db is not None: return db[collection_name]
    logger.error("Database connection is not available (db object is None). Cannot get collection.")
    return None

# --- Assignment CRUD Functions ---
async def create_assignment(assignment_in: AssignmentCreate, session=None) -> Optional[Assignment]:
    """Inserts a new assignment; the server assigns id and timestamps."""
    collection = _get_collection(ASSIGNMENT_COLLECTION); now = datetime.now(timezone.utc)
    if collection is None: return None
    new_id = uuid.uuid4()
    doc = assignment_in.model_dump(); doc["_id"] = new_id
    doc["created_at"] = now; doc["updated_at"] = now
    logger.info(f"Inserting assignment: {doc['_id']}")
    try:
        inserted_result = await collection.insert_one(doc, session=session)
        if inserted_result.acknowledged: created_doc = await collection.find_one({"_id": new_id}, session=session)
        else: logger.error(f"Insert not acknowledged for assignment ID: {new_id}"); return None
        if created_doc: return Assignment(**created_doc)
        else: logger.error(f"Failed to retrieve assignment after insert: {new_id}"); return None
    except Exception as e: logger.error(f"Error inserting assignment: {e}", exc_info=True); return None

async def get_assignment_by_id(assignment_id: uuid.UUID, session=None) -> Optional[Assignment]:
    collection = _get_collection(ASSIGNMENT_COLLECTION)
    if collection is None: return None
    logger.info(f"Getting assignment ID: {assignment_id}")
    try: doc = await collection.find_one({"_id": assignment_id}, session=session)
    except Exception as e: logger.error(f"Error getting assignment: {e}", exc_info=True); return None
    if doc: return Assignment(**doc)
    else: logger.warning(f"Assignment {assignment_id} not found."); return None

async def get_all_assignments(session=None) -> List[Assignment]:
    """Returns every assignment, newest first."""
    collection = _get_collection(ASSIGNMENT_COLLECTION); items_list: List[Assignment] = []
    if collection is None: return items_list
    logger.info("Getting all assignments")
    try:
        cursor = collection.find({}, session=session).sort("created_at", DESCENDING)
        async for doc in cursor:
            try:
                items_list.append(Assignment(**doc))
            except Exception as validation_err: logger.error(f"Pydantic validation failed for assignment doc {doc.get('_id', 'UNKNOWN')}: {validation_err}")
    except Exception as e: logger.error(f"Error getting all assignments: {e}", exc_info=True)
    return items_list

async def update_assignment(assignment_id: uuid.UUID, assignment_in: AssignmentUpdate, session=None) -> Optional[Assignment]:
    """Applies only the explicitly set fields and refreshes updated_at."""
    collection = _get_collection(ASSIGNMENT_COLLECTION); now = datetime.now(timezone.utc)
    if collection is None: return None
    update_data = assignment_in.model_dump(exclude_unset=True)
    if not update_data:
        logger.warning(f"No update data for assignment {assignment_id}")
        return await get_assignment_by_id(assignment_id, session=session)
    update_data["updated_at"] = now; logger.info(f"Updating assignment {assignment_id} fields={sorted(update_data)}")
    try:
        updated_doc = await collection.find_one_and_update(
            {"_id": assignment_id}, {"$set": update_data},
            return_document=ReturnDocument.AFTER, session=session
        )
        if updated_doc: return Assignment(**updated_doc)
        else: logger.warning(f"Assignment {assignment_id} not found for update."); return None
    except Exception as e: logger.error(f"Error updating assignment: {e}", exc_info=True); return None

@with_transaction
async def delete_assignment(assignment_id: uuid.UUID, session=None) -> bool:
    """Deletes an assignment and cascades to its work ranges."""
    collection = _get_collection(ASSIGNMENT_COLLECTION)
    ranges_collection = _get_collection(WORK_RANGE_COLLECTION)
    if collection is None or ranges_collection is None: return False
    logger.info(f"Deleting assignment {assignment_id} and its work ranges")
    # Ranges first, the assignment last: a failed cascade never leaves orphaned ranges
    ranges_result = await ranges_collection.delete_many({"assignment_id": assignment_id}, session=session)
    result = await collection.delete_one({"_id": assignment_id}, session=session)
    if result.deleted_count != 1:
        logger.warning(f"Assignment {assignment_id} not found for delete.")
        return False
    logger.info(f"Deleted assignment {assignment_id} and {ranges_result.deleted_count} work range(s)")
    return True

# --- WorkDateRange CRUD Functions ---
async def get_work_ranges_for_assignment(assignment_id: uuid.UUID, session=None) -> List[WorkDateRange]:
    """Returns the work ranges of one assignment ordered by start date."""
    collection = _get_collection(WORK_RANGE_COLLECTION); items_list: List[WorkDateRange] = []
    if collection is None: return items_list
    logger.info(f"Getting work ranges for assignment {assignment_id}")
    try:
        cursor = collection.find({"assignment_id": assignment_id}, session=session).sort("start_date", ASCENDING)
        async for doc in cursor:
            try:
                items_list.append(WorkDateRange(**doc))
            except Exception as validation_err: logger.error(f"Pydantic validation failed for work range doc {doc.get('_id', 'UNKNOWN')}: {validation_err}")
    except Exception as e: logger.error(f"Error getting work ranges: {e}", exc_info=True)
    return items_list

async def create_work_range(assignment_id: uuid.UUID, range_in: WorkDateRangeCreate, session=None) -> Optional[WorkDateRange]:
    collection = _get_collection(WORK_RANGE_COLLECTION)
    if collection is None: return None
    new_id = uuid.uuid4()
    doc = range_in.model_dump(); doc["_id"] = new_id; doc["assignment_id"] = assignment_id
    logger.info(f"Inserting work range {new_id} for assignment {assignment_id}")
    try: inserted_result = await collection.insert_one(doc, session=session)
    except Exception as e: logger.error(f"Error inserting work range: {e}", exc_info=True); return None
    if inserted_result.acknowledged: created_doc = await collection.find_one({"_id": new_id}, session=session)
    else: logger.error(f"Insert work range not acknowledged: {new_id}"); return None
    if created_doc: return WorkDateRange(**created_doc)
    else: logger.error(f"Failed retrieve work range post-insert: {new_id}"); return None

async def delete_work_range(range_id: uuid.UUID, session=None) -> bool:
    collection = _get_collection(WORK_RANGE_COLLECTION)
    if collection is None: return False
    logger.info(f"Deleting work range {range_id}")
    try: result = await collection.delete_one({"_id": range_id}, session=session)
    except Exception as e: logger.error(f"Error deleting work range: {e}", exc_info=True); return False
    if result.deleted_count == 1: logger.info(f"Successfully deleted work range {range_id}"); return True
    else: logger.warning(f"Work range {range_id} not found."); return False

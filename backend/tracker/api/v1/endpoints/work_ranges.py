# tracker/api/v1/endpoints/work_ranges.py

import uuid
import logging
from typing import Dict
from fastapi import APIRouter, HTTPException, status

from tracker.db import crud

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/work-ranges",
    tags=["Work Ranges"]
)

@router.delete(
    "/{range_id}",
    response_model=Dict[str, bool],
    status_code=status.HTTP_200_OK,
    summary="Delete a work range"
)
async def delete_existing_work_range(range_id: uuid.UUID):
    logger.info(f"Attempting to delete work range ID: {range_id}")
    deleted_successfully = await crud.delete_work_range(range_id=range_id)
    if not deleted_successfully:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Work date range not found"
        )
    return {"success": True}

# tracker/api/v1/endpoints/assignments.py

import uuid
import logging
from typing import List, Dict
from fastapi import APIRouter, HTTPException, status

from tracker.models.assignment import Assignment, AssignmentCreate, AssignmentUpdate, START_BEFORE_DUE_MESSAGE
from tracker.models.work_range import WorkDateRange, WorkDateRangeCreate
from tracker.db import crud

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/assignments",
    tags=["Assignments"]
)

# === Assignment API Endpoints ===

@router.get(
    "",
    response_model=List[Assignment],
    status_code=status.HTTP_200_OK,
    summary="List all assignments",
    description="Retrieves every assignment, most recently created first."
)
async def read_assignments():
    logger.info("Reading list of assignments")
    return await crud.get_all_assignments()

@router.post(
    "",
    response_model=Assignment,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new assignment",
    description="Creates a new assignment. The server assigns the id and timestamps."
)
async def create_new_assignment(assignment_in: AssignmentCreate):
    """
    - **assignment_in**: Assignment data based on the AssignmentCreate model.
    """
    logger.info(f"Attempting to create assignment: {assignment_in.title}")
    created_assignment = await crud.create_assignment(assignment_in=assignment_in)
    if not created_assignment:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create assignment"
        )
    logger.info(f"Assignment '{created_assignment.title}' (ID: {created_assignment.id}) created successfully.")
    return created_assignment

@router.get(
    "/{assignment_id}",
    response_model=Assignment,
    status_code=status.HTTP_200_OK,
    summary="Get a specific assignment by ID"
)
async def read_assignment(assignment_id: uuid.UUID):
    assignment = await crud.get_assignment_by_id(assignment_id=assignment_id)
    if assignment is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Assignment not found"
        )
    return assignment

@router.put(
    "/{assignment_id}",
    response_model=Assignment,
    status_code=status.HTTP_200_OK,
    summary="Update an existing assignment",
    description="Applies a partial update. Only fields present in the body change; updated_at is refreshed."
)
async def update_existing_assignment(assignment_id: uuid.UUID, assignment_in: AssignmentUpdate):
    """
    - **assignment_id**: The UUID of the assignment to update.
    - **assignment_in**: The fields to change (AssignmentUpdate model).
    """
    logger.info(f"Attempting to update assignment ID: {assignment_id}")
    existing_assignment = await crud.get_assignment_by_id(assignment_id=assignment_id)
    if existing_assignment is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Assignment not found"
        )

    # The start/due ordering must hold for the merged record, not just the patch
    merged = assignment_in.apply_to(existing_assignment)
    if merged.start_date is not None and merged.start_date >= merged.due_date:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=START_BEFORE_DUE_MESSAGE
        )

    updated_assignment = await crud.update_assignment(assignment_id=assignment_id, assignment_in=assignment_in)
    if updated_assignment is None:
        # Deleted between the check and the update
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Assignment not found"
        )
    logger.info(f"Assignment ID {assignment_id} updated successfully.")
    return updated_assignment

@router.delete(
    "/{assignment_id}",
    response_model=Dict[str, bool],
    status_code=status.HTTP_200_OK,
    summary="Delete an assignment",
    description="Deletes an assignment together with all of its work ranges."
)
async def delete_existing_assignment(assignment_id: uuid.UUID):
    logger.info(f"Attempting to delete assignment ID: {assignment_id}")
    deleted = await crud.delete_assignment(assignment_id=assignment_id)
    if deleted is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete assignment"
        )
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Assignment not found"
        )
    logger.info(f"Assignment ID {assignment_id} deleted successfully.")
    return {"success": True}

# === Nested Work Range Endpoints ===

@router.get(
    "/{assignment_id}/work-ranges",
    response_model=List[WorkDateRange],
    status_code=status.HTTP_200_OK,
    summary="List work ranges of an assignment",
    description="Retrieves the work periods of one assignment, ordered by start date."
)
async def read_work_ranges(assignment_id: uuid.UUID):
    return await crud.get_work_ranges_for_assignment(assignment_id=assignment_id)

@router.post(
    "/{assignment_id}/work-ranges",
    response_model=WorkDateRange,
    status_code=status.HTTP_201_CREATED,
    summary="Add a work range to an assignment",
    description="Body is {startDate, endDate}; both days are inclusive."
)
async def create_new_work_range(assignment_id: uuid.UUID, range_in: WorkDateRangeCreate):
    logger.info(f"Attempting to add work range {range_in.start_date} - {range_in.end_date} to assignment {assignment_id}")
    if await crud.get_assignment_by_id(assignment_id=assignment_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Assignment not found"
        )
    created_range = await crud.create_work_range(assignment_id=assignment_id, range_in=range_in)
    if not created_range:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create work date range"
        )
    return created_range

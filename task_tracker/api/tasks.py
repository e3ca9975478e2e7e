"""
Tasks API - Task CRUD and status transitions
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from uuid import UUID
import logging

from task_tracker.database import get_db
from task_tracker.schemas import (
    TaskCreate,
    TaskUpdate,
    TaskResponse,
    TaskDeleteResponse,
    StatusUpdateRequest,
)
from task_tracker.services import tasks as task_service
from task_tracker.services.transitions import apply_transition

logger = logging.getLogger(__name__)
router = APIRouter()

@router.get("", response_model=list[TaskResponse])
def list_tasks(db: Session = Depends(get_db)):
    """
    List all tasks, most recently updated first.
    Each task includes its status history, PR checklist and PR metadata.
    """
    logger.info("➡️  List tasks request")
    tasks = task_service.list_tasks(db)
    logger.info(f"✅ Returning {len(tasks)} tasks")
    return [TaskResponse.model_validate(task) for task in tasks]

@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(task_data: TaskCreate, db: Session = Depends(get_db)):
    """
    Create a task.

    The task starts at INVESTIGATION with one history entry, an unchecked
    PR checklist and PR metadata (empty strings unless supplied).

    Raises:
        400: title or description missing/blank
    """
    logger.info(f"➡️  Create task request: '{task_data.title}'")
    pr_metadata = task_data.pr_metadata.model_dump() if task_data.pr_metadata else None
    task = task_service.create_task(
        db,
        title=task_data.title,
        description=task_data.description,
        pr_metadata=pr_metadata,
    )
    return TaskResponse.model_validate(task)

@router.get("/{task_id}", response_model=TaskResponse)
def get_task(task_id: UUID, db: Session = Depends(get_db)):
    """
    Get one task with history (newest first), checklist and metadata.

    Raises:
        404: task not found
    """
    logger.info(f"➡️  Get task {task_id} request")
    return TaskResponse.model_validate(task_service.get_task(db, task_id))

@router.put("/{task_id}", response_model=TaskResponse)
def update_task(task_id: UUID, task_data: TaskUpdate, db: Session = Depends(get_db)):
    """
    Update title and description. Status is only changed via /status.

    Raises:
        400: title or description missing/blank
        404: task not found
    """
    logger.info(f"➡️  Update task {task_id} request")
    task = task_service.update_task(db, task_id, title=task_data.title, description=task_data.description)
    return TaskResponse.model_validate(task)

@router.delete("/{task_id}", response_model=TaskDeleteResponse)
def delete_task(task_id: UUID, db: Session = Depends(get_db)):
    """
    Delete a task together with its history, checklist and metadata.

    Raises:
        404: task not found
    """
    logger.info(f"➡️  Delete task {task_id} request")
    task_service.delete_task(db, task_id)
    return TaskDeleteResponse(id=task_id)

@router.post("/{task_id}/status", response_model=TaskResponse)
def update_status(task_id: UUID, body: StatusUpdateRequest, db: Session = Depends(get_db)):
    """
    Move a task to another workflow stage.

    Body:
        status: target stage
        notes: required reason, recorded in the history
        mode: "sequential" (default, next stage only) or "override" (board drag)

    Raises:
        400: MISSING_NOTES, MISSING_FIELDS, INVALID_STATUS,
             OUT_OF_SEQUENCE or CHECKLIST_INCOMPLETE
        404: task not found
    """
    logger.info(f"➡️  Status change request for task {task_id}: {body.status} ({body.mode.value})")
    apply_transition(db, task_id, body.status, body.notes, mode=body.mode)
    return TaskResponse.model_validate(task_service.get_task(db, task_id))

"""
Checklist API - Toggle PR checklist items
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from uuid import UUID
import logging

from task_tracker.database import get_db
from task_tracker.schemas import ChecklistItemUpdate, PRChecklistItemResponse
from task_tracker.services import tasks as task_service

logger = logging.getLogger(__name__)
router = APIRouter()

@router.put("/{task_id}/checklist/{item_id}", response_model=PRChecklistItemResponse)
def update_checklist_item(
    task_id: UUID,
    item_id: UUID,
    body: ChecklistItemUpdate,
    db: Session = Depends(get_db),
):
    """
    Check or uncheck one PR checklist item.

    Raises:
        400: `checked` missing
        404: task not found, or item does not belong to this task
    """
    logger.info(f"➡️  Checklist item {item_id} on task {task_id} -> {body.checked}")
    item = task_service.set_checklist_item(db, task_id, item_id, body.checked)
    return PRChecklistItemResponse.model_validate(item)

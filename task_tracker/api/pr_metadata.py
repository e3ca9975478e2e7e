"""
PR Metadata API - Read/upsert PR metadata and render the PR template
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from uuid import UUID
import logging

from task_tracker.database import get_db
from task_tracker.schemas import PRMetadataUpdate, PRMetadataResponse, PRTemplateResponse
from task_tracker.services import tasks as task_service
from task_tracker.utils.formatting import render_task_pr_template

logger = logging.getLogger(__name__)
router = APIRouter()

@router.get("/{task_id}/pr-metadata", response_model=PRMetadataResponse)
def get_pr_metadata(task_id: UUID, db: Session = Depends(get_db)):
    """
    Raises:
        404: task not found or no metadata stored
    """
    logger.info(f"➡️  Get PR metadata for task {task_id}")
    return PRMetadataResponse.model_validate(task_service.get_pr_metadata(db, task_id))

@router.put("/{task_id}/pr-metadata", response_model=PRMetadataResponse)
def upsert_pr_metadata(task_id: UUID, body: PRMetadataUpdate, db: Session = Depends(get_db)):
    """
    Create or overwrite PR metadata.
    Only fields present in the body are written; repeating a request changes nothing.

    Raises:
        404: task not found
    """
    logger.info(f"➡️  Save PR metadata for task {task_id}")
    metadata = task_service.upsert_pr_metadata(db, task_id, body.model_dump(exclude_unset=True))
    return PRMetadataResponse.model_validate(metadata)

@router.get("/{task_id}/pr-template", response_model=PRTemplateResponse)
def get_pr_template(task_id: UUID, db: Session = Depends(get_db)):
    """Markdown PR body built from the task's metadata and checklist"""
    logger.info(f"➡️  Render PR template for task {task_id}")
    task = task_service.get_task(db, task_id)
    return PRTemplateResponse(task_id=task.id, markdown=render_task_pr_template(task))

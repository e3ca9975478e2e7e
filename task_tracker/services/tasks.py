"""
Task Service - CRUD operations over tasks, checklist items and PR metadata

Functions take a SQLAlchemy session and raise domain exceptions from
task_tracker.core.exceptions; HTTP concerns live in task_tracker.api.
"""

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload
from typing import Any, Dict, List, Optional
from uuid import UUID
import logging

from task_tracker.core.exceptions import NotFoundError
from task_tracker.models import (
    Task,
    TaskStatus,
    StatusHistory,
    PRChecklistItem,
    PRMetadata,
    PR_METADATA_FIELDS,
)

logger = logging.getLogger(__name__)

INITIAL_HISTORY_NOTE = "Task created"

def _with_children(query):
    """Eager-load everything a TaskResponse serializes"""
    return query.options(
        selectinload(Task.status_history),
        selectinload(Task.pr_checklist),
        selectinload(Task.pr_metadata),
    )

def _commit(db: Session, action: str) -> None:
    """Commit or roll back, logging the failure before re-raising"""
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"❌ Failed to {action}: {str(e)}", exc_info=True)
        raise

def list_tasks(db: Session) -> List[Task]:
    """All tasks, most recently updated first"""
    tasks = _with_children(db.query(Task)).order_by(Task.updated_at.desc()).all()
    logger.debug(f"Loaded {len(tasks)} tasks")
    return tasks

def get_task(db: Session, task_id: UUID) -> Task:
    """
    Fetch one task with its related rows.

    Raises:
        NotFoundError: task does not exist
    """
    task = _with_children(db.query(Task)).filter(Task.id == task_id).first()
    if task is None:
        logger.warning(f"⚠️  Task {task_id} not found")
        raise NotFoundError(f"Task with ID {task_id} not found", code="TASK_NOT_FOUND")
    return task

def create_task(
    db: Session,
    title: str,
    description: str,
    pr_metadata: Optional[Dict[str, Any]] = None,
) -> Task:
    """
    Create a task at the first workflow stage.

    Seeds one history entry, a fresh checklist and a PR metadata row
    (fields not supplied default to empty strings).
    """
    initial = TaskStatus.initial()
    fields = pr_metadata or {}

    task = Task(title=title, description=description, status=initial)
    task.status_history.append(StatusHistory(status=initial, notes=INITIAL_HISTORY_NOTE, sequence=1))
    task.pr_checklist.extend(PRChecklistItem.from_template())
    task.pr_metadata = PRMetadata(**{name: fields.get(name) or "" for name in PR_METADATA_FIELDS})

    db.add(task)
    _commit(db, "create task")
    db.refresh(task)
    logger.info(f"✅ Task created: {task.id} '{task.title}'")
    return task

def update_task(db: Session, task_id: UUID, title: str, description: str) -> Task:
    """Change title and description only; status and history are untouched"""
    task = get_task(db, task_id)
    task.title = title
    task.description = description
    _commit(db, f"update task {task_id}")
    db.refresh(task)
    logger.info(f"✅ Task {task_id} updated")
    return task

def delete_task(db: Session, task_id: UUID) -> None:
    """Delete a task; history, checklist and metadata go with it"""
    task = get_task(db, task_id)
    db.delete(task)
    _commit(db, f"delete task {task_id}")
    logger.info(f"🗑️  Task {task_id} deleted")

def set_checklist_item(db: Session, task_id: UUID, item_id: UUID, checked: bool) -> PRChecklistItem:
    """
    Set `checked` on one checklist item.

    The item must belong to `task_id`; an item id from another task is
    reported as not found and left unchanged.
    """
    get_task(db, task_id)
    item = (
        db.query(PRChecklistItem)
        .filter(PRChecklistItem.id == item_id, PRChecklistItem.task_id == task_id)
        .first()
    )
    if item is None:
        logger.warning(f"⚠️  Checklist item {item_id} not found on task {task_id}")
        raise NotFoundError(
            f"Checklist item {item_id} not found for task {task_id}",
            code="CHECKLIST_ITEM_NOT_FOUND",
        )

    item.checked = checked
    _commit(db, f"update checklist item {item_id}")
    db.refresh(item)
    logger.info(f"✅ Checklist item {item_id} on task {task_id} set to {checked}")
    return item

def get_pr_metadata(db: Session, task_id: UUID) -> PRMetadata:
    """
    Raises:
        NotFoundError: task missing, or it has no metadata row yet
    """
    get_task(db, task_id)
    metadata = db.query(PRMetadata).filter(PRMetadata.task_id == task_id).first()
    if metadata is None:
        raise NotFoundError(f"PR metadata not found for task {task_id}", code="PR_METADATA_NOT_FOUND")
    return metadata

def upsert_pr_metadata(db: Session, task_id: UUID, fields: Dict[str, Any]) -> PRMetadata:
    """
    Overwrite the supplied metadata fields, creating the row if needed.
    Unknown keys are ignored; repeating the same call is a no-op.
    """
    get_task(db, task_id)
    values = {name: fields[name] for name in PR_METADATA_FIELDS if name in fields}

    metadata = db.query(PRMetadata).filter(PRMetadata.task_id == task_id).first()
    if metadata is None:
        metadata = PRMetadata(task_id=task_id, **values)
        db.add(metadata)
        action = "created"
    else:
        for name, value in values.items():
            setattr(metadata, name, value)
        action = "updated"

    _commit(db, f"save PR metadata for task {task_id}")
    db.refresh(metadata)
    logger.info(f"✅ PR metadata {action} for task {task_id}")
    return metadata

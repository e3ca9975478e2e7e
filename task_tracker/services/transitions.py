"""
Status Transition Engine - Workflow rules for moving a task between stages

Two entry points matter:
    validate_transition() - pure rule check, no database access
    apply_transition()    - loads the task, validates, then writes the new
                            status and its history row in one commit
"""

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import Optional, Union
from uuid import UUID
import logging

from task_tracker.core.exceptions import NotFoundError, TransitionError, ValidationError
from task_tracker.models import Task, TaskStatus, StatusHistory, TransitionMode

logger = logging.getLogger(__name__)

_ORDER = TaskStatus.ordered()

def compute_next_status(current: TaskStatus) -> Optional[TaskStatus]:
    """
    Return the stage after `current`, or None when `current` is terminal.

    Example:
        compute_next_status(TaskStatus.PLANNING)  # TaskStatus.IN_PROGRESS
        compute_next_status(TaskStatus.DONE)      # None
    """
    index = _ORDER.index(TaskStatus(current))
    if index + 1 < len(_ORDER):
        return _ORDER[index + 1]
    return None

def parse_status(value: Union[str, TaskStatus, None]) -> TaskStatus:
    """
    Convert a request value into a TaskStatus.

    Raises:
        ValidationError: value missing
        TransitionError(INVALID_STATUS): value is not a workflow stage
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError("Status is required", code="MISSING_FIELDS", details={"missing_fields": ["status"]})
    try:
        return TaskStatus(value.strip() if isinstance(value, str) else value)
    except ValueError:
        raise TransitionError(
            f"Invalid status value: {value}",
            code=TransitionError.INVALID_STATUS,
            details={"allowed": [s.value for s in _ORDER]},
        )

def require_notes(notes: Optional[str]) -> str:
    """Notes are mandatory for every transition; checked before anything else"""
    if notes is None or not str(notes).strip():
        raise TransitionError("Notes are required for a status change", code=TransitionError.MISSING_NOTES)
    return str(notes).strip()

def validate_transition(
    current: TaskStatus,
    requested: TaskStatus,
    notes: Optional[str],
    mode: TransitionMode = TransitionMode.SEQUENTIAL,
    checklist_complete: bool = True,
) -> None:
    """
    Decide whether `current` -> `requested` is allowed.

    Rules, checked in order:
        1. notes must be non-blank                    -> MISSING_NOTES
        2. SEQUENTIAL: requested must be the next stage -> OUT_OF_SEQUENCE
        3. IN_REVIEW -> DONE needs a complete checklist -> CHECKLIST_INCOMPLETE
           (applies in OVERRIDE mode too)

    OVERRIDE accepts any other target, including earlier stages.

    Raises:
        TransitionError: with one of the codes above
    """
    require_notes(notes)

    mode = TransitionMode(mode)
    if mode is TransitionMode.SEQUENTIAL:
        expected = compute_next_status(current)
        if requested != expected:
            raise TransitionError(
                "Invalid status transition. Status must progress in sequence.",
                code=TransitionError.OUT_OF_SEQUENCE,
                details={
                    "current": TaskStatus(current).value,
                    "requested": TaskStatus(requested).value,
                    "expected": expected.value if expected else None,
                },
            )

    if current == TaskStatus.IN_REVIEW and requested == TaskStatus.DONE and not checklist_complete:
        raise TransitionError(
            "All PR checklist items must be checked before marking as Done",
            code=TransitionError.CHECKLIST_INCOMPLETE,
        )

def apply_transition(
    db: Session,
    task_id: UUID,
    new_status: Union[str, TaskStatus, None],
    notes: Optional[str],
    mode: TransitionMode = TransitionMode.SEQUENTIAL,
) -> Task:
    """
    Validate and persist a status change.

    The status update and the history append are committed together;
    if the commit fails both are rolled back and the error propagates.

    Returns:
        The refreshed Task

    Raises:
        TransitionError / ValidationError: request rejected, nothing written
        NotFoundError: task does not exist
        SQLAlchemyError: persistence failure after rollback
    """
    clean_notes = require_notes(notes)
    requested = parse_status(new_status)

    task = db.get(Task, task_id)
    if task is None:
        logger.warning(f"⚠️  Status change for missing task {task_id}")
        raise NotFoundError(f"Task with ID {task_id} not found", code="TASK_NOT_FOUND")

    current = task.status
    try:
        validate_transition(
            current,
            requested,
            clean_notes,
            mode=mode,
            checklist_complete=task.checklist_complete(),
        )
    except TransitionError as e:
        logger.warning(f"⚠️  Rejected {current.value} -> {requested.value} for task {task_id}: {e.code}")
        raise

    task.status = requested
    task.status_history.append(
        StatusHistory(status=requested, notes=clean_notes, sequence=task.next_history_sequence())
    )

    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"❌ Failed to apply status change for task {task_id}: {str(e)}", exc_info=True)
        raise

    db.refresh(task)
    logger.info(f"✅ Task {task_id} moved {current.value} -> {requested.value} ({TransitionMode(mode).value})")
    return task

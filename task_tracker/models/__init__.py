"""
Models Package - Exports all database models for easy importing
"""

# Import all models to register them with SQLAlchemy Base
# This ensures create_all() knows about all tables
from task_tracker.models.task import Task, TaskStatus, TransitionMode
from task_tracker.models.status_history import StatusHistory
from task_tracker.models.pr_checklist import PRChecklistItem, DEFAULT_PR_CHECKLIST
from task_tracker.models.pr_metadata import PRMetadata, PR_METADATA_FIELDS

__all__ = [
    "Task",
    "TaskStatus",
    "TransitionMode",
    "StatusHistory",
    "PRChecklistItem",
    "DEFAULT_PR_CHECKLIST",
    "PRMetadata",
    "PR_METADATA_FIELDS",
]

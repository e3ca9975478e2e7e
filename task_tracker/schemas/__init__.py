"""
Schemas Package - Exports all Pydantic schemas
"""

from task_tracker.schemas.pr_metadata import (
    PRMetadataFields,
    PRMetadataUpdate,
    PRMetadataResponse,
    PRTemplateResponse,
)
from task_tracker.schemas.task import (
    TaskCreate,
    TaskUpdate,
    TaskResponse,
    TaskDeleteResponse,
    StatusHistoryResponse,
    PRChecklistItemResponse,
    ChecklistItemUpdate,
)
from task_tracker.schemas.status import StatusUpdateRequest

# Export all schemas for convenient importing
__all__ = [
    "PRMetadataFields",
    "PRMetadataUpdate",
    "PRMetadataResponse",
    "PRTemplateResponse",
    "TaskCreate",
    "TaskUpdate",
    "TaskResponse",
    "TaskDeleteResponse",
    "StatusHistoryResponse",
    "PRChecklistItemResponse",
    "ChecklistItemUpdate",
    "StatusUpdateRequest",
]

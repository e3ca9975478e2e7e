"""
Task Schemas - Pydantic models for task operations
"""

from pydantic import BaseModel, ConfigDict, field_validator
from typing import Optional, List
from datetime import datetime
from uuid import UUID

from task_tracker.models.task import TaskStatus
from task_tracker.schemas.pr_metadata import PRMetadataFields, PRMetadataResponse

# DO NOT import from task_tracker.schemas here - causes circular import

def _require_text(value: str, field_name: str, max_length: Optional[int] = None) -> str:
    """Shared non-empty check for title/description"""
    if value is None or not value.strip():
        raise ValueError(f"Task {field_name} cannot be empty")
    if max_length is not None and len(value.strip()) > max_length:
        raise ValueError(f"Task {field_name} cannot exceed {max_length} characters")
    return value.strip()

class TaskBase(BaseModel):
    """Common task fields - both required and non-blank"""
    title: str
    description: str

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        return _require_text(v, "title", max_length=200)

    @field_validator("description")
    @classmethod
    def validate_description(cls, v):
        return _require_text(v, "description")

class TaskCreate(TaskBase):
    """Schema for creating a task - PR metadata may be supplied up front"""
    pr_metadata: Optional[PRMetadataFields] = None

class TaskUpdate(TaskBase):
    """Schema for editing a task - status is never changed here"""

class StatusHistoryResponse(BaseModel):
    """One entry of the status audit trail"""
    id: UUID
    task_id: UUID
    status: TaskStatus
    notes: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

class PRChecklistItemResponse(BaseModel):
    """One PR checklist item"""
    id: UUID
    task_id: UUID
    text: str
    checked: bool

    model_config = ConfigDict(from_attributes=True)

class ChecklistItemUpdate(BaseModel):
    """Schema for toggling a checklist item"""
    checked: bool

class TaskResponse(BaseModel):
    """Task with its history (newest first), checklist and metadata"""
    id: UUID
    title: str
    description: str
    status: TaskStatus
    created_at: datetime
    updated_at: datetime
    status_history: List[StatusHistoryResponse] = []
    pr_checklist: List[PRChecklistItemResponse] = []
    pr_metadata: Optional[PRMetadataResponse] = None

    model_config = ConfigDict(from_attributes=True)

class TaskDeleteResponse(BaseModel):
    """Confirmation returned after a delete"""
    id: UUID
    message: str = "Task deleted successfully"

"""
Status Change Schemas - Request body for POST /tasks/{id}/status
"""

from pydantic import BaseModel
from typing import Optional

from task_tracker.models.task import TransitionMode

class StatusUpdateRequest(BaseModel):
    """
    Status change request.

    status and notes are plain optional strings so the workflow engine can
    report MISSING_NOTES / INVALID_STATUS with its own error codes.
    """
    status: Optional[str] = None  # Target workflow stage, e.g. "PLANNING"
    notes: Optional[str] = None  # Required, non-blank
    mode: TransitionMode = TransitionMode.SEQUENTIAL  # "override" for board drag-and-drop

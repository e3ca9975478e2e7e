"""
Domain Exceptions - Errors raised by the service layer

Every error carries a machine-readable code so callers can tell
an out-of-sequence move from an incomplete checklist without parsing text.
"""

from typing import Any, Optional

class TaskTrackerError(Exception):
    """Base class for all expected, client-facing errors"""
    status_code = 400
    default_code = "BAD_REQUEST"

    def __init__(self, message: str, code: Optional[str] = None, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = details

class ValidationError(TaskTrackerError):
    """Missing or empty required field"""
    status_code = 400
    default_code = "VALIDATION_ERROR"

class NotFoundError(TaskTrackerError):
    """Referenced task, checklist item or metadata does not exist"""
    status_code = 404
    default_code = "NOT_FOUND"

class TransitionError(TaskTrackerError):
    """Status change rejected by the workflow rules"""
    status_code = 400

    MISSING_NOTES = "MISSING_NOTES"  # Notes are blank or absent
    OUT_OF_SEQUENCE = "OUT_OF_SEQUENCE"  # Sequential move skipped or reversed a stage
    CHECKLIST_INCOMPLETE = "CHECKLIST_INCOMPLETE"  # IN_REVIEW -> DONE with unchecked items
    INVALID_STATUS = "INVALID_STATUS"  # Not one of the six workflow stages

    default_code = OUT_OF_SEQUENCE

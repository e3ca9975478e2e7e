"""
Core Package - Configuration and domain exceptions
"""

from task_tracker.core.config import settings, get_settings
from task_tracker.core.exceptions import TaskTrackerError, ValidationError, NotFoundError, TransitionError

__all__ = [
    "settings",
    "get_settings",
    "TaskTrackerError",
    "ValidationError",
    "NotFoundError",
    "TransitionError",
]

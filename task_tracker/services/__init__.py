"""
Services Package - Business logic shared by the API routers and scripts
"""

from task_tracker.services.transitions import (
    TransitionMode,
    compute_next_status,
    validate_transition,
    apply_transition,
)
from task_tracker.services import tasks

__all__ = [
    "TransitionMode",
    "compute_next_status",
    "validate_transition",
    "apply_transition",
    "tasks",
]

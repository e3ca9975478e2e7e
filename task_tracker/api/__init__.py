"""
API Package - Exports all API routers
"""

from task_tracker.api import tasks, checklist, pr_metadata

__all__ = ["tasks", "checklist", "pr_metadata"]

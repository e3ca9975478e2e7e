"""
Task Tracker Package

Task tracking service with a six-stage delivery workflow, PR checklists
and a kanban board client.

Usage:
    from task_tracker.models import Task, TaskStatus
    from task_tracker.core.config import settings
"""

__version__ = "1.0.0"  # Application version

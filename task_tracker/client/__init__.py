"""
Client Package - Async API client and board/list view state
"""

from task_tracker.client.api_client import TaskApiClient, TaskApiError
from task_tracker.client.cache import TaskCache, TaskFilter, filter_tasks, group_by_status
from task_tracker.client.board import BoardController, Notice

__all__ = [
    "TaskApiClient",
    "TaskApiError",
    "TaskCache",
    "TaskFilter",
    "filter_tasks",
    "group_by_status",
    "BoardController",
    "Notice",
]

"""
Utilities Package - Helper functions and tools

This package contains:
- formatting.py: status display labels and PR template rendering
"""

from task_tracker.utils.formatting import (
    STATUS_LABELS,
    format_status,
    render_pr_template,
    render_task_pr_template,
)

__all__ = [
    "STATUS_LABELS",
    "format_status",
    "render_pr_template",
    "render_task_pr_template",
]

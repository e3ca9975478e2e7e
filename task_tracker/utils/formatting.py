"""
Display Helpers - Human-readable status labels and the GitHub PR template
"""

from typing import Iterable, Optional

from task_tracker.models.task import TaskStatus

STATUS_LABELS = {
    TaskStatus.INVESTIGATION: "Investigation",
    TaskStatus.PLANNING: "Planning",
    TaskStatus.IN_PROGRESS: "In Progress",
    TaskStatus.IN_TESTING: "In Testing",
    TaskStatus.IN_REVIEW: "In Review",
    TaskStatus.DONE: "Done",
}

# Every status needs a label; a new member without one fails at import
_missing = set(TaskStatus) - set(STATUS_LABELS)
if _missing:
    raise RuntimeError(f"No display label for: {sorted(s.value for s in _missing)}")

def format_status(status) -> str:
    """'IN_PROGRESS' -> 'In Progress'"""
    return STATUS_LABELS[TaskStatus(status)]

def render_pr_template(
    description: Optional[str] = None,
    ticket_id: Optional[str] = None,
    ticket_link: Optional[str] = None,
    testing_plan: Optional[str] = None,
    checklist: Iterable = (),
) -> str:
    """
    Build the markdown body for a GitHub pull request.

    `checklist` is an iterable of objects (or dicts) with `text` and `checked`.
    Blank fields fall back to placeholder prompts.
    """
    if ticket_id:
        ticket_line = f"[{ticket_id}]({ticket_link or '#'})"
    else:
        ticket_line = "Add ticket reference..."

    lines = [
        "## Description",
        description or "Add a description of the changes...",
        "",
        "## Ticket",
        ticket_line,
        "",
        "## Testing Plan",
        testing_plan or "Explain how these changes were tested...",
        "",
        "## Checklist",
        "",
    ]
    for item in checklist:
        text = item["text"] if isinstance(item, dict) else item.text
        checked = item["checked"] if isinstance(item, dict) else item.checked
        lines.append(f"- [{'x' if checked else ' '}] {text}")

    return "\n".join(lines) + "\n"

def render_task_pr_template(task) -> str:
    """PR template for an ORM Task, using its metadata and checklist"""
    metadata = task.pr_metadata
    return render_pr_template(
        description=(metadata.description if metadata else None) or task.description,
        ticket_id=metadata.ticket_id if metadata else None,
        ticket_link=metadata.ticket_link if metadata else None,
        testing_plan=metadata.testing_plan if metadata else None,
        checklist=task.pr_checklist,
    )

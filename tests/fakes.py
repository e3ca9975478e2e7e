# tests/fakes.py

from __future__ import annotations

import asyncio
import uuid
from datetime import datetime
from typing import Dict, List, Optional

from task_tracker.client.api_client import TaskApiError
from task_tracker.models import DEFAULT_PR_CHECKLIST, TaskStatus
from task_tracker.schemas import PRChecklistItemResponse, StatusHistoryResponse, TaskResponse


def make_task_response(
    title: str = "A",
    description: str = "B",
    status: TaskStatus = TaskStatus.INVESTIGATION,
    notes: Optional[List[str]] = None,
) -> TaskResponse:
    """Build a TaskResponse without touching the database"""
    task_id = uuid.uuid4()
    now = datetime(2026, 1, 1, 12, 0, 0)
    history = [
        StatusHistoryResponse(id=uuid.uuid4(), task_id=task_id, status=status, notes=note, created_at=now)
        for note in (notes or ["Task created"])
    ]
    checklist = [
        PRChecklistItemResponse(id=uuid.uuid4(), task_id=task_id, text=text, checked=False)
        for text in DEFAULT_PR_CHECKLIST
    ]
    return TaskResponse(
        id=task_id,
        title=title,
        description=description,
        status=status,
        created_at=now,
        updated_at=now,
        status_history=history,
        pr_checklist=checklist,
    )


class FakeTaskApi:
    """
    In-memory stand-in for TaskApiClient.

    `fail_next` makes the next update_status raise and `reject` makes every
    one raise. `gate` (an asyncio.Event) holds update_status before the
    server applies it; `reply_gate` holds the reply after it was applied.
    """

    def __init__(self, tasks: List[TaskResponse]) -> None:
        self.tasks: Dict[uuid.UUID, TaskResponse] = {t.id: t for t in tasks}
        self.status_calls: list = []
        self.list_calls = 0
        self.fail_next: Optional[TaskApiError] = None
        self.reject: Optional[TaskApiError] = None
        self.gate: Optional[asyncio.Event] = None
        self.reply_gate: Optional[asyncio.Event] = None

    async def list_tasks(self) -> List[TaskResponse]:
        self.list_calls += 1
        return list(self.tasks.values())

    async def update_status(self, task_id, status, notes, mode):
        self.status_calls.append((task_id, TaskStatus(status), notes, mode))
        if self.gate is not None:
            await self.gate.wait()
        if self.reject is not None:
            raise self.reject
        if self.fail_next is not None:
            error, self.fail_next = self.fail_next, None
            raise error
        updated = self.tasks[task_id].model_copy(update={"status": TaskStatus(status)})
        self.tasks[task_id] = updated
        reply_gate = self.reply_gate
        if reply_gate is not None:
            await reply_gate.wait()
        return updated

    async def create_task(self, title, description, pr_metadata=None):
        task = make_task_response(title, description)
        self.tasks[task.id] = task
        return task

    async def delete_task(self, task_id) -> None:
        if task_id not in self.tasks:
            raise TaskApiError(404, "TASK_NOT_FOUND", "Task not found")
        del self.tasks[task_id]

    async def set_checklist_item(self, task_id, item_id, checked):
        task = self.tasks[task_id]
        item = next(i for i in task.pr_checklist if i.id == item_id)
        return item.model_copy(update={"checked": checked})

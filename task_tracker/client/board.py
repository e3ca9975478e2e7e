"""
Board Controller - Kanban/list state with optimistic drag-and-drop moves

Runs on a single asyncio event loop. Network calls are the only await
points, so cache writes between them never interleave.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional
from uuid import UUID
import asyncio
import logging
import time

from task_tracker.client.api_client import TaskApiClient, TaskApiError
from task_tracker.client.cache import TaskCache, TaskFilter, group_by_status
from task_tracker.core.config import settings
from task_tracker.models.task import TaskStatus
from task_tracker.schemas import TaskResponse
from task_tracker.services.transitions import TransitionMode, compute_next_status
from task_tracker.utils.formatting import format_status

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class Notice:
    """User-facing outcome of an action"""
    kind: str  # "success" or "error"
    title: str
    message: str

class BoardController:
    """
    Owns the task cache for a board or list view.

    Drag moves are applied locally first and rolled back if the server
    rejects them. Periodic refreshes pause while a drag is in progress and
    for `drag_grace` seconds after it ends.
    """

    def __init__(
        self,
        api: TaskApiClient,
        cache: Optional[TaskCache] = None,
        refresh_interval: Optional[float] = None,
        drag_grace: Optional[float] = None,
        on_notice: Optional[Callable[[Notice], None]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.api = api
        self.cache = cache or TaskCache()
        self.refresh_interval = settings.REFRESH_INTERVAL_SECONDS if refresh_interval is None else refresh_interval
        self.drag_grace = settings.DRAG_GRACE_SECONDS if drag_grace is None else drag_grace
        self.on_notice = on_notice
        self.notices: List[Notice] = []
        self.task_filter = TaskFilter()
        self._clock = clock
        self._dragging = False
        self._drag_ended_at: Optional[float] = None
        self._pending: Dict[UUID, List[int]] = {}  # task id -> cache versions of in-flight moves
        self._confirmed: Dict[UUID, TaskStatus] = {}  # last server-accepted status while moves are in flight

    # -------------------- views --------------------

    def set_filter(self, status: Optional[TaskStatus] = None, query: str = "") -> None:
        self.task_filter = TaskFilter(status=TaskStatus(status) if status else None, query=query)

    def reset_filter(self) -> None:
        self.task_filter = TaskFilter()

    def visible_tasks(self) -> List[TaskResponse]:
        return self.cache.view(self.task_filter)

    def columns(self) -> Dict[TaskStatus, List[TaskResponse]]:
        return group_by_status(self.visible_tasks())

    def _notify(self, kind: str, title: str, message: str) -> None:
        notice = Notice(kind=kind, title=title, message=message)
        self.notices.append(notice)
        if self.on_notice is not None:
            self.on_notice(notice)

    # -------------------- drag gesture --------------------

    def begin_drag(self) -> None:
        self._dragging = True

    def end_drag(self) -> None:
        self._dragging = False
        self._drag_ended_at = self._clock()

    @property
    def dragging(self) -> bool:
        return self._dragging

    def refresh_suspended(self) -> bool:
        """True during a drag and for the grace period after it"""
        if self._dragging:
            return True
        if self._drag_ended_at is None:
            return False
        return self._clock() - self._drag_ended_at < self.drag_grace

    def has_pending_move(self, task_id: UUID) -> bool:
        return task_id in self._pending

    # -------------------- server sync --------------------

    async def load(self) -> None:
        """Initial fetch; errors propagate to the caller"""
        self.cache.replace_all(await self.api.list_tasks())
        logger.info(f"✅ Board loaded {len(self.cache)} tasks")

    async def refresh(self) -> bool:
        """
        Re-fetch all tasks and reconcile the cache.

        Skipped while refresh is suspended. Tasks with a move in flight, or
        written locally while the fetch was running, keep their local copy.
        Returns True if the cache was updated.
        """
        if self.refresh_suspended():
            logger.debug("Refresh skipped: drag in progress")
            return False

        before = self.cache.versions()
        try:
            tasks = await self.api.list_tasks()
        except TaskApiError as e:
            logger.warning(f"⚠️  Refresh failed: {e.message}")
            return False

        if self.refresh_suspended():
            logger.debug("Refresh discarded: drag started while fetching")
            return False

        changed = {task_id for task_id, version in self.cache.versions().items() if before.get(task_id) != version}
        self.cache.replace_all(tasks, keep=changed | set(self._pending))
        return True

    async def run_auto_refresh(self, stop: Optional[asyncio.Event] = None) -> None:
        """Refresh every `refresh_interval` seconds until `stop` is set or the task is cancelled"""
        stop = stop or asyncio.Event()
        while not stop.is_set():
            try:
                await asyncio.wait_for(stop.wait(), timeout=self.refresh_interval)
            except asyncio.TimeoutError:
                await self.refresh()

    # -------------------- status changes --------------------

    async def move_task(self, task_id: UUID, new_status: TaskStatus) -> bool:
        """
        Drag-and-drop move: optimistic local update, then an override
        transition on the server.

        On failure the task reverts to its last server-confirmed status
        unless a newer local write has happened since. Returns True on success.
        """
        task = self.cache.get(task_id)
        new_status = TaskStatus(new_status)
        if task is None or task.status == new_status:
            return False

        if task_id not in self._pending:
            self._confirmed[task_id] = task.status
        version = self.cache.set_status(task_id, new_status)
        self._pending.setdefault(task_id, []).append(version)
        label = format_status(new_status)

        try:
            updated = await self.api.update_status(
                task_id,
                new_status,
                notes=f"Task moved to {label} via drag and drop",
                mode=TransitionMode.OVERRIDE,
            )
        except TaskApiError as e:
            if self.cache.version(task_id) == version:
                restored = self._confirmed.get(task_id, task.status)
                self.cache.set_status(task_id, restored)
                logger.info(f"↩️  Rolled back task {task_id} to {restored.value}")
            self._notify("error", "Error moving task", e.message)
            return False
        finally:
            self._settle(task_id, version)

        self._confirm(task_id, updated.status)
        if self.cache.version(task_id) == version:
            self.cache.upsert(updated)
        self._notify("success", "Task moved", f'"{task.title}" moved to {label}')
        return True

    def _settle(self, task_id: UUID, version: int) -> None:
        """Forget one finished move; the confirmed status goes with the last one"""
        versions = self._pending.get(task_id, [])
        if version in versions:
            versions.remove(version)
        if not versions:
            self._pending.pop(task_id, None)
            self._confirmed.pop(task_id, None)

    def _confirm(self, task_id: UUID, status: TaskStatus) -> None:
        if task_id in self._pending:
            self._confirmed[task_id] = status

    async def advance_task(self, task_id: UUID, notes: str) -> bool:
        """
        Sequential move to the next stage; the cache changes only after the
        server confirms, and only if nothing newer was written locally meanwhile.
        """
        task = self.cache.get(task_id)
        if task is None:
            return False

        next_status = compute_next_status(task.status)
        if next_status is None:
            self._notify("error", "Cannot advance task", f'"{task.title}" is already {format_status(task.status)}')
            return False

        version = self.cache.version(task_id)
        try:
            updated = await self.api.update_status(task_id, next_status, notes=notes, mode=TransitionMode.SEQUENTIAL)
        except TaskApiError as e:
            self._notify("error", "Error updating status", e.message)
            return False

        self._confirm(task_id, updated.status)
        if self.cache.version(task_id) == version:
            self.cache.upsert(updated)
        self._notify("success", "Status updated", f'"{task.title}" moved to {format_status(next_status)}')
        return True

    # -------------------- task edits --------------------

    async def create_task(self, title: str, description: str, **pr_metadata) -> Optional[TaskResponse]:
        try:
            task = await self.api.create_task(title, description, pr_metadata=pr_metadata or None)
        except TaskApiError as e:
            self._notify("error", "Error creating task", e.message)
            return None
        self.cache.upsert(task)
        self._notify("success", "Task created", f'"{task.title}" added to {format_status(task.status)}')
        return task

    async def delete_task(self, task_id: UUID) -> bool:
        try:
            await self.api.delete_task(task_id)
        except TaskApiError as e:
            self._notify("error", "Error deleting task", e.message)
            return False
        self.cache.remove(task_id)
        return True

    async def set_checklist_item(self, task_id: UUID, item_id: UUID, checked: bool) -> bool:
        try:
            item = await self.api.set_checklist_item(task_id, item_id, checked)
        except TaskApiError as e:
            self._notify("error", "Error updating checklist", e.message)
            return False

        task = self.cache.get(task_id)
        if task is not None:
            checklist = [item if existing.id == item.id else existing for existing in task.pr_checklist]
            self.cache.upsert(task.model_copy(update={"pr_checklist": checklist}))
        return True

"""
Client Task Cache - Single owned copy of the board's tasks plus derived views

Filtering never mutates the cache; every view is computed on read.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional
from uuid import UUID

from task_tracker.models.task import TaskStatus
from task_tracker.schemas import TaskResponse

@dataclass(frozen=True)
class TaskFilter:
    """
    Status filter (None means all statuses) AND free-text search.
    Search is case-insensitive over title, description and history notes.
    """
    status: Optional[TaskStatus] = None
    query: str = ""

    def matches(self, task: TaskResponse) -> bool:
        if self.status is not None and task.status != self.status:
            return False

        needle = self.query.strip().lower()
        if not needle:
            return True
        if needle in task.title.lower() or needle in task.description.lower():
            return True
        return any(needle in entry.notes.lower() for entry in task.status_history)

def filter_tasks(tasks: Iterable[TaskResponse], task_filter: TaskFilter) -> List[TaskResponse]:
    """New list of the tasks matching `task_filter`; input is left untouched"""
    return [task for task in tasks if task_filter.matches(task)]

def group_by_status(tasks: Iterable[TaskResponse]) -> Dict[TaskStatus, List[TaskResponse]]:
    """Kanban columns in workflow order; every status gets a (possibly empty) column"""
    columns = {status: [] for status in TaskStatus.ordered()}
    for task in tasks:
        columns[task.status].append(task)
    return columns

class TaskCache:
    """
    Tasks keyed by id, in server order (most recently updated first).

    Each local write (set_status, upsert) bumps a per-task version so an
    async caller can tell whether its write is still the newest one.
    """

    def __init__(self, tasks: Iterable[TaskResponse] = ()):
        self._tasks: Dict[UUID, TaskResponse] = {}
        self._versions: Dict[UUID, int] = {}
        self.replace_all(tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, task_id) -> bool:
        return task_id in self._tasks

    def all(self) -> List[TaskResponse]:
        return list(self._tasks.values())

    def get(self, task_id: UUID) -> Optional[TaskResponse]:
        return self._tasks.get(task_id)

    def version(self, task_id: UUID) -> int:
        return self._versions.get(task_id, 0)

    def versions(self) -> Dict[UUID, int]:
        return dict(self._versions)

    def _bump(self, task_id: UUID) -> int:
        self._versions[task_id] = self._versions.get(task_id, 0) + 1
        return self._versions[task_id]

    def upsert(self, task: TaskResponse) -> int:
        """Store a task (new or replacing the cached copy); returns its new version"""
        self._tasks[task.id] = task
        return self._bump(task.id)

    def set_status(self, task_id: UUID, status: TaskStatus) -> int:
        """
        Locally change a task's status; returns the new version.

        Raises:
            KeyError: task not cached
        """
        task = self._tasks[task_id]
        self._tasks[task_id] = task.model_copy(update={"status": TaskStatus(status)})
        return self._bump(task_id)

    def remove(self, task_id: UUID) -> None:
        self._tasks.pop(task_id, None)
        self._versions.pop(task_id, None)

    def replace_all(self, tasks: Iterable[TaskResponse], keep: Iterable[UUID] = ()) -> None:
        """
        Reconcile with a fresh server snapshot.

        Ids in `keep` retain their cached copy (e.g. a move still in flight);
        everything else takes the snapshot's version, and tasks missing from
        the snapshot are dropped.
        """
        keep = {task_id for task_id in keep if task_id in self._tasks}
        fresh: Dict[UUID, TaskResponse] = {}
        for task in tasks:
            fresh[task.id] = self._tasks[task.id] if task.id in keep else task
        for task_id in keep:
            fresh.setdefault(task_id, self._tasks[task_id])

        self._tasks = fresh
        self._versions = {task_id: self._versions.get(task_id, 0) for task_id in fresh}

    def view(self, task_filter: Optional[TaskFilter] = None) -> List[TaskResponse]:
        """Filtered list for rendering"""
        return filter_tasks(self._tasks.values(), task_filter or TaskFilter())

# tests/test_client_board.py

from __future__ import annotations

import asyncio

import httpx
import pytest

from task_tracker.client import BoardController, TaskApiClient, TaskApiError
from task_tracker.client.cache import TaskCache
from task_tracker.main import app
from task_tracker.models import TaskStatus
from task_tracker.services.transitions import TransitionMode

from .fakes import FakeTaskApi, make_task_response


class FakeClock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


def _board(*tasks, clock=None):
    api = FakeTaskApi(list(tasks))
    board = BoardController(api, TaskCache(tasks), refresh_interval=0.01, drag_grace=1.0, clock=clock or FakeClock())
    return api, board


@pytest.mark.asyncio
async def test_move_success_keeps_new_status() -> None:
    task = make_task_response("Dark mode")
    api, board = _board(task)

    assert await board.move_task(task.id, TaskStatus.IN_REVIEW) is True

    assert board.cache.get(task.id).status == TaskStatus.IN_REVIEW
    assert not board.has_pending_move(task.id)
    _, status, notes, mode = api.status_calls[0]
    assert status == TaskStatus.IN_REVIEW
    assert notes == "Task moved to In Review via drag and drop"
    assert mode == TransitionMode.OVERRIDE
    assert board.notices[-1].kind == "success"


@pytest.mark.asyncio
async def test_failed_move_rolls_back_and_notifies() -> None:
    task = make_task_response(status=TaskStatus.IN_REVIEW)
    api, board = _board(task)
    seen = []
    board.on_notice = seen.append
    api.fail_next = TaskApiError(400, "CHECKLIST_INCOMPLETE", "All PR checklist items must be completed")

    assert await board.move_task(task.id, TaskStatus.DONE) is False

    assert board.cache.get(task.id).status == TaskStatus.IN_REVIEW
    assert seen[-1].kind == "error"
    assert seen[-1].title == "Error moving task"
    assert seen[-1].message == "All PR checklist items must be completed"


@pytest.mark.asyncio
async def test_status_is_optimistic_while_request_in_flight() -> None:
    task = make_task_response()
    api, board = _board(task)
    api.gate = asyncio.Event()

    pending = asyncio.create_task(board.move_task(task.id, TaskStatus.IN_TESTING))
    await asyncio.sleep(0)

    assert board.cache.get(task.id).status == TaskStatus.IN_TESTING
    assert board.has_pending_move(task.id)

    api.gate.set()
    assert await pending is True
    assert not board.has_pending_move(task.id)


@pytest.mark.asyncio
async def test_rollback_skipped_after_newer_local_write() -> None:
    task = make_task_response()
    api, board = _board(task)
    api.gate = asyncio.Event()
    api.fail_next = TaskApiError(0, "NETWORK_ERROR", "Could not reach the task server")

    pending = asyncio.create_task(board.move_task(task.id, TaskStatus.PLANNING))
    await asyncio.sleep(0)
    board.cache.set_status(task.id, TaskStatus.IN_PROGRESS)
    api.gate.set()

    assert await pending is False
    assert board.cache.get(task.id).status == TaskStatus.IN_PROGRESS


@pytest.mark.asyncio
async def test_move_to_same_status_or_unknown_task_is_a_no_op() -> None:
    task = make_task_response(status=TaskStatus.PLANNING)
    api, board = _board(task)

    assert await board.move_task(task.id, TaskStatus.PLANNING) is False
    assert await board.move_task(make_task_response().id, TaskStatus.DONE) is False
    assert api.status_calls == []
    assert board.notices == []


@pytest.mark.asyncio
async def test_refresh_suspended_during_drag_and_grace_period() -> None:
    clock = FakeClock()
    task = make_task_response()
    api, board = _board(task, clock=clock)

    board.begin_drag()
    assert await board.refresh() is False

    board.end_drag()
    clock.now += 0.5
    assert await board.refresh() is False
    assert api.list_calls == 0

    clock.now += 0.6
    assert await board.refresh() is True
    assert api.list_calls == 1


@pytest.mark.asyncio
async def test_refresh_keeps_in_flight_move() -> None:
    task = make_task_response()
    other = make_task_response("other")
    api, board = _board(task, other)
    api.gate = asyncio.Event()

    pending = asyncio.create_task(board.move_task(task.id, TaskStatus.IN_TESTING))
    await asyncio.sleep(0)

    # Server still reports INVESTIGATION and a renamed sibling
    api.tasks[other.id] = other.model_copy(update={"title": "other (renamed)"})
    assert await board.refresh() is True

    assert board.cache.get(task.id).status == TaskStatus.IN_TESTING
    assert board.cache.get(other.id).title == "other (renamed)"

    api.gate.set()
    await pending
    assert board.cache.get(task.id).status == TaskStatus.IN_TESTING


@pytest.mark.asyncio
async def test_refresh_failure_leaves_cache_alone() -> None:
    task = make_task_response()
    api, board = _board(task)

    async def broken():
        raise TaskApiError(0, "NETWORK_ERROR", "Could not reach the task server")

    api.list_tasks = broken
    assert await board.refresh() is False
    assert board.cache.get(task.id) == task


@pytest.mark.asyncio
async def test_auto_refresh_stops_on_event() -> None:
    task = make_task_response()
    api, board = _board(task)
    stop = asyncio.Event()

    runner = asyncio.create_task(board.run_auto_refresh(stop))
    await asyncio.sleep(0.05)
    stop.set()
    await asyncio.wait_for(runner, timeout=1)

    assert api.list_calls >= 1


@pytest.mark.asyncio
async def test_advance_task_is_sequential() -> None:
    task = make_task_response(status=TaskStatus.IN_TESTING)
    done = make_task_response("shipped", status=TaskStatus.DONE)
    api, board = _board(task, done)

    assert await board.advance_task(task.id, notes="tests green") is True
    assert board.cache.get(task.id).status == TaskStatus.IN_REVIEW
    assert api.status_calls[-1][1:] == (TaskStatus.IN_REVIEW, "tests green", TransitionMode.SEQUENTIAL)

    assert await board.advance_task(done.id, notes="again") is False
    assert board.notices[-1].title == "Cannot advance task"
    assert len(api.status_calls) == 1


@pytest.mark.asyncio
async def test_filters_and_columns() -> None:
    tasks = [
        make_task_response("Login bug", status=TaskStatus.IN_PROGRESS),
        make_task_response("Docs", status=TaskStatus.PLANNING),
    ]
    _, board = _board(*tasks)

    board.set_filter(status=TaskStatus.PLANNING)
    assert [t.title for t in board.visible_tasks()] == ["Docs"]

    board.set_filter(query="LOGIN")
    columns = board.columns()
    assert [t.title for t in columns[TaskStatus.IN_PROGRESS]] == ["Login bug"]
    assert columns[TaskStatus.PLANNING] == []

    board.reset_filter()
    assert len(board.visible_tasks()) == 2


@pytest.mark.asyncio
async def test_create_and_delete_update_cache() -> None:
    api, board = _board()

    created = await board.create_task("New", "Thing")
    assert created is not None
    assert created.id in board.cache

    assert await board.delete_task(created.id) is True
    assert created.id not in board.cache
    assert await board.delete_task(created.id) is False
    assert board.notices[-1].title == "Error deleting task"


@pytest.mark.asyncio
async def test_board_against_live_app(client) -> None:
    # `client` installs the shared-session database override on the app
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http:
        api = TaskApiClient(client=http)
        board = BoardController(api, drag_grace=0)

        task = await board.create_task("Dark mode", "Adds a dark theme", ticket_id="UI-1")
        await board.load()
        assert [t.id for t in board.cache.all()] == [task.id]

        assert await board.move_task(task.id, TaskStatus.DONE) is True
        server_copy = await api.get_task(task.id)
        assert server_copy.status == TaskStatus.DONE
        assert server_copy.status_history[0].notes == "Task moved to Done via drag and drop"

        with pytest.raises(TaskApiError) as excinfo:
            await api.update_status(task.id, TaskStatus.PLANNING, notes="reopen")
        assert excinfo.value.code == "OUT_OF_SEQUENCE"

        metadata = await api.upsert_pr_metadata(task.id, testing_plan="manual QA")
        assert (metadata.ticket_id, metadata.testing_plan) == ("UI-1", "manual QA")


@pytest.mark.asyncio
async def test_late_advance_reply_does_not_overwrite_newer_drag() -> None:
    task = make_task_response()
    api, board = _board(task)
    held = asyncio.Event()
    api.reply_gate = held

    # Server applies the advance, but its reply is slow
    advance = asyncio.create_task(board.advance_task(task.id, notes="planned"))
    await asyncio.sleep(0)
    assert api.tasks[task.id].status == TaskStatus.PLANNING

    api.reply_gate = None
    assert await board.move_task(task.id, TaskStatus.IN_TESTING) is True

    held.set()
    assert await advance is True
    assert api.tasks[task.id].status == TaskStatus.IN_TESTING
    assert board.cache.get(task.id).status == TaskStatus.IN_TESTING


@pytest.mark.asyncio
async def test_overlapping_failed_drags_restore_server_status() -> None:
    task = make_task_response()
    api, board = _board(task)
    api.gate = asyncio.Event()
    api.reject = TaskApiError(0, "NETWORK_ERROR", "Could not reach the task server")

    first = asyncio.create_task(board.move_task(task.id, TaskStatus.PLANNING))
    await asyncio.sleep(0)
    second = asyncio.create_task(board.move_task(task.id, TaskStatus.IN_TESTING))
    await asyncio.sleep(0)
    assert board.cache.get(task.id).status == TaskStatus.IN_TESTING

    api.gate.set()
    assert await asyncio.gather(first, second) == [False, False]

    assert board.cache.get(task.id).status == TaskStatus.INVESTIGATION
    assert not board.has_pending_move(task.id)
    assert [n.kind for n in board.notices] == ["error", "error"]


@pytest.mark.asyncio
async def test_failed_drag_after_accepted_drag_restores_accepted_status() -> None:
    task = make_task_response()
    api, board = _board(task)
    first_gate, second_gate = asyncio.Event(), asyncio.Event()

    api.gate = first_gate
    first = asyncio.create_task(board.move_task(task.id, TaskStatus.PLANNING))
    await asyncio.sleep(0)
    api.gate = second_gate
    second = asyncio.create_task(board.move_task(task.id, TaskStatus.IN_TESTING))
    await asyncio.sleep(0)

    first_gate.set()
    assert await first is True
    assert board.cache.get(task.id).status == TaskStatus.IN_TESTING

    api.reject = TaskApiError(400, "OUT_OF_SEQUENCE", "Invalid status transition")
    second_gate.set()
    assert await second is False

    assert board.cache.get(task.id).status == TaskStatus.PLANNING
    assert api.tasks[task.id].status == TaskStatus.PLANNING
    assert not board.has_pending_move(task.id)

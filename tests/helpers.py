# tests/helpers.py

from __future__ import annotations

from typing import Optional

from fastapi.testclient import TestClient


def move(client: TestClient, task_id: str, status: str, notes: str = "moving on", mode: Optional[str] = None):
    """POST a status change and return the raw response"""
    body = {"status": status, "notes": notes}
    if mode is not None:
        body["mode"] = mode
    return client.post(f"/api/tasks/{task_id}/status", json=body)


def check_all(client: TestClient, task: dict) -> None:
    """Tick every checklist item on `task`"""
    for item in task["pr_checklist"]:
        response = client.put(f"/api/tasks/{task['id']}/checklist/{item['id']}", json={"checked": True})
        assert response.status_code == 200, response.text


def walk_to(client: TestClient, task_id: str, status: str) -> dict:
    """Advance sequentially until the task reaches `status`"""
    order = ["INVESTIGATION", "PLANNING", "IN_PROGRESS", "IN_TESTING", "IN_REVIEW", "DONE"]
    current = client.get(f"/api/tasks/{task_id}").json()
    for target in order[order.index(current["status"]) + 1 : order.index(status) + 1]:
        response = move(client, task_id, target, notes=f"to {target}")
        assert response.status_code == 200, response.text
        current = response.json()
    return current

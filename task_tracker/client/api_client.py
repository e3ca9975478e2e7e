"""
Task API Client - Async HTTP client for the task tracker REST API
"""

from typing import Any, Dict, List, Optional
from uuid import UUID
import logging

import httpx

from task_tracker.core.config import settings
from task_tracker.models.task import TaskStatus
from task_tracker.schemas import TaskResponse, PRChecklistItemResponse, PRMetadataResponse
from task_tracker.services.transitions import TransitionMode

logger = logging.getLogger(__name__)

class TaskApiError(Exception):
    """
    Non-2xx response or network failure.

    Attributes:
        status_code: HTTP status (0 when the request never got a response)
        code: machine-readable error code from the server, e.g. OUT_OF_SEQUENCE
        message: short human-readable reason, safe to show to a user
    """

    def __init__(self, status_code: int, code: str, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.message = message

    def __repr__(self):
        return f"<TaskApiError {self.status_code} {self.code}: {self.message}>"

class TaskApiClient:
    """
    Thin wrapper over httpx.AsyncClient returning parsed schema objects.

    Usage:
        async with TaskApiClient("http://localhost:8000") as api:
            tasks = await api.list_tasks()
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url or settings.API_BASE_URL, timeout=timeout)

    async def __aenter__(self) -> "TaskApiClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        """Send a request and return decoded JSON, raising TaskApiError on failure"""
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.warning(f"⚠️  {method} {path} failed: {e}")
            raise TaskApiError(0, "NETWORK_ERROR", "Could not reach the task server") from e

        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = {}
            message = body.get("error") or f"Request failed with status {response.status_code}"
            code = body.get("code") or "HTTP_ERROR"
            logger.warning(f"⚠️  {method} {path} -> {response.status_code} {code}")
            raise TaskApiError(response.status_code, code, message)

        return response.json()

    async def list_tasks(self) -> List[TaskResponse]:
        data = await self._request("GET", "/api/tasks")
        return [TaskResponse.model_validate(item) for item in data]

    async def get_task(self, task_id: UUID) -> TaskResponse:
        return TaskResponse.model_validate(await self._request("GET", f"/api/tasks/{task_id}"))

    async def create_task(
        self,
        title: str,
        description: str,
        pr_metadata: Optional[Dict[str, Any]] = None,
    ) -> TaskResponse:
        payload = {"title": title, "description": description}
        if pr_metadata:
            payload["pr_metadata"] = pr_metadata
        return TaskResponse.model_validate(await self._request("POST", "/api/tasks", json=payload))

    async def update_task(self, task_id: UUID, title: str, description: str) -> TaskResponse:
        payload = {"title": title, "description": description}
        return TaskResponse.model_validate(await self._request("PUT", f"/api/tasks/{task_id}", json=payload))

    async def delete_task(self, task_id: UUID) -> None:
        await self._request("DELETE", f"/api/tasks/{task_id}")

    async def update_status(
        self,
        task_id: UUID,
        status: TaskStatus,
        notes: str,
        mode: TransitionMode = TransitionMode.SEQUENTIAL,
    ) -> TaskResponse:
        payload = {"status": TaskStatus(status).value, "notes": notes, "mode": TransitionMode(mode).value}
        data = await self._request("POST", f"/api/tasks/{task_id}/status", json=payload)
        return TaskResponse.model_validate(data)

    async def set_checklist_item(self, task_id: UUID, item_id: UUID, checked: bool) -> PRChecklistItemResponse:
        data = await self._request("PUT", f"/api/tasks/{task_id}/checklist/{item_id}", json={"checked": checked})
        return PRChecklistItemResponse.model_validate(data)

    async def get_pr_metadata(self, task_id: UUID) -> PRMetadataResponse:
        return PRMetadataResponse.model_validate(await self._request("GET", f"/api/tasks/{task_id}/pr-metadata"))

    async def upsert_pr_metadata(self, task_id: UUID, **fields) -> PRMetadataResponse:
        data = await self._request("PUT", f"/api/tasks/{task_id}/pr-metadata", json=fields)
        return PRMetadataResponse.model_validate(data)

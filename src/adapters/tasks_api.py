"""Adaptador HTTP: CRUD de tareas (`/tasks`)."""

from __future__ import annotations

import logging

import httpx
import pydantic

from adapters.http_client import decode_json, error_message, raise_for_api_error, send
from core.domain.errors import FetchError, TransportError
from core.domain.models import CreateTaskRequest, Task, TaskStatus, UpdateTaskRequest
from core.interfaces.remote import TasksAPI

logger = logging.getLogger(__name__)

_TASK_LIST = pydantic.TypeAdapter(list[Task])


def _parse_task(response: httpx.Response) -> Task:
    try:
        return Task.model_validate(decode_json(response))
    except pydantic.ValidationError as exc:
        raise TransportError(f"Unexpected task payload: {exc.error_count()} error(s)") from exc


class HttpTasksAPI(TasksAPI):
    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def list_tasks(self) -> list[Task]:
        response = await send(self._client, "GET", "tasks")
        if not response.is_success:
            message = error_message(response, "Failed to fetch tasks")
            logger.warning("GET /tasks -> %s", response.status_code)
            raise FetchError(message, status_code=response.status_code)
        try:
            return _TASK_LIST.validate_python(decode_json(response))
        except pydantic.ValidationError as exc:
            raise TransportError(f"Unexpected task list payload: {exc.error_count()} error(s)") from exc

    async def create_task(self, title: str, text: str = "") -> Task:
        body = CreateTaskRequest(title=title, text=text)
        response = await send(self._client, "POST", "tasks", json=body.model_dump(mode="json"))
        raise_for_api_error(response, "Failed to create task")
        return _parse_task(response)

    async def update_task(self, task_id: int, *, title: str, text: str, status: TaskStatus) -> Task:
        body = UpdateTaskRequest(title=title, text=text, status=status)
        response = await send(self._client, "PUT", f"tasks/{task_id}", json=body.model_dump(mode="json"))
        raise_for_api_error(response, "Failed to update task")
        return _parse_task(response)

    async def delete_task(self, task_id: int) -> None:
        response = await send(self._client, "DELETE", f"tasks/{task_id}")
        raise_for_api_error(response, "Failed to delete task")

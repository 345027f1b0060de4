"""Caché en memoria de las tareas, sincronizada con el servicio remoto.

Reglas:
- Toda mutación va primero al servidor; la caché solo guarda lo que este
  devuelve.
- `load` reemplaza la caché entera y `create` antepone la tarea nueva.
- `update` sustituye la entrada con el mismo id; `delete` la quita.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from core.domain.errors import NotFoundError, ValidationError
from core.domain.models import Task, TaskPartition, TaskStatus
from core.domain.validation import validate_task_title
from core.interfaces.remote import TasksAPI
from core.services.inflight import InFlightGuard

logger = logging.getLogger(__name__)


def partition_tasks(tasks: Iterable[Task]) -> TaskPartition:
    """Separa las tareas para el dashboard; IN_PROGRESS cuenta como incompleta."""

    partition = TaskPartition()
    for task in tasks:
        if task.status is TaskStatus.DONE:
            partition.completed.append(task)
        else:
            partition.incomplete.append(task)
    return partition


def has_changes(task: Task, *, title: str, text: str, completed: bool) -> bool:
    return title.strip() != task.title or text != task.text or completed != task.is_done


class TaskStore:
    def __init__(self, api: TasksAPI, *, guard: InFlightGuard | None = None) -> None:
        self._api = api
        self._guard = guard or InFlightGuard()
        self._tasks: list[Task] = []

    @property
    def tasks(self) -> list[Task]:
        return list(self._tasks)

    def get(self, task_id: int) -> Task | None:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def partition(self) -> TaskPartition:
        return partition_tasks(self._tasks)

    def clear(self) -> None:
        self._tasks = []

    async def load(self) -> list[Task]:
        async with self._guard.claim("tasks:list"):
            tasks = await self._api.list_tasks()
        self._tasks = list(tasks)
        logger.debug("Loaded %d task(s)", len(self._tasks))
        return self.tasks

    async def create(self, title: str, text: str = "") -> Task:
        title = title.strip()
        errors = validate_task_title(title)
        if errors:
            raise ValidationError(errors)

        async with self._guard.claim("tasks:create"):
            task = await self._api.create_task(title, text)
        self._tasks.insert(0, task)
        logger.info("Created task %s", task.id)
        return task

    async def update(self, task_id: int, *, title: str, text: str, status: TaskStatus) -> Task:
        """Reemplazo completo: título, texto y estado se reenvían siempre."""

        title = title.strip()
        errors = validate_task_title(title)
        if errors:
            raise ValidationError(errors)

        async with self._guard.claim(f"tasks:update:{task_id}"):
            task = await self._api.update_task(task_id, title=title, text=text, status=status)
        self._replace(task)
        logger.info("Updated task %s (%s)", task.id, task.status.value)
        return task

    async def set_completed(self, task_id: int, completed: bool) -> Task:
        task = self.get(task_id)
        if task is None:
            raise NotFoundError(f"Task {task_id} not found")
        return await self.update(
            task_id,
            title=task.title,
            text=task.text,
            status=TaskStatus.from_completed(completed),
        )

    async def delete(self, task_id: int) -> None:
        async with self._guard.claim(f"tasks:delete:{task_id}"):
            await self._api.delete_task(task_id)
        self._tasks = [t for t in self._tasks if t.id != task_id]
        logger.info("Deleted task %s", task_id)

    def _replace(self, updated: Task) -> None:
        for index, task in enumerate(self._tasks):
            if task.id == updated.id:
                self._tasks[index] = updated
                return
        self._tasks.insert(0, updated)

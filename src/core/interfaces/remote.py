"""Contratos del servicio remoto.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- Permite que `SessionManager` y `TaskStore` reciban el adaptador HTTP real
  o un doble de test sin acoplar el Core a httpx.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import Credentials, SessionProbe, Task, TaskStatus


@runtime_checkable
class AuthAPI(Protocol):
    """Endpoints de autenticación.

    Reglas de diseño:
    - Todo es asíncrono porque hace I/O (HTTP).
    - `sign_in` y `logout` solo informan éxito/fallo por status.
    """

    async def sign_up(self, credentials: Credentials) -> dict[str, object]:
        ...

    async def sign_in(self, credentials: Credentials) -> bool:
        ...

    async def fetch_current_user(self) -> SessionProbe:
        ...

    async def logout(self) -> None:
        ...


@runtime_checkable
class TasksAPI(Protocol):
    """Endpoints CRUD de tareas."""

    async def list_tasks(self) -> list[Task]:
        ...

    async def create_task(self, title: str, text: str = "") -> Task:
        ...

    async def update_task(self, task_id: int, *, title: str, text: str, status: TaskStatus) -> Task:
        ...

    async def delete_task(self, task_id: int) -> None:
        ...

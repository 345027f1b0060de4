"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Nos da validación estricta y documentación autocontenida (Field) sin acoplar
  el Core a librerías de I/O.
- Los payloads del servicio REST se validan en un único sitio.

Nota:
- Estos modelos describen *qué* es la información, no *cómo* se obtiene.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict


class TaskStatus(str, Enum):
    """Estados de una tarea; se serializan como los literales del servicio."""

    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"

    @classmethod
    def from_completed(cls, completed: bool) -> "TaskStatus":
        """Traduce el checkbox "completada" del editor a un estado."""

        return cls.DONE if completed else cls.TODO


class User(BaseModel):
    """Identidad autenticada (el servicio solo expone el email)."""

    model_config = ConfigDict(extra="ignore")

    email: str = Field(
        ...,
        min_length=1,
        description="Email del usuario autenticado.",
    )


class Session(BaseModel):
    """Única sesión del proceso; `user=None` equivale a anónimo."""

    user: User | None = Field(
        default=None,
        description="Usuario autenticado, o None si la sesión es anónima.",
    )

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None


class Task(BaseModel):
    """Tarea tal y como la devuelve el servicio.

    Reglas:
    - `done_at` presente <=> `status == DONE` lo garantiza el servidor; el
      cliente no lo calcula ni lo corrige.
    - Los timestamps se guardan crudos (formato backend
      `"2025-12-25 13:25:24.224975"`) y se interpretan al renderizar.
    """

    model_config = ConfigDict(extra="ignore")

    id: int = Field(
        ...,
        description="Identificador asignado por el servidor.",
    )
    title: str = Field(
        ...,
        min_length=1,
        description="Título de la tarea (no vacío).",
    )
    text: str = Field(
        default="",
        description="Cuerpo libre opcional.",
    )
    status: TaskStatus = Field(
        default=TaskStatus.TODO,
        description="Estado del ciclo de vida.",
    )
    user_id: int | None = Field(
        default=None,
        description="Propietario (lo aplica el servidor).",
    )
    created_at: str | None = Field(
        default=None,
        description="Momento de creación (string del backend).",
    )
    done_at: str | None = Field(
        default=None,
        description="Momento de finalización; solo con status DONE.",
    )

    @field_validator("text", mode="before")
    @classmethod
    def _null_text_is_empty(cls, value: object) -> object:
        # `POST /tasks` acepta `text` opcional; algunos backends lo devuelven null.
        return "" if value is None else value

    @property
    def is_done(self) -> bool:
        return self.status is TaskStatus.DONE


class Credentials(BaseModel):
    """Cuerpo de sign-up / sign-in."""

    email: str
    password: str


class CreateTaskRequest(BaseModel):
    title: str = Field(..., min_length=1)
    text: str = ""


class UpdateTaskRequest(BaseModel):
    """Actualización por reemplazo completo: siempre se envían los tres campos."""

    title: str = Field(..., min_length=1)
    text: str
    status: TaskStatus


class AuthResult(BaseModel):
    """Resultado normalizado de una operación de auth (booleano + error opcional)."""

    ok: bool
    error: str | None = None
    user: User | None = None


class ProbeOutcome(str, Enum):
    AUTHENTICATED = "authenticated"
    ANONYMOUS = "anonymous"
    PROBE_FAILED = "probe_failed"


class SessionProbe(BaseModel):
    """Resultado etiquetado de `GET /user`: autenticado, anónimo o sonda fallida."""

    outcome: ProbeOutcome
    user: User | None = None
    reason: str | None = None

    @classmethod
    def authenticated(cls, user: User) -> "SessionProbe":
        return cls(outcome=ProbeOutcome.AUTHENTICATED, user=user)

    @classmethod
    def anonymous(cls, reason: str | None = None) -> "SessionProbe":
        return cls(outcome=ProbeOutcome.ANONYMOUS, reason=reason)

    @classmethod
    def failed(cls, reason: str) -> "SessionProbe":
        return cls(outcome=ProbeOutcome.PROBE_FAILED, reason=reason)


class TaskPartition(BaseModel):
    """Vistas derivadas para el dashboard; se recalculan en cada render."""

    incomplete: list[Task] = Field(default_factory=list)
    completed: list[Task] = Field(default_factory=list)

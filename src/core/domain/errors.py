"""Taxonomía de errores del cliente.

El mapeo status HTTP -> error vive en `adapters.http_client`.
"""

from __future__ import annotations


class TaskdeskError(Exception):
    """Base de todos los errores de la aplicación."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(TaskdeskError):
    """Datos inválidos: validación local (pre-request) o 400/422 del servidor."""

    def __init__(self, errors: dict[str, str] | None = None, message: str | None = None) -> None:
        self.errors = dict(errors or {})
        if message is None:
            message = next(iter(self.errors.values()), "Validation failed")
        super().__init__(message)


class AuthError(TaskdeskError):
    """El servidor rechazó las credenciales o la sesión."""


class NotFoundError(TaskdeskError):
    """Id de tarea desconocido para el servidor."""


class ServerError(TaskdeskError):
    """Cualquier otra respuesta no exitosa."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ConflictError(ServerError):
    """409 en el registro (email ya existente)."""


class FetchError(ServerError):
    """Fallo al listar tareas."""


class TransportError(TaskdeskError):
    """Fallo de red o cuerpo no decodificable."""


class DuplicateRequestError(TaskdeskError):
    """La misma acción ya tiene una petición en curso."""

    def __init__(self, action: str) -> None:
        super().__init__(f"Action already in progress: {action}")
        self.action = action

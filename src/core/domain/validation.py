"""Validación de formularios (login, registro, tareas).

Funciones puras: devuelven un dict campo -> mensaje; vacío = válido.
"""

from __future__ import annotations

import re

_EMAIL_RE = re.compile(r"\S+@\S+\.\S+")

MIN_PASSWORD_LENGTH = 3


def _validate_email(email: str, errors: dict[str, str]) -> None:
    if not email:
        errors["email"] = "Email is required"
    elif not _EMAIL_RE.search(email):
        errors["email"] = "Invalid email format"


def validate_login(email: str, password: str) -> dict[str, str]:
    errors: dict[str, str] = {}
    _validate_email(email, errors)
    if not password:
        errors["password"] = "Password is required"
    return errors


def validate_registration(email: str, password: str, repeat_password: str) -> dict[str, str]:
    """Reglas del formulario de registro.

    La confirmación se valida por separado: una contraseña corta que coincide
    con su confirmación solo produce el error de `password`.
    """

    errors: dict[str, str] = {}
    _validate_email(email, errors)

    if not password:
        errors["password"] = "Password is required"
    elif len(password) < MIN_PASSWORD_LENGTH:
        errors["password"] = f"Password must contain at least {MIN_PASSWORD_LENGTH} characters"

    if not repeat_password:
        errors["repeat_password"] = "Password confirmation is required"
    elif password != repeat_password:
        errors["repeat_password"] = "Passwords do not match"

    return errors


def validate_task_title(title: str) -> dict[str, str]:
    if not title.strip():
        return {"title": "Title is required"}
    return {}

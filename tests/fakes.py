# tests/fakes.py

from __future__ import annotations

import asyncio
import itertools
import json
from dataclasses import dataclass, field
from http.cookies import SimpleCookie
from typing import Any

import httpx

from core.domain.models import Credentials, SessionProbe, Task, TaskStatus, User

CREATED_AT = "2025-12-25 13:25:24.224975"
DONE_AT = "2025-12-26 09:00:00.000000"


def _json(status: int, payload: Any = None, headers: dict[str, str] | None = None) -> httpx.Response:
    if payload is None:
        return httpx.Response(status, headers=headers)
    return httpx.Response(status, json=payload, headers=headers)


@dataclass
class FakeTaskServer:
    """
    In-memory version of the remote service, served through httpx.MockTransport.

    - Cookie based sessions (`session=<token>`)
    - `failures[(method, path)] = (status, body)` forces an error response
    - `offline = True` raises a connect error for every request
    """

    users: dict[str, str] = field(default_factory=dict)
    sessions: dict[str, str] = field(default_factory=dict)
    tasks: dict[int, dict[str, Any]] = field(default_factory=dict)
    requests: list[httpx.Request] = field(default_factory=list)
    failures: dict[tuple[str, str], tuple[int, Any]] = field(default_factory=dict)
    offline: bool = False
    _ids: itertools.count = field(default_factory=lambda: itertools.count(1))
    _tokens: itertools.count = field(default_factory=lambda: itertools.count(1))

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def add_task(self, title: str, *, status: str = "TODO", text: str = "", owner: str = "ann@example.com") -> dict:
        task_id = next(self._ids)
        task = {
            "id": task_id,
            "title": title,
            "text": text,
            "status": status,
            "user_id": 1,
            "owner": owner,
            "created_at": CREATED_AT,
            "done_at": DONE_AT if status == "DONE" else None,
        }
        self.tasks[task_id] = task
        return task

    def _public(self, task: dict[str, Any]) -> dict[str, Any]:
        return {k: v for k, v in task.items() if k != "owner"}

    def _login(self, email: str) -> dict[str, str]:
        token = f"tok{next(self._tokens)}"
        self.sessions[token] = email
        return {"Set-Cookie": f"session={token}; Path=/"}

    def _current(self, request: httpx.Request) -> str | None:
        cookie = SimpleCookie()
        cookie.load(request.headers.get("cookie", ""))
        morsel = cookie.get("session")
        return self.sessions.get(morsel.value) if morsel else None

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.offline:
            raise httpx.ConnectError("connection refused", request=request)

        method = request.method
        path = request.url.path.removeprefix("/api")
        if (method, path) in self.failures:
            status, body = self.failures[(method, path)]
            return _json(status, body)

        body = json.loads(request.content) if request.content else {}

        if (method, path) == ("POST", "/auth/sign-up"):
            if body["email"] in self.users:
                return _json(409, {"message": "User already exists"})
            self.users[body["email"]] = body["password"]
            return _json(201, {"success": True}, headers=self._login(body["email"]))

        if (method, path) == ("POST", "/auth/sign-in"):
            if self.users.get(body.get("email")) != body.get("password"):
                return _json(401)
            return _json(200, headers=self._login(body["email"]))

        email = self._current(request)

        if (method, path) == ("POST", "/auth/logout"):
            self.sessions = {t: e for t, e in self.sessions.items() if e != email}
            return _json(200)

        if email is None:
            return _json(401, {"message": "Unauthorized"})

        if (method, path) == ("GET", "/user"):
            return _json(200, {"email": email})

        if (method, path) == ("GET", "/tasks"):
            own = [self._public(t) for t in self.tasks.values() if t["owner"] == email]
            return _json(200, own)

        if (method, path) == ("POST", "/tasks"):
            if not body.get("title"):
                return _json(400, {"message": "Title is required"})
            task = self.add_task(body["title"], text=body.get("text", ""), owner=email)
            return _json(201, self._public(task))

        if path.startswith("/tasks/"):
            task = self.tasks.get(int(path.rsplit("/", 1)[1]))
            if task is None or task["owner"] != email:
                return _json(404, {"message": "Task not found"})
            if method == "PUT":
                task.update(title=body["title"], text=body["text"], status=body["status"])
                if body["status"] == "DONE":
                    task["done_at"] = task["done_at"] or DONE_AT
                else:
                    task["done_at"] = None
                return _json(200, self._public(task))
            if method == "DELETE":
                del self.tasks[task["id"]]
                return _json(204)

        return _json(404, {"message": "No route"})


class BlockingAuthAPI:
    """
    AuthAPI double whose sign-in waits on an event.

    Used to hold one request in flight while a second one is submitted.
    """

    def __init__(self) -> None:
        self.release = asyncio.Event()
        self.sign_in_calls = 0

    async def sign_up(self, credentials: Credentials) -> dict[str, object]:
        return {}

    async def sign_in(self, credentials: Credentials) -> bool:
        self.sign_in_calls += 1
        await self.release.wait()
        return True

    async def fetch_current_user(self) -> SessionProbe:
        return SessionProbe.authenticated(User(email="ann@example.com"))

    async def logout(self) -> None:
        return None


def make_task(task_id: int, status: TaskStatus = TaskStatus.TODO, **overrides: Any) -> Task:
    data: dict[str, Any] = {
        "id": task_id,
        "title": f"task {task_id}",
        "text": "",
        "status": status,
        "user_id": 1,
        "created_at": CREATED_AT,
        "done_at": DONE_AT if status is TaskStatus.DONE else None,
    }
    data.update(overrides)
    return Task.model_validate(data)

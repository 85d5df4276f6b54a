from __future__ import annotations

from structlog import contextvars


def bind_request(request_id: str, method: str, path: str) -> None:
    contextvars.clear_contextvars()
    contextvars.bind_contextvars(request_id=request_id, method=method, path=path)


def bind_actor(user_id: str, role: str) -> None:
    contextvars.bind_contextvars(actor_id=user_id, actor_role=role)


def current_request_id() -> str | None:
    value = contextvars.get_contextvars().get("request_id")
    return str(value) if value is not None else None

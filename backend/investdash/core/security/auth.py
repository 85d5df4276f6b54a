from __future__ import annotations

import json
from typing import Any

import jwt
from starlette.requests import Request

from investdash.core.config import settings
from investdash.domain.portfolio.schemas.users import UserRecord
from investdash.domain.portfolio.store.base import RecordStore
from investdash.shared.enums import Env


async def _resolve_dev_actor_header(raw: str, store: RecordStore) -> UserRecord | None:
    """
    DEV ONLY: X-DEV-ACTOR header payload as JSON.

    Example:
      {"user_id": "user-1"}  or  {"email": "admin@example.com"}
    """
    payload = json.loads(raw)
    if payload.get("user_id"):
        return await store.get_user(str(payload["user_id"]))
    if payload.get("email"):
        return await store.get_user_by_email(str(payload["email"]))
    return None


def _get_bearer_token(request: Request) -> str | None:
    auth = request.headers.get("Authorization")
    if not auth:
        return None
    if not auth.lower().startswith("bearer "):
        return None
    return auth.split(" ", 1)[1].strip()


def _verify_jwt(token: str) -> dict[str, Any]:
    if not settings.jwt_secret:
        raise NotImplementedError("JWT secret is not configured")
    return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])


async def user_from_request(request: Request, store: RecordStore) -> UserRecord:
    # DEV shortcut (only when ENV=dev)
    if settings.env == Env.dev:
        raw = request.headers.get(settings.dev_actor_header)
        if raw:
            user = await _resolve_dev_actor_header(raw, store)
            if user is None:
                raise PermissionError("Unknown dev actor")
            return user

    token = _get_bearer_token(request)
    if not token:
        raise PermissionError("Missing bearer token")

    claims = _verify_jwt(token)

    user = None
    if claims.get("sub"):
        user = await store.get_user(str(claims["sub"]))
    if user is None and claims.get("email"):
        user = await store.get_user_by_email(str(claims["email"]))
    if user is None:
        raise PermissionError("Token subject is not a known user")
    return user

from __future__ import annotations

from fastapi import APIRouter, Depends

from investdash.core.security.dependencies import get_current_user, get_store, require_user_directory_access
from investdash.domain.portfolio.schemas.users import UserRecord
from investdash.domain.portfolio.store.sqlalchemy_store import SqlAlchemyRecordStore


router = APIRouter(tags=["Users"])


@router.get("/me", response_model=UserRecord)
async def me(user: UserRecord = Depends(get_current_user)) -> UserRecord:
    return user


@router.get("/users", response_model=list[UserRecord])
async def list_users(
    _: UserRecord = Depends(require_user_directory_access),
    store: SqlAlchemyRecordStore = Depends(get_store),
) -> list[UserRecord]:
    return await store.list_users()

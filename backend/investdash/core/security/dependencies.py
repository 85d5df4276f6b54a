from __future__ import annotations

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from investdash.core.config import settings
from investdash.core.db.session import get_db
from investdash.core.middleware.context import bind_actor
from investdash.core.security.auth import user_from_request
from investdash.domain.portfolio.schemas.users import UserRecord
from investdash.domain.portfolio.services.access_policy import can_view_all_users
from investdash.domain.portfolio.services.controller import InvestmentController
from investdash.domain.portfolio.store.sqlalchemy_store import SqlAlchemyRecordStore
from investdash.shared.exceptions import AppError


def get_store(db: AsyncSession = Depends(get_db)) -> SqlAlchemyRecordStore:
    return SqlAlchemyRecordStore(db)


async def get_current_user(
    request: Request,
    store: SqlAlchemyRecordStore = Depends(get_store),
) -> UserRecord:
    try:
        user = await user_from_request(request, store)
    except AppError:
        raise
    except NotImplementedError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    except PermissionError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    except Exception:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")

    bind_actor(user.id, user.role.value)
    return user


def get_controller(
    user: UserRecord = Depends(get_current_user),
    store: SqlAlchemyRecordStore = Depends(get_store),
) -> InvestmentController:
    return InvestmentController(store, user, reference_year=settings.reference_year)


def require_user_directory_access(user: UserRecord = Depends(get_current_user)) -> UserRecord:
    if not can_view_all_users(user):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient role")
    return user

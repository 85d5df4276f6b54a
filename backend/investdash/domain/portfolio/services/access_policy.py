from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar

from investdash.domain.portfolio.schemas.investments import InvestmentRecord
from investdash.domain.portfolio.schemas.users import UserRecord
from investdash.shared.enums import UserRole
from investdash.shared.exceptions import AuthorizationError


I = TypeVar("I", bound=InvestmentRecord)


def visible_investments(investments: Sequence[I], user: UserRecord) -> list[I]:
    """Super users see everything; normal users only their own investments."""
    if user.role == UserRole.super_user:
        return list(investments)
    return [inv for inv in investments if inv.user_id == user.id]


def can_mutate(user: UserRecord) -> bool:
    return user.role == UserRole.super_user


def can_view_all_users(user: UserRecord) -> bool:
    return user.role == UserRole.super_user


def require_mutation(user: UserRecord) -> None:
    if not can_mutate(user):
        raise AuthorizationError(f"user {user.id!r} ({user.role.value}) may not modify investments")

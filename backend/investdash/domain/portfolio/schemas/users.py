from __future__ import annotations

from pydantic import EmailStr, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from investdash.domain.portfolio.schemas.base import RecordModel
from investdash.shared.enums import UserRole


_email_adapter = TypeAdapter(EmailStr)


def normalize_email(value: str) -> str | None:
    """Normalize an address the way stored users are; None when it is not an email."""
    try:
        return _email_adapter.validate_python(value)
    except PydanticValidationError:
        return None


class UserRecord(RecordModel):
    id: str
    email: EmailStr
    name: str = Field(min_length=1)
    role: UserRole

    @property
    def is_super_user(self) -> bool:
        return self.role == UserRole.super_user


class UserCreate(RecordModel):
    email: EmailStr
    name: str = Field(min_length=1)
    role: UserRole = UserRole.normal_user

from __future__ import annotations

import datetime as dt
from typing import Any

from sqlalchemy import DateTime, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from investdash.shared.utils import new_id, utcnow


class Base(DeclarativeBase):
    type_annotation_map: dict[Any, Any] = {
        dt.datetime: DateTime(timezone=True),
    }


class IdMixin:
    # Opaque string identifiers; seeds may supply readable ids ("inv-1").
    id: Mapped[str] = mapped_column(
        String(64),
        default=new_id,
        primary_key=True,
        index=True,
    )


class TimestampMixin:
    # Client-side default so the value is never expired after flush.
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )

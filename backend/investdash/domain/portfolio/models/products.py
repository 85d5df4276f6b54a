from __future__ import annotations

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from investdash.core.db.base import Base, IdMixin, TimestampMixin


class Product(Base, IdMixin, TimestampMixin):
    """Static reference data: an investable asset and the company issuing it."""

    __tablename__ = "products"

    category: Mapped[str] = mapped_column(String(120), index=True)
    investment_company: Mapped[str] = mapped_column(String(255))

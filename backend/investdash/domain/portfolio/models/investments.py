from __future__ import annotations

import datetime as dt

from sqlalchemy import Date, Enum, Float, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from investdash.core.db.base import Base, IdMixin, TimestampMixin
from investdash.shared.enums import InvestmentStatus


class Investment(Base, IdMixin, TimestampMixin):
    """
    A user's stake in a product.

    usd_equivalent is a stored mock conversion; nothing recomputes it from
    amount_invested after creation.
    """

    __tablename__ = "investments"

    user_id: Mapped[str] = mapped_column(ForeignKey("users.id"), index=True)
    product_id: Mapped[str] = mapped_column(ForeignKey("products.id"), index=True)

    amount_invested: Mapped[float] = mapped_column(Float, nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False)
    usd_equivalent: Mapped[float] = mapped_column(Float, nullable=False)

    details_of_investment: Mapped[str] = mapped_column(Text, default="", nullable=False)
    expected_yield: Mapped[str] = mapped_column(Text, default="", nullable=False)
    investment_type: Mapped[str] = mapped_column(String(64), nullable=False)

    investment_date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    maturity_date: Mapped[dt.date | None] = mapped_column(Date, nullable=True)

    status: Mapped[InvestmentStatus] = mapped_column(
        Enum(InvestmentStatus, name="investment_status_enum", native_enum=False),
        default=InvestmentStatus.active,
        nullable=False,
    )
    contract_pdf: Mapped[str] = mapped_column(String(1024), nullable=False)

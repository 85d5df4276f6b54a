from __future__ import annotations

from sqlalchemy import Float, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from investdash.core.db.base import Base, IdMixin, TimestampMixin


class PerformanceProjection(Base, IdMixin, TimestampMixin):
    __tablename__ = "performance_projections"

    investment_id: Mapped[str] = mapped_column(
        ForeignKey("investments.id", ondelete="CASCADE"),
        index=True,
    )
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    principal_amount: Mapped[float] = mapped_column(Float, nullable=False)
    yield_amount: Mapped[float] = mapped_column(Float, nullable=False)
    total_value: Mapped[float] = mapped_column(Float, nullable=False)

    __table_args__ = (UniqueConstraint("investment_id", "year", name="uq_projection_investment_year"),)

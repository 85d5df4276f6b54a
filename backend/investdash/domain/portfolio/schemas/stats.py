from __future__ import annotations

from pydantic import Field

from investdash.domain.portfolio.schemas.base import RecordModel


class CategoryTotal(RecordModel):
    category: str
    total_usd: float
    count: int


class CurrencyTotal(RecordModel):
    currency: str
    total_usd: float
    count: int


class YearlyProjectionRow(RecordModel):
    year: int
    total_value: float = 0.0
    principal: float = 0.0
    yield_: float = Field(default=0.0, alias="yield")


class PortfolioStats(RecordModel):
    total_invested_usd: float
    total_expected_yield: float
    investment_count: int
    active_count: int
    category_breakdown: list[CategoryTotal]
    currency_breakdown: list[CurrencyTotal]

from __future__ import annotations

import datetime as dt

from pydantic import Field

from investdash.domain.portfolio.schemas.base import CurrencyCode, RecordModel, UrlStr
from investdash.domain.portfolio.schemas.products import ProductRecord
from investdash.domain.portfolio.schemas.projections import ProjectionRecord
from investdash.shared.enums import InvestmentStatus, InvestmentType


class InvestmentFields(RecordModel):
    user_id: str = Field(min_length=1)
    product_id: str = Field(min_length=1)
    amount_invested: float = Field(gt=0)
    currency: CurrencyCode
    usd_equivalent: float = Field(gt=0)
    details_of_investment: str = ""
    expected_yield: str = ""
    # Open set: unknown types pass through unchanged.
    investment_type: str = InvestmentType.lumpsum.value
    investment_date: dt.date
    maturity_date: dt.date | None = None
    status: InvestmentStatus = InvestmentStatus.active
    contract_pdf: UrlStr


class InvestmentRecord(InvestmentFields):
    id: str


class InvestmentCreate(RecordModel):
    """Creation payload; usd_equivalent may be left for the mock conversion."""

    user_id: str = Field(min_length=1)
    product_id: str = Field(min_length=1)
    amount_invested: float = Field(gt=0)
    currency: CurrencyCode = "USD"
    usd_equivalent: float | None = Field(default=None, gt=0)
    details_of_investment: str = "New investment entry"
    expected_yield: str = "TBD"
    investment_type: str = InvestmentType.lumpsum.value
    investment_date: dt.date = Field(default_factory=dt.date.today)
    maturity_date: dt.date | None = None
    status: InvestmentStatus = InvestmentStatus.active
    contract_pdf: UrlStr


class InvestmentUpdate(RecordModel):
    """Partial patch: only fields explicitly provided change."""

    user_id: str | None = Field(default=None, min_length=1)
    product_id: str | None = Field(default=None, min_length=1)
    amount_invested: float | None = Field(default=None, gt=0)
    currency: CurrencyCode | None = None
    usd_equivalent: float | None = Field(default=None, gt=0)
    details_of_investment: str | None = None
    expected_yield: str | None = None
    investment_type: str | None = None
    investment_date: dt.date | None = None
    maturity_date: dt.date | None = None
    status: InvestmentStatus | None = None
    contract_pdf: UrlStr | None = None


class EnrichedInvestment(InvestmentRecord):
    product: ProductRecord
    performance_history: list[ProjectionRecord] | None = None

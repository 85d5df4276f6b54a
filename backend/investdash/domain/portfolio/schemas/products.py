from __future__ import annotations

from pydantic import Field

from investdash.domain.portfolio.schemas.base import RecordModel


class ProductRecord(RecordModel):
    id: str
    category: str = Field(min_length=1)
    investment_company: str = Field(min_length=1)


class ProductCreate(RecordModel):
    category: str = Field(min_length=1)
    investment_company: str = Field(min_length=1)

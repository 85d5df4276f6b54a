from __future__ import annotations

from pydantic import Field, ValidationInfo, field_validator

from investdash.domain.portfolio.schemas.base import RecordModel


TOTAL_TOLERANCE = 0.01


class ProjectionFields(RecordModel):
    investment_id: str
    year: int = Field(ge=2020, le=2100)
    principal_amount: float = Field(ge=0)
    yield_amount: float = Field(ge=0)
    total_value: float = Field(ge=0)

    @field_validator("total_value")
    @classmethod
    def _total_matches_parts(cls, value: float, info: ValidationInfo) -> float:
        principal = info.data.get("principal_amount")
        yield_amount = info.data.get("yield_amount")
        if principal is None or yield_amount is None:
            return value
        if abs(value - (principal + yield_amount)) > TOTAL_TOLERANCE:
            raise ValueError("total_value must equal principal_amount + yield_amount")
        return value


class ProjectionRecord(ProjectionFields):
    id: str


class ProjectionCreate(ProjectionFields):
    pass

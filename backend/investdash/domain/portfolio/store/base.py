from __future__ import annotations

from typing import Protocol

from investdash.domain.portfolio.schemas.investments import InvestmentCreate, InvestmentRecord, InvestmentUpdate
from investdash.domain.portfolio.schemas.products import ProductCreate, ProductRecord
from investdash.domain.portfolio.schemas.projections import ProjectionCreate, ProjectionRecord
from investdash.domain.portfolio.schemas.users import UserCreate, UserRecord


class RecordStore(Protocol):
    """
    Capability interface over the persistent record store.

    Every call is awaited. Point lookups return None when the record is
    absent; failures surface as StoreError. Records are validated in both
    directions, so callers only ever see schema-valid models.
    """

    async def list_users(self) -> list[UserRecord]: ...

    async def get_user(self, user_id: str) -> UserRecord | None: ...

    async def get_user_by_email(self, email: str) -> UserRecord | None: ...

    async def create_user(self, data: UserCreate, *, user_id: str | None = None) -> UserRecord: ...

    async def list_products(self) -> list[ProductRecord]: ...

    async def get_product(self, product_id: str) -> ProductRecord | None: ...

    async def create_product(self, data: ProductCreate, *, product_id: str | None = None) -> ProductRecord: ...

    async def list_investments(self) -> list[InvestmentRecord]: ...

    async def list_investments_by_user(self, user_id: str) -> list[InvestmentRecord]: ...

    async def get_investment(self, investment_id: str) -> InvestmentRecord | None: ...

    async def create_investment(
        self, data: InvestmentCreate, *, investment_id: str | None = None
    ) -> InvestmentRecord: ...

    async def update_investment(self, investment_id: str, patch: InvestmentUpdate) -> InvestmentRecord: ...

    async def delete_investment(self, investment_id: str) -> None: ...

    async def list_projections(self, investment_id: str) -> list[ProjectionRecord]: ...

    async def list_projections_up_to_year(self, investment_id: str, year: int) -> list[ProjectionRecord]: ...

    async def create_projection(
        self, data: ProjectionCreate, *, projection_id: str | None = None
    ) -> ProjectionRecord: ...

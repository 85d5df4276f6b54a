from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from investdash.core.db.models import User
from investdash.core.logging import get_logger
from investdash.domain.portfolio.models.investments import Investment
from investdash.domain.portfolio.models.products import Product
from investdash.domain.portfolio.models.projections import PerformanceProjection
from investdash.domain.portfolio.schemas.base import parse_record, to_record
from investdash.domain.portfolio.schemas.investments import InvestmentCreate, InvestmentRecord, InvestmentUpdate
from investdash.domain.portfolio.schemas.products import ProductCreate, ProductRecord
from investdash.domain.portfolio.schemas.projections import ProjectionCreate, ProjectionRecord
from investdash.domain.portfolio.schemas.users import UserCreate, UserRecord, normalize_email
from investdash.shared.exceptions import MissingReferenceError, RecordNotFound, StoreError
from investdash.shared.utils import new_id, row_to_dict


logger = get_logger(__name__)


class SqlAlchemyRecordStore:
    """RecordStore backed by an async SQLAlchemy session (one per request/session)."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @asynccontextmanager
    async def _operation(self, operation: str) -> AsyncIterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            await self._session.rollback()
            logger.error("store.operation_failed", operation=operation, error=str(exc))
            raise StoreError(operation, str(exc)) from exc

    async def _all(self, operation: str, stmt) -> list[Any]:
        async with self._operation(operation):
            result = await self._session.execute(stmt)
            return list(result.scalars().all())

    async def _get(self, operation: str, model: type, record_id: str) -> Any | None:
        async with self._operation(operation):
            return await self._session.get(model, record_id)

    async def _insert(self, operation: str, row: Any) -> None:
        async with self._operation(operation):
            self._session.add(row)
            await self._session.commit()

    # -- users -------------------------------------------------------------

    async def list_users(self) -> list[UserRecord]:
        rows = await self._all("list_users", select(User).order_by(User.created_at.desc(), User.id))
        return [parse_record(UserRecord, row_to_dict(r)) for r in rows]

    async def get_user(self, user_id: str) -> UserRecord | None:
        row = await self._get("get_user", User, user_id)
        return parse_record(UserRecord, row_to_dict(row)) if row else None

    async def get_user_by_email(self, email: str) -> UserRecord | None:
        normalized = normalize_email(email)
        if normalized is None:
            return None
        rows = await self._all("get_user_by_email", select(User).where(User.email == normalized))
        return parse_record(UserRecord, row_to_dict(rows[0])) if rows else None

    async def create_user(self, data: UserCreate, *, user_id: str | None = None) -> UserRecord:
        record = parse_record(UserRecord, {"id": user_id or new_id(), **to_record(data)})
        await self._insert("create_user", User(**to_record(record)))
        return record

    # -- products ----------------------------------------------------------

    async def list_products(self) -> list[ProductRecord]:
        rows = await self._all("list_products", select(Product).order_by(Product.id))
        return [parse_record(ProductRecord, row_to_dict(r)) for r in rows]

    async def get_product(self, product_id: str) -> ProductRecord | None:
        row = await self._get("get_product", Product, product_id)
        return parse_record(ProductRecord, row_to_dict(row)) if row else None

    async def create_product(self, data: ProductCreate, *, product_id: str | None = None) -> ProductRecord:
        record = parse_record(ProductRecord, {"id": product_id or new_id(), **to_record(data)})
        await self._insert("create_product", Product(**to_record(record)))
        return record

    # -- investments -------------------------------------------------------

    async def list_investments(self) -> list[InvestmentRecord]:
        rows = await self._all("list_investments", select(Investment).order_by(Investment.created_at, Investment.id))
        return [parse_record(InvestmentRecord, row_to_dict(r)) for r in rows]

    async def list_investments_by_user(self, user_id: str) -> list[InvestmentRecord]:
        stmt = (
            select(Investment)
            .where(Investment.user_id == user_id)
            .order_by(Investment.created_at, Investment.id)
        )
        rows = await self._all("list_investments_by_user", stmt)
        return [parse_record(InvestmentRecord, row_to_dict(r)) for r in rows]

    async def get_investment(self, investment_id: str) -> InvestmentRecord | None:
        row = await self._get("get_investment", Investment, investment_id)
        return parse_record(InvestmentRecord, row_to_dict(row)) if row else None

    async def _check_references(self, investment_id: str, values: dict[str, Any]) -> None:
        if "product_id" in values and await self.get_product(values["product_id"]) is None:
            raise MissingReferenceError(investment_id, "product_id", values["product_id"])
        if "user_id" in values and await self.get_user(values["user_id"]) is None:
            raise MissingReferenceError(investment_id, "user_id", values["user_id"])

    async def create_investment(
        self, data: InvestmentCreate, *, investment_id: str | None = None
    ) -> InvestmentRecord:
        record = parse_record(InvestmentRecord, {"id": investment_id or new_id(), **to_record(data)})
        await self._check_references(record.id, {"product_id": record.product_id, "user_id": record.user_id})
        await self._insert("create_investment", Investment(**to_record(record)))
        return record

    async def update_investment(self, investment_id: str, patch: InvestmentUpdate) -> InvestmentRecord:
        row = await self._get("update_investment", Investment, investment_id)
        if row is None:
            raise RecordNotFound("update_investment", investment_id)

        changes = to_record(patch, exclude_unset=True)
        merged = parse_record(InvestmentRecord, {**row_to_dict(row), **changes})
        await self._check_references(investment_id, changes)

        values = to_record(merged)
        async with self._operation("update_investment"):
            for key in changes:
                setattr(row, key, values[key])
            await self._session.commit()
        return merged

    async def delete_investment(self, investment_id: str) -> None:
        row = await self._get("delete_investment", Investment, investment_id)
        if row is None:
            raise RecordNotFound("delete_investment", investment_id)
        async with self._operation("delete_investment"):
            await self._session.execute(
                delete(PerformanceProjection).where(PerformanceProjection.investment_id == investment_id)
            )
            await self._session.delete(row)
            await self._session.commit()

    # -- projections -------------------------------------------------------

    async def list_projections(self, investment_id: str) -> list[ProjectionRecord]:
        stmt = (
            select(PerformanceProjection)
            .where(PerformanceProjection.investment_id == investment_id)
            .order_by(PerformanceProjection.year.asc(), PerformanceProjection.id)
        )
        rows = await self._all("list_projections", stmt)
        return [parse_record(ProjectionRecord, row_to_dict(r)) for r in rows]

    async def list_projections_up_to_year(self, investment_id: str, year: int) -> list[ProjectionRecord]:
        stmt = (
            select(PerformanceProjection)
            .where(
                PerformanceProjection.investment_id == investment_id,
                PerformanceProjection.year <= year,
            )
            .order_by(PerformanceProjection.year.asc(), PerformanceProjection.id)
        )
        rows = await self._all("list_projections_up_to_year", stmt)
        return [parse_record(ProjectionRecord, row_to_dict(r)) for r in rows]

    async def create_projection(
        self, data: ProjectionCreate, *, projection_id: str | None = None
    ) -> ProjectionRecord:
        record = parse_record(ProjectionRecord, {"id": projection_id or new_id(), **to_record(data)})
        if await self.get_investment(record.investment_id) is None:
            raise MissingReferenceError(record.id, "investment_id", record.investment_id)
        await self._insert("create_projection", PerformanceProjection(**to_record(record)))
        return record

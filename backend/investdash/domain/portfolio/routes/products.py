from __future__ import annotations

from fastapi import APIRouter, Depends

from investdash.core.security.dependencies import get_current_user, get_store
from investdash.domain.portfolio.schemas.products import ProductRecord
from investdash.domain.portfolio.services.aggregation import product_categories
from investdash.domain.portfolio.store.sqlalchemy_store import SqlAlchemyRecordStore


router = APIRouter(prefix="/products", tags=["Products"], dependencies=[Depends(get_current_user)])


@router.get("", response_model=list[ProductRecord])
async def list_products(store: SqlAlchemyRecordStore = Depends(get_store)) -> list[ProductRecord]:
    return await store.list_products()


@router.get("/categories", response_model=list[str])
async def list_categories(store: SqlAlchemyRecordStore = Depends(get_store)) -> list[str]:
    return product_categories(await store.list_products())
